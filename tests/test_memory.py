import pytest

from conftest import create_session
from idea_dig.errors import ArtifactNotFoundError, SessionNotFoundError
from idea_dig.memory import SessionStore
from idea_dig.schemas import Alternative, Analysis, Marketing, Perspective


def test_reads_return_copies() -> None:
    store = SessionStore()
    session = create_session(store)

    fetched = store.get(session.id)
    fetched.stages_completed.append("designer")

    assert store.get(session.id).stages_completed == []


def test_save_replaces_row_and_touches_updated_at() -> None:
    store = SessionStore()
    session = create_session(store)
    before = session.updated_at

    session.mark_stage_completed("first_principles")
    session.mark_stage_completed("first_principles")
    store.save(session)

    stored = store.get(session.id)
    assert stored.stages_completed == ["first_principles"]
    assert stored.updated_at >= before


def test_save_unknown_session_raises() -> None:
    store = SessionStore()
    orphan = create_session(SessionStore())

    with pytest.raises(SessionNotFoundError):
        store.save(orphan)


def test_delete_cascades_to_artifacts() -> None:
    store = SessionStore()
    session = create_session(store)
    store.add_analysis(session.id, Analysis(perspective=Perspective.DESIGNER, score=50))
    store.add_alternative(session.id, Alternative(alternative_idea="Something else"))

    store.delete(session.id)

    with pytest.raises(SessionNotFoundError):
        store.analyses(session.id)
    with pytest.raises(SessionNotFoundError):
        store.delete(session.id)


def test_artifacts_are_linked_to_their_session() -> None:
    store = SessionStore()
    session = create_session(store)

    stored = store.add_analysis(session.id, Analysis(perspective=Perspective.DESIGNER, score=50))

    assert stored.session_id == session.id
    assert store.detail(session.id).analyses[0].session_id == session.id


def test_missing_marketing_is_reported() -> None:
    store = SessionStore()
    session = create_session(store)

    with pytest.raises(ArtifactNotFoundError):
        store.get_marketing(session.id)

    store.set_marketing(session.id, Marketing(value_proposition="Cut freely"))
    assert store.get_marketing(session.id).value_proposition == "Cut freely"


def test_list_sessions_newest_first() -> None:
    store = SessionStore()
    first = create_session(store, "First idea")
    second = create_session(store, "Second idea")

    ids = [item.id for item in store.list_sessions()]

    assert set(ids) == {first.id, second.id}
    assert store.list_sessions()[0].created_at >= store.list_sessions()[1].created_at
