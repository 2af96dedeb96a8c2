import pytest

from idea_dig.progress import DEFAULT_MESSAGE, compute_progress, progress_percentage
from idea_dig.schemas import Session


def _session(stages, current_stage="first_principles") -> Session:
    return Session(raw_idea="idea", title="idea", current_stage=current_stage, stages_completed=list(stages))


@pytest.mark.parametrize(
    ("count", "expected"),
    [(0, 0), (3, 33), (8, 88), (9, 100), (14, 100)],
)
def test_percentage_uses_fixed_denominator(count: int, expected: int) -> None:
    assert progress_percentage(count) == expected


def test_progress_reports_snapshot_fields() -> None:
    session = _session(["first_principles", "designer", "marketing"], current_stage="technical")

    progress = compute_progress(session)

    assert progress.session_id == session.id
    assert progress.percentage == 33
    assert progress.current_stage == "technical"
    assert progress.stages_completed == ["first_principles", "designer", "marketing"]
    assert progress.message == "Assessing technical feasibility..."


def test_harsh_stages_inflate_count_but_not_cap() -> None:
    stages = [f"stage_{i}" for i in range(12)]

    assert compute_progress(_session(stages, current_stage="worst_case")).percentage == 100


def test_unknown_stage_gets_default_message() -> None:
    progress = compute_progress(_session([], current_stage="mystery"))

    assert progress.message == DEFAULT_MESSAGE


def test_progress_does_not_mutate_session() -> None:
    session = _session(["first_principles"])

    progress = compute_progress(session)
    progress.stages_completed.append("designer")

    assert session.stages_completed == ["first_principles"]
