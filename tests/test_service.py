import threading

import pytest

from conftest import ScriptedGenerator
from idea_dig.service import BackgroundRunner, DigService


def test_runner_tracks_only_unfinished_runs() -> None:
    runner = BackgroundRunner()
    release = threading.Event()

    future = runner.submit("abc", lambda: release.wait(5) and "done")

    assert runner.get("abc") is future
    release.set()
    assert future.result(timeout=5) == "done"
    assert runner.get("abc") is None


def test_runner_drops_failed_runs(caplog: pytest.LogCaptureFixture) -> None:
    runner = BackgroundRunner()

    def boom() -> None:
        raise RuntimeError("boom")

    with caplog.at_level("ERROR", logger="idea_dig.service"):
        future = runner.submit("xyz", boom)
        assert isinstance(future.exception(timeout=5), RuntimeError)

    assert runner.get("xyz") is None
    assert "Background analysis for session xyz failed" in caplog.text


def test_completed_sessions_are_not_retained_by_runner() -> None:
    service = DigService(ScriptedGenerator())

    session = service.start_session("A subscription box for left-handed scissors")
    service.wait(session.id, timeout=5)

    assert service.get_progress(session.id).percentage == 100
    assert service.runner.get(session.id) is None
    service.wait(session.id, timeout=5)
