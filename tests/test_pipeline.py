from __future__ import annotations

import pytest

from conftest import RecordingStore, ScriptedGenerator, core_scores, create_session
from idea_dig.perspectives import CORE_PERSPECTIVES, HARSH_PERSPECTIVES
from idea_dig.pipeline import PipelineOrchestrator
from idea_dig.schemas import PipelineMode, Recommendation, SessionStatus, ViabilityDecision
from idea_dig.scoring import determine_recommendation

CORE = [p.value for p in CORE_PERSPECTIVES]
HARSH = [p.value for p in HARSH_PERSPECTIVES]
OUTPUTS = ["execution_plan", "marketing_materials", "revenue"]


def _run(store: RecordingStore, generator: ScriptedGenerator, idea: str = "A subscription box for left-handed scissors"):
    session = create_session(store, idea)
    PipelineOrchestrator(store, generator).run(session.id)
    return store.detail(session.id)


def test_healthy_idea_runs_every_stage(store: RecordingStore) -> None:
    generator = ScriptedGenerator(scores=core_scores(70, 65, 75, 60, 80), default_score=70)

    detail = _run(store, generator)
    session = detail.session

    assert "viability_check" not in generator.calls
    assert session.viability_check is None
    assert session.stages_completed == CORE + HARSH + OUTPUTS + ["alternatives"]
    assert len(session.stages_completed) >= 9
    assert session.status is SessionStatus.COMPLETED
    assert session.completed_at is not None
    assert session.current_stage == "completed"
    assert session.overall_score == pytest.approx(70.0)
    assert session.recommendation is determine_recommendation(70.0, detail.analyses)
    assert session.recommendation is Recommendation.REFINE
    assert detail.execution_plan is not None
    assert detail.marketing is not None
    assert detail.revenue_projection is not None
    assert len(detail.alternatives) == 2
    assert session.refined_idea == "Refined: A subscription box for left-handed scissors"


def test_gate_not_invoked_at_threshold(store: RecordingStore) -> None:
    generator = ScriptedGenerator(default_score=45)

    session = _run(store, generator).session

    assert "viability_check" not in generator.calls
    assert session.viability_check is None
    assert session.flaw_type is None


def test_stop_decision_exits_early_but_still_suggests_alternatives(store: RecordingStore) -> None:
    generator = ScriptedGenerator(default_score=44, verdict=ViabilityDecision.STOP)

    detail = _run(store, generator)
    session = detail.session

    assert session.early_exit is True
    assert session.pivot_focus is True
    assert session.mode is PipelineMode.EARLY_EXIT
    assert session.recommendation is Recommendation.ABANDON
    assert session.early_exit_reason == "No defensible market."
    assert session.flaw_type == "market"
    assert session.viability_check == {"decision": "stop", "score_seen": 44.0}
    assert detail.execution_plan is None
    assert detail.marketing is None
    assert detail.revenue_projection is None
    assert session.stages_completed == CORE + ["viability_check", "alternatives"]
    assert not set(HARSH) & set(generator.calls)
    assert len(detail.alternatives) == 2
    assert session.status is SessionStatus.COMPLETED


def test_pivot_focus_restricts_harsh_set(store: RecordingStore) -> None:
    generator = ScriptedGenerator(default_score=30, verdict=ViabilityDecision.CONTINUE_PIVOT_FOCUS)

    detail = _run(store, generator)
    session = detail.session

    harsh_run = [stage for stage in session.stages_completed if stage in HARSH]
    assert harsh_run == ["devils_advocate", "copycat"]
    assert {"user_psychology", "scalability", "worst_case"}.isdisjoint(generator.calls)
    assert session.pivot_focus is True
    assert session.early_exit is False
    assert session.early_exit_reason is None
    assert detail.execution_plan is None
    assert detail.marketing is None
    assert detail.revenue_projection is None
    assert "alternatives" in session.stages_completed
    # Not forced by the gate, so derived from the final score.
    assert session.recommendation is Recommendation.ABANDON


def test_pivot_focus_skips_outputs_above_output_threshold(store: RecordingStore) -> None:
    generator = ScriptedGenerator(default_score=42, verdict=ViabilityDecision.CONTINUE_PIVOT_FOCUS)

    detail = _run(store, generator)
    session = detail.session

    assert session.mode is PipelineMode.PIVOT_FOCUS
    assert detail.execution_plan is None
    assert detail.marketing is None
    assert detail.revenue_projection is None
    assert set(OUTPUTS).isdisjoint(session.stages_completed)
    assert set(OUTPUTS).isdisjoint(generator.calls)
    assert session.stages_completed == CORE + ["viability_check", "devils_advocate", "copycat", "alternatives"]


def test_weak_score_above_output_threshold_still_generates_outputs(store: RecordingStore) -> None:
    generator = ScriptedGenerator(default_score=42, verdict=ViabilityDecision.CONTINUE)

    detail = _run(store, generator)
    session = detail.session

    assert "viability_check" in generator.calls
    assert session.stages_completed == CORE + ["viability_check"] + HARSH + OUTPUTS + ["alternatives"]
    assert session.mode is PipelineMode.NORMAL
    assert detail.execution_plan is not None
    assert session.recommendation is Recommendation.PIVOT


def test_score_below_output_threshold_skips_outputs(store: RecordingStore) -> None:
    generator = ScriptedGenerator(default_score=38, verdict=ViabilityDecision.CONTINUE)

    detail = _run(store, generator)
    session = detail.session

    assert set(OUTPUTS).isdisjoint(session.stages_completed)
    assert set(OUTPUTS).isdisjoint(generator.calls)
    assert [stage for stage in session.stages_completed if stage in HARSH] == HARSH
    assert detail.execution_plan is None
    assert session.stages_completed[-1] == "alternatives"


def test_failed_perspective_is_skipped(store: RecordingStore) -> None:
    generator = ScriptedGenerator(scores=core_scores(80, 10, 60, 70, 70), fail={"designer"})

    detail = _run(store, generator)

    assert "designer" not in detail.session.stages_completed
    assert [a.perspective.value for a in detail.analyses][:4] == ["first_principles", "marketing", "technical", "financial"]
    assert generator.calls.count("designer") == 1


def test_missing_scores_do_not_drag_the_mean(store: RecordingStore) -> None:
    generator = ScriptedGenerator(scores=core_scores(80, None, 60, None, None), default_score=None)

    session = _run(store, generator).session

    assert session.overall_score == pytest.approx(70.0)
    assert "viability_check" not in session.stages_completed


def test_output_failures_are_independent(store: RecordingStore) -> None:
    generator = ScriptedGenerator(fail={"marketing_materials"})

    detail = _run(store, generator)

    assert "marketing_materials" not in detail.session.stages_completed
    assert detail.marketing is None
    assert detail.execution_plan is not None
    assert detail.revenue_projection is not None
    assert "revenue" in detail.session.stages_completed


def test_failed_viability_call_continues_normally(store: RecordingStore) -> None:
    generator = ScriptedGenerator(default_score=42, fail={"viability_check"})

    detail = _run(store, generator)
    session = detail.session

    assert "viability_check" in session.stages_completed
    assert session.viability_check is None
    assert session.mode is PipelineMode.NORMAL
    assert detail.execution_plan is not None


def test_failed_alternatives_still_completes(store: RecordingStore) -> None:
    generator = ScriptedGenerator(fail={"alternatives"})

    detail = _run(store, generator)

    assert "alternatives" not in detail.session.stages_completed
    assert detail.alternatives == []
    assert detail.session.status is SessionStatus.COMPLETED


def test_snapshots_grow_monotonically(store: RecordingStore) -> None:
    generator = ScriptedGenerator(default_score=42)

    session = _run(store, generator).session
    lengths = [len(snapshot.stages_completed) for snapshot in store.snapshots]

    assert lengths == sorted(lengths)
    assert lengths[-1] == len(session.stages_completed)
    assert [s.status for s in store.snapshots].count(SessionStatus.COMPLETED) == 1
    assert store.snapshots[-1].status is SessionStatus.COMPLETED
    for snapshot in store.snapshots:
        assert len(snapshot.stages_completed) == len(set(snapshot.stages_completed))


def test_current_stage_is_written_before_each_stage(store: RecordingStore) -> None:
    _run(store, ScriptedGenerator())

    first = store.snapshots[0]
    assert first.current_stage == "first_principles"
    assert first.stages_completed == []


def test_refined_idea_must_be_text(store: RecordingStore) -> None:
    generator = ScriptedGenerator()
    session = create_session(store)
    original = generator.analyze

    def analyze(idea, perspective):
        analysis = original(idea, perspective)
        analysis.detail["refined_idea"] = {"not": "text"}
        return analysis

    generator.analyze = analyze
    PipelineOrchestrator(store, generator).run(session.id)

    assert store.get(session.id).refined_idea is None


def test_deleting_session_mid_run_does_not_crash(store: RecordingStore) -> None:
    generator = ScriptedGenerator()
    session = create_session(store)
    generator.hooks["technical"] = lambda: store.delete(session.id)

    result = PipelineOrchestrator(store, generator).run(session.id)

    assert result.status is SessionStatus.COMPLETED
    assert result.stages_completed == ["first_principles", "designer", "marketing"]
    assert store.list_sessions() == []
