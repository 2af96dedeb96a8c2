"""Fixed multi-stage analysis pipeline for a single session."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import partial
from typing import Callable, List, Optional, Sequence, TypeVar

from .errors import DigError, GenerationError
from .llm import AnalysisGenerator
from .memory import SessionStore
from .perspectives import CORE_PERSPECTIVES, harsh_perspectives
from .schemas import (
    Alternative,
    Analysis,
    Perspective,
    PipelineMode,
    Recommendation,
    Session,
    SessionStatus,
)
from .scoring import aggregate_score, determine_recommendation
from .viability import ViabilityGate, mode_for

logger = logging.getLogger("idea_dig.pipeline")

# Scores below this trigger the viability gate.
VIABILITY_GATE_THRESHOLD = 45.0
# Scores below this skip execution plan, marketing and revenue.
OUTPUT_GENERATION_THRESHOLD = 40.0

VIABILITY_STAGE = "viability_check"
EXECUTION_PLAN_STAGE = "execution_plan"
MARKETING_STAGE = "marketing_materials"
REVENUE_STAGE = "revenue"
ALTERNATIVES_STAGE = "alternatives"
COMPLETED_STAGE = "completed"

T = TypeVar("T")


class PipelineOrchestrator:
    """Run every stage for one session, persisting after each transition.

    Stages run strictly in order. A generator failure skips that stage only,
    and a failed progress write is logged and otherwise ignored.
    """

    def __init__(
        self,
        store: SessionStore,
        generator: AnalysisGenerator,
        gate: ViabilityGate | None = None,
    ) -> None:
        self._store = store
        self._generator = generator
        self._gate = gate or ViabilityGate(generator)

    def run(self, session_id: str) -> Session:
        session = self._store.get(session_id)
        idea = session.raw_idea
        analyses: List[Analysis] = []
        logger.info("Starting analysis for session %s", session.id)

        self._run_perspectives(session, CORE_PERSPECTIVES, analyses)

        initial_score = aggregate_score(analyses)
        logger.info("Session %s initial score %.1f from %d analyses", session.id, initial_score, len(analyses))

        if initial_score < VIABILITY_GATE_THRESHOLD:
            self._check_viability(session, analyses, initial_score)

        if not session.early_exit:
            self._run_perspectives(session, harsh_perspectives(session.pivot_focus), analyses)

        if initial_score >= OUTPUT_GENERATION_THRESHOLD and session.mode is PipelineMode.NORMAL:
            self._run_stage(
                session,
                EXECUTION_PLAN_STAGE,
                partial(self._generator.generate_execution_plan, idea, analyses),
                partial(self._store.set_execution_plan, session.id),
            )
            self._run_stage(
                session,
                MARKETING_STAGE,
                partial(self._generator.generate_marketing, idea, analyses),
                partial(self._store.set_marketing, session.id),
            )
            self._run_stage(
                session,
                REVENUE_STAGE,
                partial(self._generator.generate_revenue_projection, idea, analyses),
                partial(self._store.set_revenue_projection, session.id),
            )
        else:
            logger.info("Session %s skips output generation (mode=%s)", session.id, session.mode.value)

        self._run_stage(
            session,
            ALTERNATIVES_STAGE,
            partial(self._generator.generate_alternatives, idea, analyses),
            partial(self._save_alternatives, session.id),
        )

        self._finalize(session, analyses)
        return session

    # ------------------------------------------------------------------
    # Stage helpers
    # ------------------------------------------------------------------

    def _persist(self, session: Session) -> None:
        try:
            self._store.save(session)
        except DigError as exc:
            logger.warning("Ignoring failed progress write for session %s: %s", session.id, exc)

    def _run_stage(
        self,
        session: Session,
        stage: str,
        produce: Callable[[], T],
        save: Callable[[T], object],
    ) -> bool:
        """Generate and store one artifact; return whether the stage completed."""

        session.current_stage = stage
        self._persist(session)

        try:
            result = produce()
        except GenerationError as exc:
            logger.warning("Skipping stage %s for session %s: %s", stage, session.id, exc)
            return False

        try:
            save(result)
        except DigError as exc:
            logger.warning("Could not store %s for session %s: %s", stage, session.id, exc)
            return False

        session.mark_stage_completed(stage)
        self._persist(session)
        logger.info("Session %s completed stage %s", session.id, stage)
        return True

    def _run_perspectives(
        self,
        session: Session,
        perspectives: Sequence[Perspective],
        analyses: List[Analysis],
    ) -> None:
        for perspective in perspectives:
            self._run_stage(
                session,
                perspective.value,
                partial(self._generator.analyze, session.raw_idea, perspective),
                partial(self._save_analysis, session.id, analyses),
            )

    def _save_analysis(self, session_id: str, analyses: List[Analysis], analysis: Analysis) -> None:
        analyses.append(self._store.add_analysis(session_id, analysis))

    def _save_alternatives(self, session_id: str, alternatives: Sequence[Alternative]) -> None:
        for alternative in alternatives:
            self._store.add_alternative(session_id, alternative)

    def _check_viability(self, session: Session, analyses: Sequence[Analysis], score: float) -> None:
        session.current_stage = VIABILITY_STAGE
        self._persist(session)

        try:
            verdict = self._gate.evaluate(session.raw_idea, analyses, score)
        except GenerationError as exc:
            logger.warning("Viability check failed for session %s, continuing: %s", session.id, exc)
            verdict = None

        if verdict is not None:
            session.viability_check = verdict.raw or verdict.model_dump(mode="json", exclude={"raw"})
            session.flaw_type = verdict.flaw_type
            session.mode = mode_for(verdict)
            if session.mode is PipelineMode.EARLY_EXIT:
                session.early_exit_reason = verdict.reasoning
                session.recommendation = Recommendation.ABANDON
            logger.info(
                "Session %s viability decision %s (flaw=%s)", session.id, verdict.decision.value, verdict.flaw_type
            )

        session.mark_stage_completed(VIABILITY_STAGE)
        self._persist(session)

    def _finalize(self, session: Session, analyses: Sequence[Analysis]) -> None:
        final_score = aggregate_score(analyses)
        session.overall_score = final_score
        if session.recommendation is None:
            session.recommendation = determine_recommendation(final_score, analyses)

        refined = _refined_idea(analyses)
        if refined:
            session.refined_idea = refined

        session.status = SessionStatus.COMPLETED
        session.current_stage = COMPLETED_STAGE
        session.completed_at = datetime.now(timezone.utc)
        self._persist(session)
        logger.info(
            "Session %s completed: score %.1f, recommendation %s",
            session.id,
            final_score,
            session.recommendation.value,
        )


def _refined_idea(analyses: Sequence[Analysis]) -> Optional[str]:
    for analysis in analyses:
        if analysis.perspective is Perspective.FIRST_PRINCIPLES:
            refined = analysis.detail.get("refined_idea")
            if isinstance(refined, str) and refined.strip():
                return refined.strip()
    return None
