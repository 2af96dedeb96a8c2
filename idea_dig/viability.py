"""Viability gate: decide whether a weak idea deserves the full pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from .schemas import Analysis, PipelineMode, ViabilityDecision, ViabilityVerdict

if TYPE_CHECKING:
    from .llm import AnalysisGenerator


_MODE_BY_DECISION = {
    ViabilityDecision.CONTINUE: PipelineMode.NORMAL,
    ViabilityDecision.CONTINUE_PIVOT_FOCUS: PipelineMode.PIVOT_FOCUS,
    ViabilityDecision.STOP: PipelineMode.EARLY_EXIT,
}


class ViabilityGate:
    """Delegate the judgement to the generator and expose the outcome.

    The gate holds no score thresholds; the orchestrator decides when to
    consult it.
    """

    def __init__(self, generator: "AnalysisGenerator") -> None:
        self._generator = generator

    def evaluate(self, idea: str, analyses: Sequence[Analysis], score: float) -> ViabilityVerdict:
        """Return the verdict; raises ``GenerationError`` when the call fails."""

        return self._generator.evaluate_viability(idea, list(analyses), score)


def mode_for(verdict: ViabilityVerdict) -> PipelineMode:
    """Translate a verdict into the pipeline branch it selects."""

    return _MODE_BY_DECISION[verdict.decision]
