from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

import pytest

from idea_dig.config import get_app_settings, get_llm_settings
from idea_dig.errors import GenerationError
from idea_dig.memory import SessionStore
from idea_dig.perspectives import CORE_PERSPECTIVES
from idea_dig.schemas import (
    Alternative,
    Analysis,
    ExecutionPlan,
    Marketing,
    Perspective,
    RevenueProjection,
    Session,
    ViabilityDecision,
    ViabilityVerdict,
)
from idea_dig.scoring import generate_title


class ScriptedGenerator:
    """Deterministic generator whose scores, verdict and failures are set per test."""

    def __init__(
        self,
        scores: Optional[Dict[Perspective, Optional[float]]] = None,
        default_score: Optional[float] = 70.0,
        verdict: ViabilityDecision = ViabilityDecision.CONTINUE,
        fail: Iterable[str] = (),
        imagery_prompts: Sequence[str] = ("hero shot", "feature shot", "social shot", "extra shot"),
    ) -> None:
        self.scores = dict(scores or {})
        self.default_score = default_score
        self.verdict = verdict
        self.fail = set(fail)
        self.imagery_prompts = list(imagery_prompts)
        self.calls: List[str] = []
        self.hooks: Dict[str, object] = {}

    def _call(self, name: str) -> None:
        self.calls.append(name)
        hook = self.hooks.get(name)
        if callable(hook):
            hook()
        if name in self.fail:
            raise GenerationError(f"{name} failed")

    def analyze(self, idea: str, perspective: Perspective) -> Analysis:
        self._call(perspective.value)
        detail: Dict[str, object] = {"summary": f"{perspective.value} take"}
        if perspective is Perspective.FIRST_PRINCIPLES:
            detail["refined_idea"] = f"Refined: {idea}"
        return Analysis(
            perspective=perspective,
            score=self.scores.get(perspective, self.default_score),
            summary=f"{perspective.value} take",
            weaknesses=[f"{perspective.value} weakness"],
            detail=detail,
        )

    def evaluate_viability(self, idea: str, analyses: Sequence[Analysis], score: float) -> ViabilityVerdict:
        self._call("viability_check")
        return ViabilityVerdict(
            decision=self.verdict,
            reasoning="No defensible market." if self.verdict is ViabilityDecision.STOP else "Worth a look.",
            flaw_type="market",
            raw={"decision": self.verdict.value, "score_seen": score},
        )

    def generate_execution_plan(self, idea: str, analyses: Sequence[Analysis]) -> ExecutionPlan:
        self._call("execution_plan")
        return ExecutionPlan(summary="Build it lean.", mvp_scope="One workflow.", llm_prompt="Build an MVP.")

    def generate_marketing(self, idea: str, analyses: Sequence[Analysis]) -> Marketing:
        self._call("marketing_materials")
        return Marketing(
            value_proposition="Finally, scissors for you.",
            elevator_pitch="Monthly delight.",
            taglines=["Cut freely."],
            imagery_prompts=list(self.imagery_prompts),
        )

    def generate_revenue_projection(self, idea: str, analyses: Sequence[Analysis]) -> RevenueProjection:
        self._call("revenue")
        return RevenueProjection(recommended_price="$15/month", pricing_rationale="Impulse price point.")

    def generate_alternatives(self, idea: str, analyses: Sequence[Analysis]) -> List[Alternative]:
        self._call("alternatives")
        return [
            Alternative(alternative_idea="Left-handed tool marketplace", potential="high", rationale="Wider catalog."),
            Alternative(alternative_idea="Ergonomic kids' stationery", potential="medium"),
        ]

    def generate_image(self, prompt: str) -> str:
        self._call(f"image:{prompt}")
        return f"https://images.example.com/{prompt.replace(' ', '-')}.png"


class RecordingStore(SessionStore):
    """Store that remembers every saved snapshot of every session."""

    def __init__(self) -> None:
        super().__init__()
        self.snapshots: List[Session] = []

    def save(self, session: Session) -> Session:
        saved = super().save(session)
        self.snapshots.append(session.model_copy(deep=True))
        return saved


def core_scores(*values: Optional[float]) -> Dict[Perspective, Optional[float]]:
    return dict(zip(CORE_PERSPECTIVES, values))


def create_session(store: SessionStore, idea: str = "A subscription box for left-handed scissors") -> Session:
    return store.create(Session(raw_idea=idea, title=generate_title(idea), current_stage="first_principles"))


@pytest.fixture(autouse=True)
def clear_settings_cache() -> None:
    """Ensure cached settings do not leak between tests."""

    get_llm_settings.cache_clear()
    get_app_settings.cache_clear()


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()
