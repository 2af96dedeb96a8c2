"""Pydantic models and enums for the idea analysis pipeline."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class SessionStatus(str, Enum):
    """Lifecycle of a session. There is deliberately no failed state."""

    ANALYZING = "analyzing"
    COMPLETED = "completed"


class Recommendation(str, Enum):
    """Final verdict attached to a completed session."""

    PROCEED = "proceed"
    REFINE = "refine"
    PIVOT = "pivot"
    ABANDON = "abandon"


class PerspectiveGroup(str, Enum):
    CORE = "core"
    HARSH = "harsh"


class Perspective(str, Enum):
    """Enumerate every analysis lens, core first then harsh."""

    FIRST_PRINCIPLES = "first_principles"
    DESIGNER = "designer"
    MARKETING = "marketing"
    TECHNICAL = "technical"
    FINANCIAL = "financial"
    DEVILS_ADVOCATE = "devils_advocate"
    COPYCAT = "copycat"
    USER_PSYCHOLOGY = "user_psychology"
    SCALABILITY = "scalability"
    WORST_CASE = "worst_case"


class PipelineMode(str, Enum):
    """Branch the pipeline is on after the viability gate.

    ``EARLY_EXIT`` implies pivot focus as well, so the two public flags can
    never disagree.
    """

    NORMAL = "normal"
    PIVOT_FOCUS = "pivot_focus"
    EARLY_EXIT = "early_exit"


class ViabilityDecision(str, Enum):
    CONTINUE = "continue"
    CONTINUE_PIVOT_FOCUS = "continue_pivot_focus"
    STOP = "stop"


class ExportFormat(str, Enum):
    JSON = "json"
    MARKDOWN = "markdown"


class Session(BaseModel):
    """Pipeline state for a single analysis run."""

    id: str = Field(default_factory=_new_id)
    raw_idea: str
    title: str
    status: SessionStatus = SessionStatus.ANALYZING
    current_stage: str
    stages_completed: List[str] = Field(default_factory=list)
    overall_score: Optional[float] = None
    recommendation: Optional[Recommendation] = None
    mode: PipelineMode = PipelineMode.NORMAL
    early_exit_reason: Optional[str] = None
    flaw_type: Optional[str] = None
    viability_check: Optional[Dict[str, Any]] = None
    refined_idea: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def early_exit(self) -> bool:
        return self.mode is PipelineMode.EARLY_EXIT

    @computed_field  # type: ignore[prop-decorator]
    @property
    def pivot_focus(self) -> bool:
        return self.mode in (PipelineMode.PIVOT_FOCUS, PipelineMode.EARLY_EXIT)

    def mark_stage_completed(self, stage: str) -> None:
        """Append *stage* to the completed list unless it is already there."""

        if stage not in self.stages_completed:
            self.stages_completed.append(stage)


class Analysis(BaseModel):
    """Result of evaluating the idea through one perspective."""

    id: str = Field(default_factory=_new_id)
    session_id: Optional[str] = None
    perspective: Perspective
    score: Optional[float] = None
    summary: str = ""
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    opportunities: List[str] = Field(default_factory=list)
    threats: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    detail: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)


class ExecutionPlan(BaseModel):
    id: str = Field(default_factory=_new_id)
    session_id: Optional[str] = None
    summary: str = ""
    mvp_scope: str = ""
    full_scope: str = ""
    architecture: Any = None
    tech_stack: Any = None
    integrations: Any = None
    phases: Any = None
    milestones: Any = None
    team_requirements: Any = None
    estimated_cost: Any = None
    llm_prompt: str = ""
    created_at: datetime = Field(default_factory=_utcnow)


class Marketing(BaseModel):
    id: str = Field(default_factory=_new_id)
    session_id: Optional[str] = None
    value_proposition: str = ""
    target_audience: Any = None
    positioning_statement: str = ""
    taglines: List[str] = Field(default_factory=list)
    elevator_pitch: str = ""
    headlines: List[str] = Field(default_factory=list)
    descriptions: Any = None
    color_suggestions: Any = None
    imagery_prompts: List[str] = Field(default_factory=list)
    generated_images: List[str] = Field(default_factory=list)
    channel_strategy: Any = None
    launch_strategy: str = ""
    created_at: datetime = Field(default_factory=_utcnow)


class RevenueProjection(BaseModel):
    id: str = Field(default_factory=_new_id)
    session_id: Optional[str] = None
    market_size: Any = None
    market_growth: str = ""
    competitors: Any = None
    pricing_models: Any = None
    recommended_price: str = ""
    pricing_rationale: str = ""
    year1_revenue: Any = None
    year2_revenue: Any = None
    year3_revenue: Any = None
    key_metrics: Any = None
    break_even_analysis: str = ""
    assumptions: Any = None
    risks: Any = None
    created_at: datetime = Field(default_factory=_utcnow)


class Alternative(BaseModel):
    id: str = Field(default_factory=_new_id)
    session_id: Optional[str] = None
    alternative_idea: str
    rationale: str = ""
    comparison: str = ""
    viability_score: Optional[float] = None
    effort_level: str = ""
    potential: str = ""
    created_at: datetime = Field(default_factory=_utcnow)


class ViabilityVerdict(BaseModel):
    """Interpreted outcome of the viability gate call."""

    decision: ViabilityDecision
    reasoning: str = ""
    flaw_type: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


class SessionDetail(BaseModel):
    """A session together with every side artifact it owns."""

    session: Session
    analyses: List[Analysis] = Field(default_factory=list)
    execution_plan: Optional[ExecutionPlan] = None
    marketing: Optional[Marketing] = None
    revenue_projection: Optional[RevenueProjection] = None
    alternatives: List[Alternative] = Field(default_factory=list)


class ProgressResponse(BaseModel):
    session_id: str
    status: SessionStatus
    percentage: int
    current_stage: str
    stages_completed: List[str]
    message: str


class PerspectiveDefinition(BaseModel):
    """Expose catalog metadata to the UI."""

    id: Perspective
    label: str
    group: PerspectiveGroup
    description: str


class StartSessionRequest(BaseModel):
    idea: str = Field(
        ...,
        min_length=1,
        description="Free-text business idea to analyse.",
    )

    @field_validator("idea")
    @classmethod
    def _strip_idea(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Idea is required")
        return stripped


class ExportDocument(BaseModel):
    format: ExportFormat
    filename: str
    media_type: str
    content: str


class ImagesResponse(BaseModel):
    session_id: str
    images: List[str]
