"""Fixed catalog of analysis perspectives and their prompt templates."""

from __future__ import annotations

from dataclasses import dataclass
from textwrap import dedent
from typing import Dict, List, Tuple

from .schemas import Perspective, PerspectiveDefinition, PerspectiveGroup


@dataclass(frozen=True)
class PerspectiveInfo:
    """Runtime definition used by the registry below."""

    slug: Perspective
    label: str
    group: PerspectiveGroup
    description: str
    prompt: str

    def render(self, idea: str) -> str:
        return self.prompt.replace("{idea}", idea)


_SCORE_FOOTER = '  "score": 0-100\n}'

# ---------------------------------------------------------------------------
# Core perspectives
# ---------------------------------------------------------------------------

_FIRST_PRINCIPLES = dedent(
    """
    You are analyzing an idea using FIRST PRINCIPLES thinking.

    Break the idea down to its fundamental truths and reason up from there.
    Ask: what are we absolutely sure is true? What are the physics, economics and human behavior fundamentals?

    For the idea: "{idea}"

    Provide analysis in this JSON format:
    {
      "summary": "2-3 sentence first principles analysis",
      "fundamental_truths": ["undeniable truths this idea relies on"],
      "assumptions_challenged": ["common assumptions that might be wrong"],
      "strengths": ["what fundamentally works"],
      "weaknesses": ["what violates first principles"],
      "opportunities": ["what first principles reveal as possible"],
      "threats": ["fundamental risks"],
      "recommendations": ["specific actions based on first principles"],
      "verdict": "proceed/pivot/refine/abandon",
      "refined_idea": "improved version of the idea based on first principles",
    """
)

_DESIGNER = dedent(
    """
    You are analyzing an idea as a SENIOR PRODUCT DESIGNER.

    Focus on user experience, pain points, user journey, emotional design, accessibility and delight.

    For the idea: "{idea}"

    Provide analysis in this JSON format:
    {
      "summary": "2-3 sentence design perspective",
      "target_users": ["specific user personas"],
      "pain_points_addressed": ["user problems this solves"],
      "user_journey": "brief description of the ideal user flow",
      "ux_strengths": ["what will delight users"],
      "ux_weaknesses": ["friction points and concerns"],
      "design_opportunities": ["ways to improve the experience"],
      "accessibility_considerations": ["inclusivity factors"],
      "recommendations": ["specific design recommendations"],
      "key_screens": ["essential screens or features"],
    """
)

_MARKETING = dedent(
    """
    You are analyzing an idea as a CHIEF MARKETING OFFICER.

    Focus on positioning, target audience, messaging, competitive landscape and go-to-market.

    For the idea: "{idea}"

    Provide analysis in this JSON format:
    {
      "summary": "2-3 sentence marketing analysis",
      "target_market": "primary market segment",
      "market_size_estimate": "rough TAM/SAM/SOM",
      "positioning": "unique value proposition",
      "competitive_advantages": ["differentiators"],
      "competitive_threats": ["market challenges"],
      "messaging_angles": ["messages that would resonate"],
      "channels": ["recommended marketing channels"],
      "viral_potential": "low/medium/high with reasoning",
      "recommendations": ["go-to-market recommendations"],
      "tagline_options": ["3-5 potential taglines"],
    """
)

_TECHNICAL = dedent(
    """
    You are analyzing an idea as a SENIOR TECHNICAL ARCHITECT.

    Focus on feasibility, architecture, scalability, security and build vs buy decisions.

    For the idea: "{idea}"

    Provide analysis in this JSON format:
    {
      "summary": "2-3 sentence technical analysis",
      "technical_feasibility": "straightforward/moderate/complex/breakthrough",
      "core_components": ["main technical building blocks"],
      "recommended_stack": {"frontend": "", "backend": "", "database": "", "infrastructure": ""},
      "build_vs_buy": ["what to build custom vs use existing solutions"],
      "technical_risks": ["implementation challenges"],
      "scalability_approach": "how it would scale",
      "security_considerations": ["security requirements"],
      "mvp_timeline": "realistic MVP timeline",
      "recommendations": ["technical recommendations"],
      "integrations_needed": ["third-party services or APIs"],
    """
)

_FINANCIAL = dedent(
    """
    You are analyzing an idea as a FINANCIAL ANALYST / VC.

    Focus on revenue model, unit economics, funding requirements, ROI and market opportunity.

    For the idea: "{idea}"

    Provide analysis in this JSON format:
    {
      "summary": "2-3 sentence financial analysis",
      "revenue_models": ["viable monetization strategies"],
      "recommended_pricing": "suggested pricing approach with reasoning",
      "unit_economics": {"estimated_cac": "", "estimated_ltv": "", "ltv_cac_ratio": ""},
      "startup_costs": "estimated initial investment",
      "monthly_burn": "estimated monthly operating costs",
      "break_even": "when profitability is realistic",
      "funding_recommendation": "bootstrap/angel/seed/series with reasoning",
      "financial_risks": ["financial challenges"],
      "recommendations": ["financial recommendations"],
    """
)

# ---------------------------------------------------------------------------
# Harsh perspectives
# ---------------------------------------------------------------------------

_DEVILS_ADVOCATE = dedent(
    """
    You are a brutally honest DEVIL'S ADVOCATE. Your job is to find every reason this idea will fail.
    Do not soften anything. Assume the founder is overconfident.

    For the idea: "{idea}"

    Provide analysis in this JSON format:
    {
      "summary": "2-3 sentence case against the idea",
      "fatal_flaws": ["problems that could kill the idea outright"],
      "weaknesses": ["serious but survivable problems"],
      "threats": ["external forces working against it"],
      "hidden_assumptions": ["things the founder assumes without evidence"],
      "strengths": ["what survives the attack, if anything"],
      "recommendations": ["what would have to be true for this to work"],
    """
)

_COPYCAT = dedent(
    """
    You are a well-funded COMPETITOR who just saw this idea. Explain exactly how you would copy it and win.

    For the idea: "{idea}"

    Provide analysis in this JSON format:
    {
      "summary": "2-3 sentence view on how easily this is copied",
      "existing_competitors": ["companies already doing this or close to it"],
      "time_to_copy": "how long a competent team needs to replicate it",
      "moat_strength": "none/weak/moderate/strong",
      "weaknesses": ["why the idea is easy to copy"],
      "strengths": ["defensible elements"],
      "threats": ["specific copycat strategies"],
      "recommendations": ["how to build a real moat"],
    """
)

_USER_PSYCHOLOGY = dedent(
    """
    You are a BEHAVIORAL PSYCHOLOGIST studying whether real people would adopt and keep using this.

    For the idea: "{idea}"

    Provide analysis in this JSON format:
    {
      "summary": "2-3 sentence view on user motivation",
      "core_motivation": "the real job the user hires this for",
      "adoption_barriers": ["habits, fears or costs that block adoption"],
      "weaknesses": ["reasons users churn"],
      "strengths": ["psychological hooks that help"],
      "threats": ["behavioral risks"],
      "willingness_to_pay": "low/medium/high with reasoning",
      "recommendations": ["ways to align with actual behavior"],
    """
)

_SCALABILITY = dedent(
    """
    You are an OPERATIONS EXECUTIVE who has scaled companies from 10 to 10 million customers.
    Stress test whether this idea survives growth.

    For the idea: "{idea}"

    Provide analysis in this JSON format:
    {
      "summary": "2-3 sentence scalability assessment",
      "bottlenecks": ["what breaks first as volume grows"],
      "unit_economics_at_scale": "how margins change with scale",
      "weaknesses": ["operational limits"],
      "strengths": ["what gets better with scale"],
      "threats": ["scaling risks"],
      "recommendations": ["how to design for scale early"],
    """
)

_WORST_CASE = dedent(
    """
    You are a RISK ANALYST running a pre-mortem. It is two years from now and this idea has failed.
    Describe the most likely ways it happened.

    For the idea: "{idea}"

    Provide analysis in this JSON format:
    {
      "summary": "2-3 sentence pre-mortem",
      "failure_scenarios": [{"scenario": "", "likelihood": "low/medium/high", "impact": "low/medium/high"}],
      "weaknesses": ["root causes of failure"],
      "threats": ["external shocks"],
      "strengths": ["what would limit the damage"],
      "early_warning_signs": ["signals to watch"],
      "recommendations": ["mitigations to put in place now"],
    """
)


def _with_score(body: str) -> str:
    return body.strip() + "\n" + _SCORE_FOOTER


PERSPECTIVE_REGISTRY: Dict[Perspective, PerspectiveInfo] = {
    Perspective.FIRST_PRINCIPLES: PerspectiveInfo(
        slug=Perspective.FIRST_PRINCIPLES,
        label="First Principles",
        group=PerspectiveGroup.CORE,
        description="Reduce the idea to fundamental truths and reason upward.",
        prompt=_with_score(_FIRST_PRINCIPLES),
    ),
    Perspective.DESIGNER: PerspectiveInfo(
        slug=Perspective.DESIGNER,
        label="Designer",
        group=PerspectiveGroup.CORE,
        description="UX and product design perspective.",
        prompt=_with_score(_DESIGNER),
    ),
    Perspective.MARKETING: PerspectiveInfo(
        slug=Perspective.MARKETING,
        label="Marketing",
        group=PerspectiveGroup.CORE,
        description="Market potential, positioning and go-to-market.",
        prompt=_with_score(_MARKETING),
    ),
    Perspective.TECHNICAL: PerspectiveInfo(
        slug=Perspective.TECHNICAL,
        label="Technical",
        group=PerspectiveGroup.CORE,
        description="Technical feasibility and architecture.",
        prompt=_with_score(_TECHNICAL),
    ),
    Perspective.FINANCIAL: PerspectiveInfo(
        slug=Perspective.FINANCIAL,
        label="Financial",
        group=PerspectiveGroup.CORE,
        description="Revenue model, unit economics and funding.",
        prompt=_with_score(_FINANCIAL),
    ),
    Perspective.DEVILS_ADVOCATE: PerspectiveInfo(
        slug=Perspective.DEVILS_ADVOCATE,
        label="Devil's Advocate",
        group=PerspectiveGroup.HARSH,
        description="Argue every reason the idea will fail.",
        prompt=_with_score(_DEVILS_ADVOCATE),
    ),
    Perspective.COPYCAT: PerspectiveInfo(
        slug=Perspective.COPYCAT,
        label="Copycat",
        group=PerspectiveGroup.HARSH,
        description="How a funded competitor would clone and beat it.",
        prompt=_with_score(_COPYCAT),
    ),
    Perspective.USER_PSYCHOLOGY: PerspectiveInfo(
        slug=Perspective.USER_PSYCHOLOGY,
        label="User Psychology",
        group=PerspectiveGroup.HARSH,
        description="Whether real people would adopt and keep using it.",
        prompt=_with_score(_USER_PSYCHOLOGY),
    ),
    Perspective.SCALABILITY: PerspectiveInfo(
        slug=Perspective.SCALABILITY,
        label="Scalability",
        group=PerspectiveGroup.HARSH,
        description="What breaks as the business grows.",
        prompt=_with_score(_SCALABILITY),
    ),
    Perspective.WORST_CASE: PerspectiveInfo(
        slug=Perspective.WORST_CASE,
        label="Worst Case",
        group=PerspectiveGroup.HARSH,
        description="Pre-mortem of the most likely failure.",
        prompt=_with_score(_WORST_CASE),
    ),
}

CORE_PERSPECTIVES: Tuple[Perspective, ...] = (
    Perspective.FIRST_PRINCIPLES,
    Perspective.DESIGNER,
    Perspective.MARKETING,
    Perspective.TECHNICAL,
    Perspective.FINANCIAL,
)

HARSH_PERSPECTIVES: Tuple[Perspective, ...] = (
    Perspective.DEVILS_ADVOCATE,
    Perspective.COPYCAT,
    Perspective.USER_PSYCHOLOGY,
    Perspective.SCALABILITY,
    Perspective.WORST_CASE,
)

# Subset still run when the viability gate asks for pivot focus.
PIVOT_HARSH_PERSPECTIVES: Tuple[Perspective, ...] = (
    Perspective.DEVILS_ADVOCATE,
    Perspective.COPYCAT,
)


def get_perspective(slug: Perspective) -> PerspectiveInfo:
    return PERSPECTIVE_REGISTRY[slug]


def harsh_perspectives(pivot_focus: bool) -> Tuple[Perspective, ...]:
    """Return the harsh set to run for the current branch."""

    return PIVOT_HARSH_PERSPECTIVES if pivot_focus else HARSH_PERSPECTIVES


def list_perspective_definitions() -> List[PerspectiveDefinition]:
    """Return UI-friendly descriptors in catalog order."""

    return [
        PerspectiveDefinition(id=info.slug, label=info.label, group=info.group, description=info.description)
        for info in (PERSPECTIVE_REGISTRY[slug] for slug in CORE_PERSPECTIVES + HARSH_PERSPECTIVES)
    ]
