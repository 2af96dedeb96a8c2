"""OpenAI-powered analysis generator used by the pipeline."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from textwrap import dedent
from typing import List, Protocol, Sequence

from openai import OpenAI, OpenAIError

from .config import LLMSettings, get_llm_settings
from .errors import GenerationError
from .heuristics import HeuristicGenerator
from .payloads import (
    alternatives_from_payload,
    analysis_from_payload,
    execution_plan_from_payload,
    marketing_from_payload,
    parse_structured_response,
    revenue_projection_from_payload,
    verdict_from_dict,
)
from .perspectives import get_perspective
from .schemas import (
    Alternative,
    Analysis,
    ExecutionPlan,
    Marketing,
    Perspective,
    RevenueProjection,
    ViabilityVerdict,
)

logger = logging.getLogger("idea_dig.llm")


class AnalysisGenerator(Protocol):
    """Everything the pipeline needs from a content generator.

    Implementations raise :class:`GenerationError` on failure.
    """

    def analyze(self, idea: str, perspective: Perspective) -> Analysis: ...

    def evaluate_viability(self, idea: str, analyses: Sequence[Analysis], score: float) -> ViabilityVerdict: ...

    def generate_execution_plan(self, idea: str, analyses: Sequence[Analysis]) -> ExecutionPlan: ...

    def generate_marketing(self, idea: str, analyses: Sequence[Analysis]) -> Marketing: ...

    def generate_revenue_projection(self, idea: str, analyses: Sequence[Analysis]) -> RevenueProjection: ...

    def generate_alternatives(self, idea: str, analyses: Sequence[Analysis]) -> List[Alternative]: ...

    def generate_image(self, prompt: str) -> str: ...


@dataclass(frozen=True)
class PromptSpec:
    """Container describing how to call the LLM for a stage."""

    system_prompt: str
    user_prompt: str
    temperature: float = 0.7
    max_tokens: int = 1500


def _insights(analyses: Sequence[Analysis]) -> str:
    return "".join(f"\n{a.perspective.value} analysis:\n{a.summary}\n" for a in analyses)


def _weaknesses(analyses: Sequence[Analysis]) -> str:
    lines = [json.dumps(a.weaknesses, ensure_ascii=False) for a in analyses if a.weaknesses]
    return "\n".join(lines) or "None identified."


def _viability_prompt(idea: str, analyses: Sequence[Analysis], score: float) -> str:
    scored = "\n".join(
        f"- {a.perspective.value}: {a.score if a.score is not None else 'n/a'} - {a.summary}" for a in analyses
    )
    return dedent(
        f"""
        An idea scored {score:.1f}/100 across its initial analyses. Decide whether it deserves further work.

        IDEA: {idea}

        ANALYSES:
        {scored or "No analyses were produced."}

        Return JSON:
        {{
          "should_continue": true/false,
          "pivot_focus": true/false,
          "reasoning": "why the idea should or should not continue",
          "flaw_type": "fatal/market/execution/timing/competition/none",
          "salvageable_elements": ["parts of the idea worth keeping"]
        }}

        Set should_continue to false only if there is no viable path forward.
        Set pivot_focus to true if the core idea is weak but a pivot could work.
        """
    )


def _execution_plan_prompt(idea: str, analyses: Sequence[Analysis]) -> str:
    return dedent(
        f"""
        Based on the following idea and multi-perspective analysis, create a detailed execution plan.

        IDEA: {idea}

        ANALYSIS INSIGHTS: {_insights(analyses)}

        Return JSON:
        {{
          "summary": "executive summary of the plan",
          "mvp_scope": "what to build for the MVP, be specific",
          "full_scope": "complete product vision",
          "architecture": {{"type": "monolith/microservices/serverless", "components": [], "data_flow": ""}},
          "tech_stack": {{"frontend": "", "backend": "", "database": "", "hosting": "", "other": []}},
          "integrations": ["third-party services needed"],
          "phases": [{{"name": "Phase 1: MVP", "duration": "X weeks", "deliverables": [], "resources": ""}}],
          "milestones": [{{"name": "", "target": "Week X", "criteria": ""}}],
          "team_requirements": {{"roles": [], "skills": [], "min_team_size": 1}},
          "estimated_cost": {{"mvp": "$X-Y", "full_product": "$X-Y", "monthly_running": "$X-Y"}},
          "llm_prompt": "a detailed prompt someone could give an LLM to help build this"
        }}
        """
    )


def _marketing_prompt(idea: str) -> str:
    return dedent(
        f"""
        Create compelling marketing materials for this idea: "{idea}"

        Return JSON:
        {{
          "value_proposition": "the one thing that makes this irresistible",
          "target_audience": [{{"segment": "", "description": "", "pain_point": ""}}],
          "positioning_statement": "For [target] who [need], [product] is a [category] that [benefit].",
          "taglines": ["5 short punchy taglines"],
          "elevator_pitch": "30-second pitch that creates urgency",
          "headlines": ["5 landing page headlines"],
          "descriptions": [{{"type": "tweet/short/long", "text": ""}}],
          "color_suggestions": {{"primary": "#hex", "secondary": "#hex", "accent": "#hex", "mood": ""}},
          "imagery_prompts": ["image prompt for hero", "image prompt for feature", "image prompt for social"],
          "channel_strategy": {{"primary_channels": [], "tactics": []}},
          "launch_strategy": "how to launch for maximum impact"
        }}
        """
    )


def _revenue_prompt(idea: str) -> str:
    return dedent(
        f"""
        Create realistic revenue projections for this idea: "{idea}"

        Be specific with numbers and use reasonable assumptions based on similar products.

        Return JSON:
        {{
          "market_size": {{"tam": "", "sam": "", "som": ""}},
          "market_growth": "annual growth rate with reasoning",
          "competitors": [{{"name": "", "revenue": "", "market_share": "X%", "pricing": "$X"}}],
          "pricing_models": [{{"model": "", "price_points": [], "pros": [], "cons": []}}],
          "recommended_price": "$X/month or $Y one-time",
          "pricing_rationale": "why this pricing makes sense",
          "year1_revenue": {{"assumptions": "", "monthly": [], "total": "$X"}},
          "year2_revenue": {{"assumptions": "", "monthly": [], "total": "$X"}},
          "year3_revenue": {{"assumptions": "", "total": "$X"}},
          "key_metrics": {{"mrr_target": "", "churn_target": "", "conversion_rate": "", "cac": "", "ltv": ""}},
          "break_even_analysis": "when and how you break even",
          "assumptions": ["key assumptions"],
          "risks": ["financial risks to watch"]
        }}
        """
    )


def _alternatives_prompt(idea: str, analyses: Sequence[Analysis]) -> str:
    return dedent(
        f"""
        Based on this idea and its identified weaknesses, suggest 3-5 alternative directions or pivots
        that might be MORE successful.

        ORIGINAL IDEA: {idea}

        IDENTIFIED WEAKNESSES: {_weaknesses(analyses)}

        Return a JSON array:
        [
          {{
            "alternative_idea": "specific alternative or pivot",
            "rationale": "why this might work better",
            "comparison": "how it addresses the original weaknesses",
            "viability_score": 0-100,
            "effort_level": "low/medium/high",
            "potential": "low/medium/high/very_high"
          }}
        ]

        Think creatively: adjacent markets, different business models, simpler versions, bigger visions.
        """
    )


_SYSTEM_PROMPT = "You are a rigorous startup analyst. Always answer with valid JSON only."


class OpenAIGenerator:
    """Analysis generator backed by the OpenAI chat and image APIs."""

    def __init__(self, settings: LLMSettings | None = None, client: OpenAI | None = None) -> None:
        self._settings = settings or get_llm_settings()
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self._settings.openai_api_key:
                raise GenerationError("OpenAI API key is not configured.")
            self._client = OpenAI(api_key=self._settings.openai_api_key, timeout=self._settings.timeout_seconds)
        return self._client

    def _chat(self, spec: PromptSpec) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self._settings.model,
                messages=[
                    {"role": "system", "content": spec.system_prompt.strip()},
                    {"role": "user", "content": spec.user_prompt.strip()},
                ],
                temperature=spec.temperature,
                max_tokens=spec.max_tokens,
            )
        except OpenAIError as exc:
            logger.warning("OpenAI chat completion failed: %s", exc)
            raise GenerationError(str(exc)) from exc

        message = response.choices[0].message.content if response.choices else None
        if not message:
            raise GenerationError("Empty response from model.")
        return message

    def analyze(self, idea: str, perspective: Perspective) -> Analysis:
        info = get_perspective(perspective)
        raw = self._chat(PromptSpec(system_prompt=_SYSTEM_PROMPT, user_prompt=info.render(idea)))
        return analysis_from_payload(perspective, raw)

    def evaluate_viability(self, idea: str, analyses: Sequence[Analysis], score: float) -> ViabilityVerdict:
        raw = self._chat(
            PromptSpec(
                system_prompt="You are a blunt venture partner deciding whether an idea is worth more time.",
                user_prompt=_viability_prompt(idea, analyses, score),
                temperature=0.3,
                max_tokens=800,
            )
        )
        data = parse_structured_response(raw)
        if not isinstance(data, dict):
            raise GenerationError("Viability check did not return a JSON object.")
        return verdict_from_dict(data)

    def generate_execution_plan(self, idea: str, analyses: Sequence[Analysis]) -> ExecutionPlan:
        raw = self._chat(
            PromptSpec(system_prompt=_SYSTEM_PROMPT, user_prompt=_execution_plan_prompt(idea, analyses), max_tokens=2500)
        )
        return execution_plan_from_payload(raw)

    def generate_marketing(self, idea: str, analyses: Sequence[Analysis]) -> Marketing:
        raw = self._chat(PromptSpec(system_prompt=_SYSTEM_PROMPT, user_prompt=_marketing_prompt(idea), temperature=0.8))
        return marketing_from_payload(raw)

    def generate_revenue_projection(self, idea: str, analyses: Sequence[Analysis]) -> RevenueProjection:
        raw = self._chat(
            PromptSpec(system_prompt=_SYSTEM_PROMPT, user_prompt=_revenue_prompt(idea), temperature=0.5, max_tokens=2500)
        )
        return revenue_projection_from_payload(raw)

    def generate_alternatives(self, idea: str, analyses: Sequence[Analysis]) -> List[Alternative]:
        raw = self._chat(
            PromptSpec(system_prompt=_SYSTEM_PROMPT, user_prompt=_alternatives_prompt(idea, analyses), temperature=0.9)
        )
        return alternatives_from_payload(raw)

    def generate_image(self, prompt: str) -> str:
        try:
            response = self.client.images.generate(
                model=self._settings.image_model,
                prompt=prompt,
                n=1,
                size="1024x1024",
            )
        except OpenAIError as exc:
            logger.warning("Image generation failed: %s", exc)
            raise GenerationError(str(exc)) from exc

        if not response.data or not response.data[0].url:
            raise GenerationError("No image generated.")
        return response.data[0].url


def get_generator(settings: LLMSettings | None = None) -> AnalysisGenerator:
    """Return the OpenAI generator when a key is configured, else the offline one."""

    resolved = settings or get_llm_settings()
    if resolved.has_api_key:
        return OpenAIGenerator(resolved)
    logger.info("No OpenAI API key configured; using the heuristic generator.")
    return HeuristicGenerator()
