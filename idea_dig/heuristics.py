"""Heuristic generator that keeps the pipeline usable without an LLM key."""

from __future__ import annotations

import re
import zlib
from collections import Counter
from typing import Dict, List, Sequence

from .errors import GenerationError
from .payloads import analysis_from_dict
from .perspectives import get_perspective
from .schemas import (
    Alternative,
    Analysis,
    ExecutionPlan,
    Marketing,
    Perspective,
    PerspectiveGroup,
    RevenueProjection,
    ViabilityDecision,
    ViabilityVerdict,
)

# ---------------------------------------------------------------------------
# Text utilities
# ---------------------------------------------------------------------------

STOP_WORDS = {
    "and",
    "the",
    "for",
    "with",
    "that",
    "this",
    "from",
    "into",
    "your",
    "their",
    "about",
    "using",
    "app",
    "startup",
    "business",
    "solution",
    "platform",
    "create",
    "building",
    "make",
    "service",
    "help",
    "helps",
    "users",
    "people",
}

# Harsh lenses grade more strictly than core ones.
_GROUP_BIAS: Dict[PerspectiveGroup, int] = {
    PerspectiveGroup.CORE: 0,
    PerspectiveGroup.HARSH: -12,
}


def _extract_keywords(*texts: str, max_terms: int = 5) -> List[str]:
    """Extract the top keywords from the provided text fragments."""

    joined = " ".join(part for part in texts if part)
    words = re.findall(r"[a-zA-Z][a-zA-Z0-9-]+", joined.lower())
    counts: Counter[str] = Counter(word for word in words if word not in STOP_WORDS and len(word) > 2)
    most_common = [word for word, _ in counts.most_common(max_terms)]
    if not most_common:
        most_common = ["idea", "market", "customers"]
    return most_common


def _titleize(word: str) -> str:
    return word.replace("-", " ").title()


def _stable_offset(*parts: str, spread: int = 21) -> int:
    """Deterministic offset in [-spread//2, spread//2] derived from the inputs."""

    digest = zlib.crc32("|".join(parts).encode("utf-8"))
    return digest % spread - spread // 2


def _base_score(idea: str) -> int:
    # Ideas with some detail score higher than one-liners, up to a cap.
    word_count = len(re.findall(r"[a-zA-Z]+", idea))
    return 45 + min(word_count, 25)


class HeuristicGenerator:
    """Deterministic, offline stand-in for the OpenAI generator."""

    def analyze(self, idea: str, perspective: Perspective) -> Analysis:
        info = get_perspective(perspective)
        keywords = _extract_keywords(idea)
        focus = _titleize(keywords[0])
        second = _titleize(keywords[1]) if len(keywords) > 1 else "Execution"
        score = _base_score(idea) + _GROUP_BIAS[info.group] + _stable_offset(idea, perspective.value)
        score = max(5, min(95, score))

        payload = {
            "summary": (
                f"{info.label} view: the idea hinges on {focus} and how convincingly it delivers on {second}."
            ),
            "strengths": [f"Clear focus on {focus}.", f"{second} is a tangible angle to test quickly."],
            "weaknesses": [
                f"Demand for {focus} is unproven beyond early adopters.",
                f"{info.label} concerns around {second} need evidence.",
            ],
            "opportunities": [f"Adjacent segments that already pay for {second}."],
            "threats": [f"Incumbents adding {focus} as a feature."],
            "recommendations": [f"Run a small paid pilot centred on {focus}."],
            "score": score,
        }
        if perspective is Perspective.FIRST_PRINCIPLES:
            payload["refined_idea"] = f"{idea.strip().rstrip('.')}, narrowed to the segment that feels the {focus} pain most."
        return analysis_from_dict(perspective, payload)

    def evaluate_viability(self, idea: str, analyses: Sequence[Analysis], score: float) -> ViabilityVerdict:
        if score < 25:
            decision = ViabilityDecision.STOP
            reasoning = "Every lens found fundamental problems and nothing obvious is salvageable."
            flaw_type = "fatal"
        elif score < 35:
            decision = ViabilityDecision.CONTINUE_PIVOT_FOCUS
            reasoning = "The core idea is weak but adjacent directions look promising."
            flaw_type = "market"
        else:
            decision = ViabilityDecision.CONTINUE
            reasoning = "Weak signals, but no single flaw rules the idea out."
            flaw_type = "none"
        raw = {
            "should_continue": decision is not ViabilityDecision.STOP,
            "pivot_focus": decision is ViabilityDecision.CONTINUE_PIVOT_FOCUS,
            "reasoning": reasoning,
            "flaw_type": flaw_type,
            "salvageable_elements": _extract_keywords(idea, max_terms=3),
        }
        return ViabilityVerdict(decision=decision, reasoning=reasoning, flaw_type=flaw_type, raw=raw)

    def generate_execution_plan(self, idea: str, analyses: Sequence[Analysis]) -> ExecutionPlan:
        keywords = _extract_keywords(idea)
        focus = _titleize(keywords[0])
        phases = [
            {
                "name": f"Phase {index + 1}: {_titleize(keyword)}",
                "duration": f"{4 + index * 2} weeks",
                "deliverables": [f"Ship a lovable slice that demonstrates {_titleize(keyword)} impact."],
                "resources": "Founding team",
            }
            for index, keyword in enumerate(keywords[:3])
        ]
        return ExecutionPlan(
            summary=f"Validate {focus} demand with a narrow MVP, then expand in staged releases.",
            mvp_scope=f"A single end-to-end {focus} workflow for one customer segment.",
            full_scope=f"A complete {focus} product covering {', '.join(_titleize(k) for k in keywords[1:3]) or 'adjacent needs'}.",
            architecture={"type": "monolith", "components": ["web app", "api", "database"], "data_flow": "request/response"},
            tech_stack={"frontend": "React", "backend": "FastAPI", "database": "PostgreSQL", "hosting": "managed PaaS"},
            phases=phases,
            team_requirements={"roles": ["Product Lead", "Engineer"], "min_team_size": 2},
            llm_prompt=f"Help me build an MVP for: {idea.strip()}",
        )

    def generate_marketing(self, idea: str, analyses: Sequence[Analysis]) -> Marketing:
        keywords = _extract_keywords(idea)
        focus = _titleize(keywords[0])
        return Marketing(
            value_proposition=f"The fastest way to get {focus} right.",
            positioning_statement=f"For people frustrated by {focus}, this is the product that finally fixes it.",
            taglines=[f"{focus}, solved.", f"Less hassle, more {focus}."],
            elevator_pitch=f"{idea.strip()} We start with the customers who feel the {focus} pain every week.",
            headlines=[f"Stop fighting {focus}", f"{focus} without the busywork"],
            imagery_prompts=[f"Hero illustration of a delighted customer using a {focus} product"],
            launch_strategy="Launch to a waitlist community first, then expand through referrals.",
        )

    def generate_revenue_projection(self, idea: str, analyses: Sequence[Analysis]) -> RevenueProjection:
        keywords = _extract_keywords(idea)
        return RevenueProjection(
            market_growth="8-12% annually",
            recommended_price="$19/month",
            pricing_rationale=f"Priced below alternatives to win early {_titleize(keywords[0])} adopters.",
            year1_revenue={"total": "$45K"},
            year2_revenue={"total": "$240K"},
            year3_revenue={"total": "$900K"},
            break_even_analysis="Around month 20 at current burn assumptions.",
            assumptions=["2% monthly conversion from free trials", "5% monthly churn"],
        )

    def generate_alternatives(self, idea: str, analyses: Sequence[Analysis]) -> List[Alternative]:
        focus = _titleize(_extract_keywords(idea)[0])
        return [
            Alternative(
                alternative_idea=f"B2B {focus} tooling for teams instead of consumers",
                rationale="Businesses pay more reliably for time savings.",
                comparison="Addresses weak willingness to pay.",
                viability_score=60.0,
                effort_level="medium",
                potential="high",
            ),
            Alternative(
                alternative_idea=f"A {focus} marketplace connecting existing providers",
                rationale="Avoids building inventory while testing demand.",
                comparison="Lowers upfront cost and copy risk.",
                viability_score=52.0,
                effort_level="high",
                potential="medium",
            ),
            Alternative(
                alternative_idea=f"A paid {focus} newsletter and community",
                rationale="Cheapest way to prove an audience exists.",
                comparison="Validates demand before any product is built.",
                viability_score=48.0,
                effort_level="low",
                potential="medium",
            ),
        ]

    def generate_image(self, prompt: str) -> str:
        raise GenerationError("Image generation requires an OpenAI API key.")
