"""Coerce free-form generator output into the pipeline's models."""

from __future__ import annotations

import json
import math
from typing import Any, Dict, List, Sequence

from .schemas import (
    Alternative,
    Analysis,
    ExecutionPlan,
    Marketing,
    Perspective,
    RevenueProjection,
    ViabilityDecision,
    ViabilityVerdict,
)

# Perspective prompts use different keys for the same concept.
_LIST_ALIASES: Dict[str, Sequence[str]] = {
    "strengths": ("strengths", "ux_strengths", "competitive_advantages"),
    "weaknesses": ("weaknesses", "ux_weaknesses", "technical_risks", "financial_risks", "fatal_flaws"),
    "opportunities": ("opportunities", "design_opportunities"),
    "threats": ("threats", "competitive_threats"),
    "recommendations": ("recommendations",),
}


def _strip_code_fence(text: str) -> str:
    for marker in ("```json", "```"):
        start = text.find(marker)
        if start == -1:
            continue
        body = text[start + len(marker) :]
        end = body.find("```")
        return body[:end] if end != -1 else body
    return text


def _balanced_slice(text: str, opener: str, closer: str) -> str | None:
    start = text.find(opener)
    if start == -1:
        return None
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return text[start:]


def extract_json(raw_text: str) -> str:
    """Return the first JSON object or array embedded in *raw_text*."""

    text = _strip_code_fence(raw_text)
    object_start = text.find("{")
    array_start = text.find("[")
    if object_start == -1 and array_start == -1:
        return text.strip()
    if array_start == -1 or (object_start != -1 and object_start < array_start):
        sliced = _balanced_slice(text, "{", "}")
    else:
        sliced = _balanced_slice(text, "[", "]")
    return (sliced or text).strip()


def parse_structured_response(raw_text: str) -> Any | None:
    """Attempt to coerce the model output into JSON."""

    try:
        return json.loads(extract_json(raw_text))
    except json.JSONDecodeError:
        return None


def _as_score(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    # NaN and infinities count as absent.
    if not math.isfinite(number):
        return None
    return max(0.0, min(100.0, number))


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _as_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [_as_text(item) for item in value if item not in (None, "")]


_TRUE_WORDS = {"true", "yes", "1"}
_FALSE_WORDS = {"false", "no", "0", "stop"}


def _as_flag(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        return default
    if isinstance(value, (int, float)):
        return bool(value)
    return default


def _first_list(data: Dict[str, Any], keys: Sequence[str]) -> List[str]:
    for key in keys:
        if isinstance(data.get(key), list):
            return _as_list(data[key])
    return []


def analysis_from_payload(perspective: Perspective, raw_text: str) -> Analysis:
    """Build an Analysis from the model output.

    Output that is not a JSON object still yields an analysis whose summary
    is the raw text and whose score is unset.
    """

    data = parse_structured_response(raw_text)
    if not isinstance(data, dict):
        return Analysis(perspective=perspective, summary=raw_text.strip())
    return analysis_from_dict(perspective, data)


def analysis_from_dict(perspective: Perspective, data: Dict[str, Any]) -> Analysis:
    return Analysis(
        perspective=perspective,
        score=_as_score(data.get("score")),
        summary=_as_text(data.get("summary")),
        detail=data,
        **{field: _first_list(data, keys) for field, keys in _LIST_ALIASES.items()},
    )


def verdict_from_dict(data: Dict[str, Any]) -> ViabilityVerdict:
    """Interpret the viability payload; missing or null flags mean continue without pivot focus."""

    should_continue = _as_flag(data.get("should_continue"), default=True)
    pivot_focus = _as_flag(data.get("pivot_focus"), default=False)

    if not should_continue:
        decision = ViabilityDecision.STOP
    elif pivot_focus:
        decision = ViabilityDecision.CONTINUE_PIVOT_FOCUS
    else:
        decision = ViabilityDecision.CONTINUE

    flaw_type = data.get("flaw_type")
    return ViabilityVerdict(
        decision=decision,
        reasoning=_as_text(data.get("reasoning")),
        flaw_type=flaw_type if isinstance(flaw_type, str) and flaw_type else None,
        raw=data,
    )


def execution_plan_from_payload(raw_text: str) -> ExecutionPlan:
    data = parse_structured_response(raw_text)
    if not isinstance(data, dict):
        return ExecutionPlan(summary=raw_text.strip())
    return ExecutionPlan(
        summary=_as_text(data.get("summary")),
        mvp_scope=_as_text(data.get("mvp_scope")),
        full_scope=_as_text(data.get("full_scope")),
        architecture=data.get("architecture"),
        tech_stack=data.get("tech_stack"),
        integrations=data.get("integrations"),
        phases=data.get("phases"),
        milestones=data.get("milestones"),
        team_requirements=data.get("team_requirements"),
        estimated_cost=data.get("estimated_cost"),
        llm_prompt=_as_text(data.get("llm_prompt")),
    )


def marketing_from_payload(raw_text: str) -> Marketing:
    data = parse_structured_response(raw_text)
    if not isinstance(data, dict):
        return Marketing(value_proposition=raw_text.strip())
    return Marketing(
        value_proposition=_as_text(data.get("value_proposition")),
        target_audience=data.get("target_audience"),
        positioning_statement=_as_text(data.get("positioning_statement")),
        taglines=_as_list(data.get("taglines")),
        elevator_pitch=_as_text(data.get("elevator_pitch")),
        headlines=_as_list(data.get("headlines")),
        descriptions=data.get("descriptions"),
        color_suggestions=data.get("color_suggestions"),
        imagery_prompts=_as_list(data.get("imagery_prompts")),
        channel_strategy=data.get("channel_strategy"),
        launch_strategy=_as_text(data.get("launch_strategy")),
    )


def revenue_projection_from_payload(raw_text: str) -> RevenueProjection:
    data = parse_structured_response(raw_text)
    if not isinstance(data, dict):
        return RevenueProjection(market_size=raw_text.strip())
    return RevenueProjection(
        market_size=data.get("market_size"),
        market_growth=_as_text(data.get("market_growth")),
        competitors=data.get("competitors"),
        pricing_models=data.get("pricing_models"),
        recommended_price=_as_text(data.get("recommended_price")),
        pricing_rationale=_as_text(data.get("pricing_rationale")),
        year1_revenue=data.get("year1_revenue"),
        year2_revenue=data.get("year2_revenue"),
        year3_revenue=data.get("year3_revenue"),
        key_metrics=data.get("key_metrics"),
        break_even_analysis=_as_text(data.get("break_even_analysis")),
        assumptions=data.get("assumptions"),
        risks=data.get("risks"),
    )


def alternatives_from_payload(raw_text: str) -> List[Alternative]:
    """Parse a JSON array of alternatives; unparseable output yields none."""

    data = parse_structured_response(raw_text)
    if isinstance(data, dict):
        data = data.get("alternatives")
    if not isinstance(data, list):
        return []

    alternatives: List[Alternative] = []
    for entry in data:
        if not isinstance(entry, dict) or not entry.get("alternative_idea"):
            continue
        alternatives.append(
            Alternative(
                alternative_idea=_as_text(entry.get("alternative_idea")),
                rationale=_as_text(entry.get("rationale")),
                comparison=_as_text(entry.get("comparison")),
                viability_score=_as_score(entry.get("viability_score")),
                effort_level=_as_text(entry.get("effort_level")),
                potential=_as_text(entry.get("potential")),
            )
        )
    return alternatives
