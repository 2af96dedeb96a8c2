"""Render a finished session as a downloadable document."""

from __future__ import annotations

import json
from typing import Any, Iterable

from .errors import ExportFormatError
from .perspectives import PERSPECTIVE_REGISTRY
from .schemas import ExportDocument, ExportFormat, SessionDetail


def _bullet_list(items: Iterable[str]) -> str:
    return "\n".join(f"- {item}" for item in items if item)


def _score(value: float) -> str:
    return f"{value:.1f}/100"


def _label(value: Any) -> str:
    if value is None:
        return "Pending"
    raw = getattr(value, "value", value)
    return str(raw).replace("_", " ").title()


def render_markdown(detail: SessionDetail) -> str:
    """Build the markdown analysis report."""

    session = detail.session
    header = [
        "# Idea Analysis Report",
        f"## {session.title}",
        "\n".join(
            line
            for line in [
                f"**Status:** {_label(session.status)}",
                f"**Overall Score:** {_score(session.overall_score)}" if session.overall_score is not None else "",
                f"**Recommendation:** {_label(session.recommendation)}",
            ]
            if line
        ),
        f"### Original Idea\n\n{session.raw_idea}",
        f"### Refined Idea\n\n{session.refined_idea}" if session.refined_idea else "",
    ]

    if session.early_exit:
        notice = "### Stopped Early\n\n" + (session.early_exit_reason or "The idea did not pass the viability check.")
        if session.flaw_type:
            notice += f"\n\n**Flaw Type:** {_label(session.flaw_type)}"
        header.append(notice)

    sections = ["\n\n".join(part for part in header if part)]

    if detail.analyses:
        perspective_blocks = []
        for analysis in detail.analyses:
            info = PERSPECTIVE_REGISTRY.get(analysis.perspective)
            lines = [f"### {info.label if info else _label(analysis.perspective)}"]
            if analysis.score is not None:
                lines.append(f"**Score:** {_score(analysis.score)}")
            if analysis.summary:
                lines.append(analysis.summary)
            if analysis.strengths:
                lines.append(f"**Strengths**\n\n{_bullet_list(analysis.strengths)}")
            if analysis.weaknesses:
                lines.append(f"**Weaknesses**\n\n{_bullet_list(analysis.weaknesses)}")
            perspective_blocks.append("\n\n".join(lines))
        sections.append("## Analysis by Perspective\n\n" + "\n\n".join(perspective_blocks))

    plan = detail.execution_plan
    if plan is not None:
        sections.append(
            "\n\n".join(
                part
                for part in [
                    "## Execution Plan",
                    plan.summary,
                    f"### MVP Scope\n\n{plan.mvp_scope}" if plan.mvp_scope else "",
                    f"### Full Scope\n\n{plan.full_scope}" if plan.full_scope else "",
                    f"### LLM-Ready Prompt\n\n```\n{plan.llm_prompt}\n```" if plan.llm_prompt else "",
                ]
                if part
            )
        )

    marketing = detail.marketing
    if marketing is not None:
        sections.append(
            "\n\n".join(
                part
                for part in [
                    "## Marketing",
                    f"**Value Proposition:** {marketing.value_proposition}" if marketing.value_proposition else "",
                    f"**Elevator Pitch:** {marketing.elevator_pitch}" if marketing.elevator_pitch else "",
                    f"**Taglines:**\n\n{_bullet_list(marketing.taglines)}" if marketing.taglines else "",
                    f"**Launch Strategy:** {marketing.launch_strategy}" if marketing.launch_strategy else "",
                ]
                if part
            )
        )

    revenue = detail.revenue_projection
    if revenue is not None:
        sections.append(
            "\n\n".join(
                part
                for part in [
                    "## Revenue Projections",
                    f"**Recommended Pricing:** {revenue.recommended_price}" if revenue.recommended_price else "",
                    revenue.pricing_rationale,
                    f"**Break-even:** {revenue.break_even_analysis}" if revenue.break_even_analysis else "",
                ]
                if part
            )
        )

    if detail.alternatives:
        alternative_lines = []
        for index, alternative in enumerate(detail.alternatives, start=1):
            lines = [f"{index}. **{alternative.alternative_idea}**"]
            if alternative.potential:
                lines.append(f"   - Potential: {alternative.potential}")
            if alternative.rationale:
                lines.append(f"   - {alternative.rationale}")
            alternative_lines.append("\n".join(lines))
        sections.append("## Alternative Ideas\n\n" + "\n\n".join(alternative_lines))

    return "\n\n---\n\n".join(sections) + "\n"


def export_session(detail: SessionDetail, export_format: ExportFormat | str) -> ExportDocument:
    """Serialize *detail* as JSON or markdown."""

    try:
        resolved = ExportFormat(export_format)
    except ValueError as exc:
        raise ExportFormatError("Unsupported format. Use 'json' or 'markdown'.") from exc

    if resolved is ExportFormat.JSON:
        content = json.dumps(detail.model_dump(mode="json"), indent=2)
        return ExportDocument(
            format=resolved,
            filename="idea-analysis.json",
            media_type="application/json",
            content=content,
        )

    return ExportDocument(
        format=resolved,
        filename="idea-analysis.md",
        media_type="text/markdown",
        content=render_markdown(detail),
    )
