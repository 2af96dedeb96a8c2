"""Derive poll-friendly progress from a session snapshot."""

from __future__ import annotations

from typing import Dict

from .schemas import ProgressResponse, Session

# 5 core perspectives + viability + execution plan + marketing + revenue + alternatives.
# Harsh perspective stages are appended to the same list but not counted here.
TOTAL_STAGES = 9

DEFAULT_MESSAGE = "Analyzing..."

STAGE_MESSAGES: Dict[str, str] = {
    "first_principles": "Breaking down to first principles...",
    "designer": "Analyzing user experience...",
    "marketing": "Evaluating market potential...",
    "technical": "Assessing technical feasibility...",
    "financial": "Running financial analysis...",
    "viability_check": "Checking whether the idea is viable...",
    "devils_advocate": "Playing devil's advocate...",
    "copycat": "Thinking like a competitor...",
    "user_psychology": "Studying user psychology...",
    "scalability": "Stress testing scalability...",
    "worst_case": "Running a pre-mortem...",
    "execution_plan": "Creating execution roadmap...",
    "marketing_materials": "Writing marketing materials...",
    "revenue": "Projecting revenue...",
    "alternatives": "Generating alternative ideas...",
    "completed": "Analysis complete!",
}


def progress_percentage(stages_completed_count: int, total: int = TOTAL_STAGES) -> int:
    return min(100, (stages_completed_count * 100) // total)


def stage_message(stage: str | None) -> str:
    if not stage:
        return DEFAULT_MESSAGE
    return STAGE_MESSAGES.get(stage, DEFAULT_MESSAGE)


def compute_progress(session: Session) -> ProgressResponse:
    """Build the progress payload for *session* without mutating it."""

    return ProgressResponse(
        session_id=session.id,
        status=session.status,
        percentage=progress_percentage(len(session.stages_completed)),
        current_stage=session.current_stage,
        stages_completed=list(session.stages_completed),
        message=stage_message(session.current_stage),
    )
