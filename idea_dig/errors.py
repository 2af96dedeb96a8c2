"""Exception types shared across the idea analysis package."""

from __future__ import annotations


class DigError(Exception):
    """Base class for idea analysis errors."""


class GenerationError(DigError):
    """Raised when the analysis generator cannot produce a result."""


class SessionNotFoundError(DigError):
    """Raised when a session id is unknown to the store."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session '{session_id}' not found.")
        self.session_id = session_id


class ArtifactNotFoundError(DigError):
    """Raised when a session exists but lacks the requested artifact."""


class ExportFormatError(DigError):
    """Raised for unsupported export formats."""


class MissingImagePromptsError(DigError):
    """Raised when marketing exists but carries no imagery prompts."""
