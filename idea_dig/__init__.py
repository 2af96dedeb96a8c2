"""Idea analysis backend package."""

from .app import create_app
from .config import get_app_settings, get_llm_settings

__all__ = ["create_app", "get_app_settings", "get_llm_settings"]
