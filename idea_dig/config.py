"""Configuration helpers for the idea analysis backend."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Mapping

from dotenv import load_dotenv

ENV_PREFIX = "IDEADIG_"

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_IMAGE_MODEL = "dall-e-3"
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3001",
]

load_dotenv(override=False)


@dataclass(frozen=True)
class LLMSettings:
    """Settings container for the text and image generation provider.

    Only OpenAI is wired up; without a key the service falls back to the
    offline heuristic generator.
    """

    openai_api_key: str | None = None
    model: str = DEFAULT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def has_api_key(self) -> bool:
        """True when an OpenAI key is configured."""

        return bool(self.openai_api_key)


@dataclass(frozen=True)
class AppSettings:
    """HTTP and logging settings."""

    allowed_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    log_level: str = "INFO"
    log_file: str | None = None


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS
    return value if value > 0 else DEFAULT_TIMEOUT_SECONDS


def _parse_origins(raw: str | None) -> List[str]:
    """Return allowed origins from a comma separated override."""

    if raw:
        origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
        if origins:
            return origins
    return list(DEFAULT_ALLOWED_ORIGINS)


def _env(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(f"{ENV_PREFIX}{name}")
    return value.strip() if value and value.strip() else None


@lru_cache(maxsize=1)
def get_llm_settings() -> LLMSettings:
    """Read environment variables and return cached LLM settings."""

    environ = os.environ
    return LLMSettings(
        openai_api_key=environ.get("OPENAI_API_KEY") or None,
        model=_env(environ, "LLM_MODEL") or DEFAULT_MODEL,
        image_model=_env(environ, "IMAGE_MODEL") or DEFAULT_IMAGE_MODEL,
        timeout_seconds=_parse_timeout(_env(environ, "LLM_TIMEOUT")),
    )


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Read environment variables and return cached application settings."""

    environ = os.environ
    return AppSettings(
        allowed_origins=_parse_origins(_env(environ, "ALLOWED_ORIGINS")),
        log_level=(_env(environ, "LOG_LEVEL") or "INFO").upper(),
        log_file=_env(environ, "LOG_FILE"),
    )
