"""Application factory for the idea analysis FastAPI backend."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_app_settings, get_llm_settings
from .llm import get_generator
from .logging_config import setup_logging
from .routers import sessions
from .service import DigService


def create_app(service: DigService | None = None) -> FastAPI:
    """Create and configure a FastAPI application instance."""
    app_settings = get_app_settings()
    setup_logging(app_settings.log_level, app_settings.log_file)

    app = FastAPI(
        title="Idea Dig Backend",
        version="0.1.0",
        description="Multi-perspective idea analysis with a viability-gated pipeline.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins,
        allow_origin_regex=r"http://localhost:\d+$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    llm_settings = get_llm_settings()
    app.state.llm_settings = llm_settings
    app.state.dig_service = service or DigService(get_generator(llm_settings))
    app.include_router(sessions.router)
    return app


app = create_app()
