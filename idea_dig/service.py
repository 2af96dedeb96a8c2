"""Session operations exposed to the HTTP layer."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from .errors import GenerationError, MissingImagePromptsError
from .export import export_session
from .llm import AnalysisGenerator
from .memory import SessionStore
from .perspectives import CORE_PERSPECTIVES
from .pipeline import PipelineOrchestrator
from .progress import compute_progress
from .schemas import (
    ExportDocument,
    ExportFormat,
    ProgressResponse,
    Session,
    SessionDetail,
)
from .scoring import generate_title

logger = logging.getLogger("idea_dig.service")

MAX_GENERATED_IMAGES = 3


class BackgroundRunner:
    """Start one detached thread per session and track it until it finishes.

    Failures that escape a run are logged; the session itself stays in
    whatever state its last successful write left it.
    """

    def __init__(self) -> None:
        self._futures: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def submit(self, key: str, target: Callable[[], object]) -> Future:
        future: Future = Future()

        def _run() -> None:
            if not future.set_running_or_notify_cancel():
                self._discard(key, future)
                return
            # A resolved future is never tracked.
            try:
                result = target()
            except BaseException as exc:
                logger.exception("Background analysis for session %s failed", key)
                self._discard(key, future)
                future.set_exception(exc)
            else:
                self._discard(key, future)
                future.set_result(result)

        with self._lock:
            self._futures[key] = future
        threading.Thread(target=_run, name=f"idea-dig-{key}", daemon=True).start()
        return future

    def _discard(self, key: str, future: Future) -> None:
        with self._lock:
            if self._futures.get(key) is future:
                del self._futures[key]

    def get(self, key: str) -> Optional[Future]:
        with self._lock:
            return self._futures.get(key)

    def forget(self, key: str) -> None:
        with self._lock:
            self._futures.pop(key, None)


class DigService:
    """Create sessions, launch their pipeline and serve read models."""

    def __init__(
        self,
        generator: AnalysisGenerator,
        store: SessionStore | None = None,
        runner: BackgroundRunner | None = None,
    ) -> None:
        self.generator = generator
        self.store = store or SessionStore()
        self.runner = runner or BackgroundRunner()
        self.orchestrator = PipelineOrchestrator(self.store, generator)

    def start_session(self, idea: str) -> Session:
        """Create the session row and launch its analysis in the background."""

        now = datetime.now(timezone.utc)
        session = self.store.create(
            Session(
                raw_idea=idea,
                title=generate_title(idea),
                current_stage=CORE_PERSPECTIVES[0].value,
                started_at=now,
            )
        )
        logger.info("Created session %s (%s)", session.id, session.title)
        self.runner.submit(session.id, lambda: self.orchestrator.run(session.id))
        return session

    def wait(self, session_id: str, timeout: float | None = None) -> None:
        """Block until the session's background run finishes.

        Returns at once when no run is in flight. Exceptions raised inside
        the run are not re-raised here.
        """

        future = self.runner.get(session_id)
        if future is None:
            return
        future.exception(timeout=timeout)

    def get_session(self, session_id: str) -> SessionDetail:
        return self.store.detail(session_id)

    def get_progress(self, session_id: str) -> ProgressResponse:
        return compute_progress(self.store.get(session_id))

    def list_sessions(self) -> List[Session]:
        return self.store.list_sessions()

    def delete_session(self, session_id: str) -> None:
        self.store.delete(session_id)
        self.runner.forget(session_id)
        logger.info("Deleted session %s", session_id)

    def export_session(self, session_id: str, export_format: ExportFormat | str = ExportFormat.JSON) -> ExportDocument:
        return export_session(self.store.detail(session_id), export_format)

    def generate_images(self, session_id: str) -> List[str]:
        """Render up to three marketing images and store their URLs.

        Only the marketing artifact is touched; the session row is left alone.
        """

        marketing = self.store.get_marketing(session_id)
        prompts = [prompt for prompt in marketing.imagery_prompts if prompt]
        if not prompts:
            raise MissingImagePromptsError("No image prompts available.")

        images: List[str] = []
        for prompt in prompts[:MAX_GENERATED_IMAGES]:
            try:
                images.append(self.generator.generate_image(prompt))
            except GenerationError as exc:
                logger.warning("Image generation skipped for session %s: %s", session_id, exc)

        marketing.generated_images = images
        self.store.set_marketing(session_id, marketing)
        return images
