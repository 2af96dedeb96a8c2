"""Idea analysis endpoints for the FastAPI backend."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response, status

from ..errors import ArtifactNotFoundError, ExportFormatError, MissingImagePromptsError, SessionNotFoundError
from ..perspectives import list_perspective_definitions
from ..schemas import (
    ImagesResponse,
    PerspectiveDefinition,
    ProgressResponse,
    Session,
    SessionDetail,
    StartSessionRequest,
)
from ..service import DigService


router = APIRouter(prefix="/dig", tags=["dig"])


def _service(request: Request) -> DigService:
    return request.app.state.dig_service


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Session '{session_id}' not found.")


@router.get("/health")
async def healthcheck() -> dict[str, str]:
    """Simple health check endpoint."""

    return {"status": "ok"}


@router.get("/perspectives", response_model=list[PerspectiveDefinition])
async def list_perspectives() -> list[PerspectiveDefinition]:
    """Expose the perspective catalog to the UI."""

    return list_perspective_definitions()


@router.post("/sessions", response_model=Session, status_code=status.HTTP_201_CREATED)
async def start_session(payload: StartSessionRequest, request: Request) -> Session:
    """Create a session and start analysing it in the background."""

    return _service(request).start_session(payload.idea)


@router.get("/sessions", response_model=list[Session])
async def list_sessions(request: Request) -> list[Session]:
    return _service(request).list_sessions()


@router.get("/sessions/{session_id}", response_model=SessionDetail)
async def get_session(session_id: str, request: Request) -> SessionDetail:
    """Return the session with all of its artifacts."""

    try:
        return _service(request).get_session(session_id)
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.get("/sessions/{session_id}/progress", response_model=ProgressResponse)
async def get_progress(session_id: str, request: Request) -> ProgressResponse:
    """Poll the progress of an ongoing analysis."""

    try:
        return _service(request).get_progress(session_id)
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str, request: Request) -> dict[str, str]:
    try:
        _service(request).delete_session(session_id)
    except SessionNotFoundError:
        raise _not_found(session_id)
    return {"status": "deleted"}


@router.get("/sessions/{session_id}/export")
async def export_session(session_id: str, request: Request, format: str = "json") -> Response:
    """Download the session as JSON or markdown."""

    try:
        document = _service(request).export_session(session_id, format)
    except SessionNotFoundError:
        raise _not_found(session_id)
    except ExportFormatError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f"attachment; filename={document.filename}"},
    )


@router.post("/sessions/{session_id}/images", response_model=ImagesResponse)
def generate_images(session_id: str, request: Request) -> ImagesResponse:
    """Generate images from the session's marketing prompts."""

    try:
        images = _service(request).generate_images(session_id)
    except SessionNotFoundError:
        raise _not_found(session_id)
    except ArtifactNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except MissingImagePromptsError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return ImagesResponse(session_id=session_id, images=images)
