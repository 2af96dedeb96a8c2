"""Simple in-memory store for analysis sessions and their artifacts."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .errors import ArtifactNotFoundError, SessionNotFoundError
from .schemas import (
    Alternative,
    Analysis,
    ExecutionPlan,
    Marketing,
    RevenueProjection,
    Session,
    SessionDetail,
)


@dataclass
class _SessionRecord:
    """Rows owned by one session; dropping the record cascades to all of them."""

    session: Session
    analyses: List[Analysis] = field(default_factory=list)
    execution_plan: Optional[ExecutionPlan] = None
    marketing: Optional[Marketing] = None
    revenue_projection: Optional[RevenueProjection] = None
    alternatives: List[Alternative] = field(default_factory=list)


class SessionStore:
    """Persist sessions so pollers and the pipeline share one source of truth.

    Every read and write copies the model, so callers only ever hold
    point-in-time snapshots and a save always replaces the whole row.
    """

    def __init__(self) -> None:
        self._records: Dict[str, _SessionRecord] = {}
        self._lock = threading.Lock()

    def _record(self, session_id: str) -> _SessionRecord:
        record = self._records.get(session_id)
        if record is None:
            raise SessionNotFoundError(session_id)
        return record

    def create(self, session: Session) -> Session:
        """Insert a new session row."""

        with self._lock:
            self._records[session.id] = _SessionRecord(session=session.model_copy(deep=True))
        return session.model_copy(deep=True)

    def save(self, session: Session) -> Session:
        """Replace the stored row for *session* with the given state."""

        with self._lock:
            record = self._record(session.id)
            session.updated_at = datetime.now(timezone.utc)
            record.session = session.model_copy(deep=True)
        return session

    def get(self, session_id: str) -> Session:
        with self._lock:
            return self._record(session_id).session.model_copy(deep=True)

    def list_sessions(self) -> List[Session]:
        """Return every session, newest first."""

        with self._lock:
            sessions = [record.session.model_copy(deep=True) for record in self._records.values()]
        return sorted(sessions, key=lambda item: item.created_at, reverse=True)

    def delete(self, session_id: str) -> None:
        with self._lock:
            if self._records.pop(session_id, None) is None:
                raise SessionNotFoundError(session_id)

    def add_analysis(self, session_id: str, analysis: Analysis) -> Analysis:
        stored = analysis.model_copy(update={"session_id": session_id}, deep=True)
        with self._lock:
            self._record(session_id).analyses.append(stored)
        return stored.model_copy(deep=True)

    def analyses(self, session_id: str) -> List[Analysis]:
        with self._lock:
            return [item.model_copy(deep=True) for item in self._record(session_id).analyses]

    def set_execution_plan(self, session_id: str, plan: ExecutionPlan) -> ExecutionPlan:
        stored = plan.model_copy(update={"session_id": session_id}, deep=True)
        with self._lock:
            self._record(session_id).execution_plan = stored
        return stored.model_copy(deep=True)

    def set_marketing(self, session_id: str, marketing: Marketing) -> Marketing:
        stored = marketing.model_copy(update={"session_id": session_id}, deep=True)
        with self._lock:
            self._record(session_id).marketing = stored
        return stored.model_copy(deep=True)

    def get_marketing(self, session_id: str) -> Marketing:
        with self._lock:
            marketing = self._record(session_id).marketing
            if marketing is None:
                raise ArtifactNotFoundError(f"Marketing data not found for session '{session_id}'.")
            return marketing.model_copy(deep=True)

    def set_revenue_projection(self, session_id: str, projection: RevenueProjection) -> RevenueProjection:
        stored = projection.model_copy(update={"session_id": session_id}, deep=True)
        with self._lock:
            self._record(session_id).revenue_projection = stored
        return stored.model_copy(deep=True)

    def add_alternative(self, session_id: str, alternative: Alternative) -> Alternative:
        stored = alternative.model_copy(update={"session_id": session_id}, deep=True)
        with self._lock:
            self._record(session_id).alternatives.append(stored)
        return stored.model_copy(deep=True)

    def detail(self, session_id: str) -> SessionDetail:
        """Return the session with every artifact it owns."""

        with self._lock:
            record = self._record(session_id)
            return SessionDetail(
                session=record.session.model_copy(deep=True),
                analyses=[item.model_copy(deep=True) for item in record.analyses],
                execution_plan=record.execution_plan.model_copy(deep=True) if record.execution_plan else None,
                marketing=record.marketing.model_copy(deep=True) if record.marketing else None,
                revenue_projection=(
                    record.revenue_projection.model_copy(deep=True) if record.revenue_projection else None
                ),
                alternatives=[item.model_copy(deep=True) for item in record.alternatives],
            )
