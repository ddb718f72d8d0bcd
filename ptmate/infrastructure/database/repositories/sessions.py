"""
Session ledger.

Training sessions are reached through their client: every query joins the
clients table and keeps only live clients of the scoped trainer, so a
session whose client was deleted disappears with it.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.orm import Session

from ....core.errors import NotFoundError
from ....core.scope import TrainerScope
from ....core.training.models import (
    ClientSummary,
    SessionStatus,
    TrainingSession,
    as_utc,
    resolve_duration,
    utcnow,
)
from ..tables import ClientRow, SessionRow
from .base import apply_patch, owned_client_ids, require_client

logger = logging.getLogger(__name__)

SESSION_NOT_FOUND = "Session not found"

SESSION_FIELDS = ("scheduled_at", "duration_minutes", "status", "notes")
REQUIRED_FIELDS = ("scheduled_at", "duration_minutes", "status")


def _scoped(query: Select, scope: TrainerScope) -> Select:
    return query.join(ClientRow, SessionRow.client_id == ClientRow.id).where(
        ClientRow.trainer_id == scope.trainer_id,
        ClientRow.deleted_at.is_(None),
        SessionRow.deleted_at.is_(None),
    )


class SessionRepository:
    """CRUD over training sessions, plus the read queries the dashboard uses."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list(
        self,
        scope: TrainerScope,
        client_id: Optional[UUID] = None,
        status: Optional[SessionStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[TrainingSession]:
        """
        Sessions matching every given filter, earliest first.

        Both ends of the date range are inclusive; either may be omitted.
        """
        query = _scoped(select(SessionRow), scope)
        if client_id is not None:
            query = query.where(SessionRow.client_id == client_id)
        if status is not None:
            query = query.where(SessionRow.status == status.value)
        if start is not None:
            query = query.where(SessionRow.scheduled_at >= as_utc(start))
        if end is not None:
            query = query.where(SessionRow.scheduled_at <= as_utc(end))

        rows = self._session.scalars(query.order_by(SessionRow.scheduled_at)).all()
        return [self._to_domain(row) for row in rows]

    def get(self, scope: TrainerScope, session_id: UUID) -> TrainingSession:
        return self._to_domain(self._require(scope, session_id))

    def create(
        self,
        scope: TrainerScope,
        client_id: UUID,
        scheduled_at: datetime,
        duration_minutes: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> TrainingSession:
        client = require_client(self._session, scope, client_id)

        row = SessionRow(
            client_id=client.id,
            scheduled_at=as_utc(scheduled_at),
            duration_minutes=resolve_duration(duration_minutes),
            status=SessionStatus.SCHEDULED.value,
            notes=notes,
        )
        row.client = client
        self._session.add(row)
        self._session.commit()

        logger.info(
            "Session scheduled",
            extra={"session_id": str(row.id), "client_id": str(client_id)}
        )
        return self._to_domain(row)

    def update(self, scope: TrainerScope, session_id: UUID, changes: Mapping[str, Any]) -> TrainingSession:
        """Apply a sparse patch over scheduled_at, duration_minutes, status and notes."""
        row = self._require(scope, session_id)

        changes = dict(changes)
        if changes.get("scheduled_at") is not None:
            changes["scheduled_at"] = as_utc(changes["scheduled_at"])
        if changes.get("duration_minutes") is not None:
            changes["duration_minutes"] = resolve_duration(changes["duration_minutes"])
        if changes.get("status") is not None:
            status = changes["status"]
            if not isinstance(status, SessionStatus):
                status = SessionStatus.parse(status)
            changes["status"] = status.value

        apply_patch(row, changes, SESSION_FIELDS, REQUIRED_FIELDS)
        self._session.commit()

        logger.info("Session updated", extra={"session_id": str(session_id)})
        return self._to_domain(row)

    def update_status(self, scope: TrainerScope, session_id: UUID, status: SessionStatus) -> TrainingSession:
        return self.update(scope, session_id, {"status": status})

    def delete(self, scope: TrainerScope, session_id: UUID) -> None:
        result = self._session.execute(
            update(SessionRow)
            .where(
                SessionRow.id == session_id,
                SessionRow.deleted_at.is_(None),
                SessionRow.client_id.in_(owned_client_ids(scope)),
            )
            .values(deleted_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self._session.rollback()
            raise NotFoundError(SESSION_NOT_FOUND)
        self._session.commit()

        logger.info("Session deleted", extra={"session_id": str(session_id)})

    # Dashboard queries

    def sessions_between(
        self,
        scope: TrainerScope,
        start: datetime,
        end: datetime,
    ) -> list[TrainingSession]:
        """Sessions in the half-open window [start, end), earliest first."""
        query = _scoped(select(SessionRow), scope).where(
            SessionRow.scheduled_at >= as_utc(start),
            SessionRow.scheduled_at < as_utc(end),
        )
        rows = self._session.scalars(query.order_by(SessionRow.scheduled_at)).all()
        return [self._to_domain(row) for row in rows]

    def status_counts_between(
        self,
        scope: TrainerScope,
        start: datetime,
        end: datetime,
    ) -> list[tuple[SessionStatus, int]]:
        query = _scoped(select(SessionRow.status, func.count()).select_from(SessionRow), scope).where(
            SessionRow.scheduled_at >= as_utc(start),
            SessionRow.scheduled_at < as_utc(end),
        )
        rows = self._session.execute(query.group_by(SessionRow.status)).all()
        return [(SessionStatus(status), count) for status, count in rows]

    def count_clients(self, scope: TrainerScope) -> int:
        return self._session.scalar(
            select(func.count()).select_from(owned_client_ids(scope).subquery())
        ) or 0

    def count_sessions(self, scope: TrainerScope) -> int:
        query = _scoped(select(func.count(SessionRow.id)).select_from(SessionRow), scope)
        return self._session.scalar(query) or 0

    def upcoming(self, scope: TrainerScope, after: datetime, limit: int) -> list[TrainingSession]:
        query = _scoped(select(SessionRow), scope).where(
            SessionRow.status == SessionStatus.SCHEDULED.value,
            SessionRow.scheduled_at > as_utc(after),
        )
        rows = self._session.scalars(query.order_by(SessionRow.scheduled_at).limit(limit)).all()
        return [self._to_domain(row) for row in rows]

    def _require(self, scope: TrainerScope, session_id: UUID) -> SessionRow:
        row = self._session.scalar(
            _scoped(select(SessionRow), scope).where(SessionRow.id == session_id)
        )
        if row is None:
            raise NotFoundError(SESSION_NOT_FOUND)
        return row

    @staticmethod
    def _to_domain(row: SessionRow) -> TrainingSession:
        client = row.client
        return TrainingSession(
            id=row.id,
            client_id=row.client_id,
            scheduled_at=as_utc(row.scheduled_at),
            duration_minutes=row.duration_minutes,
            status=SessionStatus(row.status),
            notes=row.notes,
            created_at=as_utc(row.created_at),
            updated_at=as_utc(row.updated_at),
            client=ClientSummary(
                id=client.id,
                first_name=client.first_name,
                last_name=client.last_name,
            ),
        )
