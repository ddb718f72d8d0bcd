"""
Client registry and package accounting queries.

Every client read comes back as a ClientOverview carrying live session
counts. Listing computes the counts for all clients in a single
GROUP BY client_id, status query rather than one query per client.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Iterable, Mapping
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from ....core.errors import NotFoundError, ValidationError
from ....core.scope import TrainerScope
from ....core.training.accounting import ClientOverview, SessionStats
from ....core.training.models import Client, SessionStatus, as_utc, utcnow
from ..tables import ClientRow, SessionRow
from .base import CLIENT_NOT_FOUND, apply_patch, require_client

logger = logging.getLogger(__name__)

CLIENT_FIELDS = (
    "first_name",
    "last_name",
    "phone",
    "email",
    "total_package_size",
    "package_start_date",
    "notes",
)
REQUIRED_FIELDS = ("first_name", "last_name", "total_package_size")


def _check_package_size(changes: Mapping[str, Any]) -> None:
    size = changes.get("total_package_size")
    if size is not None and size < 0:
        raise ValidationError("total_package_size must not be negative")


class ClientRepository:
    """CRUD over one trainer's clients."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list(self, scope: TrainerScope) -> list[ClientOverview]:
        """Live clients of the trainer, newest first."""
        rows = self._session.scalars(
            select(ClientRow)
            .where(
                ClientRow.trainer_id == scope.trainer_id,
                ClientRow.deleted_at.is_(None),
            )
            .order_by(ClientRow.created_at.desc())
        ).all()

        stats = self._stats_for([row.id for row in rows])
        return [
            ClientOverview(client=self._to_domain(row), stats=stats.get(row.id, SessionStats()))
            for row in rows
        ]

    def get(self, scope: TrainerScope, client_id: UUID) -> ClientOverview:
        row = require_client(self._session, scope, client_id)
        return self._overview(row)

    def create(self, scope: TrainerScope, fields: Mapping[str, Any]) -> ClientOverview:
        for name in ("first_name", "last_name"):
            if not (fields.get(name) or "").strip():
                raise ValidationError(f"{name} is required")
        _check_package_size(fields)

        row = ClientRow(trainer_id=scope.trainer_id, total_package_size=0)
        apply_patch(row, fields, CLIENT_FIELDS, REQUIRED_FIELDS)
        self._session.add(row)
        self._session.commit()

        logger.info(
            "Client created",
            extra={"client_id": str(row.id), "trainer_id": str(scope.trainer_id)}
        )
        return ClientOverview(client=self._to_domain(row), stats=SessionStats())

    def update(self, scope: TrainerScope, client_id: UUID, changes: Mapping[str, Any]) -> ClientOverview:
        """Apply a sparse patch; fields absent from `changes` are untouched."""
        row = require_client(self._session, scope, client_id)
        _check_package_size(changes)
        apply_patch(row, changes, CLIENT_FIELDS, REQUIRED_FIELDS)
        self._session.commit()

        logger.info("Client updated", extra={"client_id": str(client_id)})
        return self._overview(row)

    def delete(self, scope: TrainerScope, client_id: UUID) -> None:
        result = self._session.execute(
            update(ClientRow)
            .where(
                ClientRow.id == client_id,
                ClientRow.trainer_id == scope.trainer_id,
                ClientRow.deleted_at.is_(None),
            )
            .values(deleted_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self._session.rollback()
            raise NotFoundError(CLIENT_NOT_FOUND)
        self._session.commit()

        logger.info("Client deleted", extra={"client_id": str(client_id)})

    def stats(self, scope: TrainerScope, client_id: UUID) -> SessionStats:
        """Live session counts by status for one owned client."""
        require_client(self._session, scope, client_id)
        return self._stats_for([client_id]).get(client_id, SessionStats())

    def _overview(self, row: ClientRow) -> ClientOverview:
        stats = self._stats_for([row.id]).get(row.id, SessionStats())
        return ClientOverview(client=self._to_domain(row), stats=stats)

    def _stats_for(self, client_ids: Iterable[UUID]) -> dict[UUID, SessionStats]:
        client_ids = list(client_ids)
        if not client_ids:
            return {}

        rows = self._session.execute(
            select(SessionRow.client_id, SessionRow.status, func.count())
            .where(
                SessionRow.client_id.in_(client_ids),
                SessionRow.deleted_at.is_(None),
            )
            .group_by(SessionRow.client_id, SessionRow.status)
        ).all()

        counts: dict[UUID, list[tuple[SessionStatus, int]]] = defaultdict(list)
        for client_id, status, count in rows:
            counts[client_id].append((SessionStatus(status), count))
        return {client_id: SessionStats.from_counts(pairs) for client_id, pairs in counts.items()}

    @staticmethod
    def _to_domain(row: ClientRow) -> Client:
        return Client(
            id=row.id,
            trainer_id=row.trainer_id,
            first_name=row.first_name,
            last_name=row.last_name,
            phone=row.phone,
            email=row.email,
            total_package_size=row.total_package_size,
            package_start_date=row.package_start_date,
            notes=row.notes,
            created_at=as_utc(row.created_at),
            updated_at=as_utc(row.updated_at),
        )
