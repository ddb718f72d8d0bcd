"""
Body measurements. Append-only apart from soft deletion.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Mapping, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ....core.errors import NotFoundError
from ....core.scope import TrainerScope
from ....core.training.models import MEASUREMENT_METRICS, Measurement, as_utc, utcnow
from ..tables import MeasurementRow
from .base import owned_client_ids, require_client

logger = logging.getLogger(__name__)

MEASUREMENT_NOT_FOUND = "Measurement not found"


class MeasurementRepository:

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(
        self,
        scope: TrainerScope,
        client_id: UUID,
        metrics: Mapping[str, Optional[float]],
        measured_at: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> Measurement:
        require_client(self._session, scope, client_id)

        row = MeasurementRow(
            client_id=client_id,
            measured_at=as_utc(measured_at) if measured_at else utcnow(),
            notes=notes,
            **{name: metrics.get(name) for name in MEASUREMENT_METRICS},
        )
        self._session.add(row)
        self._session.commit()

        logger.info(
            "Measurement recorded",
            extra={"measurement_id": str(row.id), "client_id": str(client_id)}
        )
        return self._to_domain(row)

    def list(self, scope: TrainerScope, client_id: UUID) -> list[Measurement]:
        """Newest measurement first."""
        require_client(self._session, scope, client_id)
        rows = self._session.scalars(
            select(MeasurementRow)
            .where(
                MeasurementRow.client_id == client_id,
                MeasurementRow.deleted_at.is_(None),
            )
            .order_by(MeasurementRow.measured_at.desc())
        ).all()
        return [self._to_domain(row) for row in rows]

    def get(self, scope: TrainerScope, measurement_id: UUID) -> Measurement:
        row = self._session.scalar(
            select(MeasurementRow).where(
                MeasurementRow.id == measurement_id,
                MeasurementRow.deleted_at.is_(None),
                MeasurementRow.client_id.in_(owned_client_ids(scope)),
            )
        )
        if row is None:
            raise NotFoundError(MEASUREMENT_NOT_FOUND)
        return self._to_domain(row)

    def delete(self, scope: TrainerScope, measurement_id: UUID) -> None:
        result = self._session.execute(
            update(MeasurementRow)
            .where(
                MeasurementRow.id == measurement_id,
                MeasurementRow.deleted_at.is_(None),
                MeasurementRow.client_id.in_(owned_client_ids(scope)),
            )
            .values(deleted_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self._session.rollback()
            raise NotFoundError(MEASUREMENT_NOT_FOUND)
        self._session.commit()

        logger.info("Measurement deleted", extra={"measurement_id": str(measurement_id)})

    @staticmethod
    def _to_domain(row: MeasurementRow) -> Measurement:
        return Measurement(
            id=row.id,
            client_id=row.client_id,
            measured_at=as_utc(row.measured_at),
            notes=row.notes,
            created_at=as_utc(row.created_at),
            **{name: getattr(row, name) for name in MEASUREMENT_METRICS},
        )
