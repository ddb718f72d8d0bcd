"""
Trainer accounts.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ....core.errors import ConflictError
from ....core.training.models import Trainer, as_utc
from ..tables import TrainerRow

logger = logging.getLogger(__name__)


class TrainerRepository:
    """TrainerStore backed by the trainers table."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_email(self, email: str) -> Optional[Trainer]:
        row = self._session.scalar(select(TrainerRow).where(TrainerRow.email == email))
        return self._to_domain(row) if row else None

    def get_by_id(self, trainer_id: UUID) -> Optional[Trainer]:
        row = self._session.get(TrainerRow, trainer_id)
        return self._to_domain(row) if row else None

    def add(self, trainer: Trainer) -> Trainer:
        row = TrainerRow(
            id=trainer.id,
            email=trainer.email,
            password_hash=trainer.password_hash,
            first_name=trainer.first_name,
            last_name=trainer.last_name,
            created_at=as_utc(trainer.created_at),
            updated_at=as_utc(trainer.updated_at),
        )
        self._session.add(row)
        try:
            self._session.commit()
        except IntegrityError:
            # Lost a registration race on the unique email index
            self._session.rollback()
            logger.warning("Duplicate trainer email on insert")
            raise ConflictError("Email is already registered")
        return self._to_domain(row)

    @staticmethod
    def _to_domain(row: TrainerRow) -> Trainer:
        return Trainer(
            id=row.id,
            email=row.email,
            first_name=row.first_name,
            last_name=row.last_name,
            password_hash=row.password_hash,
            created_at=as_utc(row.created_at),
            updated_at=as_utc(row.updated_at),
        )
