"""
Fitness assessments.

The table stores one column per PAR-Q answer and per score; the domain
object groups them into the parq and scores mappings. Scores are range
checked by the Assessment dataclass before anything is written.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ....core.errors import NotFoundError, ValidationError
from ....core.scope import TrainerScope
from ....core.training.models import (
    PARQ_FIELDS,
    SCORE_FIELDS,
    Assessment,
    as_utc,
    utcnow,
)
from ..tables import AssessmentRow
from .base import owned_client_ids, require_client

logger = logging.getLogger(__name__)

ASSESSMENT_NOT_FOUND = "Assessment not found"


def _answers(
    changes: Mapping[str, Any],
    parq: Optional[dict[str, bool]] = None,
    scores: Optional[dict[str, Optional[int]]] = None,
) -> tuple[dict[str, bool], dict[str, Optional[int]]]:
    """Merge the PAR-Q and score keys present in `changes` over a base."""
    parq = dict(parq) if parq is not None else dict.fromkeys(PARQ_FIELDS, False)
    scores = dict(scores) if scores is not None else dict.fromkeys(SCORE_FIELDS)

    for name in PARQ_FIELDS:
        if name in changes:
            if changes[name] is None:
                raise ValidationError(f"{name} cannot be null")
            parq[name] = bool(changes[name])
    for name in SCORE_FIELDS:
        if name in changes:
            scores[name] = changes[name]
    return parq, scores


class AssessmentRepository:
    """Any number of assessments per client, each addressed by its own id."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, scope: TrainerScope, client_id: UUID, answers: Mapping[str, Any]) -> Assessment:
        require_client(self._session, scope, client_id)

        parq, scores = _answers(answers)
        assessment = Assessment(
            client_id=client_id,
            parq=parq,
            scores=scores,
            notes=answers.get("notes"),
        )

        row = AssessmentRow(id=assessment.id, client_id=client_id)
        self._write(row, assessment)
        self._session.add(row)
        self._session.commit()

        logger.info(
            "Assessment recorded",
            extra={
                "assessment_id": str(row.id),
                "client_id": str(client_id),
                "total_score": assessment.total_score,
            }
        )
        return self._to_domain(row)

    def list(self, scope: TrainerScope, client_id: UUID) -> list[Assessment]:
        """Newest assessment first."""
        require_client(self._session, scope, client_id)
        rows = self._session.scalars(
            select(AssessmentRow)
            .where(
                AssessmentRow.client_id == client_id,
                AssessmentRow.deleted_at.is_(None),
            )
            .order_by(AssessmentRow.created_at.desc())
        ).all()
        return [self._to_domain(row) for row in rows]

    def get(self, scope: TrainerScope, assessment_id: UUID) -> Assessment:
        return self._to_domain(self._require(scope, assessment_id))

    def update(self, scope: TrainerScope, assessment_id: UUID, changes: Mapping[str, Any]) -> Assessment:
        """Apply a sparse patch; unmentioned answers keep their value."""
        row = self._require(scope, assessment_id)
        current = self._to_domain(row)

        parq, scores = _answers(changes, current.parq, current.scores)
        # replace() re-runs __post_init__, so the new scores are range checked
        updated = replace(
            current,
            parq=parq,
            scores=scores,
            notes=changes["notes"] if "notes" in changes else current.notes,
        )

        self._write(row, updated)
        self._session.commit()

        logger.info("Assessment updated", extra={"assessment_id": str(assessment_id)})
        return self._to_domain(row)

    def delete(self, scope: TrainerScope, assessment_id: UUID) -> None:
        result = self._session.execute(
            update(AssessmentRow)
            .where(
                AssessmentRow.id == assessment_id,
                AssessmentRow.deleted_at.is_(None),
                AssessmentRow.client_id.in_(owned_client_ids(scope)),
            )
            .values(deleted_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self._session.rollback()
            raise NotFoundError(ASSESSMENT_NOT_FOUND)
        self._session.commit()

        logger.info("Assessment deleted", extra={"assessment_id": str(assessment_id)})

    def _require(self, scope: TrainerScope, assessment_id: UUID) -> AssessmentRow:
        row = self._session.scalar(
            select(AssessmentRow).where(
                AssessmentRow.id == assessment_id,
                AssessmentRow.deleted_at.is_(None),
                AssessmentRow.client_id.in_(owned_client_ids(scope)),
            )
        )
        if row is None:
            raise NotFoundError(ASSESSMENT_NOT_FOUND)
        return row

    @staticmethod
    def _write(row: AssessmentRow, assessment: Assessment) -> None:
        for name in PARQ_FIELDS:
            setattr(row, name, assessment.parq[name])
        for name in SCORE_FIELDS:
            setattr(row, name, assessment.scores[name])
        row.notes = assessment.notes

    @staticmethod
    def _to_domain(row: AssessmentRow) -> Assessment:
        return Assessment(
            id=row.id,
            client_id=row.client_id,
            parq={name: bool(getattr(row, name)) for name in PARQ_FIELDS},
            scores={name: getattr(row, name) for name in SCORE_FIELDS},
            notes=row.notes,
            created_at=as_utc(row.created_at),
            updated_at=as_utc(row.updated_at),
        )
