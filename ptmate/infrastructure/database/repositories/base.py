"""
Helpers shared by the repositories.

Ownership is enforced in SQL: every query for client-owned data is
restricted to client_id IN (live clients of the scoped trainer).
"""

from typing import Any, Iterable, Mapping
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from ....core.errors import NotFoundError, ValidationError
from ....core.scope import TrainerScope
from ..tables import ClientRow

CLIENT_NOT_FOUND = "Client not found"


def owned_client_ids(scope: TrainerScope) -> Select:
    """Subquery of the ids of the trainer's live clients."""
    return select(ClientRow.id).where(
        ClientRow.trainer_id == scope.trainer_id,
        ClientRow.deleted_at.is_(None),
    )


def require_client(session: Session, scope: TrainerScope, client_id: UUID) -> ClientRow:
    row = session.scalar(
        select(ClientRow).where(
            ClientRow.id == client_id,
            ClientRow.trainer_id == scope.trainer_id,
            ClientRow.deleted_at.is_(None),
        )
    )
    if row is None:
        raise NotFoundError(CLIENT_NOT_FOUND)
    return row


def apply_patch(
    row: Any,
    changes: Mapping[str, Any],
    allowed: Iterable[str],
    required: Iterable[str] = (),
) -> None:
    """
    Copy a sparse patch onto a row.

    Only keys in `allowed` are applied; keys absent from `changes` keep
    their current value. An explicit None clears optional fields and is
    rejected for the names in `required`.
    """
    required = set(required)
    for name in allowed:
        if name not in changes:
            continue
        value = changes[name]
        if name in required and (value is None or (isinstance(value, str) and not value.strip())):
            raise ValidationError(f"{name} cannot be empty")
        setattr(row, name, value)
