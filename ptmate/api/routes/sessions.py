"""
Training session endpoints.

Sessions belong to a client; the ledger view filters across all of the
trainer's clients. Status changes drive package accounting, so marking a
session completed or no-show is what uses up a purchased session.
"""

import logging
from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, Field

from ...core.training.models import SessionStatus, TrainingSession
from ..dependencies import CurrentTrainer, SessionRepositoryDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class SessionCreateRequest(BaseModel):
    client_id: UUID
    scheduled_at: datetime = Field(description="Start time; a value without offset is read as UTC")
    duration_minutes: Optional[int] = Field(None, description="Defaults to 60")
    notes: Optional[str] = None


class SessionUpdateRequest(BaseModel):
    """Only the fields present in the body are changed."""
    scheduled_at: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    status: Optional[str] = Field(None, description="scheduled, completed, no_show or cancelled")
    notes: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    status: str = Field(description="scheduled, completed, no_show or cancelled")


class ClientSummaryResponse(BaseModel):
    id: UUID
    first_name: str
    last_name: str


class SessionResponse(BaseModel):
    id: UUID
    client_id: UUID
    scheduled_at: datetime
    duration_minutes: int
    status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    client: Optional[ClientSummaryResponse] = None

    @classmethod
    def from_domain(cls, session: TrainingSession) -> "SessionResponse":
        client = None
        if session.client is not None:
            client = ClientSummaryResponse(
                id=session.client.id,
                first_name=session.client.first_name,
                last_name=session.client.last_name,
            )
        return cls(
            id=session.id,
            client_id=session.client_id,
            scheduled_at=session.scheduled_at,
            duration_minutes=session.duration_minutes,
            status=session.status.value,
            notes=session.notes,
            created_at=session.created_at,
            updated_at=session.updated_at,
            client=client,
        )


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=list[SessionResponse], summary="List sessions")
def list_sessions(
    trainer: CurrentTrainer,
    sessions: SessionRepositoryDep,
    client_id: Optional[UUID] = None,
    status_filter: Annotated[Optional[str], Query(alias="status")] = None,
    start: Annotated[Optional[datetime], Query(alias="from")] = None,
    end: Annotated[Optional[datetime], Query(alias="to")] = None,
) -> list[SessionResponse]:
    """All filters are optional and combine with AND. Sorted by start time."""
    parsed_status = SessionStatus.parse(status_filter) if status_filter else None
    found = sessions.list(
        trainer,
        client_id=client_id,
        status=parsed_status,
        start=start,
        end=end,
    )
    return [SessionResponse.from_domain(s) for s in found]


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule a session",
)
def create_session(
    request: SessionCreateRequest,
    trainer: CurrentTrainer,
    sessions: SessionRepositoryDep,
) -> SessionResponse:
    session = sessions.create(
        trainer,
        client_id=request.client_id,
        scheduled_at=request.scheduled_at,
        duration_minutes=request.duration_minutes,
        notes=request.notes,
    )
    return SessionResponse.from_domain(session)


@router.get("/{session_id}", response_model=SessionResponse, summary="Get a session")
def get_session(session_id: UUID, trainer: CurrentTrainer, sessions: SessionRepositoryDep) -> SessionResponse:
    return SessionResponse.from_domain(sessions.get(trainer, session_id))


@router.put("/{session_id}", response_model=SessionResponse, summary="Update a session")
def update_session(
    session_id: UUID,
    request: SessionUpdateRequest,
    trainer: CurrentTrainer,
    sessions: SessionRepositoryDep,
) -> SessionResponse:
    session = sessions.update(trainer, session_id, request.model_dump(exclude_unset=True))
    return SessionResponse.from_domain(session)


@router.patch("/{session_id}/status", response_model=SessionResponse, summary="Change session status")
def update_session_status(
    session_id: UUID,
    request: StatusUpdateRequest,
    trainer: CurrentTrainer,
    sessions: SessionRepositoryDep,
) -> SessionResponse:
    session = sessions.update_status(trainer, session_id, SessionStatus.parse(request.status))

    logger.info(
        "Session status changed",
        extra={"session_id": str(session_id), "status": session.status.value}
    )
    return SessionResponse.from_domain(session)


@router.delete("/{session_id}", response_model=MessageResponse, summary="Delete a session")
def delete_session(session_id: UUID, trainer: CurrentTrainer, sessions: SessionRepositoryDep) -> MessageResponse:
    sessions.delete(trainer, session_id)
    return MessageResponse(message="Session deleted successfully")
