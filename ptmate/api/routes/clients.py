"""
Client endpoints.

Every client comes back with its package accounting: how many sessions
are scheduled, completed, no-show and cancelled, and how many of the
purchased package remain.
"""

import logging
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, status
from pydantic import BaseModel, EmailStr, Field, field_validator

from ...core.training.accounting import ClientOverview
from ..dependencies import ClientRepositoryDep, CurrentTrainer

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class _ClientFields(BaseModel):

    @field_validator("phone", "email", mode="before", check_fields=False)
    @classmethod
    def blank_to_none(cls, value):
        # Forms submit empty inputs as ""
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ClientCreateRequest(_ClientFields):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=32)
    email: Optional[EmailStr] = None
    total_package_size: int = Field(0, ge=0, description="Sessions purchased")
    package_start_date: Optional[date] = None
    notes: Optional[str] = None


class ClientUpdateRequest(_ClientFields):
    """Only the fields present in the body are changed."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=32)
    email: Optional[EmailStr] = None
    total_package_size: Optional[int] = Field(None, ge=0)
    package_start_date: Optional[date] = None
    notes: Optional[str] = None


class ClientResponse(BaseModel):
    id: UUID
    trainer_id: UUID
    first_name: str
    last_name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    total_package_size: int
    package_start_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    scheduled_sessions: int
    completed_sessions: int
    no_show_sessions: int
    cancelled_sessions: int
    remaining_sessions: int = Field(description="Package size minus completed and no-show; may be negative")

    @classmethod
    def from_domain(cls, overview: ClientOverview) -> "ClientResponse":
        client, stats = overview.client, overview.stats
        return cls(
            id=client.id,
            trainer_id=client.trainer_id,
            first_name=client.first_name,
            last_name=client.last_name,
            phone=client.phone,
            email=client.email,
            total_package_size=client.total_package_size,
            package_start_date=client.package_start_date,
            notes=client.notes,
            created_at=client.created_at,
            updated_at=client.updated_at,
            scheduled_sessions=stats.scheduled,
            completed_sessions=stats.completed,
            no_show_sessions=stats.no_show,
            cancelled_sessions=stats.cancelled,
            remaining_sessions=overview.remaining_sessions,
        )


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=list[ClientResponse], summary="List clients")
def list_clients(trainer: CurrentTrainer, clients: ClientRepositoryDep) -> list[ClientResponse]:
    return [ClientResponse.from_domain(c) for c in clients.list(trainer)]


@router.post(
    "",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a client",
)
def create_client(
    request: ClientCreateRequest,
    trainer: CurrentTrainer,
    clients: ClientRepositoryDep,
) -> ClientResponse:
    overview = clients.create(trainer, request.model_dump())
    return ClientResponse.from_domain(overview)


@router.get("/{client_id}", response_model=ClientResponse, summary="Get a client")
def get_client(client_id: UUID, trainer: CurrentTrainer, clients: ClientRepositoryDep) -> ClientResponse:
    return ClientResponse.from_domain(clients.get(trainer, client_id))


@router.put("/{client_id}", response_model=ClientResponse, summary="Update a client")
def update_client(
    client_id: UUID,
    request: ClientUpdateRequest,
    trainer: CurrentTrainer,
    clients: ClientRepositoryDep,
) -> ClientResponse:
    overview = clients.update(trainer, client_id, request.model_dump(exclude_unset=True))
    return ClientResponse.from_domain(overview)


@router.delete("/{client_id}", response_model=MessageResponse, summary="Delete a client")
def delete_client(client_id: UUID, trainer: CurrentTrainer, clients: ClientRepositoryDep) -> MessageResponse:
    clients.delete(trainer, client_id)
    return MessageResponse(message="Client deleted successfully")
