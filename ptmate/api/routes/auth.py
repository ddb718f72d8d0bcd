"""
Trainer registration and login.

Both endpoints answer with a bearer token and the trainer profile. The
token goes into the Authorization header of every other request.
"""

import logging
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, status
from pydantic import BaseModel, EmailStr, Field

from ...core.training.models import Trainer
from ..dependencies import AuthServiceDep, CurrentTrainer

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class RegisterRequest(BaseModel):
    email: EmailStr = Field(description="Login email, stored lower-cased")
    password: str = Field(description="At least 6 characters")
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)


class LoginRequest(BaseModel):
    email: str
    password: str


class TrainerResponse(BaseModel):
    """Public trainer profile. Never includes the password hash."""
    id: UUID
    email: str
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, trainer: Trainer) -> "TrainerResponse":
        return cls(
            id=trainer.id,
            email=trainer.email,
            first_name=trainer.first_name,
            last_name=trainer.last_name,
            created_at=trainer.created_at,
            updated_at=trainer.updated_at,
        )


class AuthResponse(BaseModel):
    token: str = Field(description="Bearer token, valid for 7 days by default")
    trainer: TrainerResponse


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a trainer account",
)
def register(request: RegisterRequest, auth: AuthServiceDep) -> AuthResponse:
    result = auth.register(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    return AuthResponse(token=result.token, trainer=TrainerResponse.from_domain(result.trainer))


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Exchange email and password for a token",
)
def login(request: LoginRequest, auth: AuthServiceDep) -> AuthResponse:
    result = auth.login(email=request.email, password=request.password)
    return AuthResponse(token=result.token, trainer=TrainerResponse.from_domain(result.trainer))


@router.get(
    "/me",
    response_model=TrainerResponse,
    summary="Profile of the authenticated trainer",
)
def me(trainer: CurrentTrainer, auth: AuthServiceDep) -> TrainerResponse:
    return TrainerResponse.from_domain(auth.me(trainer))
