"""
FastAPI dependency injection.

Dependencies provide repositories, services and configuration to route
handlers. Long-lived resources (the database engine and the storage
client) are created once by the application factory and kept on
app.state; everything request-scoped is built here per request.

Each dependency is a function that FastAPI calls when needed.
"""

import logging
from datetime import timedelta
from typing import Annotated, Generator, Optional
from zoneinfo import ZoneInfo

from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from ..config.settings import Settings
from ..core.auth import AuthService
from ..core.errors import UnauthorizedError
from ..core.scope import TrainerScope
from ..core.training.photos import PhotoService
from ..infrastructure.database import Database
from ..infrastructure.database.repositories import (
    AssessmentRepository,
    ClientRepository,
    MeasurementRepository,
    PhotoRepository,
    SessionRepository,
    TrainerRepository,
)
from ..infrastructure.security import JWTTokenCodec, PasslibPasswordHasher
from ..infrastructure.storage import StorageClient

logger = logging.getLogger(__name__)

# Bearer token in the standard Authorization header. auto_error is off so
# the missing and malformed cases get their own messages below.
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)

_password_hasher = PasslibPasswordHasher()


# ---------------------------------------------------------------------------
# Application resources
# ---------------------------------------------------------------------------

def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db_session(
    database: Annotated[Database, Depends(get_database)],
) -> Generator[Session, None, None]:
    """
    Provide a database session for one request.

    This is a generator function (yields instead of returns) so the
    session is closed after the response is sent, whatever happened.
    """
    with database.session() as session:
        yield session


def get_storage_client(request: Request) -> Optional[StorageClient]:
    """
    Provide the shared storage client.

    None when object storage is not configured; photos then get
    placeholder paths.
    """
    return request.app.state.storage


def get_timezone(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ZoneInfo:
    return ZoneInfo(settings.timezone)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

def get_token_codec(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> JWTTokenCodec:
    return JWTTokenCodec(
        secret=settings.token_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(days=settings.token_ttl_days),
    )


def get_auth_service(
    session: Annotated[Session, Depends(get_db_session)],
    tokens: Annotated[JWTTokenCodec, Depends(get_token_codec)],
) -> AuthService:
    return AuthService(
        trainers=TrainerRepository(session),
        hasher=_password_hasher,
        tokens=tokens,
    )


def get_current_trainer(
    tokens: Annotated[JWTTokenCodec, Depends(get_token_codec)],
    authorization: Optional[str] = Security(authorization_header),
) -> TrainerScope:
    """
    Resolve the bearer token into a TrainerScope.

    Expects "Authorization: Bearer <token>". Raises UnauthorizedError
    (401) when the header is missing, malformed, or carries a bad token.
    """
    if not authorization:
        raise UnauthorizedError("Authorization header required")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthorizedError("Invalid authorization format")

    return tokens.decode(parts[1])


# ---------------------------------------------------------------------------
# Repositories and services
# ---------------------------------------------------------------------------

def get_client_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> ClientRepository:
    return ClientRepository(session)


def get_session_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> SessionRepository:
    return SessionRepository(session)


def get_measurement_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> MeasurementRepository:
    return MeasurementRepository(session)


def get_assessment_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> AssessmentRepository:
    return AssessmentRepository(session)


def get_photo_service(
    session: Annotated[Session, Depends(get_db_session)],
    storage: Annotated[Optional[StorageClient], Depends(get_storage_client)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> PhotoService:
    return PhotoService(
        repository=PhotoRepository(session),
        storage=storage,
        max_files=settings.max_photos_per_upload,
        max_total_bytes=settings.max_upload_bytes,
    )


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
CurrentTrainer = Annotated[TrainerScope, Depends(get_current_trainer)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
DatabaseDep = Annotated[Database, Depends(get_database)]
TimezoneDep = Annotated[ZoneInfo, Depends(get_timezone)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ClientRepositoryDep = Annotated[ClientRepository, Depends(get_client_repository)]
SessionRepositoryDep = Annotated[SessionRepository, Depends(get_session_repository)]
MeasurementRepositoryDep = Annotated[MeasurementRepository, Depends(get_measurement_repository)]
AssessmentRepositoryDep = Annotated[AssessmentRepository, Depends(get_assessment_repository)]
PhotoServiceDep = Annotated[PhotoService, Depends(get_photo_service)]
