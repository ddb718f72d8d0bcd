"""
Trainer authentication.

Registration, login and identity lookup. The service doesn't know how
passwords are hashed, how tokens are signed, or where trainers are stored;
those arrive as protocol implementations so tests can swap them freely.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID

from ..errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from ..scope import TrainerScope
from ..training.models import Trainer

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

# Same text for unknown email and wrong password.
INVALID_CREDENTIALS = "Invalid email or password"


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class TrainerStore(Protocol):
    """Persistence for trainer accounts."""

    def get_by_email(self, email: str) -> Optional[Trainer]:
        ...

    def get_by_id(self, trainer_id: UUID) -> Optional[Trainer]:
        ...

    def add(self, trainer: Trainer) -> Trainer:
        """Persist a new trainer. Raises ConflictError on duplicate email."""
        ...


class PasswordHasher(Protocol):
    """Salted one-way password hashing."""

    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        ...


class TokenCodec(Protocol):
    """Issues and verifies signed bearer tokens."""

    def issue(self, trainer: Trainer) -> str:
        ...

    def decode(self, token: str) -> TrainerScope:
        """Verify signature and expiry. Raises UnauthorizedError."""
        ...


@dataclass(frozen=True)
class AuthResult:
    """A freshly issued token and the trainer it belongs to."""
    token: str
    trainer: Trainer


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Register, log in and resolve trainers."""

    def __init__(
        self,
        trainers: TrainerStore,
        hasher: PasswordHasher,
        tokens: TokenCodec,
    ) -> None:
        self._trainers = trainers
        self._hasher = hasher
        self._tokens = tokens

    def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> AuthResult:
        """
        Create a trainer account and log it in.

        Raises ValidationError for a short password or empty names and
        ConflictError when the email is already registered.
        """
        email = normalize_email(email)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if not first_name.strip() or not last_name.strip():
            raise ValidationError("First name and last name are required")

        if self._trainers.get_by_email(email) is not None:
            raise ConflictError("Email is already registered")

        trainer = Trainer(
            email=email,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            password_hash=self._hasher.hash(password),
        )
        trainer = self._trainers.add(trainer)

        logger.info(
            "Trainer registered",
            extra={"trainer_id": str(trainer.id)}
        )

        return AuthResult(token=self._tokens.issue(trainer), trainer=trainer)

    def login(self, email: str, password: str) -> AuthResult:
        """Check credentials and issue a token."""
        trainer = self._trainers.get_by_email(normalize_email(email))

        if trainer is None or not self._hasher.verify(password, trainer.password_hash):
            logger.warning("Rejected login attempt")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        logger.info("Trainer logged in", extra={"trainer_id": str(trainer.id)})

        return AuthResult(token=self._tokens.issue(trainer), trainer=trainer)

    def authenticate(self, token: str) -> TrainerScope:
        """Turn a bearer token into a trainer capability."""
        return self._tokens.decode(token)

    def me(self, scope: TrainerScope) -> Trainer:
        """The trainer behind a token; NotFoundError if the account is gone."""
        trainer = self._trainers.get_by_id(scope.trainer_id)
        if trainer is None:
            raise NotFoundError("Trainer not found")
        return trainer
