"""
Signed bearer tokens (JWT) via python-jose.

Claims: trainer_id, email, iat, exp. Expiry is checked by jose during
decode; every failure surfaces as UnauthorizedError.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from ...core.errors import UnauthorizedError
from ...core.scope import TrainerScope
from ...core.training.models import Trainer

logger = logging.getLogger(__name__)

INVALID_TOKEN = "Invalid or expired token"
INVALID_CLAIMS = "Invalid token claims"


class JWTTokenCodec:
    """TokenCodec issuing HMAC-signed JWTs."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
    ) -> None:
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl

    def issue(self, trainer: Trainer, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "trainer_id": str(trainer.id),
            "email": trainer.email,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> TrainerScope:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            logger.warning("Rejected bearer token", extra={"error": str(e)})
            raise UnauthorizedError(INVALID_TOKEN)

        trainer_id = payload.get("trainer_id")
        if not isinstance(trainer_id, str):
            raise UnauthorizedError(INVALID_CLAIMS)
        try:
            parsed_id = UUID(trainer_id)
        except ValueError:
            raise UnauthorizedError(INVALID_CLAIMS)

        return TrainerScope(trainer_id=parsed_id, email=str(payload.get("email") or ""))
