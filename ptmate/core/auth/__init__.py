"""
Trainer authentication: credentials in, signed bearer tokens out.
"""

from .service import (
    AuthResult,
    AuthService,
    PasswordHasher,
    TokenCodec,
    TrainerStore,
)

__all__ = [
    "AuthResult",
    "AuthService",
    "PasswordHasher",
    "TokenCodec",
    "TrainerStore",
]
