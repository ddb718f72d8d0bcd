"""
Password hashing with passlib.

pbkdf2_sha256 is salted and pure-Python, so it needs no native backend.
The CryptContext is configured with deprecated="auto", so adding a new
scheme later will still verify hashes made with the old one.
"""

from passlib.context import CryptContext


class PasslibPasswordHasher:
    """PasswordHasher backed by a passlib CryptContext."""

    def __init__(self, schemes: tuple[str, ...] = ("pbkdf2_sha256",)) -> None:
        self._context = CryptContext(schemes=list(schemes), deprecated="auto")

    def hash(self, password: str) -> str:
        if not isinstance(password, str):
            raise TypeError("Password must be a string.")
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        if not password_hash:
            return False
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            # Unrecognized hash format
            return False
