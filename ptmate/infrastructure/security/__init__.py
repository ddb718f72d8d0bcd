"""
Credential handling: password hashes and signed bearer tokens.
"""

from .passwords import PasslibPasswordHasher
from .tokens import JWTTokenCodec

__all__ = ["JWTTokenCodec", "PasslibPasswordHasher"]
