"""
The trainer capability.

A TrainerScope is built once by the auth layer from a verified token and
handed to every repository and service call. Owning a scope is what grants
access to a trainer's clients and everything hanging off them; nothing
reads the current trainer from ambient request state.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class TrainerScope:
    """Verified identity of the calling trainer."""
    trainer_id: UUID
    email: str
