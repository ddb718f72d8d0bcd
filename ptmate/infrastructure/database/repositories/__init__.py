"""
Repository implementations over SQLAlchemy.

Repositories translate between domain models and database rows. Each one
wraps a single request-scoped Session and commits its own writes.
"""

from .assessments import AssessmentRepository
from .clients import ClientRepository
from .measurements import MeasurementRepository
from .photos import PhotoRepository
from .sessions import SessionRepository
from .trainers import TrainerRepository

__all__ = [
    "AssessmentRepository",
    "ClientRepository",
    "MeasurementRepository",
    "PhotoRepository",
    "SessionRepository",
    "TrainerRepository",
]
