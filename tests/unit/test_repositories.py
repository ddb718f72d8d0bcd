"""
Unit tests for repository signatures.

Repositories expose a method named `list`; their annotations must still
resolve to the builtin list rather than to that method.
"""

from typing import get_type_hints

import pytest

from ptmate.core.training.accounting import ClientOverview
from ptmate.core.training.models import Assessment, Measurement, SessionStatus, TrainingSession
from ptmate.infrastructure.database.repositories import (
    AssessmentRepository,
    ClientRepository,
    MeasurementRepository,
    SessionRepository,
)


class TestAnnotations:

    @pytest.mark.parametrize("method, expected", [
        (SessionRepository.list, list[TrainingSession]),
        (SessionRepository.sessions_between, list[TrainingSession]),
        (SessionRepository.status_counts_between, list[tuple[SessionStatus, int]]),
        (SessionRepository.upcoming, list[TrainingSession]),
        (ClientRepository.list, list[ClientOverview]),
        (MeasurementRepository.list, list[Measurement]),
        (AssessmentRepository.list, list[Assessment]),
    ])
    def test_return_types_resolve_to_builtin_list(self, method, expected):
        assert get_type_hints(method)["return"] == expected
