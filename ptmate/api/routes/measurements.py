"""
Body measurement endpoints.

Measurements are snapshots: they can be recorded, read and deleted, but
not edited.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from ...core.training.models import MEASUREMENT_METRICS, Measurement
from ..dependencies import CurrentTrainer, MeasurementRepositoryDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class MeasurementCreateRequest(BaseModel):
    """Every metric is optional."""
    weight_kg: Optional[float] = Field(None, ge=0)
    height_cm: Optional[float] = Field(None, ge=0)
    body_fat_percent: Optional[float] = Field(None, ge=0, le=100)
    waist_cm: Optional[float] = Field(None, ge=0)
    hip_cm: Optional[float] = Field(None, ge=0)
    flexibility_cm: Optional[float] = None
    measured_at: Optional[datetime] = Field(None, description="Defaults to now")
    notes: Optional[str] = None


class MeasurementResponse(BaseModel):
    id: UUID
    client_id: UUID
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    body_fat_percent: Optional[float] = None
    waist_cm: Optional[float] = None
    hip_cm: Optional[float] = None
    flexibility_cm: Optional[float] = None
    notes: Optional[str] = None
    measured_at: datetime
    created_at: datetime

    @classmethod
    def from_domain(cls, measurement: Measurement) -> "MeasurementResponse":
        return cls(
            id=measurement.id,
            client_id=measurement.client_id,
            notes=measurement.notes,
            measured_at=measurement.measured_at,
            created_at=measurement.created_at,
            **{name: getattr(measurement, name) for name in MEASUREMENT_METRICS},
        )


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/clients/{client_id}/measurements",
    response_model=list[MeasurementResponse],
    summary="Measurement history of a client, newest first",
)
def list_measurements(
    client_id: UUID,
    trainer: CurrentTrainer,
    measurements: MeasurementRepositoryDep,
) -> list[MeasurementResponse]:
    return [MeasurementResponse.from_domain(m) for m in measurements.list(trainer, client_id)]


@router.post(
    "/clients/{client_id}/measurements",
    response_model=MeasurementResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a measurement",
)
def create_measurement(
    client_id: UUID,
    request: MeasurementCreateRequest,
    trainer: CurrentTrainer,
    measurements: MeasurementRepositoryDep,
) -> MeasurementResponse:
    measurement = measurements.create(
        trainer,
        client_id,
        metrics=request.model_dump(include=set(MEASUREMENT_METRICS)),
        measured_at=request.measured_at,
        notes=request.notes,
    )
    return MeasurementResponse.from_domain(measurement)


@router.get(
    "/measurements/{measurement_id}",
    response_model=MeasurementResponse,
    summary="Get a measurement",
)
def get_measurement(
    measurement_id: UUID,
    trainer: CurrentTrainer,
    measurements: MeasurementRepositoryDep,
) -> MeasurementResponse:
    return MeasurementResponse.from_domain(measurements.get(trainer, measurement_id))


@router.delete(
    "/measurements/{measurement_id}",
    response_model=MessageResponse,
    summary="Delete a measurement",
)
def delete_measurement(
    measurement_id: UUID,
    trainer: CurrentTrainer,
    measurements: MeasurementRepositoryDep,
) -> MessageResponse:
    measurements.delete(trainer, measurement_id)
    return MessageResponse(message="Measurement deleted successfully")
