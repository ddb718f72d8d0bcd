"""
Fitness assessment endpoints.

An assessment is a PAR-Q health screening plus posture and movement
scores from 1 (poor) to 3 (good). Responses include the derived posture
total and its band so clients don't have to recompute them.
"""

import logging
from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from ...core.training.models import MAX_SCORE, MIN_SCORE, Assessment
from ..dependencies import AssessmentRepositoryDep, CurrentTrainer

logger = logging.getLogger(__name__)

router = APIRouter()

Score = Annotated[int, Field(ge=MIN_SCORE, le=MAX_SCORE)]


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class AssessmentScores(BaseModel):
    """Scores are 1-3; leave a score out (or null) if it was not assessed."""

    # Static posture
    posture_head_neck: Optional[Score] = None
    posture_shoulders: Optional[Score] = None
    posture_lphc: Optional[Score] = None
    posture_knee: Optional[Score] = None
    posture_foot: Optional[Score] = None

    # Push-up
    pushup_form: Optional[Score] = None
    pushup_scapular: Optional[Score] = None
    pushup_lordosis: Optional[Score] = None
    pushup_head_pos: Optional[Score] = None

    # Overhead squat
    squat_feet_out: Optional[Score] = None
    squat_knees_in: Optional[Score] = None
    squat_lower_back: Optional[Score] = None
    squat_arms_forward: Optional[Score] = None
    squat_lean_forward: Optional[Score] = None

    # Single-leg balance
    balance_correct: Optional[Score] = None
    balance_knee_in: Optional[Score] = None
    balance_hip_rise: Optional[Score] = None

    # Shoulder mobility
    shoulder_retraction: Optional[Score] = None
    shoulder_protraction: Optional[Score] = None
    shoulder_elevation: Optional[Score] = None
    shoulder_depression: Optional[Score] = None

    notes: Optional[str] = None


class AssessmentCreateRequest(AssessmentScores):
    parq_heart_problem: bool = False
    parq_chest_pain: bool = False
    parq_dizziness: bool = False
    parq_chronic_condition: bool = False
    parq_medication: bool = False
    parq_bone_joint: bool = False
    parq_supervision: bool = False


class AssessmentUpdateRequest(AssessmentScores):
    """Only the fields present in the body are changed."""
    parq_heart_problem: Optional[bool] = None
    parq_chest_pain: Optional[bool] = None
    parq_dizziness: Optional[bool] = None
    parq_chronic_condition: Optional[bool] = None
    parq_medication: Optional[bool] = None
    parq_bone_joint: Optional[bool] = None
    parq_supervision: Optional[bool] = None


class AssessmentResponse(AssessmentCreateRequest):
    id: UUID
    client_id: UUID
    total_score: int = Field(description="Sum of the five posture scores")
    score_level: str = Field(description="poor (<= 6), fair (<= 12) or good")
    parq_flagged: bool = Field(description="Any PAR-Q answer was yes")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, assessment: Assessment) -> "AssessmentResponse":
        return cls(
            id=assessment.id,
            client_id=assessment.client_id,
            notes=assessment.notes,
            total_score=assessment.total_score,
            score_level=assessment.score_level.value,
            parq_flagged=assessment.parq_flagged,
            created_at=assessment.created_at,
            updated_at=assessment.updated_at,
            **assessment.parq,
            **assessment.scores,
        )


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/clients/{client_id}/assessments",
    response_model=list[AssessmentResponse],
    summary="Assessment history of a client, newest first",
)
def list_assessments(
    client_id: UUID,
    trainer: CurrentTrainer,
    assessments: AssessmentRepositoryDep,
) -> list[AssessmentResponse]:
    return [AssessmentResponse.from_domain(a) for a in assessments.list(trainer, client_id)]


@router.post(
    "/clients/{client_id}/assessments",
    response_model=AssessmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record an assessment",
)
def create_assessment(
    client_id: UUID,
    request: AssessmentCreateRequest,
    trainer: CurrentTrainer,
    assessments: AssessmentRepositoryDep,
) -> AssessmentResponse:
    assessment = assessments.create(trainer, client_id, request.model_dump())
    return AssessmentResponse.from_domain(assessment)


@router.get(
    "/assessments/{assessment_id}",
    response_model=AssessmentResponse,
    summary="Get an assessment",
)
def get_assessment(
    assessment_id: UUID,
    trainer: CurrentTrainer,
    assessments: AssessmentRepositoryDep,
) -> AssessmentResponse:
    return AssessmentResponse.from_domain(assessments.get(trainer, assessment_id))


@router.put(
    "/assessments/{assessment_id}",
    response_model=AssessmentResponse,
    summary="Update an assessment",
)
def update_assessment(
    assessment_id: UUID,
    request: AssessmentUpdateRequest,
    trainer: CurrentTrainer,
    assessments: AssessmentRepositoryDep,
) -> AssessmentResponse:
    assessment = assessments.update(trainer, assessment_id, request.model_dump(exclude_unset=True))
    return AssessmentResponse.from_domain(assessment)


@router.delete(
    "/assessments/{assessment_id}",
    response_model=MessageResponse,
    summary="Delete an assessment",
)
def delete_assessment(
    assessment_id: UUID,
    trainer: CurrentTrainer,
    assessments: AssessmentRepositoryDep,
) -> MessageResponse:
    assessments.delete(trainer, assessment_id)
    return MessageResponse(message="Assessment deleted successfully")
