"""
Domain models for practice management.

These models represent the core business concepts. They have no dependencies
on external frameworks, databases, or APIs. Repositories translate database
rows into these objects and the API layer translates them into JSON.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from ..errors import ValidationError


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to aware UTC.

    Naive values are read as UTC. SQLite hands back naive datetimes, and
    clients may omit the offset; both land here.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SessionStatus(Enum):
    """Lifecycle of a scheduled training session. Any status may follow any other."""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: str) -> "SessionStatus":
        """Parse a wire value, raising ValidationError for unknown strings."""
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(status.value for status in cls)
            raise ValidationError(f"Invalid status. Valid values: {valid}")

    @property
    def consumes_package(self) -> bool:
        """Completed and no-show sessions use up a purchased session."""
        return self in (SessionStatus.COMPLETED, SessionStatus.NO_SHOW)


DEFAULT_SESSION_MINUTES = 60


def resolve_duration(minutes: Optional[int]) -> int:
    """Session length in minutes; missing or zero means the default hour."""
    if minutes is None or minutes == 0:
        return DEFAULT_SESSION_MINUTES
    if minutes < 0:
        raise ValidationError("duration_minutes must not be negative")
    return minutes


@dataclass
class Trainer:
    """A personal trainer account. Only the password may change after registration."""
    email: str
    first_name: str
    last_name: str
    password_hash: str = ""
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class Client:
    """A client of one trainer, with the size of the session package they bought."""
    trainer_id: UUID
    first_name: str
    last_name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    total_package_size: int = 0
    package_start_date: Optional[date] = None
    notes: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class ClientSummary:
    """Just enough of a client to label a session on a calendar."""
    id: UUID
    first_name: str
    last_name: str


@dataclass
class TrainingSession:
    """A scheduled one-on-one session with a client."""
    client_id: UUID
    scheduled_at: datetime
    duration_minutes: int = DEFAULT_SESSION_MINUTES
    status: SessionStatus = SessionStatus.SCHEDULED
    notes: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    client: Optional[ClientSummary] = None


MEASUREMENT_METRICS = (
    "weight_kg",
    "height_cm",
    "body_fat_percent",
    "waist_cm",
    "hip_cm",
    "flexibility_cm",
)


@dataclass
class Measurement:
    """
    Body metrics at a point in time.

    Measurements are snapshots: once recorded they are never edited, only
    soft-deleted. Any metric may be missing.
    """
    client_id: UUID
    measured_at: datetime = field(default_factory=utcnow)
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    body_fat_percent: Optional[float] = None
    waist_cm: Optional[float] = None
    hip_cm: Optional[float] = None
    flexibility_cm: Optional[float] = None
    notes: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)


PARQ_FIELDS = (
    "parq_heart_problem",
    "parq_chest_pain",
    "parq_dizziness",
    "parq_chronic_condition",
    "parq_medication",
    "parq_bone_joint",
    "parq_supervision",
)

POSTURE_FIELDS = (
    "posture_head_neck",
    "posture_shoulders",
    "posture_lphc",
    "posture_knee",
    "posture_foot",
)

MOVEMENT_FIELDS = (
    "pushup_form",
    "pushup_scapular",
    "pushup_lordosis",
    "pushup_head_pos",
    "squat_feet_out",
    "squat_knees_in",
    "squat_lower_back",
    "squat_arms_forward",
    "squat_lean_forward",
    "balance_correct",
    "balance_knee_in",
    "balance_hip_rise",
    "shoulder_retraction",
    "shoulder_protraction",
    "shoulder_elevation",
    "shoulder_depression",
)

SCORE_FIELDS = POSTURE_FIELDS + MOVEMENT_FIELDS

MIN_SCORE = 1
MAX_SCORE = 3


class ScoreLevel(Enum):
    """Banding of the posture total."""
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"


@dataclass
class Assessment:
    """
    A fitness assessment: PAR-Q screening plus posture and movement scores.

    Scores run 1 (poor) to 3 (good); None means the item was not assessed.
    Only the five posture scores feed total_score.
    """
    client_id: UUID
    parq: dict[str, bool] = field(default_factory=lambda: dict.fromkeys(PARQ_FIELDS, False))
    scores: dict[str, Optional[int]] = field(default_factory=lambda: dict.fromkeys(SCORE_FIELDS))
    notes: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        for name, value in self.scores.items():
            if value is not None and not MIN_SCORE <= value <= MAX_SCORE:
                raise ValidationError(f"{name} must be between {MIN_SCORE} and {MAX_SCORE}")

    @property
    def total_score(self) -> int:
        return sum(self.scores.get(name) or 0 for name in POSTURE_FIELDS)

    @property
    def score_level(self) -> ScoreLevel:
        score = self.total_score
        if score <= 6:
            return ScoreLevel.POOR
        if score <= 12:
            return ScoreLevel.FAIR
        return ScoreLevel.GOOD

    @property
    def parq_flagged(self) -> bool:
        """True when any PAR-Q answer is yes (medical clearance advised)."""
        return any(self.parq.values())


@dataclass
class Photo:
    """One image in object storage."""
    photo_group_id: UUID
    url: str
    file_name: str = ""
    file_size: int = 0
    content_type: str = ""
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class PhotoGroup:
    """Progress photos uploaded together, sharing one note."""
    client_id: UUID
    notes: Optional[str] = None
    photos: list[Photo] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
