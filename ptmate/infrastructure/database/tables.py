"""
ORM table definitions.

Rows are a persistence detail: repositories convert them to the dataclasses
in ptmate.core before anything leaves the infrastructure layer. Every table
except trainers carries a deleted_at column; a row with deleted_at set is
treated as gone by every query.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    SmallInteger,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from ...core.training.models import utcnow


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


class SoftDeleteMixin:
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), index=True)


class TrainerRow(TimestampMixin, Base):
    __tablename__ = "trainers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)


class ClientRow(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "clients"
    __table_args__ = (
        CheckConstraint("total_package_size >= 0", name="ck_clients_package_size"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trainer_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("trainers.id"), index=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(32))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    total_package_size: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    package_start_date: Mapped[Optional[date]] = mapped_column(Date)
    notes: Mapped[Optional[str]] = mapped_column(Text)


class SessionRow(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "sessions"
    __table_args__ = (
        CheckConstraint(
            "status IN ('scheduled', 'completed', 'no_show', 'cancelled')",
            name="ck_sessions_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("clients.id"), index=True, nullable=False)
    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=60, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="scheduled", index=True, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    client: Mapped[ClientRow] = relationship(lazy="joined")


class MeasurementRow(SoftDeleteMixin, Base):
    __tablename__ = "measurements"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("clients.id"), index=True, nullable=False)
    measured_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    weight_kg: Mapped[Optional[float]] = mapped_column(Float)
    height_cm: Mapped[Optional[float]] = mapped_column(Float)
    body_fat_percent: Mapped[Optional[float]] = mapped_column(Float)
    waist_cm: Mapped[Optional[float]] = mapped_column(Float)
    hip_cm: Mapped[Optional[float]] = mapped_column(Float)
    flexibility_cm: Mapped[Optional[float]] = mapped_column(Float)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class AssessmentRow(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "assessments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("clients.id"), index=True, nullable=False)

    # PAR-Q screening
    parq_heart_problem: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    parq_chest_pain: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    parq_dizziness: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    parq_chronic_condition: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    parq_medication: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    parq_bone_joint: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    parq_supervision: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Static posture, 1-3
    posture_head_neck: Mapped[Optional[int]] = mapped_column(SmallInteger)
    posture_shoulders: Mapped[Optional[int]] = mapped_column(SmallInteger)
    posture_lphc: Mapped[Optional[int]] = mapped_column(SmallInteger)
    posture_knee: Mapped[Optional[int]] = mapped_column(SmallInteger)
    posture_foot: Mapped[Optional[int]] = mapped_column(SmallInteger)

    # Push-up
    pushup_form: Mapped[Optional[int]] = mapped_column(SmallInteger)
    pushup_scapular: Mapped[Optional[int]] = mapped_column(SmallInteger)
    pushup_lordosis: Mapped[Optional[int]] = mapped_column(SmallInteger)
    pushup_head_pos: Mapped[Optional[int]] = mapped_column(SmallInteger)

    # Overhead squat
    squat_feet_out: Mapped[Optional[int]] = mapped_column(SmallInteger)
    squat_knees_in: Mapped[Optional[int]] = mapped_column(SmallInteger)
    squat_lower_back: Mapped[Optional[int]] = mapped_column(SmallInteger)
    squat_arms_forward: Mapped[Optional[int]] = mapped_column(SmallInteger)
    squat_lean_forward: Mapped[Optional[int]] = mapped_column(SmallInteger)

    # Single-leg balance
    balance_correct: Mapped[Optional[int]] = mapped_column(SmallInteger)
    balance_knee_in: Mapped[Optional[int]] = mapped_column(SmallInteger)
    balance_hip_rise: Mapped[Optional[int]] = mapped_column(SmallInteger)

    # Shoulder mobility
    shoulder_retraction: Mapped[Optional[int]] = mapped_column(SmallInteger)
    shoulder_protraction: Mapped[Optional[int]] = mapped_column(SmallInteger)
    shoulder_elevation: Mapped[Optional[int]] = mapped_column(SmallInteger)
    shoulder_depression: Mapped[Optional[int]] = mapped_column(SmallInteger)

    notes: Mapped[Optional[str]] = mapped_column(Text)


class PhotoGroupRow(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "photo_groups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("clients.id"), index=True, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)


class PhotoRow(SoftDeleteMixin, Base):
    __tablename__ = "photos"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    photo_group_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("photo_groups.id"), index=True, nullable=False)
    url: Mapped[str] = mapped_column(String(1024), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
