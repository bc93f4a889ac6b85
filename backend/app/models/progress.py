"""Progress entry model: body metrics and personal records for one day."""

from datetime import datetime
from datetime import date as date_type
from enum import Enum as PyEnum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import Integer, Float, Date, DateTime, ForeignKey, String, Text, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.user import WeightUnit

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.exercise import Exercise


MEASUREMENT_FIELDS = ("chest", "waist", "hips", "biceps", "thighs")


class RecordUnit(str, PyEnum):
    """Units a personal record can be expressed in."""
    KG = "kg"
    LB = "lb"
    SECONDS = "seconds"
    MINUTES = "minutes"
    METERS = "meters"
    KILOMETERS = "kilometers"
    MILES = "miles"


class ProgressEntry(Base):
    """Body metrics and personal records logged by a user on one date."""

    __tablename__ = "progress_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_progress_user_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    date: Mapped[date_type] = mapped_column(Date, index=True, default=date_type.today)

    # Metrics
    weight_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    weight_unit: Mapped[WeightUnit] = mapped_column(Enum(WeightUnit), default=WeightUnit.KG)
    body_fat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)  # percentage

    # Measurements in cm
    chest: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    waist: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    hips: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    biceps: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    thighs: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="progress_entries")
    personal_records: Mapped[List["PersonalRecord"]] = relationship(
        "PersonalRecord",
        back_populates="progress_entry",
        cascade="all, delete-orphan",
        order_by="PersonalRecord.id",
    )

    def __repr__(self) -> str:
        return f"<ProgressEntry(id={self.id}, user_id={self.user_id}, date={self.date})>"

    @property
    def measurements(self) -> Dict[str, Optional[float]]:
        return {field: getattr(self, field) for field in MEASUREMENT_FIELDS}

    @property
    def metrics(self) -> Dict[str, Any]:
        weight = None
        if self.weight_value is not None:
            weight = {"value": self.weight_value, "unit": self.weight_unit or WeightUnit.KG}
        return {
            "weight": weight,
            "body_fat": self.body_fat,
            "measurements": self.measurements,
        }


class PersonalRecord(Base):
    """A best value for an exercise, captured inside a progress entry."""

    __tablename__ = "personal_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    progress_entry_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("progress_entries.id", ondelete="CASCADE"), index=True
    )
    exercise_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("exercises.id", ondelete="SET NULL"), nullable=True, index=True
    )
    value: Mapped[float] = mapped_column(Float)
    unit: Mapped[Optional[RecordUnit]] = mapped_column(Enum(RecordUnit), nullable=True)
    # Falls back to the entry's date when unset
    date: Mapped[Optional[date_type]] = mapped_column(Date, nullable=True)

    progress_entry: Mapped["ProgressEntry"] = relationship(
        "ProgressEntry", back_populates="personal_records"
    )
    exercise: Mapped[Optional["Exercise"]] = relationship("Exercise")
