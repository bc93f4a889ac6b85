"""User model for local and Google-authenticated accounts."""

from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Integer, String, DateTime, Boolean, Enum, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base

if TYPE_CHECKING:
    from app.models.exercise import Exercise
    from app.models.workout import Workout
    from app.models.progress import ProgressEntry


class WeightUnit(str, PyEnum):
    """Body weight display units."""
    KG = "kg"
    LB = "lb"


class HeightUnit(str, PyEnum):
    """Height/measurement display units."""
    CM = "cm"
    IN = "in"


class User(Base):
    """User account with display preferences."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)  # None for Google-only accounts
    google_id: Mapped[Optional[str]] = mapped_column(String(255), unique=True, index=True, nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Preferences
    weight_unit: Mapped[WeightUnit] = mapped_column(Enum(WeightUnit), default=WeightUnit.KG)
    height_unit: Mapped[HeightUnit] = mapped_column(Enum(HeightUnit), default=HeightUnit.CM)
    dark_mode: Mapped[bool] = mapped_column(Boolean, default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    exercises: Mapped[List["Exercise"]] = relationship(
        "Exercise", back_populates="user", cascade="all, delete-orphan"
    )
    workouts: Mapped[List["Workout"]] = relationship(
        "Workout", back_populates="user", cascade="all, delete-orphan"
    )
    progress_entries: Mapped[List["ProgressEntry"]] = relationship(
        "ProgressEntry", back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name='{self.name}', email='{self.email}')>"

    @property
    def preferences(self) -> dict:
        return {
            "weight_unit": self.weight_unit,
            "height_unit": self.height_unit,
            "dark_mode": self.dark_mode,
        }
