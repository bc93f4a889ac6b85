"""Exercise model: public reference exercises and user-owned custom ones."""

from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Integer, String, DateTime, Boolean, ForeignKey, Enum, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base

if TYPE_CHECKING:
    from app.models.user import User


class ExerciseCategory(str, PyEnum):
    """Exercise categories. Drive which set fields are required."""
    STRENGTH = "strength"
    CARDIO = "cardio"
    FLEXIBILITY = "flexibility"
    BALANCE = "balance"
    SPORT = "sport"
    OTHER = "other"


class MuscleGroup(str, PyEnum):
    """Muscle group tags."""
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    FOREARMS = "forearms"
    QUADRICEPS = "quadriceps"
    HAMSTRINGS = "hamstrings"
    CALVES = "calves"
    GLUTES = "glutes"
    CORE = "core"
    FULL_BODY = "fullBody"
    NONE = "none"


class Equipment(str, PyEnum):
    """Equipment needed for an exercise."""
    NONE = "none"
    BARBELL = "barbell"
    DUMBBELL = "dumbbell"
    KETTLEBELL = "kettlebell"
    MACHINE = "machine"
    CABLES = "cables"
    BANDS = "bands"
    BODYWEIGHT = "bodyweight"
    OTHER = "other"


class DifficultyLevel(str, PyEnum):
    """Exercise difficulty."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Exercise(Base):
    """An exercise definition.

    Public exercises (``is_custom=False``) are shared, read-only reference
    data. Custom exercises belong to ``user`` and only that user may change
    or delete them.
    """

    __tablename__ = "exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=True
    )

    name: Mapped[str] = mapped_column(String(100), index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[ExerciseCategory] = mapped_column(Enum(ExerciseCategory), index=True)
    equipment_needed: Mapped[Equipment] = mapped_column(Enum(Equipment), default=Equipment.NONE)
    difficulty_level: Mapped[DifficultyLevel] = mapped_column(
        Enum(DifficultyLevel), default=DifficultyLevel.INTERMEDIATE
    )
    instructions: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    video_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_custom: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    user: Mapped[Optional["User"]] = relationship("User", back_populates="exercises")
    muscle_group_links: Mapped[List["ExerciseMuscleGroup"]] = relationship(
        "ExerciseMuscleGroup",
        back_populates="exercise",
        cascade="all, delete-orphan",
        order_by="ExerciseMuscleGroup.id",
    )

    def __repr__(self) -> str:
        return f"<Exercise(id={self.id}, name='{self.name}', category={self.category})>"

    @property
    def muscle_groups(self) -> List[MuscleGroup]:
        return [link.muscle_group for link in self.muscle_group_links]

    @muscle_groups.setter
    def muscle_groups(self, groups) -> None:
        # Preserve first-seen order, drop duplicates
        unique = list(dict.fromkeys(MuscleGroup(g) for g in groups or []))
        self.muscle_group_links = [ExerciseMuscleGroup(muscle_group=g) for g in unique]


class ExerciseMuscleGroup(Base):
    """One muscle group tag of an exercise."""

    __tablename__ = "exercise_muscle_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    exercise_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("exercises.id", ondelete="CASCADE"), index=True
    )
    muscle_group: Mapped[MuscleGroup] = mapped_column(Enum(MuscleGroup), index=True)

    exercise: Mapped["Exercise"] = relationship("Exercise", back_populates="muscle_group_links")
