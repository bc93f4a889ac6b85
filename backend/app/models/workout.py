"""Workout model with its ordered exercises and sets."""

from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import Integer, String, DateTime, Boolean, Float, ForeignKey, Enum, Text
from sqlalchemy.types import JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.exercise import Exercise


class Recurrence(str, PyEnum):
    """How often a scheduled workout repeats."""
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Workout(Base):
    """A workout session or template owned by a user."""

    __tablename__ = "workouts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )

    name: Mapped[str] = mapped_column(String(100))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration: Mapped[int] = mapped_column(Integer, default=0)  # minutes

    # Schedule
    schedule_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)
    recurrence: Mapped[Recurrence] = mapped_column(Enum(Recurrence), default=Recurrence.NONE)
    # 0 = Sunday ... 6 = Saturday
    days_of_week: Mapped[Optional[List[int]]] = mapped_column(JSON, nullable=True)

    is_template: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="workouts")
    exercises: Mapped[List["WorkoutExercise"]] = relationship(
        "WorkoutExercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.position",
    )

    def __repr__(self) -> str:
        return f"<Workout(id={self.id}, name='{self.name}', user_id={self.user_id})>"

    @property
    def schedule(self) -> Dict[str, Any]:
        return {
            "date": self.schedule_date,
            "recurrence": self.recurrence or Recurrence.NONE,
            "days_of_week": list(self.days_of_week or []),
        }

    def _all_sets(self):
        for workout_exercise in self.exercises:
            yield from workout_exercise.sets

    @property
    def total_volume(self) -> float:
        """Sum of weight x reps over completed sets."""
        volume = 0.0
        for workout_set in self._all_sets():
            if workout_set.completed and workout_set.weight and workout_set.reps:
                volume += workout_set.weight * workout_set.reps
        return volume

    @property
    def completed_sets(self) -> int:
        return sum(1 for workout_set in self._all_sets() if workout_set.completed)

    @property
    def total_sets(self) -> int:
        return sum(len(workout_exercise.sets) for workout_exercise in self.exercises)


class WorkoutExercise(Base):
    """An exercise slot within a workout."""

    __tablename__ = "workout_exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    workout_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("workouts.id", ondelete="CASCADE"), index=True
    )
    # Deleting a referenced exercise is not blocked; the slot keeps its sets
    exercise_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("exercises.id", ondelete="SET NULL"), nullable=True, index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0)
    notes: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    workout: Mapped["Workout"] = relationship("Workout", back_populates="exercises")
    exercise: Mapped[Optional["Exercise"]] = relationship("Exercise")
    sets: Mapped[List["WorkoutSet"]] = relationship(
        "WorkoutSet",
        back_populates="workout_exercise",
        cascade="all, delete-orphan",
        order_by="WorkoutSet.position",
    )


class WorkoutSet(Base):
    """A single set of an exercise within a workout."""

    __tablename__ = "workout_sets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    workout_exercise_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("workout_exercises.id", ondelete="CASCADE"), index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0)

    set_number: Mapped[int] = mapped_column(Integer)
    reps: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # seconds
    distance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)  # meters
    rest_time: Mapped[int] = mapped_column(Integer, default=60)  # seconds
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    notes: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    workout_exercise: Mapped["WorkoutExercise"] = relationship(
        "WorkoutExercise", back_populates="sets"
    )
