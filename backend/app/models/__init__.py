"""Database models for the Workout Tracker application."""

from app.models.base import Base
from app.models.user import User, WeightUnit, HeightUnit
from app.models.exercise import (
    Exercise,
    ExerciseMuscleGroup,
    ExerciseCategory,
    MuscleGroup,
    Equipment,
    DifficultyLevel,
)
from app.models.workout import Workout, WorkoutExercise, WorkoutSet, Recurrence
from app.models.progress import ProgressEntry, PersonalRecord, RecordUnit, MEASUREMENT_FIELDS

__all__ = [
    "Base",
    "User",
    "WeightUnit",
    "HeightUnit",
    "Exercise",
    "ExerciseMuscleGroup",
    "ExerciseCategory",
    "MuscleGroup",
    "Equipment",
    "DifficultyLevel",
    "Workout",
    "WorkoutExercise",
    "WorkoutSet",
    "Recurrence",
    "ProgressEntry",
    "PersonalRecord",
    "RecordUnit",
    "MEASUREMENT_FIELDS",
]
