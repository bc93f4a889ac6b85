"""Workout assembly and set validation.

Which set fields are required depends on the category of the exercise the
set belongs to:

- reps: every category except cardio
- weight: strength only
- duration: cardio and flexibility
- distance: cardio only
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.errors import FieldValidationError
from app.models.exercise import Exercise, ExerciseCategory
from app.models.user import User
from app.models.workout import Recurrence, Workout, WorkoutExercise, WorkoutSet
from app.schemas.workout import WorkoutBase, WorkoutExerciseInput
from app.services.access_service import load_accessible_exercises

logger = logging.getLogger(__name__)


SET_FIELD_REQUIREMENTS = {
    "reps": lambda category: category != ExerciseCategory.CARDIO,
    "weight": lambda category: category == ExerciseCategory.STRENGTH,
    "duration": lambda category: category in (ExerciseCategory.CARDIO, ExerciseCategory.FLEXIBILITY),
    "distance": lambda category: category == ExerciseCategory.CARDIO,
}


def required_set_fields(category: ExerciseCategory) -> List[str]:
    """Set fields that must be present for an exercise of ``category``."""
    return [name for name, required in SET_FIELD_REQUIREMENTS.items() if required(category)]


def validate_sets(
    exercises: List[WorkoutExerciseInput],
    exercise_map: Dict[int, Exercise],
) -> None:
    """
    Check every set against its exercise's category.

    Args:
        exercises: Exercise slots from the request body
        exercise_map: Loaded exercises keyed by ID

    Raises:
        FieldValidationError: Listing every missing field, located as
            ``exercises.<i>.sets.<j>.<field>``
    """
    errors = []
    for i, slot in enumerate(exercises):
        exercise = exercise_map[slot.exercise]
        required = required_set_fields(exercise.category)
        for j, workout_set in enumerate(slot.sets):
            for name in required:
                if getattr(workout_set, name) is None:
                    errors.append({
                        "field": f"exercises.{i}.sets.{j}.{name}",
                        "message": f"{name.capitalize()} is required for {exercise.category.value} exercises",
                    })

    if errors:
        raise FieldValidationError(errors)


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Columns store naive UTC
    if value is not None and value.tzinfo is not None:
        return value.replace(tzinfo=None) - value.utcoffset()
    return value


def build_workout_exercises(exercises: List[WorkoutExerciseInput]) -> List[WorkoutExercise]:
    """Turn request slots into ordered ORM rows."""
    rows = []
    for position, slot in enumerate(exercises):
        rows.append(WorkoutExercise(
            exercise_id=slot.exercise,
            position=position,
            notes=slot.notes,
            sets=[
                WorkoutSet(
                    position=set_position,
                    set_number=workout_set.set_number,
                    reps=workout_set.reps,
                    weight=workout_set.weight,
                    duration=workout_set.duration,
                    distance=workout_set.distance,
                    rest_time=workout_set.rest_time,
                    completed=workout_set.completed,
                    notes=workout_set.notes,
                )
                for set_position, workout_set in enumerate(slot.sets)
            ],
        ))
    return rows


def apply_workout_data(db: Session, workout: Workout, data: WorkoutBase, user: User) -> Workout:
    """
    Validate ``data`` and copy it onto ``workout``, replacing all exercises.

    Every referenced exercise must be visible to ``user`` and every set must
    carry the fields its exercise category requires. Nothing is changed when
    a check fails.

    Raises:
        HTTPException: 404 if an exercise is missing or not accessible
        FieldValidationError: If a set lacks a required field
    """
    exercise_map = load_accessible_exercises(db, user, (slot.exercise for slot in data.exercises))
    validate_sets(data.exercises, exercise_map)

    workout.name = data.name
    workout.description = data.description
    workout.duration = data.duration
    workout.schedule_date = _naive_utc(data.schedule.date)
    workout.recurrence = data.schedule.recurrence or Recurrence.NONE
    workout.days_of_week = list(data.schedule.days_of_week)
    workout.is_template = data.is_template
    workout.is_completed = data.is_completed
    workout.exercises = build_workout_exercises(data.exercises)

    logger.debug(f"Applied {len(data.exercises)} exercises to workout '{workout.name}'")
    return workout
