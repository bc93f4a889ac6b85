"""Ownership and visibility rules for single records.

Workouts and progress entries are private to their owner. Exercises are
either public reference data (readable by everyone, changeable by no one)
or custom exercises private to the user who created them.

Authorization failures use 403; 401 is reserved for missing or invalid
credentials.
"""

import logging
from typing import Dict, Iterable, Type, TypeVar

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.exercise import Exercise
from app.models.user import User
from app.schemas.common import SQL_INT_MAX

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def get_or_404(db: Session, model: Type[ModelT], record_id: int, resource: str) -> ModelT:
    """Fetch a record by primary key or raise 404."""
    record = db.get(model, record_id) if abs(record_id) <= SQL_INT_MAX else None
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource.capitalize()} not found with id of {record_id}",
        )
    return record


def ensure_owner(record, user: User, resource: str, action: str) -> None:
    """Raise 403 unless ``user`` owns ``record``."""
    if record.user_id != user.id:
        logger.warning(f"User {user.id} denied {action} on {resource} {record.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"User not authorized to {action} this {resource}",
        )


def ensure_exercise_readable(exercise: Exercise, user: User) -> None:
    """Public exercises are readable by all; custom ones only by the owner."""
    if exercise.is_custom and exercise.user_id != user.id:
        logger.warning(f"User {user.id} denied access to exercise {exercise.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this exercise",
        )


def ensure_exercise_mutable(exercise: Exercise, user: User, action: str) -> None:
    """Only the owner may change a custom exercise; public ones never change."""
    if exercise.is_custom and exercise.user_id != user.id:
        logger.warning(f"User {user.id} denied {action} on exercise {exercise.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not authorized to {action} this exercise",
        )
    if not exercise.is_custom:
        logger.warning(f"User {user.id} tried to {action} public exercise {exercise.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Cannot {action} public exercises",
        )


def visible_exercises_clause(user: User):
    """SQL condition selecting the exercises ``user`` may see."""
    return or_(Exercise.user_id == user.id, Exercise.is_custom == False)  # noqa: E712


def load_accessible_exercises(db: Session, user: User, exercise_ids: Iterable[int]) -> Dict[int, Exercise]:
    """
    Load every referenced exercise, all or nothing.

    Args:
        db: Database session
        user: The caller
        exercise_ids: Exercise IDs referenced by a request body (repeats allowed)

    Returns:
        Dict[int, Exercise]: The exercises keyed by ID

    Raises:
        HTTPException: 404 if any ID is missing or belongs to another user
    """
    unique_ids = set(exercise_ids)
    if not unique_ids:
        return {}

    exercises = db.query(Exercise).filter(
        Exercise.id.in_(unique_ids),
        visible_exercises_clause(user),
    ).all()

    if len(exercises) != len(unique_ids):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="One or more exercises not found or not accessible",
        )

    return {exercise.id: exercise for exercise in exercises}
