"""Exercises API router: public catalogue plus the caller's custom exercises."""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session, selectinload

from app.database import get_db
from app.models.exercise import (
    DifficultyLevel,
    Equipment,
    Exercise,
    ExerciseCategory,
    ExerciseMuscleGroup,
    MuscleGroup,
)
from app.models.user import User
from app.schemas.common import DataResponse, DeletedResponse, ListResponse
from app.schemas.exercise import ExerciseCreate, ExerciseResponse, ExerciseUpdate
from app.services.access_service import (
    ensure_exercise_mutable,
    ensure_exercise_readable,
    get_or_404,
    visible_exercises_clause,
)
from app.services.auth_service import get_current_user
from app.services.query_service import (
    ALL_OPERATORS,
    FilterField,
    FilterOperator,
    ResourceQuerySpec,
    enum_parser,
    paginate,
    parse_bool,
    parse_datetime,
    select_fields_of,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["exercises"])


def _muscle_group_clause(operator: FilterOperator, value):
    if operator == FilterOperator.IN:
        return Exercise.muscle_group_links.any(ExerciseMuscleGroup.muscle_group.in_(value))
    match = Exercise.muscle_group_links.any(ExerciseMuscleGroup.muscle_group == value)
    return ~match if operator == FilterOperator.NE else match


EXERCISE_QUERY = ResourceQuerySpec(
    filters={
        "name": FilterField(Exercise.name),
        "category": FilterField(Exercise.category, enum_parser(ExerciseCategory)),
        "muscleGroups": FilterField(None, enum_parser(MuscleGroup), clause=_muscle_group_clause),
        "equipmentNeeded": FilterField(Exercise.equipment_needed, enum_parser(Equipment)),
        "difficultyLevel": FilterField(Exercise.difficulty_level, enum_parser(DifficultyLevel)),
        "isCustom": FilterField(Exercise.is_custom, parse_bool),
        "createdAt": FilterField(Exercise.created_at, parse_datetime, ALL_OPERATORS),
    },
    sort_fields={
        "name": Exercise.name,
        "category": Exercise.category,
        "difficultyLevel": Exercise.difficulty_level,
        "equipmentNeeded": Exercise.equipment_needed,
        "createdAt": Exercise.created_at,
        "updatedAt": Exercise.updated_at,
    },
    select_fields=select_fields_of(ExerciseResponse),
    default_sort="-createdAt",
    tie_breaker=Exercise.id,
)


@router.get("", response_model=ListResponse)
async def list_exercises(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ListResponse:
    """
    List public exercises and the caller's custom exercises.

    Supports ``select``, ``sort``, ``page``, ``limit`` and filters such as
    ``category=strength``, ``muscleGroups=chest`` or ``createdAt[gte]=2024-01-01``.
    """
    query = db.query(Exercise).options(selectinload(Exercise.muscle_group_links)).filter(
        visible_exercises_clause(current_user)
    )
    return paginate(query, request.query_params.multi_items(), EXERCISE_QUERY, ExerciseResponse)


@router.get("/{exercise_id}", response_model=DataResponse[ExerciseResponse])
async def get_exercise(
    exercise_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DataResponse[ExerciseResponse]:
    """
    Get one exercise.

    Raises:
        HTTPException: 404 if missing, 403 if it is another user's custom exercise
    """
    exercise = get_or_404(db, Exercise, exercise_id, "exercise")
    ensure_exercise_readable(exercise, current_user)
    return DataResponse(data=ExerciseResponse.model_validate(exercise))


def _apply_exercise_data(exercise: Exercise, data: ExerciseCreate) -> None:
    values = data.model_dump(exclude={"muscle_groups"})
    for field, value in values.items():
        setattr(exercise, field, value)
    exercise.muscle_groups = data.muscle_groups


@router.post("", response_model=DataResponse[ExerciseResponse], status_code=status.HTTP_201_CREATED)
async def create_exercise(
    body: ExerciseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DataResponse[ExerciseResponse]:
    """Create a custom exercise owned by the caller."""
    exercise = Exercise(user_id=current_user.id, is_custom=True)
    _apply_exercise_data(exercise, body)

    db.add(exercise)
    db.commit()
    db.refresh(exercise)

    logger.info(f"User {current_user.id} created exercise {exercise.id}")
    return DataResponse(data=ExerciseResponse.model_validate(exercise))


@router.put("/{exercise_id}", response_model=DataResponse[ExerciseResponse])
async def update_exercise(
    exercise_id: int,
    body: ExerciseUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DataResponse[ExerciseResponse]:
    """
    Replace one of the caller's custom exercises.

    Raises:
        HTTPException: 404 if missing, 403 if public or owned by someone else
    """
    exercise = get_or_404(db, Exercise, exercise_id, "exercise")
    ensure_exercise_mutable(exercise, current_user, "update")

    _apply_exercise_data(exercise, body)
    db.commit()
    db.refresh(exercise)

    logger.info(f"User {current_user.id} updated exercise {exercise.id}")
    return DataResponse(data=ExerciseResponse.model_validate(exercise))


@router.delete("/{exercise_id}", response_model=DeletedResponse)
async def delete_exercise(
    exercise_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DeletedResponse:
    """
    Delete one of the caller's custom exercises.

    Workouts and personal records that used it keep their sets and values
    with a null exercise reference.

    Raises:
        HTTPException: 404 if missing, 403 if public or owned by someone else
    """
    exercise = get_or_404(db, Exercise, exercise_id, "exercise")
    ensure_exercise_mutable(exercise, current_user, "delete")

    db.delete(exercise)
    db.commit()

    logger.info(f"User {current_user.id} deleted exercise {exercise_id}")
    return DeletedResponse()
