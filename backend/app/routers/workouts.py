"""Workouts API router for the caller's workout sessions and templates."""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session, selectinload

from app.database import get_db
from app.models.exercise import Exercise
from app.models.user import User
from app.models.workout import Recurrence, Workout, WorkoutExercise
from app.schemas.common import DataResponse, DeletedResponse, ListResponse
from app.schemas.workout import WorkoutCreate, WorkoutResponse, WorkoutUpdate
from app.services.access_service import ensure_owner, get_or_404
from app.services.auth_service import get_current_user
from app.services.query_service import (
    ALL_OPERATORS,
    FilterField,
    ResourceQuerySpec,
    enum_parser,
    paginate,
    parse_bool,
    parse_datetime,
    parse_int,
    select_fields_of,
)
from app.services.workout_service import apply_workout_data

logger = logging.getLogger(__name__)

router = APIRouter(tags=["workouts"])


_schedule_date = FilterField(Workout.schedule_date, parse_datetime, ALL_OPERATORS)

WORKOUT_QUERY = ResourceQuerySpec(
    filters={
        "name": FilterField(Workout.name),
        "isTemplate": FilterField(Workout.is_template, parse_bool),
        "isCompleted": FilterField(Workout.is_completed, parse_bool),
        "duration": FilterField(Workout.duration, parse_int, ALL_OPERATORS),
        "scheduleDate": _schedule_date,
        "schedule.date": _schedule_date,
        "recurrence": FilterField(Workout.recurrence, enum_parser(Recurrence)),
        "createdAt": FilterField(Workout.created_at, parse_datetime, ALL_OPERATORS),
    },
    sort_fields={
        "name": Workout.name,
        "duration": Workout.duration,
        "scheduleDate": Workout.schedule_date,
        "schedule.date": Workout.schedule_date,
        "createdAt": Workout.created_at,
        "updatedAt": Workout.updated_at,
    },
    select_fields=select_fields_of(WorkoutResponse),
    default_sort="-createdAt",
    tie_breaker=Workout.id,
)

_WORKOUT_LOAD = (
    selectinload(Workout.exercises).selectinload(WorkoutExercise.sets),
    selectinload(Workout.exercises)
    .selectinload(WorkoutExercise.exercise)
    .selectinload(Exercise.muscle_group_links),
)


@router.get("", response_model=ListResponse)
async def list_workouts(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ListResponse:
    """
    List the caller's workouts.

    Supports ``select``, ``sort``, ``page``, ``limit`` and filters such as
    ``isTemplate=true`` or ``duration[gte]=45``.
    """
    query = db.query(Workout).options(*_WORKOUT_LOAD).filter(Workout.user_id == current_user.id)
    return paginate(query, request.query_params.multi_items(), WORKOUT_QUERY, WorkoutResponse)


@router.get("/{workout_id}", response_model=DataResponse[WorkoutResponse])
async def get_workout(
    workout_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DataResponse[WorkoutResponse]:
    """
    Get workout details by ID.

    Raises:
        HTTPException: 404 if workout not found, 403 if owned by someone else
    """
    workout = get_or_404(db, Workout, workout_id, "workout")
    ensure_owner(workout, current_user, "workout", "access")
    return DataResponse(data=WorkoutResponse.model_validate(workout))


@router.post("", response_model=DataResponse[WorkoutResponse], status_code=status.HTTP_201_CREATED)
async def create_workout(
    body: WorkoutCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DataResponse[WorkoutResponse]:
    """
    Create a workout for the caller.

    Raises:
        HTTPException: 404 if an exercise is missing or not accessible
        FieldValidationError: If a set lacks a field its exercise requires
    """
    workout = Workout(user_id=current_user.id)
    apply_workout_data(db, workout, body, current_user)

    db.add(workout)
    db.commit()
    db.refresh(workout)

    logger.info(f"User {current_user.id} created workout {workout.id}")
    return DataResponse(data=WorkoutResponse.model_validate(workout))


@router.put("/{workout_id}", response_model=DataResponse[WorkoutResponse])
async def update_workout(
    workout_id: int,
    body: WorkoutUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DataResponse[WorkoutResponse]:
    """
    Replace a workout, including all of its exercises and sets.

    Raises:
        HTTPException: 404 if the workout or an exercise is missing, 403 if
            the workout belongs to someone else
        FieldValidationError: If a set lacks a field its exercise requires
    """
    workout = get_or_404(db, Workout, workout_id, "workout")
    ensure_owner(workout, current_user, "workout", "update")

    apply_workout_data(db, workout, body, current_user)
    db.commit()
    db.refresh(workout)

    logger.info(f"User {current_user.id} updated workout {workout.id}")
    return DataResponse(data=WorkoutResponse.model_validate(workout))


@router.put("/{workout_id}/complete", response_model=DataResponse[WorkoutResponse])
async def toggle_workout_complete(
    workout_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DataResponse[WorkoutResponse]:
    """Flip the completion flag of a workout."""
    workout = get_or_404(db, Workout, workout_id, "workout")
    ensure_owner(workout, current_user, "workout", "update")

    workout.is_completed = not workout.is_completed
    db.commit()
    db.refresh(workout)

    logger.info(f"Workout {workout.id} marked {'completed' if workout.is_completed else 'not completed'}")
    return DataResponse(data=WorkoutResponse.model_validate(workout))


@router.delete("/{workout_id}", response_model=DeletedResponse)
async def delete_workout(
    workout_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DeletedResponse:
    """
    Delete a workout with its exercises and sets.

    Raises:
        HTTPException: 404 if workout not found, 403 if owned by someone else
    """
    workout = get_or_404(db, Workout, workout_id, "workout")
    ensure_owner(workout, current_user, "workout", "delete")

    db.delete(workout)
    db.commit()

    logger.info(f"User {current_user.id} deleted workout {workout_id}")
    return DeletedResponse()
