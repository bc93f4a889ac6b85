"""Progress API router for body metrics, personal records and statistics."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.database import get_db
from app.models.progress import MEASUREMENT_FIELDS, PersonalRecord, ProgressEntry
from app.models.user import User, WeightUnit
from app.schemas.common import DataResponse, DeletedResponse, ListResponse
from app.schemas.progress import ProgressBase, ProgressCreate, ProgressResponse, ProgressStats, ProgressUpdate
from app.services.access_service import ensure_owner, get_or_404, load_accessible_exercises
from app.services.auth_service import get_current_user
from app.services.query_service import (
    ALL_OPERATORS,
    FilterField,
    ResourceQuerySpec,
    paginate,
    parse_date,
    parse_datetime,
    parse_float,
    select_fields_of,
)
from app.services.stats_service import progress_stats_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["progress"])


PROGRESS_QUERY = ResourceQuerySpec(
    filters={
        "date": FilterField(ProgressEntry.date, parse_date, ALL_OPERATORS),
        "weight": FilterField(ProgressEntry.weight_value, parse_float, ALL_OPERATORS),
        "bodyFat": FilterField(ProgressEntry.body_fat, parse_float, ALL_OPERATORS),
        "createdAt": FilterField(ProgressEntry.created_at, parse_datetime, ALL_OPERATORS),
    },
    sort_fields={
        "date": ProgressEntry.date,
        "weight": ProgressEntry.weight_value,
        "bodyFat": ProgressEntry.body_fat,
        "createdAt": ProgressEntry.created_at,
        "updatedAt": ProgressEntry.updated_at,
    },
    select_fields=select_fields_of(ProgressResponse),
    default_sort="-date",
    tie_breaker=ProgressEntry.id,
)

DUPLICATE_DATE_MESSAGE = "A progress entry already exists for this date"


def _duplicate_date(db: Session, user_id: int, entry_date: date, exclude_id: Optional[int] = None) -> bool:
    query = db.query(ProgressEntry).filter(
        ProgressEntry.user_id == user_id,
        ProgressEntry.date == entry_date,
    )
    if exclude_id is not None:
        query = query.filter(ProgressEntry.id != exclude_id)
    return query.first() is not None


def _apply_progress_data(db: Session, entry: ProgressEntry, data: ProgressBase, user: User) -> None:
    """Copy a request body onto an entry, replacing its personal records."""
    load_accessible_exercises(db, user, (record.exercise for record in data.personal_records))

    metrics = data.metrics
    entry.date = data.date or date.today()
    entry.weight_value = metrics.weight.value if metrics.weight is not None else None
    entry.weight_unit = metrics.weight.unit if metrics.weight is not None else WeightUnit.KG
    entry.body_fat = metrics.body_fat
    for name in MEASUREMENT_FIELDS:
        setattr(entry, name, getattr(metrics.measurements, name))
    entry.notes = data.notes
    entry.personal_records = [
        PersonalRecord(
            exercise_id=record.exercise,
            value=record.value,
            unit=record.unit,
            date=record.date,
        )
        for record in data.personal_records
    ]


def _commit_entry(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=DUPLICATE_DATE_MESSAGE,
        )


@router.get("", response_model=ListResponse)
async def list_progress(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ListResponse:
    """
    List the caller's progress entries, newest first by default.

    Supports ``select``, ``sort``, ``page``, ``limit`` and filters such as
    ``date[gte]=2024-01-01`` or ``weight[lt]=80``.
    """
    query = (
        db.query(ProgressEntry)
        .options(selectinload(ProgressEntry.personal_records).selectinload(PersonalRecord.exercise))
        .filter(ProgressEntry.user_id == current_user.id)
    )
    return paginate(query, request.query_params.multi_items(), PROGRESS_QUERY, ProgressResponse)


@router.get("/stats", response_model=DataResponse[ProgressStats])
async def get_progress_stats(
    start_date: Optional[date] = Query(None, alias="startDate", description="First day, defaults to 30 days before endDate"),
    end_date: Optional[date] = Query(None, alias="endDate", description="Last day, defaults to today"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DataResponse[ProgressStats]:
    """
    Weight, body fat and measurement series plus best personal records.

    Raises:
        HTTPException: 400 if startDate is after endDate
    """
    try:
        start, end = progress_stats_service.resolve_date_range(start_date, end_date)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    stats = progress_stats_service.get_stats(db, current_user.id, start, end)
    return DataResponse(data=stats)


@router.get("/{entry_id}", response_model=DataResponse[ProgressResponse])
async def get_progress_entry(
    entry_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DataResponse[ProgressResponse]:
    """
    Get one progress entry.

    Raises:
        HTTPException: 404 if not found, 403 if owned by someone else
    """
    entry = get_or_404(db, ProgressEntry, entry_id, "progress entry")
    ensure_owner(entry, current_user, "progress entry", "access")
    return DataResponse(data=ProgressResponse.model_validate(entry))


@router.post("", response_model=DataResponse[ProgressResponse], status_code=status.HTTP_201_CREATED)
async def create_progress_entry(
    body: ProgressCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DataResponse[ProgressResponse]:
    """
    Log body metrics and personal records for a date.

    Raises:
        HTTPException: 400 if an entry already exists for the date, 404 if a
            personal record references an inaccessible exercise
    """
    entry = ProgressEntry(user_id=current_user.id)
    _apply_progress_data(db, entry, body, current_user)

    if _duplicate_date(db, current_user.id, entry.date):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=DUPLICATE_DATE_MESSAGE,
        )

    db.add(entry)
    _commit_entry(db)
    db.refresh(entry)

    logger.info(f"User {current_user.id} created progress entry {entry.id} for {entry.date}")
    return DataResponse(data=ProgressResponse.model_validate(entry))


@router.put("/{entry_id}", response_model=DataResponse[ProgressResponse])
async def update_progress_entry(
    entry_id: int,
    body: ProgressUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DataResponse[ProgressResponse]:
    """
    Replace a progress entry, including its personal records.

    Raises:
        HTTPException: 404 if missing, 403 if owned by someone else, 400 if
            the new date collides with another entry
    """
    entry = get_or_404(db, ProgressEntry, entry_id, "progress entry")
    ensure_owner(entry, current_user, "progress entry", "update")

    new_date = body.date or date.today()
    if _duplicate_date(db, current_user.id, new_date, exclude_id=entry.id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=DUPLICATE_DATE_MESSAGE,
        )

    _apply_progress_data(db, entry, body, current_user)
    _commit_entry(db)
    db.refresh(entry)

    logger.info(f"User {current_user.id} updated progress entry {entry.id}")
    return DataResponse(data=ProgressResponse.model_validate(entry))


@router.delete("/{entry_id}", response_model=DeletedResponse)
async def delete_progress_entry(
    entry_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DeletedResponse:
    """
    Delete a progress entry.

    Raises:
        HTTPException: 404 if not found, 403 if owned by someone else
    """
    entry = get_or_404(db, ProgressEntry, entry_id, "progress entry")
    ensure_owner(entry, current_user, "progress entry", "delete")

    db.delete(entry)
    db.commit()

    logger.info(f"User {current_user.id} deleted progress entry {entry_id}")
    return DeletedResponse()
