"""Pydantic schemas for progress entries and progress statistics."""

from datetime import datetime
from datetime import date as date_type
from typing import List, Optional

from pydantic import Field

from app.models.exercise import ExerciseCategory
from app.models.progress import RecordUnit
from app.models.user import WeightUnit
from app.schemas.common import SQL_INT_MAX, CamelModel


# ============== Progress Entry Schemas ==============

class WeightSchema(CamelModel):
    value: float = Field(..., ge=0, description="Body weight")
    unit: WeightUnit = Field(WeightUnit.KG, description="Weight unit")


class MeasurementsSchema(CamelModel):
    """Body measurements in cm."""

    chest: Optional[float] = Field(None, ge=0)
    waist: Optional[float] = Field(None, ge=0)
    hips: Optional[float] = Field(None, ge=0)
    biceps: Optional[float] = Field(None, ge=0)
    thighs: Optional[float] = Field(None, ge=0)


class MetricsSchema(CamelModel):
    weight: Optional[WeightSchema] = Field(None, description="Body weight")
    body_fat: Optional[float] = Field(None, ge=0, le=100, description="Body fat percentage")
    measurements: MeasurementsSchema = Field(default_factory=MeasurementsSchema)


class PersonalRecordInput(CamelModel):
    exercise: int = Field(..., ge=1, le=SQL_INT_MAX, description="Exercise ID")
    value: float = Field(..., description="Weight for strength, time for cardio, etc.")
    unit: Optional[RecordUnit] = Field(None, description="Unit of value")
    date: Optional[date_type] = Field(None, description="Defaults to the entry date")


class ProgressBase(CamelModel):
    """Fields a client may set on a progress entry."""

    date: Optional[date_type] = Field(None, description="Entry date, defaults to today")
    metrics: MetricsSchema = Field(default_factory=MetricsSchema)
    personal_records: List[PersonalRecordInput] = Field(default_factory=list)
    notes: Optional[str] = Field(None, max_length=500)


class ProgressCreate(ProgressBase):
    """Schema for creating a progress entry."""
    pass


class ProgressUpdate(ProgressBase):
    """Schema for replacing a progress entry."""
    pass


class ExerciseRef(CamelModel):
    id: int
    name: str
    category: ExerciseCategory


class PersonalRecordResponse(CamelModel):
    id: int
    exercise: Optional[ExerciseRef] = Field(None, description="Null if the exercise was deleted")
    value: float
    unit: Optional[RecordUnit] = None
    date: Optional[date_type] = None


class ProgressResponse(CamelModel):
    """Schema for progress entry API responses."""

    id: int = Field(..., description="Entry ID")
    user_id: int = Field(..., description="Owner ID")
    date: date_type = Field(..., description="Entry date")
    metrics: MetricsSchema
    personal_records: List[PersonalRecordResponse] = Field(default_factory=list)
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ============== Statistics Schemas ==============

class WeightPoint(CamelModel):
    date: date_type
    weight: float
    unit: WeightUnit


class BodyFatPoint(CamelModel):
    date: date_type
    body_fat: float


class MeasurementPoint(CamelModel):
    date: date_type
    value: float


class MeasurementsProgress(CamelModel):
    chest: List[MeasurementPoint] = Field(default_factory=list)
    waist: List[MeasurementPoint] = Field(default_factory=list)
    hips: List[MeasurementPoint] = Field(default_factory=list)
    biceps: List[MeasurementPoint] = Field(default_factory=list)
    thighs: List[MeasurementPoint] = Field(default_factory=list)


class PersonalRecordStat(CamelModel):
    exercise: int = Field(..., ge=1, le=SQL_INT_MAX, description="Exercise ID")
    exercise_name: Optional[str] = Field(None, description="Exercise name")
    value: float
    unit: Optional[RecordUnit] = None
    date: date_type


class ProgressStats(CamelModel):
    """Time series and best records over a date window."""

    start_date: date_type
    end_date: date_type
    weight_progress: List[WeightPoint] = Field(default_factory=list)
    body_fat_progress: List[BodyFatPoint] = Field(default_factory=list)
    measurements_progress: MeasurementsProgress = Field(default_factory=MeasurementsProgress)
    personal_records: List[PersonalRecordStat] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "startDate": "2024-01-01",
                "endDate": "2024-01-31",
                "weightProgress": [{"date": "2024-01-01", "weight": 80.2, "unit": "kg"}],
                "bodyFatProgress": [{"date": "2024-01-01", "bodyFat": 18.5}],
                "measurementsProgress": {
                    "chest": [], "waist": [{"date": "2024-01-01", "value": 84}],
                    "hips": [], "biceps": [], "thighs": [],
                },
                "personalRecords": [
                    {"exercise": 1, "exerciseName": "Bench Press", "value": 100,
                     "unit": "kg", "date": "2024-01-20"}
                ],
            }
        }
