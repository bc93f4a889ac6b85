"""Pydantic schemas for workout-related API operations."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.models.workout import Recurrence
from app.schemas.common import SQL_INT_MAX, CamelModel
from app.schemas.exercise import ExerciseSummary


class WorkoutSetSchema(CamelModel):
    """Schema for a single set.

    Which of reps/weight/duration/distance are required depends on the
    category of the exercise the set belongs to; that check happens in the
    workout service once the exercises are loaded.
    """

    set_number: int = Field(..., ge=1, le=SQL_INT_MAX, description="1-based set number")
    reps: Optional[int] = Field(None, ge=0, le=SQL_INT_MAX, description="Repetitions")
    weight: Optional[float] = Field(None, ge=0, description="Load")
    duration: Optional[int] = Field(None, ge=0, le=SQL_INT_MAX, description="Duration in seconds")
    distance: Optional[float] = Field(None, ge=0, description="Distance in meters")
    rest_time: int = Field(60, ge=0, le=SQL_INT_MAX, description="Rest after the set in seconds")
    completed: bool = Field(False, description="Whether the set was performed")
    notes: Optional[str] = Field(None, max_length=200, description="Set notes")


class WorkoutExerciseInput(CamelModel):
    """An exercise slot in a workout request body."""

    exercise: int = Field(..., ge=1, le=SQL_INT_MAX, description="Exercise ID")
    sets: List[WorkoutSetSchema] = Field(default_factory=list, description="Ordered sets")
    notes: Optional[str] = Field(None, max_length=200, description="Exercise notes")


class ScheduleSchema(CamelModel):
    """When a workout is planned and how it repeats."""

    date: Optional[datetime] = Field(None, description="Scheduled date/time")
    recurrence: Recurrence = Field(Recurrence.NONE, description="Repeat pattern")
    days_of_week: List[int] = Field(
        default_factory=list, description="Days the workout repeats on, 0 = Sunday"
    )

    @field_validator("days_of_week")
    @classmethod
    def check_days_of_week(cls, value: List[int]) -> List[int]:
        if any(day < 0 or day > 6 for day in value):
            raise ValueError("Days of week must be between 0 and 6")
        return value


class WorkoutBase(CamelModel):
    """Fields a client may set on a workout."""

    name: str = Field(..., min_length=1, max_length=100, description="Workout name")
    description: Optional[str] = Field(None, max_length=500, description="Workout description")
    exercises: List[WorkoutExerciseInput] = Field(default_factory=list, description="Ordered exercises")
    duration: int = Field(0, ge=0, le=SQL_INT_MAX, description="Duration in minutes")
    schedule: ScheduleSchema = Field(default_factory=ScheduleSchema, description="Schedule")
    is_template: bool = Field(False, description="Template to clone from")
    is_completed: bool = Field(False, description="Whether the workout is done")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class WorkoutCreate(WorkoutBase):
    """Schema for creating a workout."""
    pass


class WorkoutUpdate(WorkoutBase):
    """Schema for replacing a workout."""
    pass


class WorkoutSetResponse(WorkoutSetSchema):
    id: int


class WorkoutExerciseResponse(CamelModel):
    id: int
    exercise: Optional[ExerciseSummary] = Field(None, description="Null if the exercise was deleted")
    sets: List[WorkoutSetResponse] = Field(default_factory=list)
    notes: Optional[str] = None


class WorkoutResponse(CamelModel):
    """Schema for workout API responses."""

    id: int = Field(..., description="Unique workout ID")
    user_id: int = Field(..., description="Owner ID")
    name: str = Field(..., description="Workout name")
    description: Optional[str] = Field(None, description="Workout description")
    exercises: List[WorkoutExerciseResponse] = Field(default_factory=list)
    duration: int = Field(..., description="Duration in minutes")
    schedule: ScheduleSchema = Field(..., description="Schedule")
    is_template: bool = Field(..., description="Template flag")
    is_completed: bool = Field(..., description="Completion flag")
    total_volume: float = Field(..., description="Sum of weight x reps over completed sets")
    completed_sets: int = Field(..., ge=0, description="Completed set count")
    total_sets: int = Field(..., ge=0, description="Total set count")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "id": 1,
                "userId": 1,
                "name": "Push Day",
                "description": "Chest, shoulders and triceps",
                "exercises": [
                    {
                        "id": 1,
                        "exercise": {
                            "id": 1,
                            "name": "Bench Press",
                            "category": "strength",
                            "muscleGroups": ["chest", "triceps"],
                            "equipmentNeeded": "barbell",
                        },
                        "sets": [
                            {"id": 1, "setNumber": 1, "reps": 10, "weight": 60, "duration": None,
                             "distance": None, "restTime": 90, "completed": True, "notes": None}
                        ],
                        "notes": None,
                    }
                ],
                "duration": 60,
                "schedule": {"date": "2024-01-15T08:00:00Z", "recurrence": "weekly", "daysOfWeek": [1, 4]},
                "isTemplate": False,
                "isCompleted": False,
                "totalVolume": 600,
                "completedSets": 1,
                "totalSets": 1,
                "createdAt": "2024-01-10T10:00:00Z",
                "updatedAt": "2024-01-10T10:00:00Z",
            }
        }
