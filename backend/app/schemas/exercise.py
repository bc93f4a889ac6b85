"""Pydantic schemas for exercise API operations."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.models.exercise import DifficultyLevel, Equipment, ExerciseCategory, MuscleGroup
from app.schemas.common import CamelModel


class ExerciseBase(CamelModel):
    """Fields a client may set on an exercise."""

    name: str = Field(..., min_length=1, max_length=100, description="Exercise name")
    description: Optional[str] = Field(None, max_length=500, description="Short description")
    category: ExerciseCategory = Field(..., description="Exercise category")
    muscle_groups: List[MuscleGroup] = Field(default_factory=list, description="Targeted muscle groups")
    equipment_needed: Equipment = Field(Equipment.NONE, description="Required equipment")
    difficulty_level: DifficultyLevel = Field(DifficultyLevel.INTERMEDIATE, description="Difficulty")
    instructions: Optional[str] = Field(None, max_length=1000, description="How to perform it")
    image_url: Optional[str] = Field(None, max_length=500, description="Image link")
    video_url: Optional[str] = Field(None, max_length=500, description="Video link")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class ExerciseCreate(ExerciseBase):
    """Schema for creating a custom exercise."""
    pass


class ExerciseUpdate(ExerciseBase):
    """Schema for replacing a custom exercise."""
    pass


class ExerciseResponse(ExerciseBase):
    """Schema for exercise API responses."""

    id: int = Field(..., description="Exercise ID")
    user_id: Optional[int] = Field(None, description="Owner ID, null for public exercises")
    is_custom: bool = Field(..., description="True when owned by a user")
    created_at: datetime = Field(..., description="Created timestamp")
    updated_at: datetime = Field(..., description="Updated timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "id": 7,
                "userId": 1,
                "name": "Bulgarian Split Squat",
                "description": "Rear-foot elevated split squat",
                "category": "strength",
                "muscleGroups": ["quadriceps", "glutes"],
                "equipmentNeeded": "dumbbell",
                "difficultyLevel": "intermediate",
                "instructions": None,
                "imageUrl": None,
                "videoUrl": None,
                "isCustom": True,
                "createdAt": "2024-01-10T10:00:00Z",
                "updatedAt": "2024-01-10T10:00:00Z",
            }
        }


class ExerciseSummary(CamelModel):
    """Compact exercise shown inside workouts and personal records."""

    id: int
    name: str
    category: ExerciseCategory
    muscle_groups: List[MuscleGroup] = Field(default_factory=list)
    equipment_needed: Equipment = Equipment.NONE
