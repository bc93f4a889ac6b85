"""Pydantic schemas package for API request/response models."""

from app.schemas.common import (
    CamelModel,
    DataResponse,
    DeletedResponse,
    ErrorResponse,
    FieldError,
    ListResponse,
    PageRef,
)
from app.schemas.auth import (
    LoginRequest,
    PasswordUpdateRequest,
    PreferencesSchema,
    RegisterRequest,
    TokenResponse,
    UserDetailsUpdate,
    UserResponse,
)
from app.schemas.exercise import (
    ExerciseCreate,
    ExerciseResponse,
    ExerciseSummary,
    ExerciseUpdate,
)
from app.schemas.workout import (
    ScheduleSchema,
    WorkoutCreate,
    WorkoutExerciseInput,
    WorkoutResponse,
    WorkoutSetSchema,
    WorkoutUpdate,
)
from app.schemas.progress import (
    PersonalRecordInput,
    ProgressCreate,
    ProgressResponse,
    ProgressStats,
    ProgressUpdate,
)

__all__ = [
    # Envelopes
    "CamelModel",
    "DataResponse",
    "DeletedResponse",
    "ErrorResponse",
    "FieldError",
    "ListResponse",
    "PageRef",
    # Auth schemas
    "LoginRequest",
    "PasswordUpdateRequest",
    "PreferencesSchema",
    "RegisterRequest",
    "TokenResponse",
    "UserDetailsUpdate",
    "UserResponse",
    # Exercise schemas
    "ExerciseCreate",
    "ExerciseResponse",
    "ExerciseSummary",
    "ExerciseUpdate",
    # Workout schemas
    "ScheduleSchema",
    "WorkoutCreate",
    "WorkoutExerciseInput",
    "WorkoutResponse",
    "WorkoutSetSchema",
    "WorkoutUpdate",
    # Progress schemas
    "PersonalRecordInput",
    "ProgressCreate",
    "ProgressResponse",
    "ProgressStats",
    "ProgressUpdate",
]
