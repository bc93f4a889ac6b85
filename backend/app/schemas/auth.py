"""
Authentication and user-related Pydantic schemas.

These schemas define the request/response models for authentication endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from app.models.user import HeightUnit, WeightUnit
from app.schemas.common import CamelModel


class PreferencesSchema(CamelModel):
    """Display preferences of a user."""

    weight_unit: WeightUnit = Field(WeightUnit.KG, description="Body weight unit")
    height_unit: HeightUnit = Field(HeightUnit.CM, description="Height/measurement unit")
    dark_mode: bool = Field(False, description="Dark theme enabled")


class UserResponse(CamelModel):
    """
    User profile response schema.

    Returned when fetching or updating the current user's profile.

    Attributes:
        id: Internal user ID
        name: Display name
        email: Email address
        avatar: URL to profile picture (optional)
        bio: Short biography (optional)
        preferences: Unit and theme preferences
        created_at: Account creation time
    """

    id: int = Field(..., description="Internal user ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    avatar: Optional[str] = Field(None, description="URL to profile picture")
    bio: Optional[str] = Field(None, description="Short biography")
    preferences: PreferencesSchema = Field(default_factory=PreferencesSchema)
    created_at: datetime = Field(..., description="Account creation time")

    class Config:
        json_schema_extra = {
            "example": {
                "id": 1,
                "name": "Jane Lifter",
                "email": "jane@example.com",
                "avatar": "https://example.com/avatar.jpg",
                "bio": "Powerlifting on weekdays",
                "preferences": {"weightUnit": "kg", "heightUnit": "cm", "darkMode": True},
                "createdAt": "2024-01-10T10:00:00Z",
            }
        }


class TokenResponse(CamelModel):
    """
    JWT token response schema.

    Returned after registration, login and password change.

    Attributes:
        success: Always True
        token: JWT access token for API authentication
        token_type: Token type, always "bearer"
    """

    success: bool = True
    token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "tokenType": "bearer"
            }
        }


class RegisterRequest(CamelModel):
    """Body of the register endpoint."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=6, max_length=128, description="Password (6+ characters)")


class LoginRequest(CamelModel):
    """Body of the login endpoint."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")


class PreferencesUpdate(CamelModel):
    weight_unit: Optional[WeightUnit] = None
    height_unit: Optional[HeightUnit] = None
    dark_mode: Optional[bool] = None


class UserDetailsUpdate(CamelModel):
    """
    User update request schema.

    Only fields that are provided are changed.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=100, description="Display name")
    email: Optional[EmailStr] = Field(None, description="Email address")
    bio: Optional[str] = Field(None, max_length=500, description="Short biography")
    avatar: Optional[str] = Field(None, max_length=500, description="URL to profile picture")
    preferences: Optional[PreferencesUpdate] = None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Jane Lifter",
                "preferences": {"weightUnit": "lb", "darkMode": True},
            }
        }


class PasswordUpdateRequest(CamelModel):
    """Body of the update-password endpoint."""

    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=6, max_length=128, description="New password (6+ characters)")
