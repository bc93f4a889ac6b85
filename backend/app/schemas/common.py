"""Response envelopes and base model shared by all API schemas."""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Largest value an INTEGER column can hold
SQL_INT_MAX = 2**63 - 1


class CamelModel(BaseModel):
    """Base schema exposing camelCase field names on the wire.

    Input accepts both camelCase and snake_case keys.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class PageRef(BaseModel):
    """Pointer to a neighbouring page of a list result."""

    page: int = Field(..., ge=1, description="Page number")
    limit: int = Field(..., ge=1, description="Page size")


class ListResponse(BaseModel):
    """Envelope returned by every list endpoint."""

    success: bool = Field(True, description="Request succeeded")
    count: int = Field(..., ge=0, description="Number of items on this page")
    pagination: Dict[str, PageRef] = Field(
        default_factory=dict,
        description="Contains 'next' and/or 'prev' when those pages exist",
    )
    data: List[Dict[str, Any]] = Field(default_factory=list, description="Page items")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "count": 2,
                "pagination": {"next": {"page": 3, "limit": 2}, "prev": {"page": 1, "limit": 2}},
                "data": [{"id": 3, "name": "Squat"}, {"id": 4, "name": "Deadlift"}],
            }
        }


class DataResponse(BaseModel, Generic[T]):
    """Envelope returned by single-resource endpoints."""

    success: bool = True
    data: T


class DeletedResponse(BaseModel):
    """Envelope returned after a delete."""

    success: bool = True
    data: Dict[str, Any] = Field(default_factory=dict)


class FieldError(BaseModel):
    """A single field-level validation problem."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Envelope returned for every failed request."""

    success: bool = False
    error: str
    errors: Optional[List[FieldError]] = None
