"""
Chartwise Backend — Shared Pydantic Schemas
=============================================

What:  Base model and response shapes shared by every route group.
Why:   The frontend speaks camelCase JSON; Python code uses snake_case.
How:   CamelModel generates camelCase aliases for every field. FastAPI
       serializes response models by alias, and request bodies accept
       either spelling (populate_by_name).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for all API schemas: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Pagination(CamelModel):
    """
    Offset pagination block returned by list endpoints.

    Arithmetic:
        skip     = (page - 1) * limit
        pages    = ceil(total / limit)
        has_next = skip + limit < total
        has_prev = page > 1
    """
    current: int = Field(description="Current page number (1-based)")
    pages: int = Field(description="Total number of pages")
    total: int = Field(description="Total number of matching documents")
    has_next: bool = Field(description="Whether a following page exists")
    has_prev: bool = Field(description="Whether a preceding page exists")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        skip = (page - 1) * limit
        return cls(
            current=page,
            pages=-(-total // limit),
            total=total,
            has_next=skip + limit < total,
            has_prev=page > 1,
        )


class MessageResponse(BaseModel):
    """Plain confirmation body, e.g. after a delete."""
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Nickname is already taken",
            "details": {"field": "nickname"},
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
