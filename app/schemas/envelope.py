"""Response envelope shared by every API route: {success, data, error, message, timestamp, requestId}."""

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CamelModel(BaseModel):
    """Base for wire models: snake_case attributes, camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldError(CamelModel):
    """One invalid input field in a 400 response."""

    field: str = Field(..., description="Dotted location, e.g. query.pageSize or body.email.")
    message: str
    value: Any = None


class Pagination(CamelModel):
    """Pagination block for list endpoints."""

    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class ApiResponse(CamelModel, Generic[T]):
    """
    Uniform response wrapper.

    Routes serialise with exclude_none so absent keys (data, error, message) are omitted.
    """

    success: bool
    data: T | None = None
    error: str | None = None
    message: str | None = None
    details: list[FieldError] | None = None
    timestamp: str = Field(default_factory=utc_timestamp)
    request_id: str = "unknown"


class PaginatedResponse(ApiResponse[list[T]], Generic[T]):
    """Envelope for list endpoints; adds the pagination block."""

    pagination: Pagination
