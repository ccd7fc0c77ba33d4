"""Common Pydantic v2 schemas shared across the API.

Provides pagination, error descriptor, and error response schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from civic_snapshot.lib.legislation import Pagination
from civic_snapshot.lib.upstream import ErrorDescriptor


class PaginationMeta(BaseModel):
    """Upstream pagination metadata included in paginated responses."""

    page: int = Field(description="Current page number")
    max_page: int = Field(description="Last available page number")
    per_page: int = Field(description="Items per page")
    total_items: int = Field(description="Total number of items")

    @classmethod
    def from_domain(cls, pagination: Pagination | None) -> PaginationMeta | None:
        if pagination is None:
            return None
        return cls(
            page=pagination.page,
            max_page=pagination.max_page,
            per_page=pagination.per_page,
            total_items=pagination.total_items,
        )


class ErrorDescriptorResponse(BaseModel):
    """Typed error attached to a failed outcome slot."""

    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    source: str | None = Field(default=None, description="Upstream source that failed")
    status_code: int | None = Field(default=None, description="Upstream HTTP status, when known")

    @classmethod
    def from_domain(cls, error: ErrorDescriptor | None) -> ErrorDescriptorResponse | None:
        if error is None:
            return None
        return cls(
            code=error.code.value,
            message=error.message,
            source=error.source,
            status_code=error.status_code,
        )


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error message")
    code: str | None = Field(default=None, description="Machine-readable error code")
