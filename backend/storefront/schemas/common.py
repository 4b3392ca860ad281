"""
Storefront Backend — Shared Request/Response Schemas
======================================================

What:  Pagination parameters, error envelope, upload and health responses.
Who:   Used by every router; product and order schemas build on
       PaginationParams.
"""

from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
# Keeps the offset (page - 1) * size within SQLite's 64-bit integers
MAX_PAGE = 1_000_000
MAX_PAGE_SIZE = 1000


class PaginationParams(BaseModel):
    """
    Page/size windowing over a sorted result set.

    Items returned: `size` documents starting at offset (page - 1) * size.
    """
    page: int = Field(default=DEFAULT_PAGE, ge=1, le=MAX_PAGE, description="Page number (1-based)")
    size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.size


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Product with ID 'abc' was not found",
            "request_id": "1f0e2d3c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict | list] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class UploadResponse(BaseModel):
    message: str = Field(default="File uploaded successfully")
    file_path: str = Field(
        alias="filePath",
        description="Path of the stored file, relative to the /upload prefix",
    )

    model_config = {"populate_by_name": True, "frozen": True}


class HealthResponse(BaseModel):
    """Health check response showing service and collection status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    products_store: str = Field(description="Products collection: connected, disconnected")
    orders_store: str = Field(description="Orders collection: connected, disconnected")
    uploads: str = Field(description="Upload directory: writable, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
