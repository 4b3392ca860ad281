"""
Storefront Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and the document store; caught by global handlers.

Exception Hierarchy:
    StorefrontError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    ├── NotFoundError     → 404 Not Found
    ├── FileStorageError  → 500 Internal Server Error
    └── DatabaseError     → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class StorefrontError(Exception):
    """
    Base exception for all Storefront application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(StorefrontError):
    """
    Raised when client input is missing or unusable.

    When:    No uploaded file, oversized upload, unknown query parameter,
             a file path escaping the upload directory.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "No file uploaded",
            "details": {"field": "file"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(StorefrontError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE on a product or order id that is not stored,
             or a download of an upload that is not on disk.
    HTTP:    404 Not Found

    The document store returns None / 0 for missing records; services turn
    that into NotFoundError so routes stay free of status-code logic.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class FileStorageError(StorefrontError):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, directory not writable, I/O error.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(StorefrontError):
    """
    Raised when a document store operation fails unexpectedly.

    When:    Backing file unreadable, locked, corrupted; malformed field path.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        The SQL error and collection name are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
