"""
FitTrack Backend — Custom Exception Hierarchy
===============================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Stores classify every failure into one unambiguous category; the HTTP
       layer maps each category to a status code without inspecting
       driver-specific error types.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by the entry validator and the stores; caught by global handlers.

Exception Hierarchy:
    FitTrackError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    │   └── InvalidEntryError    → 400 (one workout entry breaks a domain rule)
    ├── NotFoundError            → 404 Not Found
    ├── NoRowsAffectedError      → 404 Not Found (update/delete hit no row)
    ├── ConflictError            → 409 Conflict (constraint violation)
    ├── TransientError           → 503 Service Unavailable (caller may retry)
    └── DatabaseError            → 500 Internal Server Error

Absent rows are NOT errors at the store level: lookups return None and the
route handler decides whether that means 404.
"""

from typing import Any, Dict, Optional


class FitTrackError(Exception):
    """
    Base exception for all FitTrack application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client),
                  e.g. {"operation": "create_workout", "step": "insert_entries"}
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(FitTrackError):
    """
    Raised when client input fails a domain rule.

    Detected before any write begins, so nothing needs rolling back.
    HTTP: 400 Bad Request
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


class InvalidEntryError(ValidationError):
    """
    A single workout entry is invalid; the whole workout is rejected.

    Examples:
        - both reps/weight and duration_seconds are set
        - empty exercise name, non-positive sets
        - order_index repeated within one submission
    """

    def __init__(
        self,
        reason: str,
        order_index: Optional[int] = None,
        field: Optional[str] = None,
    ):
        ctx: Dict[str, Any] = {}
        if order_index is not None:
            ctx["order_index"] = order_index
        message = f"Invalid workout entry: {reason}"
        if order_index is not None:
            message = f"Invalid workout entry (order_index={order_index}): {reason}"
        super().__init__(message=message, field=field, context=ctx)
        self.reason = reason
        self.order_index = order_index


class NotFoundError(FitTrackError):
    """
    Raised by route handlers when a store lookup returned None.

    HTTP: 404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class NoRowsAffectedError(FitTrackError):
    """
    An update or delete targeted a row that does not exist.

    Distinct from DatabaseError: the statement ran fine, it just matched
    nothing. The table is left unchanged.
    HTTP: 404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"No {resource} rows were affected"
        if resource_id:
            message = f"No {resource} with ID '{resource_id}' to modify"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(FitTrackError):
    """
    A database constraint rejected the write (duplicate key, FK, CHECK).

    The surrounding transaction has already been rolled back.
    HTTP: 409 Conflict
    """

    def __init__(
        self,
        message: str = "The request conflicts with existing data",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TransientError(FitTrackError):
    """
    Connectivity loss or a deadline expiry.

    The operation was rolled back in full. Stores never retry on their own;
    the caller decides whether to repeat the whole operation.
    HTTP: 503 Service Unavailable
    """

    def __init__(
        self,
        message: str = "The database is temporarily unavailable. Please retry.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(FitTrackError):
    """
    Raised when database operations fail in any other way.

    Security Note:
        The message returned to the client is always generic.
        Detailed error info (SQL, constraint name, etc.) is logged
        server-side only.
    HTTP: 500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
