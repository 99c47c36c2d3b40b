"""
Notes Service - Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for every failure the API can report.
How:   Each exception carries a client-safe message and an optional context
       dict. Handlers registered in main.py translate them into the
       `{success: false, message, errors?}` envelope with the right status.
Who:   Raised by routes and the NoteStore; caught by global handlers.

Exception Hierarchy:
    NotesServiceError (base)
    ├── ValidationError              → 400 "Validation failed" + errors[]
    ├── BadRequestError              → 400 (malformed id or body)
    ├── NotFoundError                → 404 "Note not found"
    └── StoreError                   → 500 "Internal server error"
        └── ConstraintViolationError → 500 (CHECK / NOT NULL rejected a write)

Not-found is an expected outcome at the store level: NoteStore returns
None and the route layer raises NotFoundError to pick the status code.
"""

from typing import Any, Dict, List, Optional


class NotesServiceError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Client-facing error description (safe to return in a response)
        context:  Additional debug info (logged, never returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesServiceError):
    """
    One or more note field rules were violated.

    HTTP: 400 Bad Request, with every violated rule listed in `errors`.

    Example response:
        {
            "success": false,
            "message": "Validation failed",
            "errors": ["Title is required", "Description is required"]
        }
    """

    def __init__(
        self,
        errors: List[str],
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors = list(errors)


class BadRequestError(NotesServiceError):
    """Malformed identifier or request body. HTTP: 400 Bad Request."""

    def __init__(
        self,
        message: str = "Bad request",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NotesServiceError):
    """
    The requested note does not exist.

    HTTP: 404 Not Found. Expected in normal operation (racing deletes,
    stale client lists), so handlers log it at most at INFO.
    """

    def __init__(
        self,
        resource: str = "Note",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class StoreError(NotesServiceError):
    """
    A persistence operation failed unexpectedly.

    HTTP: 500 Internal Server Error. The response message is always generic;
    the driver error is kept in `context` and logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConstraintViolationError(StoreError):
    """
    The database rejected a write because of a column constraint.

    When:  category/priority outside their closed sets, or a required field
           is NULL. The row is not written.
    HTTP:  500, since the API validates before calling the store and a
           violation here means bad input slipped past that check.
    """

    def __init__(
        self,
        message: str = "Note violates a database constraint",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
