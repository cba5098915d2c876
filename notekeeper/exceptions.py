"""
Notekeeper Backend: Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the outcomes of note operations.
How:   Each exception carries a client-facing message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       the fail/error JSON envelopes with the matching HTTP status code.
Who:   Raised by NoteService; caught by the handlers in main.py.

Exception Hierarchy:
    NotekeeperError (base)        → 500 error envelope
    ├── ConflictError             → 400 fail envelope
    │   └── DuplicateTitleError   → 400 fail envelope (preset message)
    ├── NotFoundError             → 404 fail envelope
    └── DatabaseError             → 500 error envelope
"""

from typing import Any, Dict, Optional


class NotekeeperError(Exception):
    """
    Base exception for all Notekeeper application errors.

    Attributes:
        message:  Client-facing error description (returned in the envelope)
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


class ConflictError(NotekeeperError):
    """
    Raised when a write collides with an existing row.

    HTTP:    400 Bad Request, `{"status": "fail", ...}`
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DuplicateTitleError(ConflictError):
    """A note with the same title is already stored."""

    def __init__(self, title: Optional[str] = None):
        ctx = {"title": title} if title is not None else None
        super().__init__(message="Note with that title already exists", context=ctx)


class NotFoundError(NotekeeperError):
    """
    Raised when a delete matched no row.

    HTTP:    404 Not Found, `{"status": "fail", ...}`

    Get and edit do not raise this: a missing row there is reported as a
    DatabaseError like any other storage failure.
    """

    def __init__(
        self,
        resource: str = "Note",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} with ID: {resource_id} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(NotekeeperError):
    """
    Raised when a statement fails for any reason other than a title conflict.

    HTTP:    500 Internal Server Error, `{"status": "error", ...}`

    The message is chosen by the operation: a fixed phrase for list, get and
    edit; the raw driver text for create.
    """

    def __init__(
        self,
        message: str = "A database error occurred.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
