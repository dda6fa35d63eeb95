"""
Mongo API — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the three failure kinds a request
       can end in.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by models (identifier parsing), adapters and route handlers.

Exception Hierarchy:
    MongoApiError (base)
    ├── InvalidArgumentError  → 400 Bad Request (malformed id, JSON or base64)
    ├── NotFoundError         → 404 Not Found
    └── StoreError            → 500 Internal Server Error (database / GridFS)

Every failure is terminal for its request: nothing is retried.
"""

from typing import Any, Dict, Optional


class MongoApiError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, only returned for client errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidArgumentError(MongoApiError):
    """
    Raised when the client sent something that cannot be decoded.

    When:  Path identifier is not 24 hex characters, JSON body does not decode
           into a user, image body is unreadable or not valid base64.
    HTTP:  400 Bad Request
    """

    def __init__(
        self,
        message: str = "Invalid argument",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(MongoApiError):
    """
    Raised when a requested record does not exist.

    When:  GET/DELETE /users/{id} or GET /image/{id} with an unknown identifier.
    HTTP:  404 Not Found
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


class StoreError(MongoApiError):
    """
    Raised when a database or blob-store operation fails.

    When:  Connection refused, server selection timeout, write error, or a
           cursor failing mid-iteration.
    HTTP:  500 Internal Server Error

    The response message is always generic; driver details live in `context`
    and are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
