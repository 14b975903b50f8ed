"""
Ristorante API: Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions, one per error class the API reports.
How:   Each exception carries a client-safe `message` and an optional
       `context` dict. Handlers registered in main.py turn them into
       `{"error": message}` JSON responses with the matching status code.
Who:   Raised by dependencies, services and image stores.

Exception Hierarchy:
    RistoranteError (base)
    ├── ConfigurationError   → 500 (message names the missing setting)
    ├── UnauthorizedError    → 401 {"error": "Unauthorized"}
    ├── ValidationError      → 400 (message names the failed constraint)
    ├── NotFoundError        → 404 {"error": "Not found"}
    ├── DatabaseError        → 500 (opaque body, details logged)
    └── ImageStorageError    → 500 (opaque body, details logged)
"""

from typing import Any, Dict, Optional


class RistoranteError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ConfigurationError(RistoranteError):
    """
    A required external dependency is not configured.

    When:    DATABASE_URL or the image-store binding is unset.
    HTTP:    500, with the descriptive message (it names a setting, not data).
    """

    status_code = 500

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class UnauthorizedError(RistoranteError):
    """Missing or wrong admin bearer token. Always the same fixed body."""

    status_code = 401

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Unauthorized", context=context)


class ValidationError(RistoranteError):
    """
    Raised when client input fails validation.

    When:    Missing required field, out-of-range number, unknown enum value,
             wrong body shape, unsupported upload type.
    HTTP:    400 Bad Request

    Example response:
        {"error": "people must be between 1 and 30"}
    """

    status_code = 400

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


class NotFoundError(RistoranteError):
    """
    Raised when an identifier-scoped lookup or mutation matches nothing.

    The response body is always `{"error": "Not found"}`; resource and id
    only go to the logs.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message="Not found", context=ctx)


class DatabaseError(RistoranteError):
    """
    Raised when a database statement fails.

    Security Note:
        The response body is always generic. The SQLAlchemy error (which may
        include SQL text or constraint names) is logged server-side only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ImageStorageError(RistoranteError):
    """Object-store get/put failed (network, permissions, disk). Generic 500."""

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
