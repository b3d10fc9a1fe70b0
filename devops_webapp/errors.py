# =============================================================================
# DevOps Web App - Error Types
# =============================================================================
"""
Application error taxonomy.

Every error a handler raises on purpose derives from AppError and carries
the HTTP status it should be answered with. Anything else is treated as an
internal error by the central handler in api.errors.
"""

from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base class for errors with a declared HTTP status."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class RequestValidationFailed(AppError):
    """One or more request fields violated the input contract."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: List[Dict[str, Any]], message: Optional[str] = None) -> None:
        super().__init__(message)
        self.errors = errors


class MalformedBodyError(AppError):
    """The request body could not be decoded."""

    status_code = 400
    default_message = "Malformed request body"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Endpoint not found"


class PayloadTooLargeError(AppError):
    """The request body exceeds the configured size cap."""

    status_code = 413
    default_message = "Request entity too large"


class InternalError(AppError):
    status_code = 500
