"""
Custom exceptions for the tracemask service.

The masking engine itself never raises; these cover the service boundary
and map to HTTP status codes and error details for API responses.
"""

from typing import Any, Dict, Optional


class TraceMaskException(Exception):
    """Base exception for the tracemask service."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "internal_error",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}


class ValidationError(TraceMaskException):
    """Raised when a submitted trace entry or batch is rejected."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code="validation_error",
            details=details,
        )
