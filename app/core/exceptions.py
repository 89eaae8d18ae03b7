"""
Base exception classes for client-wide error handling.

This module provides a standardized exception hierarchy that enables:
- A human-readable message callers can show directly in an alert
- Machine-readable error codes for programmatic handling
- Detailed error information for debugging

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Local checks failed before any network activity
    └── ExternalServiceError - Application server or storage provider failures

Usage:
    from core.exceptions import ValidationError

    # Raise with message only
    raise ValidationError("This video is too large (2.50 GB). Maximum size is 2.00 GB.")

    # Raise with error code and details
    raise ValidationError(
        "File not found",
        error_code="FILE_NOT_FOUND",
        details={"uri": uri},
    )

    # Convert to dict for logging or crash reports
    try:
        ...
    except BaseApplicationError as e:
        logger.warning("Upload failed", extra=e.to_dict())

Note:
    Domain packages (e.g. uploads.exceptions) subclass these to build their
    own taxonomy; callers can catch either the domain base or these bases.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for programmatic handling
        details: Additional error context (uri, status, metadata, etc.)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to a plain dictionary.

        Returns:
            Dict with error, error_code, and details keys

        Example:
            {
                "error": "Please log in again to upload media",
                "error_code": "SESSION_EXPIRED",
                "details": {"status_code": 401}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return the human-readable message."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when a local check fails.

    Use for:
    - File size over the per-kind ceiling
    - Missing local files
    - Unusable file references

    These are always raised before any bytes leave the device.
    """

    default_error_code: str = "VALIDATION_ERROR"


class ExternalServiceError(BaseApplicationError):
    """
    Raised when a remote call fails.

    Use for:
    - Application server errors (signing, status, proxied upload)
    - Storage provider errors
    - Network timeouts and connection failures
    - Unexpected response bodies

    Note:
        Log the original error for debugging; the message itself is meant
        for display and must not leak transport internals.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
