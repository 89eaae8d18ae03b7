"""
Upload-specific exceptions.

Every failure of an upload attempt is normalized into exactly one of these
kinds before it reaches the caller. Each carries a display-ready ``message``.

Exception Hierarchy:
    UploadError (base for the upload domain)
    ├── UploadValidationError - Local size/type check failed (no network call made)
    ├── SigningError - Signing endpoint rejected or failed the request
    ├── TransportError - DNS/connection/timeout failure, optional numeric code
    ├── ServerError - Non-2xx response, carries the HTTP status
    └── ParseError - 2xx response whose body could not be decoded

    UploadValidationError also inherits core.exceptions.ValidationError;
    the remote kinds inherit core.exceptions.ExternalServiceError.

Usage:
    from uploads.exceptions import ServerError, UploadError

    try:
        result = await selector.upload(request, on_progress=bar.update)
    except ServerError as e:
        if e.status_code == 401:
            redirect_to_login()
        show_alert(e.message)
    except UploadError as e:
        show_alert(e.message)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import (
    BaseApplicationError,
    ExternalServiceError,
    ValidationError,
)

if TYPE_CHECKING:
    from typing import Any


class UploadError(BaseApplicationError):
    """
    Base exception for all upload failures.

    Attributes:
        kind: Taxonomy name ("validation", "signing", "transport", "server", "parse")
    """

    default_error_code: str = "UPLOAD_ERROR"
    kind: str = "upload"


class UploadValidationError(UploadError, ValidationError):
    """
    Local size or reference check failed before any network call.

    Example:
        raise UploadValidationError(
            "This image is too large (150.0 MB). Maximum size is 100.0 MB.",
            error_code="FILE_TOO_LARGE",
            details={"size": 157286400, "max_size": 104857600},
        )
    """

    default_error_code: str = "UPLOAD_VALIDATION_ERROR"
    kind: str = "validation"


class SigningError(UploadError, ExternalServiceError):
    """
    The signing collaborator rejected or failed the request.

    The server's own message is propagated as-is when it sends one.
    """

    default_error_code: str = "SIGNING_ERROR"
    kind: str = "signing"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, error_code=error_code, details=details)
        self.status_code = status_code


class TransportError(UploadError, ExternalServiceError):
    """
    Connection, DNS or timeout failure below the HTTP layer.

    Attributes:
        code: Numeric status/code when derivable from the transport, else None
        timed_out: True when the hard transport timeout elapsed
    """

    default_error_code: str = "TRANSPORT_ERROR"
    kind: str = "transport"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        code: int | None = None,
        timed_out: bool = False,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if code is not None:
            details["code"] = code
        if timed_out:
            details["timed_out"] = True
        super().__init__(message, error_code=error_code, details=details)
        self.code = code
        self.timed_out = timed_out


class ServerError(UploadError, ExternalServiceError):
    """
    Non-2xx response from the application server or the storage provider.

    Attributes:
        status_code: HTTP status of the response
    """

    default_error_code: str = "SERVER_ERROR"
    kind: str = "server"

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        details["status_code"] = status_code
        super().__init__(message, error_code=error_code, details=details)
        self.status_code = status_code


class ParseError(UploadError, ExternalServiceError):
    """A 2xx response whose body was not the expected JSON shape."""

    default_error_code: str = "PARSE_ERROR"
    kind: str = "parse"
