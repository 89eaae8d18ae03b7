"""
Error classification for upload transports.

Translates httpx exceptions and non-2xx responses into the upload error
taxonomy so no raw transport exception crosses the public upload boundary.
Messages are display-ready; callers show them as-is.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

import httpx

from uploads.exceptions import (
    ParseError,
    ServerError,
    SigningError,
    TransportError,
    UploadError,
)


class UploadPath(str, Enum):
    """Which remote call failed; selects the wording of the message."""

    PROXIED = "proxied"
    DIRECT = "direct"
    SIGNING = "signing"
    STATUS = "status"


CONNECT_MESSAGES = {
    UploadPath.PROXIED: "Could not connect to server. Please check your internet connection.",
    UploadPath.DIRECT: "Network error during direct upload",
}
NETWORK_MESSAGES = {
    UploadPath.PROXIED: "Network error during upload. Please try again.",
    UploadPath.DIRECT: "Network error during direct upload",
}
TIMEOUT_MESSAGES = {
    UploadPath.PROXIED: "Upload timed out. Please try with a smaller file or better connection.",
    UploadPath.DIRECT: "Direct upload timed out",
}
PARSE_MESSAGES = {
    UploadPath.PROXIED: "Failed to parse upload response",
    UploadPath.DIRECT: "Failed to parse storage provider response",
    UploadPath.SIGNING: "Failed to parse upload signature",
    UploadPath.STATUS: "Failed to parse upload status",
}
STATUS_MESSAGES = {
    UploadPath.PROXIED: "Upload failed with status {status}",
    UploadPath.DIRECT: "Direct upload failed with status {status}",
    UploadPath.SIGNING: "Failed to get upload signature",
    UploadPath.STATUS: "Failed to get upload status",
}

SESSION_EXPIRED_MESSAGE = "Please log in again to upload media"

# Cap on raw response text kept in error details
RESPONSE_TEXT_LIMIT = 500


def _transport_code(error: BaseException) -> int | None:
    """Walk the exception chain for an OS-level errno."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        errno = getattr(current, "errno", None)
        if isinstance(errno, int):
            return errno
        current = current.__cause__ or current.__context__
    return None


class ErrorClassifier:
    """
    Maps transport failures and responses to upload errors.

    All methods are class methods - no instance state is maintained.

    Usage:
        try:
            response = await client.post(url, files=files)
        except (httpx.HTTPError, OSError) as e:
            raise ErrorClassifier.from_transport(e, UploadPath.PROXIED) from e
        if not response.is_success:
            raise ErrorClassifier.from_response(response, UploadPath.PROXIED)
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this classifier."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    def from_transport(
        cls,
        error: BaseException,
        path: UploadPath,
        log_context: dict[str, Any] | None = None,
    ) -> UploadError:
        """
        Classify an exception raised while talking to a remote endpoint.

        Args:
            error: Exception raised by httpx or by reading the file
            path: Remote call that failed
            log_context: Extra fields for the log record

        Returns:
            The classified error (already-classified errors pass through)
        """
        if isinstance(error, UploadError):
            return error

        logger = cls.get_logger()
        log_context = {**(log_context or {}), "path": path.value}

        if isinstance(error, httpx.HTTPStatusError):
            return cls.from_response(error.response, path, log_context)

        code = _transport_code(error)

        if isinstance(error, httpx.TimeoutException):
            logger.error("Upload transport timed out", extra=log_context)
            return TransportError(
                TIMEOUT_MESSAGES.get(path, NETWORK_MESSAGES[UploadPath.PROXIED]),
                error_code="UPLOAD_TIMEOUT",
                code=code,
                timed_out=True,
            )

        if isinstance(error, httpx.ConnectError):
            logger.error("Could not connect for upload", extra=log_context, exc_info=error)
            return TransportError(
                CONNECT_MESSAGES.get(path, CONNECT_MESSAGES[UploadPath.PROXIED]),
                error_code="CONNECTION_FAILED",
                code=code,
            )

        logger.error(
            f"Network error during upload: {type(error).__name__}",
            extra=log_context,
            exc_info=error,
        )
        return TransportError(
            NETWORK_MESSAGES.get(path, NETWORK_MESSAGES[UploadPath.PROXIED]),
            error_code="NETWORK_ERROR",
            code=code,
            details={"original_error": str(error)},
        )

    @classmethod
    def from_response(
        cls,
        response: httpx.Response,
        path: UploadPath,
        log_context: dict[str, Any] | None = None,
    ) -> UploadError:
        """
        Classify a non-2xx response.

        The server's own message wins when the body is JSON and carries one;
        otherwise a status-coded message is synthesized. A 401 on the proxied
        path means the session expired and gets its own message.

        Returns:
            SigningError for the signing endpoint, ServerError otherwise
        """
        status = response.status_code
        log_context = {**(log_context or {}), "path": path.value, "status_code": status}
        cls.get_logger().warning("Upload endpoint returned an error", extra=log_context)

        if path is UploadPath.PROXIED and status == httpx.codes.UNAUTHORIZED:
            return ServerError(
                SESSION_EXPIRED_MESSAGE,
                status_code=status,
                error_code="SESSION_EXPIRED",
            )

        message = cls._message_from_body(response, path)
        details: dict[str, Any] = {}
        if message is None:
            message = STATUS_MESSAGES[path].format(status=status)
            text = response.text
            if text:
                details["response_text"] = text[:RESPONSE_TEXT_LIMIT]

        if path is UploadPath.SIGNING:
            return SigningError(message, status_code=status, details=details)
        return ServerError(message, status_code=status, details=details)

    @classmethod
    def parse_error(cls, path: UploadPath, error: BaseException | None = None) -> ParseError:
        """Error for a 2xx response whose body is not the expected shape."""
        cls.get_logger().error(
            "Could not parse upload response",
            extra={"path": path.value},
            exc_info=error,
        )
        details = {"reason": str(error)} if error is not None else None
        return ParseError(PARSE_MESSAGES[path], details=details)

    @staticmethod
    def _message_from_body(response: httpx.Response, path: UploadPath) -> str | None:
        """Pull the error message out of a JSON body, if there is one."""
        try:
            body = response.json()
        except ValueError:
            return None
        if not isinstance(body, dict):
            return None

        if path is UploadPath.DIRECT:
            # Provider shape: {"error": {"message": "..."}}
            error = body.get("error")
            message = error.get("message") if isinstance(error, dict) else None
        else:
            message = body.get("message")

        if isinstance(message, str) and message:
            return message
        return None
