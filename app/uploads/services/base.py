"""
Base class for upload paths.

Holds what the direct and proxied paths share: the platform adapter, the
configuration, normalization with the strict-mode check, and the multipart
POST that turns transport failures into classified errors.
"""

from __future__ import annotations

import logging
from abc import ABC
from typing import TYPE_CHECKING, Any

import httpx

from uploads.exceptions import UploadValidationError
from uploads.multipart import StreamingMultipart
from uploads.progress import ProgressReporter
from uploads.services.errors import ErrorClassifier, UploadPath

if TYPE_CHECKING:
    from uploads.config import UploadConfig
    from uploads.platforms.base import NormalizationResult, PlatformAdapter
    from uploads.progress import ProgressCallback
    from uploads.types import UploadRequest


class BaseUploader(ABC):
    """
    Shared plumbing for DirectCloudUploader and ProxiedServerUploader.

    Subclasses set ``path`` and implement their public upload method.
    """

    path: UploadPath

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: UploadConfig,
        platform: PlatformAdapter,
    ) -> None:
        self.client = client
        self.config = config
        self.platform = platform

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this uploader."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    async def resolve_normalized(
        self,
        request: UploadRequest,
        normalized: NormalizationResult | None = None,
    ) -> NormalizationResult:
        """
        Normalize the request's reference unless the caller already did.

        Raises:
            UploadValidationError: A required cache copy failed and the
                configuration forbids the best-effort fallback
        """
        if normalized is None:
            normalized = await self.platform.normalize(request.uri, request.mime_type)

        if normalized.is_degraded:
            if self.config.strict_normalization:
                raise UploadValidationError(
                    "Could not prepare the selected file for upload. Please choose it again.",
                    error_code="NORMALIZATION_FAILED",
                    details={"uri": request.uri, "reason": normalized.error},
                )
            self.get_logger().warning(
                "Uploading from un-normalized reference",
                extra={"uri": request.uri, "reason": normalized.error, "platform": self.platform.name},
            )
        return normalized

    async def post_multipart(
        self,
        client: httpx.AsyncClient,
        url: httpx.URL | str,
        uri: str,
        mime_type: str | None,
        fields: dict[str, str],
        timeout: float,
        on_progress: ProgressCallback | None = None,
        params: dict[str, str] | None = None,
        log_context: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        POST ``fields`` plus the file behind ``uri`` as multipart/form-data.

        Returns:
            The response, whatever its status

        Raises:
            TransportError: Connection, DNS, timeout or read failure
            UploadValidationError: The local file could not be opened
        """
        part = await self.platform.load_file_part(uri, mime_type, client=self.client)
        body = StreamingMultipart(fields, part, ProgressReporter(on_progress))
        try:
            return await client.post(
                url,
                params=params,
                content=body,
                headers=body.headers,
                timeout=timeout,
            )
        except (httpx.HTTPError, OSError) as e:
            raise ErrorClassifier.from_transport(e, self.path, log_context) from e
