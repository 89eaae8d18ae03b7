"""
Proxied upload path.

Streams the file through the application server (``POST /api/upload``),
which performs its own handoff to storage. The request carries the session
cookies of the API client.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import httpx

from uploads.services.base import BaseUploader
from uploads.services.errors import ErrorClassifier, UploadPath
from uploads.types import UploadResult
from uploads.validators import classify_kind

if TYPE_CHECKING:
    from uploads.platforms.base import NormalizationResult
    from uploads.progress import ProgressCallback
    from uploads.types import UploadRequest

UPLOAD_ENDPOINT = "/api/upload"


class ProxiedServerUploader(BaseUploader):
    """
    Upload path through the application server.

    Used for everything on web and for files at or below the direct-upload
    threshold on native platforms.
    """

    path = UploadPath.PROXIED

    @property
    def upload_url(self) -> httpx.URL:
        return httpx.URL(self.config.api_base_url).join(UPLOAD_ENDPOINT)

    async def upload_via_server(
        self,
        request: UploadRequest,
        on_progress: ProgressCallback | None = None,
        normalized: NormalizationResult | None = None,
    ) -> UploadResult:
        """
        Upload a file through the application server.

        Args:
            request: What to upload and where
            on_progress: Receives integer percentages while bytes stream
            normalized: Pre-computed normalization (normalizes when omitted)

        Returns:
            UploadResult parsed from the server response

        Raises:
            UploadValidationError: The file could not be prepared or opened
            TransportError: Connection, DNS or timeout failure
            ServerError: Non-2xx response (401 means the session expired)
            ParseError: 2xx response that is not an UploadResult
        """
        logger = self.get_logger()
        kind = classify_kind(request.uri, request.mime_type)
        log_context = {
            "operation": "upload_via_server",
            "folder": request.folder.value,
            "media_kind": kind.value,
            "platform": self.platform.name,
        }

        start_time = time.monotonic()
        logger.info("Starting upload operation", extra=log_context)

        normalized = await self.resolve_normalized(request, normalized)

        fields: dict[str, str] = {}
        if request.duration_ms:
            fields["durationMs"] = str(request.duration_ms)

        response = await self.post_multipart(
            self.client,
            self.upload_url,
            normalized.uri,
            request.mime_type,
            fields,
            timeout=self.config.proxied_timeout,
            on_progress=on_progress,
            params={"folder": request.folder.value},
            log_context=log_context,
        )

        if not response.is_success:
            raise ErrorClassifier.from_response(response, self.path, log_context)

        try:
            result = UploadResult.from_dict(response.json(), media_type=kind)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise ErrorClassifier.parse_error(self.path, e) from e

        logger.info(
            "Upload operation completed",
            extra={
                **log_context,
                "public_id": result.public_id,
                "duration_ms": (time.monotonic() - start_time) * 1000,
            },
        )
        return result
