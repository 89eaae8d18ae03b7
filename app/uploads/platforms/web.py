"""
Web platform adapter.

Browsers expose no filesystem: references are passed through untouched and
the file part is built by fetching the reference into memory first.
"""

from __future__ import annotations

import httpx

from uploads.exceptions import UploadValidationError
from uploads.filesystem import BytesFileStream
from uploads.platforms.base import (
    FilePart,
    NormalizationResult,
    PlatformAdapter,
    filename_from_uri,
)
from uploads.validators import get_mime_type


class WebPlatformAdapter(PlatformAdapter):
    """Pass-through adapter for browser contexts."""

    name = "web"
    can_stat_local_files = False

    async def normalize(self, uri: str, mime_type: str | None = None) -> NormalizationResult:
        return NormalizationResult.passthrough(uri=uri, original_uri=uri)

    async def load_file_part(
        self,
        uri: str,
        mime_type: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> FilePart:
        """
        Fetch the reference into memory and wrap it as a file part.

        A failed fetch is a problem with the picked file, not with the
        upload destination, so it never surfaces as a session or server
        error.

        Raises:
            UploadValidationError: The reference could not be fetched
        """
        if client is None:
            raise RuntimeError("WebPlatformAdapter needs an HTTP client to fetch files")

        try:
            response = await client.get(uri)
            response.raise_for_status()
        except httpx.HTTPError as e:
            details = {"uri": uri, "reason": str(e) or type(e).__name__}
            if isinstance(e, httpx.HTTPStatusError):
                details["status_code"] = e.response.status_code
            self.get_logger().warning(
                "Failed to fetch file reference",
                extra={"platform": self.name, "uri": uri},
                exc_info=True,
            )
            raise UploadValidationError(
                "Could not read the selected file. Please choose it again.",
                error_code="FILE_UNREADABLE",
                details=details,
            ) from e

        return FilePart(
            filename=filename_from_uri(uri),
            stream=BytesFileStream(response.content),
            mime_type=mime_type or response.headers.get("content-type") or get_mime_type(uri),
        )
