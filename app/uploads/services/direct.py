"""
Direct upload path.

Large files bypass the application server, whose request-body ceiling is
well below large video sizes:

1. Classify the provider resource type (audio uploads as "video")
2. Ask the server to sign a single upload for the folder
3. Normalize the file reference
4. POST file + signed fields straight to the provider's upload URL
5. Translate the provider response into an UploadResult

The provider client must not carry the application's session cookies; the
signature alone authenticates the request.
"""

from __future__ import annotations

import re
import time
from typing import TYPE_CHECKING, Any

from uploads.services.base import BaseUploader
from uploads.services.errors import ErrorClassifier, UploadPath
from uploads.services.signing import SignedUploadRequester
from uploads.types import MediaKind, UploadResult
from uploads.validators import classify_kind

if TYPE_CHECKING:
    import httpx

    from uploads.config import UploadConfig
    from uploads.platforms.base import NormalizationResult, PlatformAdapter
    from uploads.progress import ProgressCallback
    from uploads.types import UploadRequest

VIDEO_EXTENSION_PATTERN = re.compile(r"\.(mp4|mov|avi|webm|mkv)$", re.IGNORECASE)

# Poster frame at 0s, cropped to the feed aspect ratio
THUMBNAIL_TRANSFORMATION = "so_0,c_fill,w_720,h_900/"


def resource_type_for(kind: MediaKind) -> str:
    """Provider resource type for a media kind."""
    if kind in (MediaKind.VIDEO, MediaKind.AUDIO):
        return "video"
    return "image"


def thumbnail_url_for(video_url: str) -> str:
    """
    Derive a poster-frame URL from a video delivery URL.

    Pure string rewrite on the provider's URL scheme; no extra request.
    """
    url = VIDEO_EXTENSION_PATTERN.sub(".jpg", video_url)
    return url.replace("/upload/", f"/upload/{THUMBNAIL_TRANSFORMATION}", 1)


class DirectCloudUploader(BaseUploader):
    """Upload path straight to the storage provider using signed params."""

    path = UploadPath.DIRECT

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: UploadConfig,
        platform: PlatformAdapter,
        provider_client: httpx.AsyncClient,
        signer: SignedUploadRequester | None = None,
    ) -> None:
        """
        Initialize the direct uploader.

        Args:
            client: Cookie-authenticated client for the application server
            config: Limits and timeouts
            platform: Adapter for the host platform
            provider_client: Cookie-less client for the storage provider
            signer: Signing collaborator. Defaults to one using ``client``.
        """
        super().__init__(client, config, platform)
        self.provider_client = provider_client
        self.signer = signer or SignedUploadRequester(client, config)

    async def upload_direct(
        self,
        request: UploadRequest,
        on_progress: ProgressCallback | None = None,
        normalized: NormalizationResult | None = None,
    ) -> UploadResult:
        """
        Upload a file straight to the storage provider.

        Args:
            request: What to upload and where
            on_progress: Receives integer percentages while bytes stream
            normalized: Pre-computed normalization (normalizes when omitted)

        Returns:
            UploadResult translated from the provider response

        Raises:
            SigningError: The signing endpoint rejected the request
            UploadValidationError: The file could not be prepared or opened
            TransportError: Connection, DNS or timeout failure
            ServerError: Non-2xx response from the provider
            ParseError: 2xx response that is not a provider upload record
        """
        logger = self.get_logger()
        kind = classify_kind(request.uri, request.mime_type)
        resource_type = resource_type_for(kind)
        log_context = {
            "operation": "upload_direct",
            "folder": request.folder.value,
            "media_kind": kind.value,
            "resource_type": resource_type,
            "platform": self.platform.name,
        }

        start_time = time.monotonic()
        logger.info("Starting upload operation", extra=log_context)

        signed = await self.signer.request_signature(request.folder, resource_type)
        normalized = await self.resolve_normalized(request, normalized)

        response = await self.post_multipart(
            self.provider_client,
            signed.upload_url,
            normalized.uri,
            request.mime_type,
            signed.form_fields(),
            timeout=self.config.direct_timeout,
            on_progress=on_progress,
            log_context=log_context,
        )

        if not response.is_success:
            raise ErrorClassifier.from_response(response, self.path, log_context)

        try:
            result = self.translate_response(response.json(), kind)
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

    @staticmethod
    def translate_response(data: dict[str, Any], kind: MediaKind) -> UploadResult:
        """
        Map the provider's upload record onto an UploadResult.

        ``duration`` arrives in seconds and is rounded to milliseconds.
        Videos get a derived poster-frame ``thumbnail_url``.

        Raises:
            KeyError: A required field is missing
        """
        secure_url = data.get("secure_url")
        url = secure_url or data["url"]
        duration = data.get("duration")

        thumbnail_url = None
        if kind is MediaKind.VIDEO and secure_url:
            thumbnail_url = thumbnail_url_for(secure_url)

        return UploadResult(
            url=url,
            public_id=data["public_id"],
            format=data.get("format") or "",
            resource_type=data.get("resource_type") or "",
            width=data.get("width"),
            height=data.get("height"),
            duration_ms=round(duration * 1000) if duration else None,
            media_type=kind,
            thumbnail_url=thumbnail_url,
        )
