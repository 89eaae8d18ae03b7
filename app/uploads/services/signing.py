"""
Signed upload requester.

Asks the application server for short-lived, folder-scoped credentials so
the client can upload straight to the storage provider without ever holding
persistent storage-write secrets. Each signature is used for one POST only.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import httpx

from uploads.services.errors import ErrorClassifier, UploadPath
from uploads.types import SignedUploadParams, UploadFolder

if TYPE_CHECKING:
    from uploads.config import UploadConfig

logger = logging.getLogger(__name__)

SIGN_ENDPOINT = "/api/upload/sign"

# Provider resource taxonomy: audio uploads as a video-compatible resource
RESOURCE_TYPES = ("image", "video", "raw")


class SignedUploadRequester:
    """Calls ``POST /api/upload/sign`` with the session cookies of ``client``."""

    def __init__(self, client: httpx.AsyncClient, config: UploadConfig) -> None:
        self.client = client
        self.config = config

    @property
    def sign_url(self) -> httpx.URL:
        return httpx.URL(self.config.api_base_url).join(SIGN_ENDPOINT)

    async def request_signature(
        self,
        folder: UploadFolder | str,
        resource_type: str,
    ) -> SignedUploadParams:
        """
        Obtain signed parameters for one direct upload.

        Args:
            folder: Destination folder
            resource_type: "image", "video" or "raw"

        Returns:
            SignedUploadParams for a single multipart POST

        Raises:
            SigningError: The server rejected the request
            TransportError: The server could not be reached
            ParseError: The response was not a signature
        """
        if resource_type not in RESOURCE_TYPES:
            raise ValueError(f"resource_type must be one of {', '.join(RESOURCE_TYPES)}")

        folder_name = UploadFolder(folder).value
        log_context = {
            "operation": "request_signature",
            "folder": folder_name,
            "resource_type": resource_type,
        }
        start_time = time.monotonic()
        logger.debug("Requesting upload signature", extra=log_context)

        try:
            response = await self.client.post(
                self.sign_url,
                json={"folder": folder_name, "resourceType": resource_type},
            )
        except (httpx.HTTPError, OSError) as e:
            raise ErrorClassifier.from_transport(e, UploadPath.SIGNING, log_context) from e

        if not response.is_success:
            raise ErrorClassifier.from_response(response, UploadPath.SIGNING, log_context)

        try:
            params = SignedUploadParams.from_dict(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise ErrorClassifier.parse_error(UploadPath.SIGNING, e) from e

        logger.debug(
            "Received upload signature",
            extra={
                **log_context,
                "upload_url": params.upload_url,
                "duration_ms": (time.monotonic() - start_time) * 1000,
            },
        )
        return params
