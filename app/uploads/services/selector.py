"""
Upload orchestration.

UploadStrategySelector is the single entry point callers use. It validates
the file size locally, normalizes the reference through the platform
adapter, and routes the upload to the direct or the proxied path.

Steps within one attempt are strictly sequential:
validate -> normalize -> sign (direct only) -> transfer.
Concurrent attempts share no mutable state.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import httpx

from uploads.config import UploadConfig
from uploads.exceptions import UploadValidationError
from uploads.filesystem import LocalFileSystem
from uploads.platforms import get_platform_adapter
from uploads.services.direct import DirectCloudUploader
from uploads.services.errors import ErrorClassifier, UploadPath
from uploads.services.proxied import ProxiedServerUploader
from uploads.services.signing import SignedUploadRequester
from uploads.types import UploadFolder, UploadRequest, UploadStatus
from uploads.validators import SizePolicy

if TYPE_CHECKING:
    from uploads.platforms.base import PlatformAdapter
    from uploads.progress import ProgressCallback
    from uploads.types import PickedAsset, UploadResult

logger = logging.getLogger(__name__)

STATUS_ENDPOINT = "/api/upload/status"


class UploadStrategySelector:
    """
    Chooses between the direct and the proxied upload path.

    Files strictly larger than ``direct_upload_threshold`` go straight to
    the storage provider on native platforms; everything else, and every
    upload on web, goes through the application server.

    Example:
        async with UploadStrategySelector.from_settings(cookies=session) as uploads:
            result = await uploads.upload(
                UploadRequest(uri=asset.uri, folder="posts", mime_type="video/mp4"),
                on_progress=progress_bar.update,
            )
    """

    def __init__(
        self,
        config: UploadConfig,
        platform: PlatformAdapter,
        client: httpx.AsyncClient,
        provider_client: httpx.AsyncClient | None = None,
        size_policy: SizePolicy | None = None,
        signer: SignedUploadRequester | None = None,
        direct: DirectCloudUploader | None = None,
        proxied: ProxiedServerUploader | None = None,
    ) -> None:
        """
        Initialize the selector.

        Args:
            config: Limits, threshold and timeouts
            platform: Adapter for the host platform
            client: Cookie-authenticated client for the application server
            provider_client: Cookie-less client for the storage provider.
                A new one is created (and owned) when omitted.
            size_policy: Defaults to one over ``platform.filesystem``
            signer: Defaults to one using ``client``
            direct: Defaults to a DirectCloudUploader over the clients above
            proxied: Defaults to a ProxiedServerUploader over ``client``
        """
        self.config = config
        self.platform = platform
        self.client = client
        self._owned_clients: list[httpx.AsyncClient] = []

        if provider_client is None:
            provider_client = httpx.AsyncClient()
            self._owned_clients.append(provider_client)
        self.provider_client = provider_client

        self.size_policy = size_policy or SizePolicy(config, platform.filesystem)
        self.signer = signer or SignedUploadRequester(client, config)
        self.direct = direct or DirectCloudUploader(
            client, config, platform, provider_client, signer=self.signer
        )
        self.proxied = proxied or ProxiedServerUploader(client, config, platform)

    @classmethod
    def from_settings(
        cls,
        client: httpx.AsyncClient | None = None,
        cookies: httpx.Cookies | dict[str, str] | None = None,
    ) -> UploadStrategySelector:
        """
        Build the production selector from ``config.settings``.

        Args:
            client: Application server client. A new one carrying
                ``cookies`` is created (and owned) when omitted.
            cookies: Session cookies for the application server
        """
        from config import settings

        config = UploadConfig.from_settings()
        filesystem = LocalFileSystem(settings.UPLOAD_CACHE_DIR)
        platform = get_platform_adapter(settings.UPLOAD_PLATFORM, filesystem)

        owned = client is None
        if client is None:
            client = httpx.AsyncClient(cookies=cookies)

        selector = cls(config, platform, client)
        if owned:
            selector._owned_clients.append(client)
        return selector

    async def aclose(self) -> None:
        """Close the HTTP clients this selector created."""
        for client in self._owned_clients:
            await client.aclose()
        self._owned_clients.clear()

    async def __aenter__(self) -> UploadStrategySelector:
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()

    def choose_path(self, size: int | None) -> UploadPath:
        """
        Pick the upload path for a validated size.

        ``None`` means the size is unknown (web), which always uses the
        proxied path. The threshold itself is still proxied.
        """
        if size is not None and size > self.config.direct_upload_threshold:
            return UploadPath.DIRECT
        return UploadPath.PROXIED

    async def upload(
        self,
        request: UploadRequest,
        on_progress: ProgressCallback | None = None,
    ) -> UploadResult:
        """
        Upload one file and return the stored media descriptor.

        Args:
            request: What to upload and where
            on_progress: Receives integer percentages (0-100) while bytes stream

        Returns:
            UploadResult for the stored media

        Raises:
            UploadValidationError: Local check failed; no network call was made
            SigningError: Direct path could not obtain a signature
            TransportError: Connection, DNS or timeout failure
            ServerError: Non-2xx response
            ParseError: 2xx response with an unexpected body
        """
        log_context = {
            "operation": "upload",
            "folder": request.folder.value,
            "platform": self.platform.name,
        }
        start_time = time.monotonic()

        size: int | None = None
        if self.platform.can_stat_local_files:
            validation = await self.size_policy.validate_file_size(request.uri, request.mime_type)
            if not validation.valid:
                logger.warning(
                    "Upload rejected by local size check",
                    extra={**log_context, "size": validation.size, "max_size": validation.max_size},
                )
                raise UploadValidationError(
                    validation.error or "File is not valid for upload",
                    error_code="FILE_NOT_FOUND" if validation.max_size == 0 else "FILE_TOO_LARGE",
                    details={"size": validation.size, "max_size": validation.max_size},
                )
            size = validation.size

        normalized = await self.platform.normalize(request.uri, request.mime_type)
        path = self.choose_path(size)
        log_context.update(size=size, path=path.value, normalization=normalized.outcome.value)
        logger.info("Selected upload path", extra=log_context)

        if path is UploadPath.DIRECT:
            result = await self.direct.upload_direct(request, on_progress, normalized=normalized)
        else:
            result = await self.proxied.upload_via_server(request, on_progress, normalized=normalized)

        logger.info(
            "Upload finished",
            extra={
                **log_context,
                "public_id": result.public_id,
                "duration_ms": (time.monotonic() - start_time) * 1000,
            },
        )
        return result

    async def upload_picked_asset(
        self,
        asset: PickedAsset,
        folder: UploadFolder | str = UploadFolder.GENERAL,
        on_progress: ProgressCallback | None = None,
    ) -> UploadResult:
        """Upload a picker result, carrying its mime type and duration."""
        return await self.upload(UploadRequest.from_asset(asset, folder), on_progress)

    async def get_upload_status(self) -> UploadStatus:
        """
        Fetch the server's upload capabilities.

        Advisory: callers read it before offering a picker.

        Raises:
            ServerError: Non-2xx response
            TransportError: The server could not be reached
            ParseError: The body was not a status descriptor
        """
        url = httpx.URL(self.config.api_base_url).join(STATUS_ENDPOINT)
        log_context = {"operation": "get_upload_status"}

        try:
            response = await self.client.get(url)
        except httpx.HTTPError as e:
            raise ErrorClassifier.from_transport(e, UploadPath.STATUS, log_context) from e

        if not response.is_success:
            raise ErrorClassifier.from_response(response, UploadPath.STATUS, log_context)

        try:
            return UploadStatus.from_dict(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise ErrorClassifier.parse_error(UploadPath.STATUS, e) from e
