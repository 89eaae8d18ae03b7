"""
Media upload orchestration for the mobile client.

This package provides:
- Per-kind size ceilings checked locally before any bandwidth is spent
- Platform adapters that turn picker references into streamable files
- A direct path to the storage provider for large files (signed, single use)
- A proxied path through the application server for everything else
- Integer progress callbacks and a single classified error taxonomy

Usage:
    from uploads import UploadRequest, UploadStrategySelector

    async with UploadStrategySelector.from_settings(cookies=session_cookies) as uploads:
        result = await uploads.upload(
            UploadRequest(uri=picked.uri, folder="posts", mime_type=picked.mime_type),
            on_progress=lambda percent: print(f"{percent}%"),
        )
        print(result.url, result.thumbnail_url)
"""

from uploads.config import UploadConfig
from uploads.exceptions import (
    ParseError,
    ServerError,
    SigningError,
    TransportError,
    UploadError,
    UploadValidationError,
)
from uploads.services import UploadStrategySelector
from uploads.types import (
    MediaKind,
    PickedAsset,
    UploadFolder,
    UploadRequest,
    UploadResult,
    UploadStatus,
)
from uploads.validators import SizePolicy, format_file_size, get_mime_type

__all__ = [
    "MediaKind",
    "ParseError",
    "PickedAsset",
    "ServerError",
    "SigningError",
    "SizePolicy",
    "TransportError",
    "UploadConfig",
    "UploadError",
    "UploadFolder",
    "UploadRequest",
    "UploadResult",
    "UploadStatus",
    "UploadStrategySelector",
    "UploadValidationError",
    "format_file_size",
    "get_mime_type",
]
