"""
iOS platform adapter.

Photo-library references (``ph://``, ``assets-library://``, PHAsset ids) are
not filesystem paths and can be invalidated or permission-gated mid-upload.
Video and audio, and any asset-library reference, are copied into the app
cache first. Plain file references only get a ``file://`` prefix.
"""

from __future__ import annotations

from uploads.platforms.base import NormalizationResult, PlatformAdapter, ensure_file_prefix
from uploads.types import MediaKind
from uploads.validators import classify_kind

ASSET_LIBRARY_SCHEMES = ("ph://", "assets-library://")


def is_asset_library_reference(uri: str) -> bool:
    return uri.startswith(ASSET_LIBRARY_SCHEMES) or "PHAsset" in uri


class IOSPlatformAdapter(PlatformAdapter):
    """Normalizes photo-library references by copying them to the cache."""

    name = "ios"
    can_stat_local_files = True

    def needs_cache_copy(self, uri: str, mime_type: str | None = None) -> bool:
        kind = classify_kind(uri, mime_type)
        return kind in (MediaKind.VIDEO, MediaKind.AUDIO) or is_asset_library_reference(uri)

    async def normalize(self, uri: str, mime_type: str | None = None) -> NormalizationResult:
        if self.needs_cache_copy(uri, mime_type):
            return await self.copy_to_cache(
                uri, mime_type, fallback_uri=ensure_file_prefix(uri)
            )
        return NormalizationResult.passthrough(uri=ensure_file_prefix(uri), original_uri=uri)
