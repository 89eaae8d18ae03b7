"""
Android platform adapter.

``content://`` references come from content providers that may not support
the streaming reads the uploader needs, and some providers refuse a second
read. They are copied into the app cache first. Other bare paths get a
``file://`` prefix.
"""

from __future__ import annotations

from uploads.platforms.base import NormalizationResult, PlatformAdapter, ensure_file_prefix

CONTENT_SCHEME = "content://"


class AndroidPlatformAdapter(PlatformAdapter):
    """Normalizes content-provider references by copying them to the cache."""

    name = "android"
    can_stat_local_files = True

    async def normalize(self, uri: str, mime_type: str | None = None) -> NormalizationResult:
        if uri.startswith(CONTENT_SCHEME):
            return await self.copy_to_cache(uri, mime_type)
        return NormalizationResult.passthrough(uri=ensure_file_prefix(uri), original_uri=uri)
