"""
Factory function for platform adapter selection.

Provides a single function to get the adapter for the host platform, so the
orchestrator never branches on the platform itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uploads.filesystem import FileSystem
    from uploads.platforms.base import PlatformAdapter

SUPPORTED_PLATFORMS = ("ios", "android", "web")


def get_platform_adapter(platform: str, filesystem: FileSystem) -> "PlatformAdapter":
    """
    Get the adapter for a host platform.

    Args:
        platform: "ios", "android" or "web" (case-insensitive)
        filesystem: Device filesystem used for stats and cache copies

    Returns:
        PlatformAdapter implementation for the platform

    Raises:
        ValueError: Unknown platform name

    Usage:
        adapter = get_platform_adapter(settings.UPLOAD_PLATFORM, filesystem)
        result = await adapter.normalize(uri, mime_type)
    """
    name = platform.lower()

    if name == "ios":
        from uploads.platforms.ios import IOSPlatformAdapter

        return IOSPlatformAdapter(filesystem)

    if name == "android":
        from uploads.platforms.android import AndroidPlatformAdapter

        return AndroidPlatformAdapter(filesystem)

    if name == "web":
        from uploads.platforms.web import WebPlatformAdapter

        return WebPlatformAdapter(filesystem)

    raise ValueError(
        f"Unsupported platform {platform!r}; expected one of {', '.join(SUPPORTED_PLATFORMS)}"
    )
