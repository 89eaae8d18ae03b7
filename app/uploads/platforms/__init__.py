"""
Platform adapter package.

Turns picker references into stable local references on iOS, Android and
web, and builds the multipart file part for each environment.

Usage:
    from uploads.platforms import get_platform_adapter

    adapter = get_platform_adapter("android", filesystem)
    result = await adapter.normalize("content://media/external/video/media/7", "video/mp4")
    if result.is_degraded:
        logger.warning("Uploading from the original reference: %s", result.error)
"""

from uploads.platforms.android import AndroidPlatformAdapter
from uploads.platforms.base import (
    FilePart,
    NormalizationOutcome,
    NormalizationResult,
    PlatformAdapter,
)
from uploads.platforms.factory import SUPPORTED_PLATFORMS, get_platform_adapter
from uploads.platforms.ios import IOSPlatformAdapter
from uploads.platforms.web import WebPlatformAdapter

__all__ = [
    "AndroidPlatformAdapter",
    "FilePart",
    "IOSPlatformAdapter",
    "NormalizationOutcome",
    "NormalizationResult",
    "PlatformAdapter",
    "SUPPORTED_PLATFORMS",
    "WebPlatformAdapter",
    "get_platform_adapter",
]
