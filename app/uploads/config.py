"""
Immutable upload configuration.

Size ceilings, the direct-upload threshold and transport timeouts form the
contract surface with the application server. They are bundled into a frozen
dataclass injected into SizePolicy and UploadStrategySelector so tests can
use tighter bounds without touching module globals.
"""

from __future__ import annotations

from dataclasses import dataclass

# Defaults (must match the server values)
MAX_IMAGE_SIZE = 100 * 1024 * 1024  # 100MB
MAX_VIDEO_SIZE = 2 * 1024 * 1024 * 1024  # 2GB
MAX_AUDIO_SIZE = 100 * 1024 * 1024  # 100MB

# Files strictly larger than this bypass the application server
DIRECT_UPLOAD_THRESHOLD = 20 * 1024 * 1024  # 20MB

PROXIED_UPLOAD_TIMEOUT = 10 * 60.0  # seconds
DIRECT_UPLOAD_TIMEOUT = 15 * 60.0  # seconds


@dataclass(frozen=True)
class UploadConfig:
    """
    Limits and endpoints for one upload client.

    Attributes:
        api_base_url: Origin of the application server
        max_image_size: Ceiling for images in bytes
        max_video_size: Ceiling for videos in bytes
        max_audio_size: Ceiling for audio in bytes
        direct_upload_threshold: Sizes above this use the direct path
        proxied_timeout: Hard timeout for proxied uploads in seconds
        direct_timeout: Hard timeout for direct uploads in seconds
        strict_normalization: Fail instead of falling back when a cache copy fails
    """

    api_base_url: str = "http://localhost:5000"
    max_image_size: int = MAX_IMAGE_SIZE
    max_video_size: int = MAX_VIDEO_SIZE
    max_audio_size: int = MAX_AUDIO_SIZE
    direct_upload_threshold: int = DIRECT_UPLOAD_THRESHOLD
    proxied_timeout: float = PROXIED_UPLOAD_TIMEOUT
    direct_timeout: float = DIRECT_UPLOAD_TIMEOUT
    strict_normalization: bool = False

    def __post_init__(self) -> None:
        """Validate limits after initialization."""
        for name in ("max_image_size", "max_video_size", "max_audio_size"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.direct_upload_threshold < 0:
            raise ValueError("direct_upload_threshold must not be negative")
        if self.proxied_timeout <= 0 or self.direct_timeout <= 0:
            raise ValueError("timeouts must be positive")

    def max_size_for(self, kind: str) -> int:
        """Return the ceiling in bytes for a media kind."""
        if kind == "video":
            return self.max_video_size
        if kind == "audio":
            return self.max_audio_size
        return self.max_image_size

    @classmethod
    def from_settings(cls) -> UploadConfig:
        """Build the production configuration from ``config.settings``."""
        from config import settings

        return cls(
            api_base_url=settings.UPLOAD_API_BASE_URL,
            max_image_size=settings.UPLOAD_MAX_IMAGE_SIZE,
            max_video_size=settings.UPLOAD_MAX_VIDEO_SIZE,
            max_audio_size=settings.UPLOAD_MAX_AUDIO_SIZE,
            direct_upload_threshold=settings.UPLOAD_DIRECT_THRESHOLD,
            proxied_timeout=settings.UPLOAD_PROXIED_TIMEOUT,
            direct_timeout=settings.UPLOAD_DIRECT_TIMEOUT,
            strict_normalization=settings.UPLOAD_STRICT_NORMALIZATION,
        )
