"""
Size policy for media uploads.

Classifies a file reference as image, video or audio from its MIME type and
filename, and checks its on-disk size against the ceiling for that kind
before any bandwidth is spent. The server remains the final authority; this
check is advisory and fails open when the file cannot be stat'ed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from uploads.config import UploadConfig
from uploads.types import MediaClassification, MediaKind, SizeValidation

if TYPE_CHECKING:
    from uploads.filesystem import FileSystem

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

# Filename markers checked when the MIME type does not decide the kind
VIDEO_MARKERS = (".mp4", ".mov")
AUDIO_MARKERS = (".m4a", ".mp3")

# Extensions kept as-is when an image is copied to the cache
IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp", "heic"}

EXTENSION_TO_MIME: dict[str, str] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "mp4": "video/mp4",
    "mov": "video/quicktime",
    "webm": "video/webm",
    "mp3": "audio/mpeg",
    "m4a": "audio/mp4",
    "wav": "audio/wav",
    "aac": "audio/aac",
    "ogg": "audio/ogg",
    "3gp": "audio/3gpp",
    "caf": "audio/x-caf",
}

DEFAULT_MIME_TYPE = "application/octet-stream"

# Used when a picked asset has neither a MIME type nor a telling extension
KIND_DEFAULT_MIME: dict[MediaKind, str] = {
    MediaKind.IMAGE: "image/jpeg",
    MediaKind.VIDEO: "video/mp4",
    MediaKind.AUDIO: "audio/mp4",
}

KB = 1024
MB = 1024 * KB
GB = 1024 * MB


# =============================================================================
# Helpers
# =============================================================================


def format_file_size(size: int) -> str:
    """
    Format a byte count for display.

    Boundaries sit at exact 1024 multiples: B, then KB and MB with one
    decimal, then GB with two.

    Example:
        format_file_size(100 * 1024 * 1024)  # "100.0 MB"
    """
    if size < KB:
        return f"{size} B"
    if size < MB:
        return f"{size / KB:.1f} KB"
    if size < GB:
        return f"{size / MB:.1f} MB"
    return f"{size / GB:.2f} GB"


def get_extension(uri: str) -> str:
    """Return the lowercase extension of the last path segment, or ''."""
    filename = uri.rsplit("/", 1)[-1]
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def get_mime_type(uri: str, mime_type: str | None = None) -> str:
    """
    Resolve the MIME type sent with the multipart file part.

    The picker-reported type wins; otherwise the extension is looked up,
    falling back to ``application/octet-stream``.
    """
    if mime_type:
        return mime_type
    return EXTENSION_TO_MIME.get(get_extension(uri), DEFAULT_MIME_TYPE)


def mime_type_for_kind(uri: str, kind: MediaKind) -> str:
    """
    MIME type for a reference whose picker reported only a media kind.

    The extension is used when it agrees with ``kind``; otherwise the kind's
    default type.
    """
    mime_type = get_mime_type(uri)
    if mime_type != DEFAULT_MIME_TYPE and classify_kind(uri, mime_type) is kind:
        return mime_type
    return KIND_DEFAULT_MIME[kind]


def classify_kind(uri: str, mime_type: str | None = None) -> MediaKind:
    """
    Classify a file reference as image, video or audio.

    MIME substring first, filename markers second, image by default. Total
    and deterministic for every input.
    """
    if mime_type:
        lowered_mime = mime_type.lower()
        if "video" in lowered_mime:
            return MediaKind.VIDEO
        if "audio" in lowered_mime:
            return MediaKind.AUDIO
        if "image" in lowered_mime:
            return MediaKind.IMAGE

    lowered_uri = uri.lower()
    if any(marker in lowered_uri for marker in VIDEO_MARKERS):
        return MediaKind.VIDEO
    if any(marker in lowered_uri for marker in AUDIO_MARKERS):
        return MediaKind.AUDIO
    return MediaKind.IMAGE


# =============================================================================
# Policy Class
# =============================================================================


class SizePolicy:
    """Applies the per-kind size ceilings of an UploadConfig.

    Example:
        policy = SizePolicy(UploadConfig(), LocalFileSystem(cache_dir))
        validation = await policy.validate_file_size(uri, "video/mp4")
        if not validation.valid:
            show_alert(validation.error)
    """

    def __init__(
        self,
        config: UploadConfig | None = None,
        filesystem: FileSystem | None = None,
    ) -> None:
        """Initialize the policy.

        Args:
            config: Limits to enforce. Defaults to the production values.
            filesystem: Collaborator used to stat files. Required for
                validate_file_size only.
        """
        self.config = config or UploadConfig()
        self.filesystem = filesystem

    def classify(self, uri: str, mime_type: str | None = None) -> MediaClassification:
        """Return the media kind of a file and its size ceiling."""
        kind = classify_kind(uri, mime_type)
        return MediaClassification(kind=kind, max_size=self.config.max_size_for(kind.value))

    def get_mime_type(self, uri: str, mime_type: str | None = None) -> str:
        return get_mime_type(uri, mime_type)

    async def validate_file_size(
        self,
        uri: str,
        mime_type: str | None = None,
    ) -> SizeValidation:
        """Check the local file size against the ceiling for its kind.

        Fails open (valid, size 0) when the file cannot be stat'ed at all,
        because the server re-validates every upload.

        Args:
            uri: Local file reference.
            mime_type: MIME type if known.

        Returns:
            SizeValidation with the measured size and the applied ceiling.
        """
        if self.filesystem is None:
            raise RuntimeError("SizePolicy needs a filesystem to validate sizes")

        try:
            info = await self.filesystem.get_info(uri)
        except Exception:
            logger.info(
                "Could not validate file size, deferring to server",
                extra={"uri": uri},
                exc_info=True,
            )
            return SizeValidation(valid=True, size=0, max_size=self.config.max_video_size)

        if not info.exists:
            return SizeValidation(valid=False, size=0, max_size=0, error="File not found")

        classification = self.classify(uri, mime_type)
        if info.size >= classification.max_size:
            return SizeValidation(
                valid=False,
                size=info.size,
                max_size=classification.max_size,
                error=(
                    f"This {classification.kind.value} is too large "
                    f"({format_file_size(info.size)}). "
                    f"Maximum size is {format_file_size(classification.max_size)}."
                ),
            )

        return SizeValidation(valid=True, size=info.size, max_size=classification.max_size)
