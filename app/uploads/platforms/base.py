"""
Base types and abstract base class for platform adapters.

Each host platform exposes file references with its own quirks. An adapter
turns an opaque, possibly ephemeral reference into one the uploaders can
stream from, and builds the multipart file part for it. The orchestrator
depends only on this interface.
"""

from __future__ import annotations

import logging
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from uploads.exceptions import UploadValidationError
from uploads.filesystem import FILE_SCHEME
from uploads.types import MediaKind
from uploads.validators import IMAGE_EXTENSIONS, classify_kind, get_extension, get_mime_type

if TYPE_CHECKING:
    import httpx

    from uploads.filesystem import FileStream, FileSystem

logger = logging.getLogger(__name__)


# =============================================================================
# Result Types
# =============================================================================


class NormalizationOutcome(str, Enum):
    """How a reference was turned into an uploadable one."""

    COPIED = "copied"
    FALLBACK = "fallback"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True)
class NormalizationResult:
    """
    Outcome of normalizing a file reference.

    Attributes:
        uri: Reference the uploaders should stream from
        outcome: copied (cache copy made), fallback (copy failed, original
            kept), or passthrough (no copy needed)
        original_uri: Reference as received from the caller
        error: Reason the copy failed, for fallback only
    """

    uri: str
    outcome: NormalizationOutcome
    original_uri: str
    error: str | None = None

    @classmethod
    def copied(cls, uri: str, original_uri: str) -> NormalizationResult:
        return cls(uri=uri, outcome=NormalizationOutcome.COPIED, original_uri=original_uri)

    @classmethod
    def fallback(cls, uri: str, original_uri: str, error: str) -> NormalizationResult:
        return cls(
            uri=uri,
            outcome=NormalizationOutcome.FALLBACK,
            original_uri=original_uri,
            error=error,
        )

    @classmethod
    def passthrough(cls, uri: str, original_uri: str) -> NormalizationResult:
        return cls(uri=uri, outcome=NormalizationOutcome.PASSTHROUGH, original_uri=original_uri)

    @property
    def is_degraded(self) -> bool:
        """True when a required copy failed and the original reference is used."""
        return self.outcome is NormalizationOutcome.FALLBACK


@dataclass
class FilePart:
    """
    The ``file`` field of a multipart upload.

    Attributes:
        filename: Name sent in the Content-Disposition header
        stream: Async byte stream of the file contents
        mime_type: Content-Type of the part
    """

    filename: str
    stream: FileStream
    mime_type: str

    @property
    def size(self) -> int:
        return self.stream.size


def filename_from_uri(uri: str) -> str:
    """Last path segment of a reference, or ``upload`` when there is none."""
    return uri.rsplit("/", 1)[-1] or "upload"


def ensure_file_prefix(uri: str) -> str:
    """Prefix bare paths with ``file://``; references with a scheme are kept."""
    if "://" in uri:
        return uri
    return f"{FILE_SCHEME}{uri}"


def cache_extension(uri: str, mime_type: str | None = None) -> str:
    """
    Extension for a cache copy.

    Video is always .mp4 and audio .m4a; images keep a known image extension
    and default to .jpg.
    """
    kind = classify_kind(uri, mime_type)
    if kind is MediaKind.VIDEO:
        return ".mp4"
    if kind is MediaKind.AUDIO:
        return ".m4a"
    extension = get_extension(uri)
    if extension in IMAGE_EXTENSIONS:
        return f".{extension}"
    return ".jpg"


# =============================================================================
# Abstract Base Class
# =============================================================================


class PlatformAdapter(ABC):
    """
    Abstract base class for platform adapters.

    Implementations must provide:
    - normalize(): make a reference stable enough to stream from

    Native adapters share the cache-copy helper and the file part builder
    defined here; the web adapter overrides the latter.
    """

    name: str = ""
    can_stat_local_files: bool = True

    def __init__(self, filesystem: FileSystem) -> None:
        self.filesystem = filesystem

    def get_logger(self) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @abstractmethod
    async def normalize(self, uri: str, mime_type: str | None = None) -> NormalizationResult:
        """
        Convert a picker reference into a stable local reference.

        Args:
            uri: Reference as returned by the picker
            mime_type: MIME type if known

        Returns:
            NormalizationResult; never raises for copy failures.
        """

    async def copy_to_cache(
        self,
        uri: str,
        mime_type: str | None = None,
        fallback_uri: str | None = None,
    ) -> NormalizationResult:
        """
        Copy a reference into the cache under ``upload_<timestamp>_<hex><ext>``.

        The random suffix keeps concurrent copies made in the same
        millisecond apart. The temporary file is left for OS cache eviction.
        When the copy fails the result falls back to ``fallback_uri``
        (default: ``uri``).
        """
        filename = (
            f"upload_{int(time.time() * 1000)}_{uuid.uuid4().hex}"
            f"{cache_extension(uri, mime_type)}"
        )
        destination = f"{self.filesystem.cache_directory}{filename}"
        logger = self.get_logger()

        try:
            await self.filesystem.copy(uri, destination)
        except Exception as e:
            logger.warning(
                "Failed to copy file reference to cache, using original",
                extra={"platform": self.name, "uri": uri, "destination": destination},
                exc_info=True,
            )
            return NormalizationResult.fallback(
                uri=fallback_uri or uri,
                original_uri=uri,
                error=str(e) or type(e).__name__,
            )

        logger.info(
            "Copied file reference to cache",
            extra={"platform": self.name, "uri": uri, "destination": destination},
        )
        return NormalizationResult.copied(uri=destination, original_uri=uri)

    async def load_file_part(
        self,
        uri: str,
        mime_type: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> FilePart:
        """
        Open a normalized local reference for streaming.

        Raises:
            UploadValidationError: The file cannot be opened
        """
        try:
            stream = await self.filesystem.open(uri)
        except OSError as e:
            raise UploadValidationError(
                "Could not read the selected file. Please choose it again.",
                error_code="FILE_UNREADABLE",
                details={"uri": uri, "reason": str(e)},
            ) from e

        return FilePart(
            filename=filename_from_uri(uri),
            stream=stream,
            mime_type=get_mime_type(uri, mime_type),
        )
