"""
Data types for upload operations.

This module defines the dataclasses passed between the upload components.
All of them are immutable for the lifetime of one upload attempt.

Types:
    MediaKind: image, video or audio
    UploadFolder: destination folder on the storage side
    PickedAsset: Output of a device picker
    UploadRequest: Parameters of one upload attempt
    MediaClassification: Kind and ceiling for a file
    SizeValidation: Outcome of the local size check
    SignedUploadParams: Short-lived credentials for a direct upload
    UploadResult: Terminal artifact handed back to the caller
    UploadStatus: Server capability descriptor

Usage:
    from uploads.types import UploadFolder, UploadRequest

    request = UploadRequest(
        uri="content://media/external/images/media/42",
        folder=UploadFolder.POSTS,
        mime_type="image/jpeg",
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MediaKind(str, Enum):
    """Media category used for size ceilings and provider resource types."""

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"


class UploadFolder(str, Enum):
    """Destination folder accepted by the upload endpoints."""

    AVATARS = "avatars"
    COVERS = "covers"
    POSTS = "posts"
    GENERAL = "general"


@dataclass(frozen=True)
class PickedAsset:
    """
    A file chosen through the device picker.

    Attributes:
        uri: Opaque reference returned by the picker
        kind: Media category reported by the picker
        mime_type: MIME type if the picker reported one
        duration_ms: Playback length for video/audio
        width: Pixel width if known
        height: Pixel height if known
    """

    uri: str
    kind: MediaKind = MediaKind.IMAGE
    mime_type: str | None = None
    duration_ms: int | None = None
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class UploadRequest:
    """
    Parameters for one upload attempt.

    Attributes:
        uri: File reference (may be ephemeral until normalized)
        folder: Destination folder
        mime_type: MIME type if known
        duration_ms: Playback length, forwarded to the server when set
    """

    uri: str
    folder: UploadFolder = UploadFolder.GENERAL
    mime_type: str | None = None
    duration_ms: int | None = None

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        if not self.uri:
            raise ValueError("uri is required")
        # Accept plain strings for the folder
        object.__setattr__(self, "folder", UploadFolder(self.folder))

    @classmethod
    def from_asset(
        cls,
        asset: PickedAsset,
        folder: UploadFolder | str = UploadFolder.GENERAL,
    ) -> UploadRequest:
        """
        Build a request from a picker result.

        When the picker reported no MIME type, one is filled in from the
        filename or, failing that, from the picked media kind, so an
        extensionless video reference is still sized and cached as video.
        """
        from uploads.validators import mime_type_for_kind

        return cls(
            uri=asset.uri,
            folder=UploadFolder(folder),
            mime_type=asset.mime_type or mime_type_for_kind(asset.uri, asset.kind),
            duration_ms=asset.duration_ms,
        )


@dataclass(frozen=True)
class MediaClassification:
    """Media kind of a file and the ceiling that applies to it."""

    kind: MediaKind
    max_size: int


@dataclass(frozen=True)
class SizeValidation:
    """
    Outcome of the local size check.

    Advisory only: the server re-validates every upload.

    Attributes:
        valid: Whether the file may be uploaded
        size: Measured size in bytes (0 when it could not be measured)
        max_size: Ceiling that was applied
        error: Display-ready reason when not valid
    """

    valid: bool
    size: int
    max_size: int
    error: str | None = None


@dataclass(frozen=True)
class SignedUploadParams:
    """
    Credentials for one direct upload to the storage provider.

    Tied to ``timestamp``; consumed by a single multipart POST and never
    cached or reused.
    """

    signature: str
    timestamp: int
    api_key: str
    cloud_name: str
    folder: str
    upload_url: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SignedUploadParams:
        """Build from the signing endpoint's JSON body."""
        return cls(
            signature=str(data["signature"]),
            timestamp=int(data["timestamp"]),
            api_key=str(data["apiKey"]),
            cloud_name=str(data["cloudName"]),
            folder=str(data["folder"]),
            upload_url=str(data["uploadUrl"]),
        )

    def form_fields(self) -> dict[str, str]:
        """Signed fields the provider requires alongside the file."""
        return {
            "api_key": self.api_key,
            "timestamp": str(self.timestamp),
            "signature": self.signature,
            "folder": self.folder,
        }


@dataclass(frozen=True)
class UploadResult:
    """
    Terminal artifact of a successful upload.

    Ownership transfers to the caller, who persists ``url`` elsewhere.
    """

    url: str
    public_id: str
    format: str
    resource_type: str
    width: int | None = None
    height: int | None = None
    duration_ms: int | None = None
    media_type: MediaKind | None = None
    thumbnail_url: str | None = None

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        media_type: MediaKind | None = None,
    ) -> UploadResult:
        """
        Build from the application server's JSON body.

        Args:
            data: Decoded response body
            media_type: Client-side classification made at request time. The
                body's ``mediaType`` is not trusted.

        Raises:
            KeyError: A required field is missing
            ValueError: A field has the wrong shape
        """
        return cls(
            url=str(data["url"]),
            public_id=str(data["publicId"]),
            format=str(data.get("format") or ""),
            resource_type=str(data.get("resourceType") or ""),
            width=data.get("width"),
            height=data.get("height"),
            duration_ms=data.get("durationMs"),
            media_type=media_type,
            thumbnail_url=data.get("thumbnailUrl"),
        )


@dataclass(frozen=True)
class UploadStatus:
    """
    Server capability descriptor from ``GET /api/upload/status``.

    Read-only; callers consult it before offering a picker.
    """

    configured: bool
    max_image_size: int
    max_video_size: int
    max_audio_size: int
    allowed_image_types: list[str] = field(default_factory=list)
    allowed_video_types: list[str] = field(default_factory=list)
    allowed_audio_types: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UploadStatus:
        """Build from the status endpoint's JSON body."""
        return cls(
            configured=bool(data.get("configured", False)),
            max_image_size=int(data["maxImageSize"]),
            max_video_size=int(data["maxVideoSize"]),
            max_audio_size=int(data["maxAudioSize"]),
            allowed_image_types=list(data.get("allowedImageTypes") or []),
            allowed_video_types=list(data.get("allowedVideoTypes") or []),
            allowed_audio_types=list(data.get("allowedAudioTypes") or []),
        )
