"""
Filesystem collaborator for the upload subsystem.

The size check, the URI normalizer and the uploaders never touch the disk
directly; they go through a ``FileSystem`` so the device-specific
implementation can be swapped (and faked in tests).

Available Protocols:
    FileSystem: stat, copy and open operations on file references
    FileStream: sized async byte stream returned by ``FileSystem.open``

Implementations:
    LocalFileSystem: ``file://`` URIs and bare paths on the local disk
    LocalFileStream: file bytes read through aiofile
    BytesFileStream: bytes already in memory

Usage:
    from uploads.filesystem import LocalFileSystem

    fs = LocalFileSystem(cache_dir="/data/user/0/app/cache")
    info = await fs.get_info("file:///sdcard/DCIM/clip.mp4")
    if info.exists:
        stream = await fs.open("file:///sdcard/DCIM/clip.mp4")
        async for chunk in stream:
            ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import anyio
from aiofile import async_open

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

logger = logging.getLogger(__name__)

FILE_SCHEME = "file://"

COPY_CHUNK_SIZE = 1024 * 1024  # 1MB
STREAM_CHUNK_SIZE = 64 * 1024  # 64KB


@dataclass(frozen=True)
class FileInfo:
    """Result of a stat on a file reference."""

    exists: bool
    size: int = 0


def uri_to_path(uri: str) -> str:
    """
    Convert a local file reference into a filesystem path.

    Raises:
        FileNotFoundError: The reference uses a scheme other than ``file://``
            (asset-library and content-provider handles are not paths)
    """
    if uri.startswith(FILE_SCHEME):
        return uri[len(FILE_SCHEME):]
    if "://" in uri:
        raise FileNotFoundError(f"Not a local file reference: {uri}")
    return uri


class FileStream(Protocol):
    """
    Sized async byte stream.

    ``size`` is the exact number of bytes iteration yields; uploads send it
    as the length of the file part.
    """

    size: int

    def __aiter__(self) -> AsyncIterator[bytes]: ...


class LocalFileStream:
    """Reads a local file in chunks through aiofile without blocking the loop."""

    def __init__(self, path: str, size: int, chunk_size: int = STREAM_CHUNK_SIZE) -> None:
        self.path = path
        self.size = size
        self.chunk_size = chunk_size

    async def __aiter__(self) -> AsyncIterator[bytes]:
        async with async_open(self.path, "rb") as src:
            async for chunk in src.iter_chunked(self.chunk_size):
                yield chunk


class BytesFileStream:
    """In-memory bytes exposed as a FileStream."""

    def __init__(self, content: bytes, chunk_size: int = STREAM_CHUNK_SIZE) -> None:
        self.content = content
        self.size = len(content)
        self.chunk_size = chunk_size

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for offset in range(0, self.size, self.chunk_size):
            yield self.content[offset:offset + self.chunk_size]


@runtime_checkable
class FileSystem(Protocol):
    """
    Protocol for the device filesystem.

    Attributes:
        cache_directory: URI of the app cache directory, with trailing slash
    """

    cache_directory: str

    async def get_info(self, uri: str) -> FileInfo:
        """
        Stat a file reference.

        Returns:
            FileInfo with exists=False when the file is missing

        Raises:
            Exception: The reference cannot be stat'ed in this environment
        """
        ...

    async def copy(self, source: str, destination: str) -> None:
        """Copy the bytes behind ``source`` to the ``destination`` URI."""
        ...

    async def open(self, uri: str) -> FileStream:
        """
        Open a local reference for streaming reads.

        Raises:
            OSError: The reference cannot be read
        """
        ...


class LocalFileSystem:
    """
    FileSystem backed by the local disk.

    Stats go through ``anyio.Path``; copies and upload reads stream through
    ``aiofile`` so large videos are never loaded into memory and never block
    the event loop.
    """

    def __init__(self, cache_dir: str | Path) -> None:
        """
        Initialize the filesystem.

        Args:
            cache_dir: Directory where normalized copies are written
        """
        path = str(cache_dir).rstrip("/")
        self.cache_directory = f"{FILE_SCHEME}{path}/"

    async def get_info(self, uri: str) -> FileInfo:
        path = anyio.Path(uri_to_path(uri))
        if not await path.exists():
            return FileInfo(exists=False)
        stat = await path.stat()
        return FileInfo(exists=True, size=stat.st_size)

    async def copy(self, source: str, destination: str) -> None:
        source_path = uri_to_path(source)
        destination_path = anyio.Path(uri_to_path(destination))
        await destination_path.parent.mkdir(parents=True, exist_ok=True)

        copied = 0
        async with async_open(source_path, "rb") as src, async_open(
            str(destination_path), "wb"
        ) as dst:
            async for chunk in src.iter_chunked(COPY_CHUNK_SIZE):
                await dst.write(chunk)
                copied += len(chunk)

        logger.debug(
            "Copied file reference",
            extra={"source": source, "destination": destination, "bytes": copied},
        )

    async def open(self, uri: str) -> LocalFileStream:
        path = anyio.Path(uri_to_path(uri))
        stat = await path.stat()
        if not await path.is_file():
            raise IsADirectoryError(f"Not a regular file: {uri}")
        return LocalFileStream(str(path), stat.st_size)
