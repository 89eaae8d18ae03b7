"""
Test fixtures for the uploads package.

Provides fixtures for:
- An in-memory device filesystem (stat, copy, open)
- A mock application server + storage provider behind httpx.MockTransport
- Upload configurations and platform adapters
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from uploads.config import UploadConfig
from uploads.filesystem import BytesFileStream, FileInfo
from uploads.platforms import get_platform_adapter

if TYPE_CHECKING:
    from collections.abc import Callable

API_BASE_URL = "https://api.example.com"
PROVIDER_UPLOAD_PATH = "/v1_1/demo/{resource_type}/upload"
PROVIDER_ORIGIN = "https://api.cloudinary.com"


# =============================================================================
# Filesystem
# =============================================================================


@dataclass
class FakeEntry:
    content: bytes
    size: int


class FakeFileSystem:
    """
    In-memory FileSystem.

    Reported sizes can exceed the stored bytes so large videos can be
    simulated without allocating them.
    """

    def __init__(self, cache_directory: str = "file:///data/cache/") -> None:
        self.cache_directory = cache_directory
        self.entries: dict[str, FakeEntry] = {}
        self.copies: list[tuple[str, str]] = []
        self.fail_copy: Exception | None = None
        self.fail_stat: Exception | None = None

    def add(self, uri: str, content: bytes = b"\xff\xd8\xff\xe0fake", size: int | None = None) -> str:
        self.entries[uri] = FakeEntry(content=content, size=len(content) if size is None else size)
        return uri

    async def get_info(self, uri: str) -> FileInfo:
        if self.fail_stat is not None:
            raise self.fail_stat
        entry = self.entries.get(uri)
        if entry is None:
            return FileInfo(exists=False)
        return FileInfo(exists=True, size=entry.size)

    async def copy(self, source: str, destination: str) -> None:
        if self.fail_copy is not None:
            raise self.fail_copy
        if source not in self.entries:
            raise FileNotFoundError(source)
        self.entries[destination] = self.entries[source]
        self.copies.append((source, destination))

    async def open(self, uri: str) -> BytesFileStream:
        entry = self.entries.get(uri)
        if entry is None:
            raise FileNotFoundError(uri)
        return BytesFileStream(entry.content)


@pytest.fixture
def filesystem() -> FakeFileSystem:
    """Return an empty in-memory device filesystem."""
    return FakeFileSystem()


# =============================================================================
# Mock Server
# =============================================================================


@dataclass
class Route:
    status_code: int = 200
    json: Any = None
    text: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    error: type[httpx.TransportError] | None = None


class MockUploadServer:
    """
    Application server and storage provider behind one MockTransport.

    Routes are keyed by (method, path); unknown routes answer 404.
    Every request is recorded with its body already read.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Route | Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def route(
        self,
        method: str,
        path: str,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
        **kwargs: Any,
    ) -> None:
        self.routes[(method, path)] = handler or Route(**kwargs)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not found"})
        if callable(route):
            return route(request)
        if route.error is not None:
            raise route.error("simulated transport failure", request=request)
        if route.json is not None:
            return httpx.Response(route.status_code, json=route.json, headers=route.headers)
        return httpx.Response(route.status_code, text=route.text or "", headers=route.headers)

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]

    # Canned responses ------------------------------------------------------

    def sign_ok(self, resource_type: str = "video", folder: str = "posts") -> None:
        self.route(
            "POST",
            "/api/upload/sign",
            json={
                "signature": "a1b2c3",
                "timestamp": 1704110400,
                "apiKey": "123456789",
                "cloudName": "demo",
                "folder": folder,
                "uploadUrl": PROVIDER_ORIGIN + PROVIDER_UPLOAD_PATH.format(resource_type=resource_type),
            },
        )

    def provider_ok(self, resource_type: str = "video", **overrides: Any) -> None:
        body = {
            "secure_url": f"https://res.cloudinary.com/demo/{resource_type}/upload/v1704110400/posts/clip.mp4",
            "url": f"http://res.cloudinary.com/demo/{resource_type}/upload/v1704110400/posts/clip.mp4",
            "public_id": "posts/clip",
            "format": "mp4",
            "resource_type": resource_type,
            "width": 1080,
            "height": 1920,
            "duration": 12.3456,
        }
        body.update(overrides)
        self.route("POST", PROVIDER_UPLOAD_PATH.format(resource_type=resource_type), json=body)

    def proxied_ok(self, **overrides: Any) -> None:
        body = {
            "url": "https://res.cloudinary.com/demo/image/upload/v1704110400/posts/photo.jpg",
            "publicId": "posts/photo",
            "format": "jpg",
            "resourceType": "image",
            "width": 1200,
            "height": 900,
        }
        body.update(overrides)
        self.route("POST", "/api/upload", json=body)


@pytest.fixture
def server() -> MockUploadServer:
    """Return a mock server with no routes."""
    return MockUploadServer()


@pytest.fixture
def api_client(server: MockUploadServer) -> httpx.AsyncClient:
    """Return a cookie-authenticated client for the application server."""
    return httpx.AsyncClient(
        transport=httpx.MockTransport(server.handler),
        cookies={"session": "s3ss10n"},
    )


@pytest.fixture
def provider_client(server: MockUploadServer) -> httpx.AsyncClient:
    """Return a cookie-less client for the storage provider."""
    return httpx.AsyncClient(transport=httpx.MockTransport(server.handler))


# =============================================================================
# Configuration & Adapters
# =============================================================================


@pytest.fixture
def config() -> UploadConfig:
    """Return the production limits against the mock server origin."""
    return UploadConfig(api_base_url=API_BASE_URL)


@pytest.fixture
def tight_config() -> UploadConfig:
    """Return a configuration with tiny limits for boundary tests."""
    return UploadConfig(
        api_base_url=API_BASE_URL,
        max_image_size=1000,
        max_video_size=5000,
        max_audio_size=1000,
        direct_upload_threshold=100,
    )


@pytest.fixture
def ios_adapter(filesystem: FakeFileSystem):
    return get_platform_adapter("ios", filesystem)


@pytest.fixture
def android_adapter(filesystem: FakeFileSystem):
    return get_platform_adapter("android", filesystem)


@pytest.fixture
def web_adapter(filesystem: FakeFileSystem):
    return get_platform_adapter("web", filesystem)
