"""
End-to-end upload journeys.

Each test drives UploadStrategySelector.upload from a picked reference to
an UploadResult (or a classified error) against the mock application
server and storage provider, with only the device filesystem faked.
"""

from __future__ import annotations

import re

import anyio
import httpx
import pytest
from freezegun import freeze_time

from uploads.config import UploadConfig
from uploads.exceptions import UploadValidationError
from uploads.services.selector import UploadStrategySelector
from uploads.tests.factories import PickedAssetFactory
from uploads.types import MediaKind, UploadFolder, UploadRequest

MiB = 1024 * 1024

FILENAME_PATTERN = re.compile(rb'filename="([^"]+)"')


class TestUploadJourneys:
    """Full journeys across validation, normalization and delivery."""

    @pytest.mark.anyio
    async def test_android_content_jpeg_goes_proxied(self, config, android_adapter, api_client, provider_client, server, filesystem):
        """
        A 5 MiB JPEG behind content:// is copied to the cache and proxied.

        Why it matters: Content providers may refuse streaming reads.
        """
        uri = filesystem.add("content://media/external/images/media/42", content=b"\xff\xd8jpeg", size=5 * MiB)
        server.proxied_ok()
        selector = UploadStrategySelector(config, android_adapter, api_client, provider_client)
        seen = []

        result = await selector.upload(
            UploadRequest(uri=uri, folder=UploadFolder.POSTS, mime_type="image/jpeg"),
            on_progress=seen.append,
        )

        assert result.media_type is MediaKind.IMAGE
        assert result.public_id == "posts/photo"
        assert seen[-1] == 100

        ((source, destination),) = filesystem.copies
        assert source == uri
        assert destination.startswith("file:///data/cache/upload_")
        assert destination.endswith(".jpg")

        assert [request.url.path for request in server.requests] == ["/api/upload"]
        (post,) = server.requests
        filename = destination.rsplit("/", 1)[-1]
        assert f'filename="{filename}"'.encode() in post.content

    @pytest.mark.anyio
    async def test_ios_large_video_goes_direct(self, config, ios_adapter, api_client, provider_client, server, filesystem):
        """
        A 500 MiB MP4 passes validation, exceeds the threshold and goes direct.

        Why it matters: Large videos must bypass the server's body ceiling.
        """
        asset = PickedAssetFactory(video=True)
        filesystem.add(asset.uri, content=b"\x00\x00\x00\x18ftypmp42", size=500 * MiB)
        server.sign_ok(resource_type="video")
        server.provider_ok(resource_type="video")
        selector = UploadStrategySelector(config, ios_adapter, api_client, provider_client)

        result = await selector.upload_picked_asset(asset, UploadFolder.POSTS)

        assert result.media_type is MediaKind.VIDEO
        assert result.thumbnail_url.endswith(".jpg")
        assert result.duration_ms == 12346

        assert len(filesystem.copies) == 1
        paths = [request.url.path for request in server.requests]
        assert paths == ["/api/upload/sign", "/v1_1/demo/video/upload"]

    @pytest.mark.anyio
    async def test_oversized_jpeg_rejected_before_network(self, config, android_adapter, api_client, provider_client, server, filesystem):
        """A 150 MiB JPEG fails locally citing the 100 MiB ceiling."""
        uri = filesystem.add("file:///sdcard/DCIM/huge.jpg", size=150 * MiB)
        server.proxied_ok()
        selector = UploadStrategySelector(config, android_adapter, api_client, provider_client)

        with pytest.raises(UploadValidationError) as exc_info:
            await selector.upload(UploadRequest(uri=uri, folder="posts", mime_type="image/jpeg"))

        assert "100.0 MB" in exc_info.value.message
        assert "150.0 MB" in exc_info.value.message
        assert server.requests == []

    @pytest.mark.anyio
    async def test_failed_copy_falls_back_to_original(self, config, android_adapter, api_client, provider_client, server, filesystem):
        """
        When the cache copy fails the original reference is uploaded.

        The original is still readable here, so the upload succeeds degraded.
        """
        uri = filesystem.add("content://media/external/images/media/42", content=b"\xff\xd8jpeg")
        filesystem.fail_copy = OSError("provider refused")
        server.proxied_ok()
        selector = UploadStrategySelector(config, android_adapter, api_client, provider_client)

        result = await selector.upload(UploadRequest(uri=uri, mime_type="image/jpeg"))

        assert result.public_id == "posts/photo"
        (post,) = server.requests
        assert b'filename="42"' in post.content

    @pytest.mark.anyio
    async def test_strict_normalization_fails_before_transfer(self, android_adapter, api_client, provider_client, server, filesystem):
        strict = UploadConfig(api_base_url="https://api.example.com", strict_normalization=True)
        uri = filesystem.add("content://media/external/images/media/42", content=b"\xff\xd8jpeg")
        filesystem.fail_copy = OSError("provider refused")
        server.proxied_ok()
        selector = UploadStrategySelector(strict, android_adapter, api_client, provider_client)

        with pytest.raises(UploadValidationError) as exc_info:
            await selector.upload(UploadRequest(uri=uri, mime_type="image/jpeg"))

        assert exc_info.value.error_code == "NORMALIZATION_FAILED"
        assert exc_info.value.details["reason"] == "provider refused"
        assert server.requests == []

    @pytest.mark.anyio
    async def test_concurrent_uploads_stay_isolated(self, config, android_adapter, api_client, provider_client, server, filesystem):
        """
        Uploads started together in the same millisecond each send their own file.

        Why it matters: A mix-up would publish one user's media as another's.
        """
        contents = {}
        for index in range(8):
            uri = filesystem.add(
                f"content://media/external/images/media/{index}",
                content=f"jpeg-{index};".encode() * 64,
            )
            contents[uri] = filesystem.entries[uri].content

        def echo_filename(request: httpx.Request) -> httpx.Response:
            filename = FILENAME_PATTERN.search(request.content).group(1).decode()
            return httpx.Response(
                200,
                json={
                    "url": f"https://res.cloudinary.com/demo/image/upload/v1/posts/{filename}",
                    "publicId": f"posts/{filename}",
                    "format": "jpg",
                    "resourceType": "image",
                },
            )

        server.route("POST", "/api/upload", echo_filename)
        selector = UploadStrategySelector(config, android_adapter, api_client, provider_client)
        results = {}

        async def upload(uri):
            results[uri] = await selector.upload(UploadRequest(uri=uri, folder="posts", mime_type="image/jpeg"))

        with freeze_time("2024-01-01 12:00:00", real_asyncio=True):
            async with anyio.create_task_group() as tg:
                for uri in contents:
                    tg.start_soon(upload, uri)

        destinations = dict(filesystem.copies)
        assert len(set(destinations.values())) == len(contents)

        bodies = {
            FILENAME_PATTERN.search(request.content).group(1).decode(): request.content
            for request in server.requests_to("/api/upload")
        }
        assert len(bodies) == len(contents)

        for uri, result in results.items():
            filename = destinations[uri].rsplit("/", 1)[-1]
            assert result.public_id == f"posts/{filename}"
            assert result.media_type is MediaKind.IMAGE
            body = bodies[filename]
            assert contents[uri] in body
            assert all(other not in body for other_uri, other in contents.items() if other_uri != uri)
