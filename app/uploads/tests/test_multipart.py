"""
Tests for the streaming multipart body.

These tests verify:
- The streamed body is byte-identical to httpx's own multipart encoding
- Content-Length is exact so the body is never sent chunked
- Progress is reported per file chunk and ends at 100
"""

from __future__ import annotations

import httpx
import pytest

from uploads.filesystem import BytesFileStream
from uploads.multipart import StreamingMultipart
from uploads.platforms.base import FilePart
from uploads.progress import ProgressReporter

FIELDS = {"api_key": "123456789", "timestamp": "1704110400", "folder": "posts"}


async def collect(body: StreamingMultipart) -> bytes:
    return b"".join([chunk async for chunk in body])


def make_part(content: bytes, chunk_size: int = 4) -> FilePart:
    return FilePart(
        filename="clip.mp4",
        stream=BytesFileStream(content, chunk_size=chunk_size),
        mime_type="video/mp4",
    )


class TestStreamingMultipart:
    """Tests for StreamingMultipart."""

    @pytest.mark.anyio
    async def test_matches_httpx_encoding(self):
        """
        Splicing the stream in produces the same bytes httpx would send.

        Why it matters: Servers parse the body with ordinary multipart parsers.
        """
        content = b"\x00\x00\x00\x18ftypmp42" * 10
        body = StreamingMultipart(FIELDS, make_part(content), ProgressReporter())

        expected = httpx.Request(
            "POST",
            "https://api.example.com/api/upload",
            data=FIELDS,
            files={"file": ("clip.mp4", content, "video/mp4")},
            headers={"Content-Type": body.headers["Content-Type"]},
        ).read()

        assert await collect(body) == expected

    @pytest.mark.anyio
    async def test_content_length_is_exact(self):
        body = StreamingMultipart(FIELDS, make_part(b"0123456789"), ProgressReporter())

        streamed = await collect(body)

        assert int(body.headers["Content-Length"]) == len(streamed)
        assert body.headers["Content-Type"].startswith("multipart/form-data; boundary=")

    @pytest.mark.anyio
    async def test_custom_field_name(self):
        body = StreamingMultipart({}, make_part(b"abc"), ProgressReporter(), field_name="media")

        streamed = await collect(body)

        assert b'name="media"; filename="clip.mp4"' in streamed

    @pytest.mark.anyio
    async def test_reports_progress_per_chunk(self):
        """Each file chunk handed to the transport advances the percentage."""
        seen = []
        body = StreamingMultipart(FIELDS, make_part(b"x" * 16, chunk_size=4), ProgressReporter(seen.append))

        await collect(body)

        assert seen == [25, 50, 75, 100]

    @pytest.mark.anyio
    async def test_empty_file_reports_nothing(self):
        seen = []
        body = StreamingMultipart(FIELDS, make_part(b""), ProgressReporter(seen.append))

        streamed = await collect(body)

        assert seen == []
        assert int(body.headers["Content-Length"]) == len(streamed)

    @pytest.mark.anyio
    async def test_sent_with_declared_length(self):
        """httpx sends the declared length instead of chunked encoding."""
        captured = {}

        async def handler(request: httpx.Request) -> httpx.Response:
            captured["headers"] = request.headers
            captured["content"] = await request.aread()
            return httpx.Response(200)

        body = StreamingMultipart(FIELDS, make_part(b"payload"), ProgressReporter())
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            await client.post("https://api.example.com/api/upload", content=body, headers=body.headers)

        assert "transfer-encoding" not in captured["headers"]
        assert int(captured["headers"]["content-length"]) == len(captured["content"])
        assert b"payload" in captured["content"]
