"""
Streaming multipart/form-data bodies.

httpx only streams file parts from synchronous file objects, which would put
blocking disk reads on the event loop. ``StreamingMultipart`` lets httpx
render the form envelope (boundary, field encoding, part headers) around an
empty file, then splices the file's async chunks in where the empty content
sat. The body has a known Content-Length, so it is never sent chunked.

Usage:
    body = StreamingMultipart({"folder": "posts"}, part, ProgressReporter(cb))
    response = await client.post(url, content=body, headers=body.headers)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from uploads.platforms.base import FilePart
    from uploads.progress import ProgressReporter

# Only used to build the envelope; never requested
ENVELOPE_URL = "https://multipart.invalid/"


class StreamingMultipart:
    """
    Async multipart body with one streamed file part.

    Attributes:
        headers: Content-Type (with boundary) and Content-Length to send
    """

    def __init__(
        self,
        fields: dict[str, str],
        part: FilePart,
        reporter: ProgressReporter,
        field_name: str = "file",
    ) -> None:
        self.part = part
        self.reporter = reporter

        envelope = httpx.Request(
            "POST",
            ENVELOPE_URL,
            data=fields,
            files={field_name: (part.filename, b"", part.mime_type)},
        )
        body = envelope.read()
        content_type = envelope.headers["Content-Type"]
        boundary = content_type.split("boundary=", 1)[1].encode("ascii")

        closing = b"\r\n--" + boundary + b"--\r\n"
        self.preamble = body[: -len(closing)]
        self.closing = closing
        self.headers = {
            "Content-Type": content_type,
            "Content-Length": str(len(body) + part.size),
        }

    async def __aiter__(self) -> AsyncIterator[bytes]:
        yield self.preamble
        loaded = 0
        async for chunk in self.part.stream:
            loaded += len(chunk)
            self.reporter.report(loaded, self.part.size)
            yield chunk
        yield self.closing
