"""Default content server.

Streams an opened store entry as the response body. Deliberately small:
no range requests, no conditional GET handling, no content sniffing.
Pass a different ``content_server`` to ``FileServer`` when those matter.
"""

import mimetypes
import os
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from email.utils import format_datetime
from typing import TypeAlias

import anyio.to_thread

from static404.fs import File
from static404.http.request import Request
from static404.http.response import ResponseWriter

DEFAULT_CHUNK_SIZE = 64 * 1024

# (writer, request, name, modified, file) -> None
ContentServer: TypeAlias = Callable[
    [ResponseWriter, Request, str, datetime, File],
    Awaitable[None],
]


def guess_content_type(name: str) -> str:
    """Content type for *name* by extension, ``application/octet-stream`` if unknown."""
    content_type, encoding = mimetypes.guess_type(name, strict=False)
    if content_type is None or encoding is not None:
        # Compressed files (.gz, .br) are served as opaque bytes
        return "application/octet-stream"
    if content_type.startswith("text/") or content_type in (
        "application/javascript",
        "application/json",
        "image/svg+xml",
    ):
        return f"{content_type}; charset=utf-8"
    return content_type


def http_date(value: datetime) -> str:
    """Format *value* as an RFC 7231 IMF-fixdate (``Sun, 06 Nov 1994 08:49:37 GMT``)."""
    if value.tzinfo is None:
        value = value.astimezone()
    return format_datetime(value.astimezone(UTC), usegmt=True)


def _size(file: File) -> int:
    size = file.seek(0, os.SEEK_END)
    file.seek(0, os.SEEK_SET)
    return size


async def serve_content(
    writer: ResponseWriter,
    request: Request,
    name: str,
    modified: datetime,
    file: File,
    *,
    status: int = 200,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> None:
    """Send *file* as the response body with *status*.

    The caller owns *file* and closes it after this returns. A *modified*
    at or before the Unix epoch means "unknown" and omits ``Last-Modified``.
    """
    size = await anyio.to_thread.run_sync(_size, file)

    headers = [
        ("content-type", guess_content_type(name)),
        ("content-length", str(size)),
    ]
    if modified.timestamp() > 0:
        headers.append(("last-modified", http_date(modified)))

    await writer.start(status, headers)

    if request.method != "HEAD":
        while True:
            chunk = await anyio.to_thread.run_sync(file.read, chunk_size)
            if not chunk:
                break
            await writer.write(chunk)

    await writer.finish()
