"""Not-found callbacks.

Every failure the handler meets (missing file, hidden path, directory
without an index, store error) ends in one callback with the signature::

    def not_found(writer: ResponseWriter, request: Request) -> None: ...

``async def`` works too. The callback owns the whole response: status,
headers and body.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeAlias

import anyio.to_thread

from static404.content import serve_content
from static404.errors import FileStoreError
from static404.fs import FileSystem
from static404.http.request import Request
from static404.http.response import Response, ResponseWriter

logger = logging.getLogger("static404.server")

NotFoundHandler: TypeAlias = Callable[[ResponseWriter, Request], Awaitable[None] | None]


async def default_not_found(writer: ResponseWriter, request: Request) -> None:
    """Plain-text 404, the same body most servers use."""
    await writer.send_response(Response("404 page not found\n", status=404))


def not_found_page(
    root: FileSystem,
    name: str = "404.html",
    *,
    status: int = 404,
) -> NotFoundHandler:
    """Build a callback that serves *name* from *root* with *status*.

    The page is opened per request, so edits show up without a restart.
    If it cannot be opened (or is a directory) the callback falls back
    to ``default_not_found``::

        public = Dir("./public")
        app = FileServer(public, not_found_page(public, "errors/404.html"))
    """

    async def serve_page(writer: ResponseWriter, request: Request) -> None:
        try:
            file = await anyio.to_thread.run_sync(root.open, name)
        except (FileStoreError, OSError) as exc:
            logger.debug("Not-found page %r unavailable: %s", name, exc)
            await default_not_found(writer, request)
            return

        try:
            info = await anyio.to_thread.run_sync(file.stat)
            if info.is_dir:
                logger.debug("Not-found page %r is a directory", name)
                await default_not_found(writer, request)
                return
            await serve_content(writer, request, info.name, info.modified, file, status=status)
        except (FileStoreError, OSError) as exc:
            if writer.started:
                raise
            logger.debug("Not-found page %r unreadable: %s", name, exc)
            await default_not_found(writer, request)
        finally:
            await anyio.to_thread.run_sync(file.close)

    return serve_page
