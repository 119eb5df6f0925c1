"""Resolving file handler.

Serves entries from a file store and sends every failure through one
not-found callback instead of a stock 404::

    from static404 import Dir, FileServer, Response

    async def not_found(writer, request):
        await writer.send_response(Response("Nothing here", status=404))

    app = FileServer(Dir("./static"), not_found)

Resolution order for each request:

1. Give the path a leading slash (written back onto the request).
2. Reject any path with a segment starting with ``.``.
3. Map a trailing ``/`` to the directory's index document.
4. Open and stat the entry.
5. Directory without trailing ``/``: 301 to ``<last segment>/``.
   Directory with trailing ``/``: not found (no listings, ever).
   Regular file: hand it to the content server.
"""

import logging
from functools import partial
from urllib.parse import quote

import anyio.to_thread

from static404._internal.asgi import Receive, Scope, Send
from static404._internal.invoke import invoke
from static404._internal.paths import base_name, clean_path, has_hidden_segment
from static404.config import FileServerConfig
from static404.content import ContentServer, serve_content
from static404.fs import File, FileSystem
from static404.http.request import Request
from static404.http.response import Response, ResponseWriter
from static404.notfound import NotFoundHandler, default_not_found

logger = logging.getLogger("static404.server")


async def local_redirect(writer: ResponseWriter, request: Request, new_path: str) -> None:
    """Send a 301 to *new_path*, keeping the request's query string.

    Relative targets stay relative; nothing is resolved against the
    request URL. *new_path* is a decoded name; characters that cannot
    appear in a URL, and ``%`` itself, are percent-encoded, so ``café``
    becomes ``caf%C3%A9`` and ``50%`` becomes ``50%25``.
    """
    new_path = quote(new_path, safe="/:@!$&'()*+,;=~")
    if request.query_string:
        new_path += "?" + request.query_string
    await writer.send_response(
        Response(body=b"", status=301, content_type=None).with_header("Location", new_path)
    )


class FileServer:
    """ASGI app serving a file store with a custom not-found response.

    Holds only references fixed at construction, so one instance can
    serve any number of concurrent requests.

    Usage::

        app = FileServer(Dir("./public"), not_found_page(Dir("./public")))

        # Under a prefix
        app = strip_prefix("/static", FileServer(Dir("./static")))
    """

    __slots__ = ("_config", "_content_server", "_not_found", "_root")

    def __init__(
        self,
        root: FileSystem,
        not_found: NotFoundHandler = default_not_found,
        *,
        content_server: ContentServer | None = None,
        config: FileServerConfig | None = None,
    ) -> None:
        self._root = root
        self._not_found = not_found
        self._config = config or FileServerConfig()
        self._content_server = content_server or partial(
            serve_content, chunk_size=self._config.chunk_size
        )

    @property
    def root(self) -> FileSystem:
        return self._root

    @property
    def config(self) -> FileServerConfig:
        return self._config

    def __repr__(self) -> str:
        return f"FileServer({self._root!r}, index={self._config.index!r})"

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        writer = ResponseWriter(send)
        try:
            await self.handle(writer, Request.from_asgi(scope))
        except Exception:
            logger.exception("Unhandled error serving %s", scope.get("path", ""))
            if not writer.started:
                await writer.send_response(Response("Internal Server Error\n", status=500))
            else:
                await writer.finish()

    async def handle(self, writer: ResponseWriter, request: Request) -> None:
        """Resolve *request* and write exactly one response to *writer*."""
        upath = request.path
        if not upath.startswith("/"):
            upath = "/" + upath
            request = request.with_path(upath)
        lookup = clean_path(upath)

        # Checked on the uncleaned path: cleaning would erase ".." segments
        if has_hidden_segment(upath):
            logger.debug("Hidden path rejected: %s", upath)
            await self._not_found_response(writer, request)
            return

        if upath.endswith("/"):
            lookup = clean_path(lookup + "/" + self._config.index)

        try:
            file: File = await anyio.to_thread.run_sync(self._root.open, lookup)
        except Exception as exc:
            # Any open failure is a miss, whatever the store raised
            logger.debug("Open failed for %s: %s", lookup, exc)
            await self._not_found_response(writer, request)
            return

        try:
            await self._serve_opened(writer, request, upath, lookup, file)
        finally:
            await anyio.to_thread.run_sync(file.close)

    async def _serve_opened(
        self, writer: ResponseWriter, request: Request, upath: str, lookup: str, file: File
    ) -> None:
        try:
            info = await anyio.to_thread.run_sync(file.stat)
        except Exception as exc:
            logger.debug("Stat failed for %s: %s", lookup, exc)
            await self._not_found_response(writer, request)
            return

        if info.is_dir:
            if not upath.endswith("/"):
                target = base_name(upath) + "/"
                logger.debug("Directory redirect: %s -> %s", upath, target)
                await local_redirect(writer, request, target)
                return

            logger.debug("Directory listing suppressed: %s", upath)
            await self._not_found_response(writer, request)
            return

        await self._content_server(writer, request, info.name, info.modified, file)

    async def _not_found_response(self, writer: ResponseWriter, request: Request) -> None:
        await invoke(self._not_found, writer, request)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Acknowledge lifespan events; a file server has nothing to set up."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
