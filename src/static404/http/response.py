"""HTTP responses and the writer that sends them over ASGI.

``Response`` is a small immutable value for complete, single-body
responses. ``ResponseWriter`` is the response sink handed to the handler,
the content server and not-found callbacks: it wraps ASGI ``send`` and
enforces one response per request.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

from static404._internal.asgi import Send
from static404.errors import ResponseStartedError


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _encode_headers(headers: Iterable[tuple[str, str]]) -> list[tuple[bytes, bytes]]:
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers]


@dataclass(frozen=True, slots=True)
class Response:
    """A complete HTTP response built through immutable transformations.

    ``content_type=None`` sends no ``Content-Type`` header at all, which
    is what bodiless responses such as redirects want.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str | None = "text/plain; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body


class ResponseWriter:
    """Response sink over an ASGI ``send`` callable.

    Low-level use streams a body::

        await writer.start(200, [("content-type", "text/plain")])
        await writer.write(b"hello ")
        await writer.write(b"world")
        await writer.finish()

    ``send_response`` does all three for a complete ``Response``.
    """

    __slots__ = ("_finished", "_send", "_status")

    def __init__(self, send: Send) -> None:
        self._send = send
        self._status: int | None = None
        self._finished = False

    @property
    def started(self) -> bool:
        """True once the status line and headers have been sent."""
        return self._status is not None

    @property
    def finished(self) -> bool:
        """True once the final body message has been sent."""
        return self._finished

    @property
    def status(self) -> int | None:
        """The status code sent, or ``None`` before ``start``."""
        return self._status

    async def start(self, status: int, headers: Iterable[tuple[str, str]] = ()) -> None:
        """Send the status and headers. Allowed once per request."""
        if self._status is not None:
            msg = f"response already started with status {self._status}"
            raise ResponseStartedError(msg)
        self._status = status
        await self._send(
            {
                "type": "http.response.start",
                "status": status,
                "headers": _encode_headers(headers),
            }
        )

    async def write(self, chunk: bytes) -> None:
        """Send one body chunk. Empty chunks are skipped."""
        if self._status is None:
            msg = "write() before start()"
            raise RuntimeError(msg)
        if chunk:
            await self._send({"type": "http.response.body", "body": chunk, "more_body": True})

    async def finish(self) -> None:
        """Close the body. Calling it again is a no-op."""
        if self._status is None:
            msg = "finish() before start()"
            raise RuntimeError(msg)
        if self._finished:
            return
        self._finished = True
        await self._send({"type": "http.response.body", "body": b"", "more_body": False})

    async def send_response(self, response: Response) -> None:
        """Send a complete single-body response."""
        headers: list[tuple[str, str]] = []
        if response.content_type is not None:
            headers.append(("content-type", response.content_type))
        headers.extend(response.headers)

        body = response.body_bytes if _body_allowed(response.status) else b""
        headers.append(("content-length", str(len(body))))

        await self.start(response.status, headers)
        self._finished = True
        await self._send({"type": "http.response.body", "body": body})
