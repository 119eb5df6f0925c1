"""In-process test client for ASGI apps.

Sends requests straight through the ASGI interface; no sockets, no
HTTP parsing. Works with ``FileServer`` and anything wrapping it.
"""

from dataclasses import dataclass, field
from typing import Any

from static404._internal.asgi import ASGIApp, Message


@dataclass(frozen=True, slots=True)
class TestResponse:
    """The response an app produced for one request.

    ``starts`` counts ``http.response.start`` messages; anything other
    than 1 means the app answered zero or several times.
    """

    __test__ = False  # Tell pytest this is not a test class

    status: int
    headers: tuple[tuple[str, str], ...]
    body: bytes
    starts: int = 1
    messages: tuple[Message, ...] = field(default=(), repr=False)

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return self.body.decode("utf-8")

    @property
    def content_type(self) -> str | None:
        return self.header("content-type")

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or ``None``."""
        key = name.lower()
        for header_name, value in self.headers:
            if header_name == key:
                return value
        return None


class TestClient:
    """Async test client.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/index.html")
            assert response.status == 200
    """

    __test__ = False  # Tell pytest this is not a test class

    __slots__ = ("app",)

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __aenter__(self) -> "TestClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> TestResponse:
        """Send a GET request. *path* may carry a ``?query``."""
        return await self.request("GET", path, headers=headers)

    async def head(self, path: str, *, headers: dict[str, str] | None = None) -> TestResponse:
        """Send a HEAD request."""
        return await self.request("HEAD", path, headers=headers)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        scope: dict[str, Any] | None = None,
    ) -> TestResponse:
        """Send an arbitrary request through the ASGI app.

        *scope*, when given, is used as the ASGI scope after the request
        fields are filled in, so a test can inspect what the app wrote
        back into it.
        """
        if "?" in path:
            path_part, query_string = path.split("?", 1)
        else:
            path_part = path
            query_string = ""

        raw_headers = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in (headers or {}).items()
        ]

        request_scope: dict[str, Any] = scope if scope is not None else {}
        request_scope.update(
            {
                "type": "http",
                "asgi": {"version": "3.0"},
                "http_version": "1.1",
                "method": method.upper(),
                "path": path_part,
                "raw_path": path_part.encode("utf-8"),
                "query_string": query_string.encode("latin-1"),
                "root_path": "",
                "headers": raw_headers,
                "server": ("testserver", 80),
                "client": ("127.0.0.1", 0),
            }
        )

        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": b"", "more_body": False}
            return {"type": "http.disconnect"}

        messages: list[Message] = []

        async def send(message: Message) -> None:
            messages.append(message)

        await self.app(request_scope, receive, send)

        starts = [m for m in messages if m["type"] == "http.response.start"]
        status = starts[0]["status"] if starts else 0
        response_headers = tuple(
            (name.decode("latin-1"), value.decode("latin-1"))
            for name, value in (starts[0].get("headers", []) if starts else [])
        )
        body = b"".join(m.get("body", b"") for m in messages if m["type"] == "http.response.body")

        return TestResponse(
            status=status,
            headers=response_headers,
            body=body,
            starts=len(starts),
            messages=tuple(messages),
        )
