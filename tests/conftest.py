"""Shared fixtures: on-disk and in-memory stores, a handle-tracking store
wrapper and a recording not-found callback."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from static404.fs import File, FileInfo, FileSystem, MemoryFS
from static404.http.request import Request
from static404.http.response import Response, ResponseWriter

MODIFIED = datetime(2021, 3, 14, 15, 9, 26, tzinfo=UTC)


class TrackedFile:
    """Wraps a store handle and counts ``close`` calls."""

    def __init__(self, inner: File, *, stat_error: Exception | None = None) -> None:
        self.inner = inner
        self.stat_error = stat_error
        self.close_calls = 0

    def read(self, size: int = -1) -> bytes:
        return self.inner.read(size)

    def seek(self, offset: int, whence: int = 0) -> int:
        return self.inner.seek(offset, whence)

    def stat(self) -> FileInfo:
        if self.stat_error is not None:
            raise self.stat_error
        return self.inner.stat()

    def close(self) -> None:
        self.close_calls += 1
        self.inner.close()


class TrackingFS:
    """Store wrapper recording every path opened and every handle handed out."""

    def __init__(self, inner: FileSystem, *, stat_error: Exception | None = None) -> None:
        self.inner = inner
        self.stat_error = stat_error
        self.opened: list[str] = []
        self.handles: list[TrackedFile] = []

    def open(self, name: str) -> File:
        self.opened.append(name)
        handle = TrackedFile(self.inner.open(name), stat_error=self.stat_error)
        self.handles.append(handle)
        return handle

    @property
    def leaked(self) -> int:
        """Handles never closed."""
        return sum(1 for h in self.handles if h.close_calls == 0)

    @property
    def closed_once(self) -> bool:
        return all(h.close_calls == 1 for h in self.handles)


class NotFoundRecorder:
    """Not-found callback that remembers which paths it answered."""

    def __init__(self, body: str = "custom not found", status: int = 404) -> None:
        self.body = body
        self.status = status
        self.paths: list[str] = []

    async def __call__(self, writer: ResponseWriter, request: Request) -> None:
        self.paths.append(request.path)
        await writer.send_response(Response(self.body, status=self.status))

    @property
    def calls(self) -> int:
        return len(self.paths)


BUNDLE = {
    "index.html": "<h1>Home</h1>",
    "style.css": "body { color: red; }",
    "app.js": "console.log('hello');",
    "data.bin": b"\x00\x01\x02\x03",
    "404.html": "<h1>Not Found</h1>",
    ".env": "SECRET=1",
    "a/.git/config": "[core]",
    "static/.env": "SECRET=2",
    "css/main.css": "h1 { font-size: 2em; }",
    "docs/index.html": "<h1>Docs</h1>",
    "docs/guide.html": "<h1>Guide</h1>",
    "assets/logo.png": b"\x89PNG\r\n\x1a\n",
    "a/b/c.txt": "deep",
    "weird/index.html/inner.txt": "index is a directory",
}


@pytest.fixture
def memory_fs() -> MemoryFS:
    return MemoryFS(BUNDLE, modified=MODIFIED)


@pytest.fixture
def tracking(memory_fs: MemoryFS) -> TrackingFS:
    return TrackingFS(memory_fs)


@pytest.fixture
def recorder() -> NotFoundRecorder:
    return NotFoundRecorder()


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    """The same bundle laid out on disk."""
    static = tmp_path / "static"
    static.mkdir()
    for name, content in BUNDLE.items():
        target = static / name
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content)
    (static / "empty").mkdir()
    # Sibling outside the root, for traversal checks
    (tmp_path / "secret.txt").write_text("outside")
    return static
