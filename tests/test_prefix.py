"""Tests for static404.prefix — mounting under a URL prefix."""

from typing import Any

from static404.fs import MemoryFS
from static404.handler import FileServer
from static404.prefix import strip_prefix
from static404.testing import TestClient

from .conftest import NotFoundRecorder


class TestStripPrefix:
    async def test_serves_under_prefix(self, memory_fs: MemoryFS) -> None:
        app = strip_prefix("/static", FileServer(memory_fs))
        async with TestClient(app) as client:
            response = await client.get("/static/css/main.css")

        assert response.status == 200
        assert response.text == "h1 { font-size: 2em; }"

    async def test_outside_prefix_goes_to_not_found(
        self, memory_fs: MemoryFS, recorder: NotFoundRecorder
    ) -> None:
        app = strip_prefix("/static", FileServer(memory_fs), not_found=recorder)
        async with TestClient(app) as client:
            response = await client.get("/style.css")

        assert response.status == 404
        assert recorder.paths == ["/style.css"]

    async def test_bare_prefix_serves_root_index(self, memory_fs: MemoryFS) -> None:
        app = strip_prefix("/static", FileServer(memory_fs))
        async with TestClient(app) as client:
            response = await client.get("/static")

        assert response.status == 200
        assert response.text == "<h1>Home</h1>"

    async def test_redirect_is_relative_to_original_url(self, memory_fs: MemoryFS) -> None:
        app = strip_prefix("/static", FileServer(memory_fs))
        async with TestClient(app) as client:
            response = await client.get("/static/docs?lang=en")

        assert response.status == 301
        assert response.header("location") == "docs/?lang=en"

    async def test_hidden_files_still_blocked(
        self, memory_fs: MemoryFS, recorder: NotFoundRecorder
    ) -> None:
        app = strip_prefix("/static", FileServer(memory_fs, recorder))
        async with TestClient(app) as client:
            response = await client.get("/static/.env")

        assert response.status == 404
        assert recorder.paths == ["/.env"]

    async def test_scope_rewritten_for_child(self) -> None:
        seen: list[dict[str, Any]] = []

        async def child(scope: dict[str, Any], receive: Any, send: Any) -> None:
            seen.append(scope)

        app = strip_prefix("/static", child)
        async with TestClient(app) as client:
            await client.get("/static/a/b.txt")

        assert seen[0]["path"] == "/a/b.txt"
        assert seen[0]["raw_path"] == b"/a/b.txt"
        assert seen[0]["root_path"] == "/static"

    async def test_lifespan_passes_through(self) -> None:
        seen: list[str] = []

        async def child(scope: dict[str, Any], receive: Any, send: Any) -> None:
            seen.append(scope["type"])

        await strip_prefix("/static", child)({"type": "lifespan"}, None, None)

        assert seen == ["lifespan"]

    async def test_empty_prefix_is_transparent(self, memory_fs: MemoryFS) -> None:
        app = strip_prefix("", FileServer(memory_fs))
        async with TestClient(app) as client:
            response = await client.get("/style.css")

        assert response.status == 200
