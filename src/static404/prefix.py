"""Mount an ASGI app under a URL prefix.

The file server resolves paths relative to its store root, so the host
strips the mount prefix first::

    app = strip_prefix("/static", FileServer(Dir("./assets"), not_found))

``GET /static/css/site.css`` then reaches the file server as
``/css/site.css``.
"""

from static404._internal.asgi import ASGIApp, Receive, Scope, Send
from static404._internal.invoke import invoke
from static404.http.request import Request
from static404.http.response import ResponseWriter
from static404.notfound import NotFoundHandler, default_not_found


def strip_prefix(
    prefix: str,
    app: ASGIApp,
    *,
    not_found: NotFoundHandler = default_not_found,
) -> ASGIApp:
    """Wrap *app* so it only sees paths under *prefix*, with the prefix removed.

    HTTP requests whose path does not start with *prefix* go to
    *not_found*. Non-HTTP scopes (lifespan) pass through untouched.
    An empty prefix leaves paths unchanged.
    """
    raw_prefix = prefix.encode("utf-8")

    async def stripped(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not prefix:
            await app(scope, receive, send)
            return

        path: str = scope.get("path", "")
        if not path.startswith(prefix):
            await invoke(not_found, ResponseWriter(send), Request.from_asgi(scope))
            return

        child = dict(scope)
        child["path"] = path[len(prefix) :]
        raw_path: bytes | None = scope.get("raw_path")
        if raw_path and raw_path.startswith(raw_prefix):
            child["raw_path"] = raw_path[len(raw_prefix) :]
        else:
            child.pop("raw_path", None)
        child["root_path"] = scope.get("root_path", "") + prefix
        await app(child, receive, send)

    return stripped
