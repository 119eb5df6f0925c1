"""static404 — static files over ASGI with your own "not found".

Serves a file store (a directory, an in-memory bundle, anything with an
``open``) and sends every failure through one callback: missing files,
hidden ``.dot`` paths, directories without an index document.

Basic usage::

    from static404 import Dir, FileServer, Response

    async def not_found(writer, request):
        await writer.send_response(
            Response("We are sorry - this resource was not found", status=404)
        )

    app = FileServer(Dir("./static"), not_found)

Mounted under a prefix::

    from static404 import strip_prefix

    app = strip_prefix("/static", FileServer(Dir("./static"), not_found))
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "Dir",
    "File",
    "FileInfo",
    "FileNotFound",
    "FileServer",
    "FileServerConfig",
    "FileStoreError",
    "FileSystem",
    "InvalidPath",
    "MemoryFS",
    "NotFoundHandler",
    "PermissionDenied",
    "Request",
    "Response",
    "ResponseStartedError",
    "ResponseWriter",
    "Static404Error",
    "default_not_found",
    "local_redirect",
    "not_found_page",
    "serve_content",
    "strip_prefix",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import static404`` free of anyio until a server is built.
    """
    if name in ("FileServer", "local_redirect"):
        from static404 import handler as _handler

        return getattr(_handler, name)

    if name == "FileServerConfig":
        from static404.config import FileServerConfig

        return FileServerConfig

    if name in ("Dir", "File", "FileInfo", "FileSystem", "MemoryFS"):
        from static404 import fs as _fs

        return getattr(_fs, name)

    if name == "serve_content":
        from static404.content import serve_content

        return serve_content

    if name in ("NotFoundHandler", "default_not_found", "not_found_page"):
        from static404 import notfound as _notfound

        return getattr(_notfound, name)

    if name == "strip_prefix":
        from static404.prefix import strip_prefix

        return strip_prefix

    if name == "Request":
        from static404.http.request import Request

        return Request

    if name in ("Response", "ResponseWriter"):
        from static404.http import response as _resp

        return getattr(_resp, name)

    if name in (
        "ConfigurationError",
        "FileNotFound",
        "FileStoreError",
        "InvalidPath",
        "PermissionDenied",
        "ResponseStartedError",
        "Static404Error",
    ):
        from static404 import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
