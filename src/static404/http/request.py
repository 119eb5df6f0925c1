"""Immutable HTTP request.

Frozen metadata built from an ASGI scope. The one field the handler is
allowed to correct, the path, is changed through ``with_path`` so the
original scope and the rebound request never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from static404._internal.asgi import Scope


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable view of an ASGI HTTP request.

    ``query_string`` is the raw query without the leading ``?``.
    ``headers`` keeps the raw ASGI byte pairs; use ``header()`` to read one.
    """

    method: str
    path: str
    query_string: str = ""
    headers: tuple[tuple[bytes, bytes], ...] = ()
    http_version: str = "1.1"

    # The ASGI scope this request was built from (mutated by with_path)
    scope: Scope = field(default_factory=dict, repr=False, compare=False)

    @property
    def url(self) -> str:
        """Path plus query string, as the client sent it."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of header *name* (case-insensitive)."""
        key = name.lower().encode("latin-1")
        for raw_name, value in self.headers:
            if raw_name.lower() == key:
                return value.decode("latin-1")
        return default

    def with_path(self, path: str) -> Request:
        """Return a copy with *path*, writing it back into the ASGI scope.

        Anything else holding the same scope (an outer wrapper, a
        not-found callback reading ``request.scope``) sees the new path.
        """
        self.scope["path"] = path
        return replace(self, path=path)

    @classmethod
    def from_asgi(cls, scope: Scope) -> Request:
        """Create a Request from an ASGI HTTP scope."""
        return cls(
            method=scope.get("method", "GET"),
            path=scope.get("path", ""),
            query_string=scope.get("query_string", b"").decode("latin-1"),
            headers=tuple(scope.get("headers", ())),
            http_version=scope.get("http_version", "1.1"),
            scope=scope,
        )
