"""static404 exception hierarchy.

Shared by the file stores, the response writer and the handler so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class Static404Error(Exception):
    """Base for all static404-specific errors."""


class ConfigurationError(Static404Error):
    """Raised when a ``FileServerConfig`` value is invalid."""


class ResponseStartedError(Static404Error):
    """Raised when a second response is started on one ``ResponseWriter``.

    Each request produces exactly one response. Hitting this means two
    collaborators (say, the content server and a not-found callback) both
    tried to answer the same request.
    """


@dataclass(frozen=True, slots=True)
class FileStoreError(Static404Error):
    """A file store could not open or stat *path*.

    The handler treats every subclass the same way: the request goes to
    the not-found callback. The distinction only shows up in logs.
    """

    path: str
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.path}: {self.detail}"
        return self.path


class FileNotFound(FileStoreError):  # noqa: N818
    """The path does not exist in the store."""


class PermissionDenied(FileStoreError):  # noqa: N818
    """The store refused access to the path."""


class InvalidPath(FileStoreError):
    """The path contains characters the store cannot represent."""
