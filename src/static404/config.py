"""File server configuration.

FileServerConfig is a frozen dataclass: immutable after creation and shared
read-only by every concurrent request.
"""

from dataclasses import dataclass

from static404.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class FileServerConfig:
    """Settings for a ``FileServer``. Immutable after creation.

    Defaults match the usual static-site layout::

        config = FileServerConfig(index="default.htm", chunk_size=16 * 1024)
    """

    # Served in place of a directory whose request path ends with "/"
    index: str = "index.html"

    # Bytes read from the store per body message
    chunk_size: int = 64 * 1024

    def __post_init__(self) -> None:
        if not self.index or "/" in self.index or "\\" in self.index:
            msg = f"index must be a single path segment, got {self.index!r}"
            raise ConfigurationError(msg)
        if self.index.startswith("."):
            # Hidden names are always rejected, so such an index could never be served.
            msg = f"index must not be a hidden file, got {self.index!r}"
            raise ConfigurationError(msg)
        if self.chunk_size <= 0:
            msg = f"chunk_size must be positive, got {self.chunk_size}"
            raise ConfigurationError(msg)
