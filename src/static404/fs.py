"""Virtual file stores.

A store maps slash-separated paths to readable, seekable handles. The
handler only needs ``open`` and, on the returned handle, ``stat`` and
``close``; the content server also reads and seeks.

Two stores ship with the package:

- ``Dir`` serves a directory tree from the local disk.
- ``MemoryFS`` serves an in-memory asset bundle (tests, embedded assets).

Any object with a matching ``open`` works as a store::

    class ZipStore:
        def open(self, name: str) -> File: ...

Store methods are blocking. The handler calls them through
``anyio.to_thread`` so they never stall the event loop.
"""

from __future__ import annotations

import errno
import io
import os
import stat as stat_module
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from static404._internal.paths import base_name, clean_path
from static404.errors import FileNotFound, FileStoreError, InvalidPath, PermissionDenied


@dataclass(frozen=True, slots=True)
class FileInfo:
    """Metadata for one entry in a store."""

    name: str
    size: int
    modified: datetime
    is_dir: bool = False


@runtime_checkable
class File(Protocol):
    """An open entry. Directories are opened too; they just can't be read."""

    def read(self, size: int = -1) -> bytes: ...

    def seek(self, offset: int, whence: int = 0) -> int: ...

    def stat(self) -> FileInfo: ...

    def close(self) -> None: ...


@runtime_checkable
class FileSystem(Protocol):
    """Anything that can open slash-separated paths.

    ``open`` raises a ``FileStoreError`` subclass when the path cannot be
    opened. The handler treats any other exception as a miss too.
    """

    def open(self, name: str) -> File: ...


def _timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=UTC)


def _map_os_error(name: str, exc: OSError) -> FileStoreError:
    """Translate an ``OSError`` into the store error hierarchy."""
    if isinstance(exc, (FileNotFoundError, NotADirectoryError)) or exc.errno in (
        errno.ENOENT,
        errno.ENOTDIR,
    ):
        return FileNotFound(name, "file does not exist")
    if isinstance(exc, PermissionError):
        return PermissionDenied(name, "permission denied")
    return FileStoreError(name, exc.strerror or str(exc))


# -- Local directory tree --


class _LocalFile:
    """A regular file opened from a ``Dir``."""

    __slots__ = ("_fh", "_name")

    def __init__(self, fh: io.BufferedReader, name: str) -> None:
        self._fh = fh
        self._name = name

    def read(self, size: int = -1) -> bytes:
        return self._fh.read(size)

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._fh.seek(offset, whence)

    def stat(self) -> FileInfo:
        try:
            st = os.fstat(self._fh.fileno())
        except OSError as exc:
            raise _map_os_error(self._name, exc) from exc
        return FileInfo(
            name=self._name,
            size=st.st_size,
            modified=_timestamp(st.st_mtime),
            is_dir=stat_module.S_ISDIR(st.st_mode),
        )

    def close(self) -> None:
        self._fh.close()


class _LocalDirectory:
    """A directory opened from a ``Dir``. Only ``stat`` is meaningful."""

    __slots__ = ("_name", "_path")

    def __init__(self, path: Path, name: str) -> None:
        self._path = path
        self._name = name

    def read(self, size: int = -1) -> bytes:
        raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), str(self._path))

    def seek(self, offset: int, whence: int = 0) -> int:
        raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), str(self._path))

    def stat(self) -> FileInfo:
        try:
            st = self._path.stat()
        except OSError as exc:
            raise _map_os_error(self._name, exc) from exc
        return FileInfo(
            name=self._name,
            size=st.st_size,
            modified=_timestamp(st.st_mtime),
            is_dir=stat_module.S_ISDIR(st.st_mode),
        )

    def close(self) -> None:
        # Nothing is held open for a directory
        return None


class Dir:
    """A file store rooted at a directory on the local disk.

    Names are cleaned as rooted paths before being joined to the root,
    so ``..`` segments can never climb out of it. Symlinks are followed
    only while their target stays under the root; one pointing outside
    it reads as a missing file.

    Usage::

        store = Dir("./public")
        f = store.open("/css/site.css")
    """

    __slots__ = ("_root",)

    def __init__(self, root: str | os.PathLike[str] = ".") -> None:
        self._root = Path(root or ".")

    @property
    def root(self) -> Path:
        return self._root

    def __repr__(self) -> str:
        return f"Dir({str(self._root)!r})"

    def open(self, name: str) -> File:
        if "\x00" in name or (os.sep != "/" and os.sep in name):
            raise InvalidPath(name, "invalid character in file path")

        cleaned = clean_path("/" + name)
        segments = [segment for segment in cleaned.split("/") if segment]
        full = self._root.joinpath(*segments)
        if not full.resolve().is_relative_to(self._root.resolve()):
            raise FileNotFound(name, "file does not exist")
        display = base_name(cleaned) if segments else self._root.resolve().name or "/"

        try:
            fh = open(full, "rb")  # noqa: SIM115
        except IsADirectoryError:
            return _LocalDirectory(full, display)
        except OSError as exc:
            # Windows refuses to open directories with PermissionError
            if full.is_dir():
                return _LocalDirectory(full, display)
            raise _map_os_error(name, exc) from exc
        return _LocalFile(fh, display)


# -- In-memory bundle --


class _MemoryFile:
    """A handle onto one ``MemoryFS`` entry. Each open gets its own cursor."""

    __slots__ = ("_buffer", "_info")

    def __init__(self, data: bytes, info: FileInfo) -> None:
        self._buffer = io.BytesIO(data)
        self._info = info

    def read(self, size: int = -1) -> bytes:
        if self._info.is_dir:
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), self._info.name)
        return self._buffer.read(size)

    def seek(self, offset: int, whence: int = 0) -> int:
        if self._info.is_dir:
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), self._info.name)
        return self._buffer.seek(offset, whence)

    def stat(self) -> FileInfo:
        if self._buffer.closed:
            raise FileStoreError(self._info.name, "file already closed")
        return self._info

    def close(self) -> None:
        self._buffer.close()


class MemoryFS:
    """A read-only file store backed by a mapping of paths to contents.

    Keys are slash paths (leading slash optional); ``str`` values are
    encoded as UTF-8. Parent directories are created implicitly and ``/``
    always exists::

        store = MemoryFS({
            "index.html": "<h1>Home</h1>",
            "docs/index.html": "<h1>Docs</h1>",
            "img/logo.png": png_bytes,
        })

    All entries share one modification time, *modified* or the moment the
    store was built.
    """

    __slots__ = ("_dirs", "_files", "_modified")

    def __init__(
        self,
        files: Mapping[str, bytes | str],
        *,
        modified: datetime | None = None,
    ) -> None:
        self._modified = modified or datetime.now(UTC)
        self._files: dict[str, bytes] = {}
        self._dirs: set[str] = {"/"}

        for key, content in files.items():
            path = clean_path("/" + key)
            if path == "/":
                msg = f"file key {key!r} names the root directory"
                raise ValueError(msg)
            data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
            self._files[path] = data

            parent = path.rsplit("/", 1)[0]
            while parent:
                self._dirs.add(parent)
                parent = parent.rsplit("/", 1)[0]

        clash = self._dirs & self._files.keys()
        if clash:
            msg = f"paths used as both file and directory: {sorted(clash)}"
            raise ValueError(msg)

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        path = clean_path("/" + name)
        return path in self._files or path in self._dirs

    def open(self, name: str) -> File:
        if "\x00" in name:
            raise InvalidPath(name, "invalid character in file path")

        path = clean_path("/" + name)
        if path in self._files:
            data = self._files[path]
            info = FileInfo(base_name(path), len(data), self._modified)
            return _MemoryFile(data, info)
        if path in self._dirs:
            info = FileInfo(base_name(path), 0, self._modified, is_dir=True)
            return _MemoryFile(b"", info)
        raise FileNotFound(name, "file does not exist")
