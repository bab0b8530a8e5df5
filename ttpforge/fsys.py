"""File system abstraction with an on-disk and an in-memory implementation."""

from __future__ import annotations

import errno
import os
import posixpath
import shutil
import stat
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping


def _as_bytes(data: bytes | str) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


class FileSystem(ABC):
    """The file operations the rest of the package relies on."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return whether a file or directory exists at ``path``."""

    @abstractmethod
    def is_dir(self, path: str) -> bool:
        """Return whether ``path`` is a directory; raise if it does not exist."""

    @abstractmethod
    def read_file(self, path: str) -> bytes:
        """Return the contents of the file at ``path``."""

    @abstractmethod
    def write_file(self, path: str, data: bytes | str) -> None:
        """Create or replace the file at ``path`` with ``data``."""

    @abstractmethod
    def mkdir_all(self, path: str) -> None:
        """Create the directory ``path`` and any missing parents."""

    @abstractmethod
    def remove_all(self, path: str) -> None:
        """Remove ``path`` and everything below it; a missing path is ignored."""

    @abstractmethod
    def walk(self, root: str) -> Iterator[tuple[str, bool]]:
        """Yield ``(path, is_dir)`` for ``root`` and everything below it, depth first in lexical order."""


class OsFileSystem(FileSystem):
    """The real file system of the running process."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return stat.S_ISDIR(os.stat(path).st_mode)

    def read_file(self, path: str) -> bytes:
        with open(path, "rb") as handle:
            return handle.read()

    def write_file(self, path: str, data: bytes | str) -> None:
        with open(path, "wb") as handle:
            handle.write(_as_bytes(data))

    def mkdir_all(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def remove_all(self, path: str) -> None:
        if not os.path.lexists(path):
            return
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.remove(path)

    def walk(self, root: str) -> Iterator[tuple[str, bool]]:
        is_dir = stat.S_ISDIR(os.lstat(root).st_mode)
        yield root, is_dir
        if is_dir:
            for name in sorted(os.listdir(root)):
                yield from self.walk(os.path.join(root, name))


class MemoryFileSystem(FileSystem):
    """A file system held entirely in memory, with '/'-separated paths."""

    _ROOTS = (".", "/")

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}
        self._dirs: set[str] = set()

    @staticmethod
    def _clean(path: str) -> str:
        if not path:
            return "."
        return posixpath.normpath(path.replace(os.sep, "/"))

    def _ancestors(self, path: str) -> list[str]:
        found = []
        parent = posixpath.dirname(path)
        while parent and parent not in self._ROOTS and parent != path:
            found.append(parent)
            path, parent = parent, posixpath.dirname(parent)
        return found

    def _is_under(self, candidate: str, parent: str) -> bool:
        if parent == ".":
            return candidate != "." and not candidate.startswith("/")
        if parent == "/":
            return candidate != "/" and candidate.startswith("/")
        return candidate.startswith(parent + "/")

    def exists(self, path: str) -> bool:
        p = self._clean(path)
        return p in self._ROOTS or p in self._files or p in self._dirs

    def is_dir(self, path: str) -> bool:
        p = self._clean(path)
        if p in self._ROOTS or p in self._dirs:
            return True
        if p in self._files:
            return False
        raise FileNotFoundError(errno.ENOENT, "no such file or directory", path)

    def read_file(self, path: str) -> bytes:
        p = self._clean(path)
        if p in self._files:
            return self._files[p]
        if p in self._dirs or p in self._ROOTS:
            raise IsADirectoryError(errno.EISDIR, "is a directory", path)
        raise FileNotFoundError(errno.ENOENT, "no such file or directory", path)

    def write_file(self, path: str, data: bytes | str) -> None:
        p = self._clean(path)
        if p in self._dirs or p in self._ROOTS:
            raise IsADirectoryError(errno.EISDIR, "is a directory", path)
        parent = posixpath.dirname(p)
        if parent:
            self.mkdir_all(parent)
        self._files[p] = _as_bytes(data)

    def mkdir_all(self, path: str) -> None:
        p = self._clean(path)
        if p in self._ROOTS:
            return
        chain = [p, *self._ancestors(p)]
        for entry in chain:
            if entry in self._files:
                raise FileExistsError(errno.EEXIST, "file exists", entry)
        self._dirs.update(chain)

    def remove_all(self, path: str) -> None:
        p = self._clean(path)
        self._files = {
            k: v for k, v in self._files.items() if k != p and not self._is_under(k, p)
        }
        self._dirs = {d for d in self._dirs if d != p and not self._is_under(d, p)}

    def walk(self, root: str) -> Iterator[tuple[str, bool]]:
        p = self._clean(root)
        is_dir = self.is_dir(p)
        yield p, is_dir
        if not is_dir:
            return
        entries = [e for e in (*self._dirs, *self._files) if self._is_under(e, p)]
        for entry in sorted(entries, key=lambda e: e.split("/")):
            yield entry, entry in self._dirs


def make_test_fs(files: Mapping[str, bytes | str]) -> MemoryFileSystem:
    """Build an in-memory file system from a path-to-contents mapping."""
    fsys = MemoryFileSystem()
    for path, contents in files.items():
        fsys.mkdir_all(posixpath.dirname(path.replace(os.sep, "/")))
        fsys.write_file(path, contents)
    return fsys