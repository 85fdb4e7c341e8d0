"""Read-only filesystem access for the parsers.

Parsers never touch ``os`` directly; they go through a FileSystem so
tests can run them against in-memory fixtures.

Exports:
- FileSystem: Protocol every backend implements
- DirEntry: One entry of a directory listing
- LocalFileSystem: The real filesystem (default)
- MemoryFileSystem: Files held in a dict, directories implied by paths
"""

from __future__ import annotations

import os
import posixpath
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Union, runtime_checkable

PathLike = Union[str, Path]


@dataclass(frozen=True)
class DirEntry:
    """A directory entry.

    Attributes:
        name: Entry name (no path).
        kind: "directory", "file", or "other" (symlinks, devices, ...).
    """

    name: str
    kind: str

    @property
    def is_dir(self) -> bool:
        return self.kind == "directory"

    @property
    def is_file(self) -> bool:
        return self.kind == "file"


@runtime_checkable
class FileSystem(Protocol):
    """Minimal read-only capability used by all parsers."""

    def exists(self, path: PathLike) -> bool:
        """True if a file or directory exists at path."""
        ...

    def is_dir(self, path: PathLike) -> bool:
        """True if path is a directory."""
        ...

    def read_file(self, path: PathLike) -> str:
        """Return the whole file as text. Raises OSError if unreadable."""
        ...

    def list_dir(self, path: PathLike) -> list[DirEntry]:
        """Return the entries of a directory. Raises OSError if unreadable."""
        ...

    def file_size(self, path: PathLike) -> int:
        """Return the size of a file in bytes."""
        ...


class LocalFileSystem:
    """FileSystem backed by the real disk.

    Listings are sorted by name and symlinks are reported as "other".
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def exists(self, path: PathLike) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: PathLike) -> bool:
        return os.path.isdir(path)

    def read_file(self, path: PathLike) -> str:
        return Path(path).read_text(encoding=self.encoding)

    def list_dir(self, path: PathLike) -> list[DirEntry]:
        entries = []
        with os.scandir(path) as it:
            for entry in it:
                if entry.is_dir(follow_symlinks=False):
                    kind = "directory"
                elif entry.is_file(follow_symlinks=False):
                    kind = "file"
                else:
                    kind = "other"
                entries.append(DirEntry(entry.name, kind))
        return sorted(entries, key=lambda e: e.name)

    def file_size(self, path: PathLike) -> int:
        return os.stat(path).st_size


class MemoryFileSystem:
    """FileSystem holding text files in memory.

    Paths are normalized to POSIX form, so ``os.path.join`` output from
    the parsers resolves on every platform. Directories exist implicitly
    for every parent of a stored file; empty directories can be added
    with ``add_dir``.

    Example:
        fs = MemoryFileSystem({"/proj/.planning/STATE.md": "Status: Executing"})
        fs.list_dir("/proj/.planning")  # [DirEntry("STATE.md", "file")]
    """

    def __init__(self, files: Mapping[str, str] | None = None) -> None:
        self._files: dict[str, str] = {}
        self._dirs: set[str] = {"/"}
        for path, text in (files or {}).items():
            self.add_file(path, text)

    @staticmethod
    def _norm(path: PathLike) -> str:
        text = str(path).replace("\\", "/")
        if not text.startswith("/"):
            text = "/" + text
        return posixpath.normpath(text)

    def add_file(self, path: PathLike, text: str) -> None:
        norm = self._norm(path)
        self._files[norm] = text
        self.add_dir(posixpath.dirname(norm))

    def add_dir(self, path: PathLike) -> None:
        norm = self._norm(path)
        while norm not in self._dirs:
            self._dirs.add(norm)
            norm = posixpath.dirname(norm)

    def exists(self, path: PathLike) -> bool:
        norm = self._norm(path)
        return norm in self._files or norm in self._dirs

    def is_dir(self, path: PathLike) -> bool:
        return self._norm(path) in self._dirs

    def read_file(self, path: PathLike) -> str:
        norm = self._norm(path)
        if norm not in self._files:
            raise FileNotFoundError(norm)
        return self._files[norm]

    def list_dir(self, path: PathLike) -> list[DirEntry]:
        norm = self._norm(path)
        if norm not in self._dirs:
            raise NotADirectoryError(norm)
        entries = [
            DirEntry(posixpath.basename(d), "directory")
            for d in self._dirs
            if d != norm and posixpath.dirname(d) == norm
        ]
        entries.extend(
            DirEntry(posixpath.basename(f), "file")
            for f in self._files
            if posixpath.dirname(f) == norm
        )
        return sorted(entries, key=lambda e: e.name)

    def file_size(self, path: PathLike) -> int:
        return len(self.read_file(path).encode("utf-8"))


def resolve_fs(fs: FileSystem | None) -> FileSystem:
    """Return fs, or a LocalFileSystem when None."""
    return fs if fs is not None else LocalFileSystem()
