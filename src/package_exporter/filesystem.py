"""File access and hidden-attribute helpers used during an export run."""

from __future__ import annotations

import logging
import os
import stat
import sys
from pathlib import Path
from typing import Protocol, runtime_checkable

__all__ = ["FileSystem", "LocalFileSystem"]

logger = logging.getLogger(__name__)


@runtime_checkable
class FileSystem(Protocol):
    """Protocol describing the file operations the exporter relies on."""

    def exists(self, path: Path) -> bool:
        """Return ``True`` when *path* exists."""

    def read_bytes(self, path: Path) -> bytes:
        """Return the raw contents of *path*."""

    def write_bytes(self, path: Path, data: bytes) -> None:
        """Replace the contents of *path* with *data*."""

    def is_hidden(self, path: Path) -> bool:
        """Return ``True`` when *path* carries the hidden attribute."""

    def set_hidden(self, path: Path, hidden: bool) -> None:
        """Set or clear the hidden attribute of *path*."""


class LocalFileSystem:
    """:class:`FileSystem` backed by the real disk.

    The hidden attribute maps to ``FILE_ATTRIBUTE_HIDDEN`` on Windows and to
    the ``UF_HIDDEN`` flag where :func:`os.chflags` exists. Other platforms
    have no such attribute, so hidden files are tracked in a mask owned by
    this instance; the asset database consults the same instance when it
    scans the tree.
    """

    def __init__(self) -> None:
        self._masked: set[Path] = set()
        if sys.platform == "win32":
            self.mode = "windows"
        elif hasattr(os, "chflags"):
            self.mode = "chflags"
        else:
            self.mode = "mask"

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read_bytes(self, path: Path) -> bytes:
        return path.read_bytes()

    def write_bytes(self, path: Path, data: bytes) -> None:
        path.write_bytes(data)

    def is_hidden(self, path: Path) -> bool:
        if self.mode == "windows":
            attributes = getattr(os.stat(path), "st_file_attributes", 0)
            return bool(attributes & stat.FILE_ATTRIBUTE_HIDDEN)
        if self.mode == "chflags":
            return bool(os.stat(path).st_flags & stat.UF_HIDDEN)
        return self._key(path) in self._masked

    def set_hidden(self, path: Path, hidden: bool) -> None:
        if self.mode == "windows":
            self._set_windows_hidden(path, hidden)
        elif self.mode == "chflags":
            flags = os.stat(path).st_flags
            flags = flags | stat.UF_HIDDEN if hidden else flags & ~stat.UF_HIDDEN
            os.chflags(path, flags)
        else:
            key = self._key(path)
            if not key.exists():
                raise FileNotFoundError(f"No such file or directory: {str(path)!r}")
            if hidden:
                self._masked.add(key)
            else:
                self._masked.discard(key)
        logger.debug("%s %s", "Hid" if hidden else "Unhid", path)

    @staticmethod
    def _key(path: Path) -> Path:
        return path.expanduser().resolve()

    @staticmethod
    def _set_windows_hidden(path: Path, hidden: bool) -> None:  # pragma: no cover - Windows only
        import ctypes

        attributes = os.stat(path).st_file_attributes
        if hidden:
            attributes |= stat.FILE_ATTRIBUTE_HIDDEN
        else:
            attributes &= ~stat.FILE_ATTRIBUTE_HIDDEN
        if not ctypes.windll.kernel32.SetFileAttributesW(str(path), attributes):
            raise ctypes.WinError()
