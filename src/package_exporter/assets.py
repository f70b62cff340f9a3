"""Enumerate project assets and resolve their stable identifiers."""

from __future__ import annotations

import logging
import os
import re
import uuid
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .config import ASSETS_DIR_NAME
from .filesystem import FileSystem, LocalFileSystem
from .utils.paths import META_SUFFIX, is_under, meta_path_for, normalize_asset_path

if TYPE_CHECKING:
    from .ignore import IgnoreSet

__all__ = ["AssetDatabase", "AssetRecord", "derive_identifier", "read_meta_guid"]

logger = logging.getLogger(__name__)

_GUID_PATTERN = re.compile(rb"^guid:\s*(?P<guid>[0-9a-fA-F]{8,})\s*$", re.MULTILINE)
_IDENTIFIER_NAMESPACE = uuid.UUID("5f0c3e1e-93b4-4f53-9a8e-1c1e4b7d2a60")


@dataclass(frozen=True, slots=True)
class AssetRecord:
    """Asset discovered under the export root during a single run."""

    path: str
    identifier: str
    is_ignored: bool = False


def read_meta_guid(data: bytes) -> str | None:
    """Return the ``guid`` declared in companion metadata *data* if any."""

    match = _GUID_PATTERN.search(data)
    if match is None:
        return None
    return match.group("guid").decode("ascii").lower()


def derive_identifier(asset_path: str) -> str:
    """Return a deterministic identifier for an asset lacking metadata."""

    return uuid.uuid5(_IDENTIFIER_NAMESPACE, asset_path).hex


def _is_skipped_name(name: str) -> bool:
    return name.startswith(".") or name.endswith("~") or name.endswith(META_SUFFIX)


class AssetDatabase:
    """Filesystem-backed view of the project's ``Assets`` directory.

    Paths exchanged with the database are project-relative POSIX strings,
    for example ``Assets/Foo/Script.cs``. Entries marked hidden through the
    shared :class:`~package_exporter.filesystem.FileSystem` disappear from
    the view after the next :meth:`refresh`, together with the subtree of a
    hidden folder.
    """

    def __init__(self, project_root: Path, filesystem: FileSystem | None = None) -> None:
        self.project_root = project_root.expanduser().resolve()
        self.filesystem = filesystem or LocalFileSystem()
        self._paths: tuple[str, ...] | None = None
        self._identifiers: dict[str, str] = {}

    def absolute_path(self, asset_path: str) -> Path:
        return self.project_root / normalize_asset_path(asset_path, self.project_root)

    def refresh(self) -> None:
        """Discard cached state so the next query rescans the tree."""

        self._paths = None
        self._identifiers.clear()
        logger.debug("Asset database refreshed for %s", self.project_root)

    def all_asset_paths(self) -> tuple[str, ...]:
        """Return every visible asset path, folders included, in sorted order."""

        if self._paths is None:
            self._paths = tuple(sorted(self._scan(ASSETS_DIR_NAME, recursive=True)))
        return self._paths

    def asset_paths_under(self, root: str) -> list[str]:
        """Return the visible asset paths below *root* (excluding *root* itself)."""

        root = normalize_asset_path(root, self.project_root)
        return [path for path in self.all_asset_paths() if path != root and is_under(path, root)]

    def records_under(self, root: str, ignore_set: IgnoreSet | None = None) -> list[AssetRecord]:
        """Return an :class:`AssetRecord` for every visible asset below *root*."""

        return [
            AssetRecord(
                path=path,
                identifier=self.asset_path_to_identifier(path),
                is_ignored=ignore_set is not None and ignore_set.is_ignored(path),
            )
            for path in self.asset_paths_under(root)
        ]

    def exists(self, asset_path: str) -> bool:
        return self.filesystem.exists(self.absolute_path(asset_path))

    def asset_path_to_identifier(self, asset_path: str) -> str:
        """Return the stable identifier of *asset_path*.

        The identifier is the ``guid`` recorded in the companion metadata
        file; assets without one fall back to an identifier derived from
        their path.
        """

        asset_path = normalize_asset_path(asset_path, self.project_root)
        cached = self._identifiers.get(asset_path)
        if cached is not None:
            return cached

        identifier: str | None = None
        meta_file = self.project_root / meta_path_for(asset_path)
        if self.filesystem.exists(meta_file):
            identifier = read_meta_guid(self.filesystem.read_bytes(meta_file))
        if identifier is None:
            identifier = derive_identifier(asset_path)
        self._identifiers[asset_path] = identifier
        return identifier

    def identifier_to_asset_path(self, identifier: str) -> str | None:
        """Return the asset path owning *identifier* or ``None`` when unknown."""

        for path in self.all_asset_paths():
            if self.asset_path_to_identifier(path) == identifier:
                return path
        return None

    def iter_files(self, root: str, *, recursive: bool = True) -> Iterator[tuple[str, Path]]:
        """Yield ``(asset_path, absolute_path)`` for visible files below *root*.

        Companion metadata files are yielded right after their asset when
        they exist and are visible themselves. Folder metadata is included
        so the archive keeps folder identifiers.
        """

        root = normalize_asset_path(root, self.project_root)
        for asset_path in self._scan(root, recursive=recursive):
            absolute = self.project_root / asset_path
            if absolute.is_file():
                yield asset_path, absolute
            meta_file = self.project_root / meta_path_for(asset_path)
            if meta_file.is_file() and not self.filesystem.is_hidden(meta_file):
                yield meta_path_for(asset_path), meta_file

    def _scan(self, root: str, *, recursive: bool) -> Iterator[str]:
        base = self.project_root / root
        if not base.is_dir():
            logger.debug("Asset root %s does not exist", base)
            return
        for current, dirnames, filenames in os.walk(base):
            current_path = Path(current)
            relative = current_path.relative_to(self.project_root).as_posix()
            visible_dirs = sorted(
                name
                for name in dirnames
                if not _is_skipped_name(name) and not self.filesystem.is_hidden(current_path / name)
            )
            dirnames[:] = visible_dirs if recursive else []
            entries = visible_dirs + [
                name
                for name in filenames
                if not _is_skipped_name(name) and not self.filesystem.is_hidden(current_path / name)
            ]
            for name in sorted(entries):
                yield f"{relative}/{name}"
