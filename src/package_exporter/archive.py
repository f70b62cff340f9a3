"""Archive writers producing the exported package file."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from .assets import AssetDatabase

__all__ = ["ArchiveWriter", "ZipArchiveWriter"]

logger = logging.getLogger(__name__)


@runtime_checkable
class ArchiveWriter(Protocol):
    """Protocol implemented by objects that write package archives."""

    def write(self, source_root: str, destination: Path, *, recursive: bool = True) -> None:
        """Write every visible asset below *source_root* into *destination*."""


class ZipArchiveWriter:
    """Write visible assets and their metadata into a deflated zip archive.

    Members are stored under their project-relative asset path, so
    extracting the archive into another project's root recreates the
    exported subtree. Hidden assets are left out because the scan goes
    through *database*.
    """

    def __init__(self, database: AssetDatabase, *, compresslevel: int | None = None) -> None:
        self.database = database
        self.compresslevel = compresslevel

    def write(self, source_root: str, destination: Path, *, recursive: bool = True) -> None:
        count = 0
        with zipfile.ZipFile(
            destination,
            "w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=self.compresslevel,
        ) as archive:
            for asset_path, absolute in self.database.iter_files(source_root, recursive=recursive):
                archive.writestr(asset_path, self.database.filesystem.read_bytes(absolute))
                count += 1
        logger.info("Packaged %d file(s) -> %s", count, destination)
