"""Temporary copyright headers for first-party scripts."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePosixPath

from .assets import AssetDatabase
from .config import DEFAULT_SCRIPT_EXTENSIONS, DEFAULT_THIRD_PARTY_DIRS
from .ignore import IgnoreSet

__all__ = ["ScriptBackup", "ScriptRewriter", "build_header"]

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"


class ScriptBackup:
    """Original contents of every script rewritten during one run."""

    def __init__(self) -> None:
        self._entries: dict[Path, bytes] = {}

    def record(self, path: Path, original: bytes) -> None:
        if path in self._entries:
            raise ValueError(f"{path} has already been backed up")
        self._entries[path] = original

    def items(self) -> Iterator[tuple[Path, bytes]]:
        return iter(list(self._entries.items()))

    def paths(self) -> tuple[Path, ...]:
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)


def build_header(copyright_notice: str, original: bytes) -> bytes:
    """Return *original* prefixed with a comment line and a blank line."""

    newline = b"\r\n" if b"\r\n" in original else b"\n"
    header = f"// {copyright_notice}".encode("utf-8") + newline + newline
    if original.startswith(_UTF8_BOM):
        return _UTF8_BOM + header + original[len(_UTF8_BOM):]
    return header + original


class ScriptRewriter:
    """Inject a copyright notice into scripts and put them back afterwards."""

    def __init__(
        self,
        database: AssetDatabase,
        *,
        ignore_set: IgnoreSet | None = None,
        third_party_dirs: Iterable[str] = DEFAULT_THIRD_PARTY_DIRS,
        script_extensions: Iterable[str] = DEFAULT_SCRIPT_EXTENSIONS,
    ) -> None:
        self.database = database
        self.ignore_set = ignore_set
        self.third_party_dirs = frozenset(third_party_dirs)
        self.script_extensions = tuple(ext.lower() for ext in script_extensions)

    def is_script(self, asset_path: str) -> bool:
        return asset_path.lower().endswith(self.script_extensions)

    def is_third_party(self, asset_path: str) -> bool:
        return any(part in self.third_party_dirs for part in PurePosixPath(asset_path).parts)

    def should_rewrite(self, asset_path: str) -> bool:
        if not self.is_script(asset_path) or self.is_third_party(asset_path):
            return False
        return self.ignore_set is None or not self.ignore_set.is_ignored(asset_path)

    def apply(self, candidate_paths: Iterable[str], copyright_notice: str) -> ScriptBackup:
        """Prefix every eligible script in *candidate_paths* with *copyright_notice*.

        Returns the backup required by :meth:`restore`. An empty notice
        leaves every file untouched and yields an empty backup. When a read
        or write fails, the scripts rewritten so far are restored before the
        error propagates.
        """

        backup = ScriptBackup()
        if not copyright_notice:
            return backup

        filesystem = self.database.filesystem
        try:
            for asset_path in candidate_paths:
                if not self.should_rewrite(asset_path):
                    continue
                absolute = self.database.absolute_path(asset_path)
                if not absolute.is_file():
                    continue
                original = filesystem.read_bytes(absolute)
                backup.record(absolute, original)
                filesystem.write_bytes(absolute, build_header(copyright_notice, original))
                logger.debug("Added copyright header to %s", asset_path)
        except Exception:
            logger.error("Rewriting scripts failed; restoring %d script(s)", len(backup))
            self.restore(backup)
            raise

        logger.info("Added copyright header to %d script(s)", len(backup))
        return backup

    def restore(self, backup: ScriptBackup) -> None:
        """Write every backed up script back verbatim and clear *backup*.

        All entries are attempted; the first failure is re-raised afterwards.
        """

        filesystem = self.database.filesystem
        failure: BaseException | None = None
        for path, original in backup.items():
            try:
                filesystem.write_bytes(path, original)
            except OSError as exc:
                logger.exception("Failed to restore %s", path)
                if failure is None:
                    failure = exc
        restored = len(backup)
        backup.clear()
        if failure is not None:
            raise failure
        if restored:
            logger.info("Restored %d script(s)", restored)
