"""Track which assets are excluded from an exported package."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from .assets import AssetDatabase
from .utils.paths import normalize_asset_path

__all__ = ["IgnoreSet", "SETTING_SEPARATOR"]

logger = logging.getLogger(__name__)

SETTING_SEPARATOR = ","
"""Separator used when the identifiers are persisted as a single string."""


class IgnoreSet:
    """Ordered set of asset identifiers excluded from export.

    Paths handed to :meth:`add`, :meth:`remove` and :meth:`contains` are
    resolved to stable identifiers through *database*, so renaming an asset
    keeps it ignored. Membership uses exact identifier matches.
    """

    def __init__(self, database: AssetDatabase, identifiers: Iterable[str] = ()) -> None:
        self.database = database
        self._identifiers: dict[str, None] = {}
        for identifier in identifiers:
            self.add_identifier(identifier)

    @classmethod
    def from_setting(cls, database: AssetDatabase, value: str | None) -> IgnoreSet:
        """Build a set from the comma-joined form stored in settings."""

        items = (value or "").split(SETTING_SEPARATOR)
        return cls(database, (item for item in items if item.strip()))

    def to_setting(self) -> str:
        return SETTING_SEPARATOR.join(self._identifiers)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._identifiers))

    def __len__(self) -> int:
        return len(self._identifiers)

    def __bool__(self) -> bool:
        return bool(self._identifiers)

    def __repr__(self) -> str:
        return f"IgnoreSet({list(self._identifiers)!r})"

    @property
    def identifiers(self) -> tuple[str, ...]:
        return tuple(self._identifiers)

    def add_identifier(self, identifier: str) -> bool:
        """Insert *identifier*; return ``False`` when it was already present."""

        identifier = identifier.strip()
        if not identifier or identifier in self._identifiers:
            return False
        self._identifiers[identifier] = None
        return True

    def discard_identifier(self, identifier: str) -> bool:
        """Remove *identifier*; return ``False`` when it was not present."""

        identifier = identifier.strip()
        if identifier not in self._identifiers:
            return False
        del self._identifiers[identifier]
        return True

    def add(self, path: str) -> bool:
        """Ignore the asset at *path*."""

        identifier = self.database.asset_path_to_identifier(path)
        added = self.add_identifier(identifier)
        if added:
            logger.info("Ignoring %s (%s)", path, identifier)
        return added

    def remove(self, path: str) -> bool:
        """Stop ignoring the asset at *path*."""

        identifier = self.database.asset_path_to_identifier(path)
        removed = self.discard_identifier(identifier)
        if removed:
            logger.info("No longer ignoring %s (%s)", path, identifier)
        return removed

    def contains(self, path: str) -> bool:
        return self.database.asset_path_to_identifier(path) in self._identifiers

    __contains__ = contains

    def is_ignored(self, path: str) -> bool:
        """Return ``True`` when *path* or one of its parent folders is ignored."""

        if not self._identifiers:
            return False
        parts = normalize_asset_path(path, self.database.project_root).split("/")
        for depth in range(len(parts), 1, -1):
            if self.contains("/".join(parts[:depth])):
                return True
        return False

    def prune(self) -> list[str]:
        """Drop identifiers that no longer resolve to an existing asset."""

        known = {self.database.asset_path_to_identifier(path) for path in self.database.all_asset_paths()}
        stale = [identifier for identifier in self._identifiers if identifier not in known]
        for identifier in stale:
            del self._identifiers[identifier]
            logger.info("Dropped stale ignored asset identifier %s", identifier)
        return stale
