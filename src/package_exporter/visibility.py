"""Hide ignored assets from the export scan for the duration of a run."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path

from .assets import AssetDatabase
from .host import EditorHost, SceneSetup
from .utils.paths import meta_path_for

__all__ = ["VisibilityToggler"]

logger = logging.getLogger(__name__)


class VisibilityToggler:
    """Mark ignored assets and their metadata hidden, then reveal them again."""

    def __init__(self, database: AssetDatabase, host: EditorHost) -> None:
        self.database = database
        self.host = host

    def _targets(self, asset_path: str) -> Iterator[Path]:
        yield self.database.absolute_path(asset_path)
        meta_file = self.database.absolute_path(meta_path_for(asset_path))
        if self.database.filesystem.exists(meta_file):
            yield meta_file

    def hide(self, ignored_paths: Sequence[str]) -> SceneSetup | None:
        """Hide *ignored_paths* and return the scene setup open beforehand.

        Nothing happens and ``None`` is returned when *ignored_paths* is
        empty. The open scenes are swapped for an empty one first so no
        scene holds on to the assets whose attributes change. If hiding
        fails, the files hidden so far are revealed and the scenes reopened
        before the error propagates.
        """

        if not ignored_paths:
            return None

        snapshot = self.host.get_scene_setup()
        self.host.open_empty_scene()
        filesystem = self.database.filesystem
        hidden: list[Path] = []
        try:
            for asset_path in ignored_paths:
                for target in self._targets(asset_path):
                    filesystem.set_hidden(target, True)
                    hidden.append(target)
            self.host.refresh()
        except Exception:
            logger.error("Hiding ignored assets failed; reverting %d file(s)", len(hidden))
            for target in reversed(hidden):
                filesystem.set_hidden(target, False)
            self.host.refresh()
            self.host.restore_scene_setup(snapshot)
            raise

        logger.info("Hid %d ignored asset(s)", len(ignored_paths))
        return snapshot

    def unhide(self, ignored_paths: Sequence[str]) -> None:
        """Clear the hidden attribute of *ignored_paths* and their metadata.

        Every path is attempted; the first failure is re-raised once the
        asset tree has been rescanned.
        """

        if not ignored_paths:
            return

        filesystem = self.database.filesystem
        failure: OSError | None = None
        for asset_path in ignored_paths:
            for target in self._targets(asset_path):
                try:
                    filesystem.set_hidden(target, False)
                except OSError as exc:
                    logger.exception("Failed to unhide %s", target)
                    if failure is None:
                        failure = exc
        self.host.refresh()
        if failure is not None:
            raise failure
        logger.info("Unhid %d ignored asset(s)", len(ignored_paths))

    def restore_context(self, snapshot: SceneSetup | None) -> None:
        """Reopen the scenes captured by :meth:`hide`."""

        if snapshot is None:
            return
        self.host.restore_scene_setup(snapshot)
