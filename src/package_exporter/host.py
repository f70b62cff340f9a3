"""Editor host services wrapped around an export run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .assets import AssetDatabase

__all__ = ["EditorHost", "ProjectHost", "SceneSetup"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SceneSetup:
    """Snapshot of the scenes open in the host when it was captured."""

    scene_paths: tuple[str, ...] = ()
    active_scene: str | None = None


@runtime_checkable
class EditorHost(Protocol):
    """Host editor services the export pipeline brackets its work with."""

    def get_auto_refresh(self) -> bool:
        """Return whether the host recompiles automatically on file changes."""

    def set_auto_refresh(self, enabled: bool) -> None:
        """Enable or disable automatic recompilation."""

    def get_scene_setup(self) -> SceneSetup:
        """Return a snapshot of the currently open scenes."""

    def open_empty_scene(self) -> None:
        """Replace the open scenes with an empty transient scene."""

    def restore_scene_setup(self, setup: SceneSetup) -> None:
        """Reopen the scenes recorded in *setup*."""

    def refresh(self) -> None:
        """Rescan the asset tree so file attribute changes become visible."""


@dataclass(slots=True)
class ProjectHost:
    """:class:`EditorHost` used when exporting outside of a running editor.

    Auto-refresh and the open scene list only live in memory; asset rescans
    are forwarded to *database*.
    """

    database: AssetDatabase
    auto_refresh: bool = True
    scene_setup: SceneSetup = field(default_factory=SceneSetup)

    def get_auto_refresh(self) -> bool:
        return self.auto_refresh

    def set_auto_refresh(self, enabled: bool) -> None:
        self.auto_refresh = enabled
        logger.debug("Auto refresh %s", "enabled" if enabled else "disabled")

    def get_scene_setup(self) -> SceneSetup:
        return self.scene_setup

    def open_empty_scene(self) -> None:
        self.scene_setup = SceneSetup()
        logger.debug("Opened empty scene")

    def restore_scene_setup(self, setup: SceneSetup) -> None:
        self.scene_setup = setup
        logger.debug("Restored scene setup %s", setup)

    def refresh(self) -> None:
        self.database.refresh()
