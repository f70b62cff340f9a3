"""Persistence helpers for user-configurable exporter settings."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from PySide6.QtCore import QSettings

from .assets import AssetDatabase
from .config import ExporterConfig, default_package_name
from .ignore import SETTING_SEPARATOR, IgnoreSet
from .utils.paths import coerce_optional_path

__all__ = [
    "SETTINGS_FILE_ENV_VAR",
    "SETTINGS_GROUP",
    "default_settings_path",
    "load_config",
    "save_config",
]

logger = logging.getLogger(__name__)

SETTINGS_GROUP: Final[str] = "PackageExporter"
"""Group holding every exporter key inside the settings file."""

SETTINGS_FILE_ENV_VAR: Final[str] = "PACKAGE_EXPORTER_SETTINGS"
"""Environment variable pointing at an alternative settings file."""

_SETTINGS_RELATIVE_PATH: Final[Path] = Path("Library") / "PackageExporter.ini"


def default_settings_path(project_root: Path) -> Path:
    """Return the settings file used for *project_root*.

    The file lives in the project's ``Library`` folder, which holds local
    editor state and is neither shipped in builds nor under version control.
    """

    override = coerce_optional_path(os.environ.get(SETTINGS_FILE_ENV_VAR))
    if override is not None:
        return override
    return project_root / _SETTINGS_RELATIVE_PATH


def _settings_storage(path: Path) -> QSettings:
    return QSettings(str(path), QSettings.Format.IniFormat)


def _coerce_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    # INI values containing commas come back as string lists.
    if isinstance(value, Sequence):
        return SETTING_SEPARATOR.join(str(item) for item in value).strip()
    return str(value).strip()


def load_config(project_root: Path, *, settings_path: Path | None = None) -> ExporterConfig:
    """Return the exporter configuration persisted for *project_root*.

    An empty package name falls back to the project's product name.
    """

    path = settings_path or default_settings_path(project_root)
    store = _settings_storage(path)
    store.beginGroup(SETTINGS_GROUP)
    package_name = _coerce_text(store.value("PackageName"))
    copyright_notice = _coerce_text(store.value("Copyright"))
    output_path = _coerce_text(store.value("OutputPath"))
    ignored = _coerce_text(store.value("IgnoredAssetGUIds"))
    store.endGroup()

    if not package_name:
        package_name = default_package_name(project_root)
        logger.debug("Package name defaulted to %s", package_name)

    return ExporterConfig(
        project_root=project_root,
        package_name=package_name,
        copyright=copyright_notice,
        output_path=output_path,
        ignored_asset_ids=IgnoreSet.from_setting(AssetDatabase(project_root), ignored).identifiers,
    )


def save_config(config: ExporterConfig, *, settings_path: Path | None = None) -> Path:
    """Persist *config* using Qt's :class:`~PySide6.QtCore.QSettings`."""

    path = settings_path or default_settings_path(config.project_root)
    path.parent.mkdir(parents=True, exist_ok=True)
    store = _settings_storage(path)

    store.beginGroup(SETTINGS_GROUP)
    store.setValue("PackageName", config.package_name)
    store.setValue("Copyright", config.copyright)
    store.setValue("OutputPath", config.output_path)
    ignore_set = IgnoreSet(AssetDatabase(config.project_root), config.ignored_asset_ids)
    store.setValue("IgnoredAssetGUIds", ignore_set.to_setting())
    store.endGroup()

    store.sync()
    logger.debug("Saved exporter settings to %s", path)
    return path
