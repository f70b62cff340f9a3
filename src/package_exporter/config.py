"""Configuration helpers for the package exporter."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Final

from .errors import ConfigurationError
from .utils.paths import coerce_required_path

__all__ = [
    "ASSETS_DIR_NAME",
    "DEFAULT_ARCHIVE_EXTENSION",
    "DEFAULT_SCRIPT_EXTENSIONS",
    "DEFAULT_THIRD_PARTY_DIRS",
    "ExporterConfig",
    "PROJECT_ROOT_ENV_VAR",
    "configure",
    "default_package_name",
    "get_config",
]

logger = logging.getLogger(__name__)

PROJECT_ROOT_ENV_VAR: Final[str] = "PACKAGE_EXPORTER_PROJECT_ROOT"
"""Environment variable that overrides the project directory."""

ASSETS_DIR_NAME: Final[str] = "Assets"
"""Name of the project directory holding every exportable asset."""

DEFAULT_ARCHIVE_EXTENSION: Final[str] = "zip"
"""Extension appended to the output file name of the written archive."""

DEFAULT_THIRD_PARTY_DIRS: Final[tuple[str, ...]] = ("ThirdParty",)
"""Directory names whose scripts never receive a copyright header."""

DEFAULT_SCRIPT_EXTENSIONS: Final[tuple[str, ...]] = (".cs", ".shader", ".cginc")
"""Text asset extensions eligible for copyright header injection."""

_PRODUCT_NAME_PATTERN = re.compile(r"^\s*productName:\s*(?P<name>.*?)\s*$", re.MULTILINE)


@dataclass(frozen=True, slots=True)
class ExporterConfig:
    """Settings consumed by a single export run."""

    project_root: Path
    package_name: str = ""
    copyright: str = ""
    output_path: str = ""
    ignored_asset_ids: tuple[str, ...] = ()
    archive_extension: str = DEFAULT_ARCHIVE_EXTENSION
    third_party_dirs: tuple[str, ...] = field(default=DEFAULT_THIRD_PARTY_DIRS)
    script_extensions: tuple[str, ...] = field(default=DEFAULT_SCRIPT_EXTENSIONS)

    def __post_init__(self) -> None:
        try:
            normalized = coerce_required_path(
                self.project_root,
                empty_error="Project root cannot be empty",
            )
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        object.__setattr__(self, "project_root", normalized)
        object.__setattr__(self, "package_name", self.package_name.strip())
        object.__setattr__(self, "output_path", self.output_path.strip())
        object.__setattr__(self, "archive_extension", self.archive_extension.strip().lstrip("."))
        object.__setattr__(self, "ignored_asset_ids", _unique(self.ignored_asset_ids))
        object.__setattr__(self, "third_party_dirs", tuple(self.third_party_dirs))
        object.__setattr__(
            self,
            "script_extensions",
            tuple(ext.lower() for ext in self.script_extensions),
        )

    @property
    def assets_root(self) -> Path:
        """Absolute location of the project's ``Assets`` directory."""

        return self.project_root / ASSETS_DIR_NAME

    @property
    def assets_path(self) -> str:
        """Project-relative path of the exported subtree."""

        return f"{ASSETS_DIR_NAME}/{self.package_name}" if self.package_name else ASSETS_DIR_NAME

    @property
    def output_file_name(self) -> str:
        return self.package_name

    @property
    def destination(self) -> Path:
        """Archive location ``{output_path}/{output_file_name}.{archive_extension}``."""

        return Path(self.output_path).expanduser() / f"{self.output_file_name}.{self.archive_extension}"

    @property
    def is_ready_to_export(self) -> bool:
        return bool(self.output_path) and bool(self.output_file_name)

    def with_updates(self, **changes: Any) -> ExporterConfig:
        """Return a copy of this configuration with *changes* applied."""

        return replace(self, **changes)


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for value in values:
        text = str(value).strip()
        if text:
            seen.setdefault(text, None)
    return tuple(seen)


def default_package_name(project_root: Path) -> str:
    """Return the product name declared by the project, or its folder name."""

    settings_file = project_root / "ProjectSettings" / "ProjectSettings.asset"
    try:
        text = settings_file.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return project_root.name
    match = _PRODUCT_NAME_PATTERN.search(text)
    if match and match.group("name"):
        return match.group("name").strip("'\"")
    logger.debug("No productName declared in %s", settings_file)
    return project_root.name


_CONFIG: ExporterConfig | None = None


def get_config() -> ExporterConfig:
    """Return the cached :class:`ExporterConfig` instance."""

    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _build_config()
    return _CONFIG


def configure(
    *,
    project_root: str | Path | None = None,
    **overrides: Any,
) -> ExporterConfig:
    """Rebuild the global configuration with optional overrides."""

    global _CONFIG
    _CONFIG = _build_config(project_root=project_root, **overrides)
    return _CONFIG


def _build_config(*, project_root: str | Path | None = None, **overrides: Any) -> ExporterConfig:
    if project_root is None:
        env_value = os.environ.get(PROJECT_ROOT_ENV_VAR)
        project_root = env_value if env_value else Path.cwd()
    if isinstance(project_root, str) and not project_root.strip():
        raise ConfigurationError("Project root overrides cannot be empty")
    return ExporterConfig(project_root=Path(project_root), **overrides)
