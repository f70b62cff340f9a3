"""Tests covering persisted exporter settings."""

from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("PySide6.QtCore")

from package_exporter.config import ExporterConfig  # noqa: E402
from package_exporter.settings import (  # noqa: E402
    SETTINGS_FILE_ENV_VAR,
    default_settings_path,
    load_config,
    save_config,
)


def test_settings_round_trip(project_root: Path, tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.ini"
    config = ExporterConfig(
        project_root=project_root,
        package_name="Foo",
        copyright="Acme 2024",
        output_path=str(tmp_path / "out"),
        ignored_asset_ids=("aaaa", "bbbb"),
    )

    save_config(config, settings_path=settings_path)
    loaded = load_config(project_root, settings_path=settings_path)

    assert loaded == config


def test_missing_settings_fall_back_to_defaults(project_root: Path, tmp_path: Path) -> None:
    loaded = load_config(project_root, settings_path=tmp_path / "absent.ini")

    assert loaded.package_name == project_root.name
    assert loaded.copyright == ""
    assert loaded.output_path == ""
    assert loaded.ignored_asset_ids == ()
    assert not loaded.is_ready_to_export


def test_default_settings_path_lives_in_library(
    project_root: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    assert default_settings_path(project_root) == project_root / "Library" / "PackageExporter.ini"

    override = tmp_path / "custom.ini"
    monkeypatch.setenv(SETTINGS_FILE_ENV_VAR, str(override))
    assert default_settings_path(project_root) == override.resolve()


def test_save_creates_library_folder(project_root: Path) -> None:
    path = save_config(ExporterConfig(project_root=project_root, package_name="Foo"))

    assert path == project_root.resolve() / "Library" / "PackageExporter.ini"
    assert path.exists()


def test_comma_separated_values_survive_round_trip(project_root: Path, tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.ini"
    config = ExporterConfig(
        project_root=project_root,
        package_name="Foo",
        copyright="Acme, Inc.",
        output_path=str(tmp_path / "out"),
        ignored_asset_ids=("cccc", "aaaa", "bbbb"),
    )

    save_config(config, settings_path=settings_path)
    loaded = load_config(project_root, settings_path=settings_path)

    assert loaded.copyright == "Acme, Inc."
    assert loaded.ignored_asset_ids == ("cccc", "aaaa", "bbbb")
