from __future__ import annotations

from pathlib import Path

import pytest

from package_exporter.config import (
    DEFAULT_ARCHIVE_EXTENSION,
    PROJECT_ROOT_ENV_VAR,
    ExporterConfig,
    configure,
    default_package_name,
    get_config,
)
from package_exporter.errors import ConfigurationError


def test_default_project_root_is_cwd(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Without overrides the working directory is treated as the project."""

    monkeypatch.chdir(tmp_path)
    configure(project_root=None)

    assert get_config().project_root == tmp_path.resolve()


def test_environment_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """An environment variable should control the default project root."""

    override = tmp_path / "env_project"
    monkeypatch.setenv(PROJECT_ROOT_ENV_VAR, str(override))
    configure(project_root=None)

    assert get_config().project_root == override.resolve()


def test_blank_project_root_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        configure(project_root="   ")


def test_derived_paths(tmp_path: Path) -> None:
    config = ExporterConfig(
        project_root=tmp_path,
        package_name=" Foo ",
        output_path=str(tmp_path / "out"),
    )

    assert config.package_name == "Foo"
    assert config.assets_path == "Assets/Foo"
    assert config.assets_root == tmp_path.resolve() / "Assets"
    assert config.output_file_name == "Foo"
    assert config.destination == tmp_path / "out" / f"Foo.{DEFAULT_ARCHIVE_EXTENSION}"
    assert config.is_ready_to_export


@pytest.mark.parametrize(
    ("package_name", "output_path"),
    [("", "/tmp/out"), ("Foo", ""), ("", "")],
)
def test_export_requires_output_path_and_name(tmp_path: Path, package_name: str, output_path: str) -> None:
    config = ExporterConfig(project_root=tmp_path, package_name=package_name, output_path=output_path)

    assert not config.is_ready_to_export


def test_ignored_identifiers_are_unique_and_ordered(tmp_path: Path) -> None:
    config = ExporterConfig(project_root=tmp_path, ignored_asset_ids=("b", "a", "b", " ", "c"))

    assert config.ignored_asset_ids == ("b", "a", "c")


def test_with_updates_returns_new_config(tmp_path: Path) -> None:
    config = ExporterConfig(project_root=tmp_path, package_name="Foo")
    updated = config.with_updates(copyright="Acme 2024", archive_extension=".unitypackage")

    assert config.copyright == ""
    assert updated.copyright == "Acme 2024"
    assert updated.destination.name == "Foo.unitypackage"


def test_default_package_name_reads_product_name(tmp_path: Path) -> None:
    settings_dir = tmp_path / "ProjectSettings"
    settings_dir.mkdir()
    (settings_dir / "ProjectSettings.asset").write_text(
        "PlayerSettings:\n  companyName: Acme\n  productName: Space Game\n",
        encoding="utf-8",
    )

    assert default_package_name(tmp_path) == "Space Game"


def test_default_package_name_falls_back_to_directory(tmp_path: Path) -> None:
    project = tmp_path / "MyProject"
    project.mkdir()

    assert default_package_name(project) == "MyProject"
