"""Pytest configuration helpers for package_exporter tests."""

from __future__ import annotations

import hashlib
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Ensure the source directory is importable without requiring an editable install.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from package_exporter.assets import AssetDatabase  # noqa: E402
from package_exporter.filesystem import LocalFileSystem  # noqa: E402
from package_exporter.host import ProjectHost, SceneSetup  # noqa: E402

AssetWriter = Callable[..., Path]


@pytest.fixture(autouse=True)
def reset_exporter_state(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure each test runs with default configuration and no processors."""

    from package_exporter.config import PROJECT_ROOT_ENV_VAR, configure
    from package_exporter.processors import clear_processors

    monkeypatch.delenv(PROJECT_ROOT_ENV_VAR, raising=False)
    monkeypatch.delenv("PACKAGE_EXPORTER_SETTINGS", raising=False)
    clear_processors()
    configure(project_root=None)
    yield
    clear_processors()


def guid_for(name: str) -> str:
    """Return a 32 character hex guid derived from *name*."""

    return hashlib.md5(name.encode("utf-8")).hexdigest()


@pytest.fixture()
def project_root(tmp_path: Path) -> Path:
    """Return an empty project directory containing an ``Assets`` folder."""

    root = tmp_path / "project"
    (root / "Assets").mkdir(parents=True)
    return root


@pytest.fixture()
def write_asset(project_root: Path) -> AssetWriter:
    """Return a helper creating an asset and its companion metadata file."""

    def _write(asset_path: str, content: bytes | str = b"", *, guid: str | None = None, meta: bool = True) -> Path:
        target = project_root / asset_path
        target.parent.mkdir(parents=True, exist_ok=True)
        data = content.encode("utf-8") if isinstance(content, str) else content
        target.write_bytes(data)
        if meta:
            identifier = guid or guid_for(asset_path)
            (project_root / f"{asset_path}.meta").write_text(
                f"fileFormatVersion: 2\nguid: {identifier}\n",
                encoding="utf-8",
            )
        return target

    return _write


class RecordingFileSystem(LocalFileSystem):
    """Local filesystem that records every mutation relative to the project."""

    def __init__(self, project_root: Path) -> None:
        super().__init__()
        self.project_root = project_root.resolve()
        self.writes: list[str] = []
        self.hidden_calls: list[tuple[str, bool]] = []
        self.fail_writes_for: set[str] = set()
        self.fail_hidden_for: set[str] = set()

    def _relative(self, path: Path) -> str:
        return path.resolve().relative_to(self.project_root).as_posix()

    def write_bytes(self, path: Path, data: bytes) -> None:
        relative = self._relative(path)
        if relative in self.fail_writes_for:
            raise PermissionError(f"write denied: {relative}")
        self.writes.append(relative)
        super().write_bytes(path, data)

    def set_hidden(self, path: Path, hidden: bool) -> None:
        relative = self._relative(path)
        if hidden and relative in self.fail_hidden_for:
            raise PermissionError(f"attribute change denied: {relative}")
        self.hidden_calls.append((relative, hidden))
        super().set_hidden(path, hidden)


class RecordingHost(ProjectHost):
    """Project host that records the editor calls made by the pipeline."""

    def __init__(self, database: AssetDatabase, *, auto_refresh: bool = True) -> None:
        super().__init__(
            database,
            auto_refresh=auto_refresh,
            scene_setup=SceneSetup(scene_paths=("Assets/Scenes/Main.unity",), active_scene="Assets/Scenes/Main.unity"),
        )
        self.calls: list[str] = []

    def set_auto_refresh(self, enabled: bool) -> None:
        self.calls.append(f"set_auto_refresh:{enabled}")
        super().set_auto_refresh(enabled)

    def get_scene_setup(self) -> SceneSetup:
        self.calls.append("get_scene_setup")
        return super().get_scene_setup()

    def open_empty_scene(self) -> None:
        self.calls.append("open_empty_scene")
        super().open_empty_scene()

    def restore_scene_setup(self, setup: SceneSetup) -> None:
        self.calls.append("restore_scene_setup")
        super().restore_scene_setup(setup)

    def refresh(self) -> None:
        self.calls.append("refresh")
        super().refresh()


@pytest.fixture()
def filesystem(project_root: Path) -> RecordingFileSystem:
    return RecordingFileSystem(project_root)


@pytest.fixture()
def database(project_root: Path, filesystem: RecordingFileSystem) -> AssetDatabase:
    return AssetDatabase(project_root, filesystem)


@pytest.fixture()
def host(database: AssetDatabase) -> RecordingHost:
    return RecordingHost(database)
