"""Utilities for coercing user-provided values into project paths."""

from __future__ import annotations

from os import PathLike
from pathlib import Path, PurePosixPath
from typing import Any

__all__ = [
    "META_SUFFIX",
    "coerce_optional_path",
    "coerce_required_path",
    "is_under",
    "meta_path_for",
    "normalize_asset_path",
]

META_SUFFIX = ".meta"
"""Suffix of the companion metadata file that sits next to every asset."""


def _normalize_path(path: Path) -> Path:
    return path.expanduser().resolve()


def coerce_required_path(
    value: str | Path | PathLike[str],
    *,
    empty_error: str | None = None,
) -> Path:
    """Return *value* coerced into an absolute :class:`~pathlib.Path`.

    Parameters
    ----------
    value:
        Path-like object that must resolve to a non-empty filesystem location.
    empty_error:
        Optional custom error message raised when *value* resolves to an
        empty string.
    """

    if isinstance(value, Path):
        candidate = value
    else:
        text = str(value).strip()
        if not text:
            msg = empty_error or "Path value cannot be empty."
            raise ValueError(msg)
        candidate = Path(text)

    return _normalize_path(candidate)


def coerce_optional_path(candidate: Any) -> Path | None:
    """Coerce *candidate* into a :class:`~pathlib.Path` when possible.

    Returns ``None`` when the provided value cannot be interpreted as a path.
    """

    if isinstance(candidate, Path):
        return _normalize_path(candidate)
    if isinstance(candidate, str | PathLike):
        text = str(candidate).strip()
        if text:
            return _normalize_path(Path(text))
    return None


def normalize_asset_path(value: str | PathLike[str], project_root: Path | None = None) -> str:
    """Return *value* as a project-relative POSIX path such as ``Assets/Foo/A.cs``.

    Absolute paths are made relative to *project_root*; a :class:`ValueError`
    is raised when they live outside of it.
    """

    text = str(value).strip().replace("\\", "/")
    if not text:
        raise ValueError("Asset path cannot be empty.")
    candidate = Path(text)
    if candidate.is_absolute():
        if project_root is None:
            raise ValueError(f"Cannot relativize {text!r} without a project root.")
        candidate = candidate.resolve().relative_to(project_root.resolve())
    normalized = PurePosixPath(candidate.as_posix()).as_posix()
    return normalized.rstrip("/")


def meta_path_for(asset_path: str) -> str:
    """Return the companion metadata path for *asset_path*."""

    return asset_path + META_SUFFIX


def is_under(asset_path: str, root: str) -> bool:
    """Return ``True`` when *asset_path* equals *root* or lives beneath it."""

    root = root.rstrip("/")
    return asset_path == root or asset_path.startswith(root + "/")
