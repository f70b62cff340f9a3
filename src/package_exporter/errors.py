"""Exception types raised by the package exporter."""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "ExportInProgressError",
    "PackageExporterError",
]


class PackageExporterError(Exception):
    """Base class for errors raised by :mod:`package_exporter`."""


class ConfigurationError(PackageExporterError, ValueError):
    """Raised when exporter settings contain values that cannot be used."""


class ExportInProgressError(PackageExporterError, RuntimeError):
    """Raised when an export is requested while another one is still running."""
