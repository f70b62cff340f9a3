"""Top-level package for the package exporter.

The exporter writes ``Assets/<PackageName>`` of a game project into an
archive while temporarily stamping first-party scripts with a copyright
notice and hiding ignored assets.
"""

from __future__ import annotations

from .config import ExporterConfig
from .pipeline import ExportResult, PackageExporter, export_package
from .processors import Processor, register_processor

__all__ = [
    "ExportResult",
    "ExporterConfig",
    "PackageExporter",
    "Processor",
    "__version__",
    "export_package",
    "register_processor",
]

__version__ = "0.1.0"
