"""Export pipeline bracketing the archive write with reversible project edits."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from . import processors as processor_registry
from .archive import ArchiveWriter, ZipArchiveWriter
from .assets import AssetDatabase, AssetRecord
from .config import ExporterConfig
from .errors import ExportInProgressError
from .filesystem import FileSystem
from .host import EditorHost, ProjectHost, SceneSetup
from .ignore import IgnoreSet
from .processors import Processor
from .rewriter import ScriptBackup, ScriptRewriter
from .visibility import VisibilityToggler

__all__ = [
    "ExportResult",
    "LoggingProgress",
    "PackageExporter",
    "PipelineState",
    "ProgressReporter",
    "export_package",
]

logger = logging.getLogger(__name__)

_EXPORT_LOCK = threading.Lock()


class ProgressReporter(Protocol):
    """Receives coarse progress updates while an export runs."""

    def update(self, title: str, activity: str, fraction: float) -> None:
        """Report that *activity* started with *fraction* of the work done."""

    def clear(self) -> None:
        """Called once the run finished, successfully or not."""


class LoggingProgress:
    """:class:`ProgressReporter` that writes each step to the log."""

    def update(self, title: str, activity: str, fraction: float) -> None:
        logger.info("%s: %s (%d%%)", title, activity, round(fraction * 100))

    def clear(self) -> None:
        return None


@dataclass(slots=True)
class PipelineState:
    """Everything a single export run has to put back before it returns."""

    previous_auto_refresh: bool
    previous_scene_setup: SceneSetup | None = None
    hidden_paths: tuple[str, ...] = ()
    backup: ScriptBackup = field(default_factory=ScriptBackup)


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Summary of a completed export."""

    destination: Path
    exported: tuple[str, ...]
    ignored_paths: tuple[str, ...]
    rewritten_paths: tuple[Path, ...]
    records: tuple[AssetRecord, ...] = ()


class PackageExporter:
    """Export ``Assets/<package>`` into an archive and restore the project.

    Parameters
    ----------
    config:
        Settings for the run. Exporting is skipped when the output path or
        the output file name is empty.
    database:
        Asset database of the project. Defaults to one rooted at
        ``config.project_root`` using *filesystem*.
    host:
        Editor services toggled around the export. Defaults to a
        :class:`~package_exporter.host.ProjectHost`.
    archive_writer:
        Writer producing the archive. Defaults to
        :class:`~package_exporter.archive.ZipArchiveWriter`.
    processors:
        Callable returning the processors notified before and after the
        export. Defaults to :func:`package_exporter.processors.discover`.
    progress:
        Reporter receiving progress updates.
    """

    def __init__(
        self,
        config: ExporterConfig,
        *,
        database: AssetDatabase | None = None,
        filesystem: FileSystem | None = None,
        host: EditorHost | None = None,
        archive_writer: ArchiveWriter | None = None,
        processors: Callable[[], Sequence[Processor]] | None = None,
        progress: ProgressReporter | None = None,
    ) -> None:
        self.config = config
        self.database = database or AssetDatabase(config.project_root, filesystem)
        self.host = host or ProjectHost(self.database)
        self.archive_writer = archive_writer or ZipArchiveWriter(self.database)
        self.processor_source = processors or processor_registry.discover
        self.progress = progress or LoggingProgress()
        self.ignore_set = IgnoreSet(self.database, config.ignored_asset_ids)
        self.rewriter = ScriptRewriter(
            self.database,
            ignore_set=self.ignore_set,
            third_party_dirs=config.third_party_dirs,
            script_extensions=config.script_extensions,
        )
        self.toggler = VisibilityToggler(self.database, self.host)

    def export(self) -> ExportResult | None:
        """Run the export; return ``None`` when the configuration is incomplete.

        Raises :class:`~package_exporter.errors.ExportInProgressError` when
        another export is running in this process.
        """

        if not self.config.is_ready_to_export:
            logger.info("Export skipped: output path or output file name is not configured")
            return None

        if not _EXPORT_LOCK.acquire(blocking=False):
            raise ExportInProgressError("Another package export is already running")
        try:
            return self._run()
        finally:
            _EXPORT_LOCK.release()
            self.progress.clear()

    def _report(self, activity: str, fraction: float) -> None:
        self.progress.update(f"Exporting {self.config.package_name}", activity, fraction)

    def _run(self) -> ExportResult:
        config = self.config
        state = PipelineState(previous_auto_refresh=self.host.get_auto_refresh())
        self.host.set_auto_refresh(False)

        failure: BaseException | None = None
        processors: Sequence[Processor] = ()
        records: list[AssetRecord] = []
        unignored: list[str] = []
        rewritten: tuple[Path, ...] = ()
        try:
            self._report("Pre-processing assets...", 0.0)
            processors = tuple(self.processor_source())
            for processor in processors:
                processor.on_pre_process()

            records = self.database.records_under(config.assets_path, self.ignore_set)
            ignored = [record.path for record in records if record.is_ignored]
            unignored = [record.path for record in records if not record.is_ignored]
            logger.info(
                "Exporting %s: %d asset(s), %d ignored",
                config.assets_path,
                len(unignored),
                len(ignored),
            )

            self._report("Hiding ignored assets...", 0.1)
            state.previous_scene_setup = self.toggler.hide(ignored)
            state.hidden_paths = tuple(ignored)

            self._report("Modifying scripts...", 0.25)
            state.backup = self.rewriter.apply(unignored, config.copyright)
            rewritten = state.backup.paths()

            self._report("Writing package file...", 0.5)
            destination = config.destination
            destination.parent.mkdir(parents=True, exist_ok=True)
            self.archive_writer.write(config.assets_path, destination, recursive=True)
        except BaseException as exc:
            logger.error("Export of %s failed: %s", config.package_name, exc)
            failure = exc

        self._report("Restoring modified scripts...", 0.75)
        failure = _cleanup("Restoring scripts", lambda: self.rewriter.restore(state.backup), failure)

        self._report("Un-hiding ignored assets...", 0.95)
        failure = _cleanup("Un-hiding assets", lambda: self.toggler.unhide(state.hidden_paths), failure)

        if failure is None:
            self._report("Post-processing assets...", 1.0)
            try:
                for processor in processors:
                    processor.on_post_process()
            except BaseException as exc:
                failure = exc

        failure = _cleanup(
            "Restoring auto refresh",
            lambda: self.host.set_auto_refresh(state.previous_auto_refresh),
            failure,
        )
        failure = _cleanup(
            "Restoring scene setup",
            lambda: self.toggler.restore_context(state.previous_scene_setup),
            failure,
        )

        if failure is not None:
            raise failure

        logger.info("Exported %s to %s", config.package_name, config.destination)
        return ExportResult(
            destination=config.destination,
            exported=tuple(unignored),
            ignored_paths=state.hidden_paths,
            rewritten_paths=rewritten,
            records=tuple(records),
        )


def _cleanup(
    description: str,
    action: Callable[[], None],
    failure: BaseException | None,
) -> BaseException | None:
    """Run *action* and return the error the export should raise, if any.

    An earlier *failure* takes precedence; a cleanup error raised on top of
    it is only logged.
    """

    try:
        action()
    except Exception as exc:
        if failure is None:
            return exc
        logger.exception("%s failed while handling an earlier error", description)
    return failure


def export_package(config: ExporterConfig, **kwargs) -> ExportResult | None:
    """Convenience wrapper running a :class:`PackageExporter` once."""

    return PackageExporter(config, **kwargs).export()
