"""Command line entry points: edit exporter settings and export a package."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .assets import AssetDatabase
from .config import ExporterConfig, configure
from .errors import PackageExporterError
from .ignore import IgnoreSet
from .pipeline import PackageExporter
from .settings import default_settings_path, load_config, save_config

__all__ = ["main"]

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="package-exporter",
        description="Export Assets/<PackageName> of a game project into a package archive.",
    )
    parser.add_argument(
        "--project",
        type=Path,
        default=None,
        help="Project directory containing the Assets folder (default: current directory).",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Settings file to use (default: <project>/Library/PackageExporter.ini).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every step of the run.")
    sub = parser.add_subparsers(dest="cmd")

    p_settings = sub.add_parser("settings", help="Show or update the exporter settings")
    p_settings.add_argument("--package-name", default=None, help="Name of the exported package")
    p_settings.add_argument("--copyright", default=None, help="Notice prepended to scripts ('' to disable)")
    p_settings.add_argument("--output-path", default=None, help="Directory receiving the archive")
    p_settings.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="ASSET",
        help="Exclude an asset (e.g. Assets/Foo/Secret.asset); repeatable",
    )
    p_settings.add_argument(
        "--unignore",
        action="append",
        default=[],
        metavar="ASSET",
        help="Include a previously ignored asset again; repeatable",
    )
    p_settings.add_argument(
        "--prune",
        action="store_true",
        help="Forget ignored identifiers that no longer match an asset",
    )

    sub.add_parser("export", help="Export the package using the saved settings")
    return parser


def _print_settings(config: ExporterConfig, database: AssetDatabase, settings_path: Path) -> None:
    print(f"Settings file:  {settings_path}")
    print(f"Package name:   {config.package_name}")
    print(f"Copyright:      {config.copyright}")
    print(f"Output path:    {config.output_path}")
    print(f"Archive:        {config.destination if config.is_ready_to_export else '(not configured)'}")
    if not config.ignored_asset_ids:
        print("Ignored assets: (none)")
        return
    print("Ignored assets:")
    for identifier in config.ignored_asset_ids:
        path = database.identifier_to_asset_path(identifier) or "(missing)"
        print(f"  {identifier}  {path}")


def _run_settings(args: argparse.Namespace, config: ExporterConfig, settings_path: Path) -> int:
    database = AssetDatabase(config.project_root)
    ignore_set = IgnoreSet(database, config.ignored_asset_ids)
    changes: dict[str, object] = {}

    if args.package_name is not None:
        changes["package_name"] = args.package_name
    if args.copyright is not None:
        changes["copyright"] = args.copyright
    if args.output_path is not None:
        changes["output_path"] = args.output_path

    for asset in args.ignore:
        if not database.exists(asset):
            print(f"No such asset: {asset}", file=sys.stderr)
            return 1
        ignore_set.add(asset)
    for asset in args.unignore:
        ignore_set.remove(asset)
    if args.prune:
        for identifier in ignore_set.prune():
            print(f"Dropped {identifier}")

    if ignore_set.identifiers != config.ignored_asset_ids:
        changes["ignored_asset_ids"] = ignore_set.identifiers

    if changes:
        config = config.with_updates(**changes)
        save_config(config, settings_path=settings_path)

    _print_settings(config, database, settings_path)
    return 0


def _run_export(config: ExporterConfig) -> int:
    if not config.is_ready_to_export:
        print("Nothing to export: configure an output path and package name first.")
        return 0

    result = PackageExporter(config).export()
    if result is None:
        return 0
    print(f"Exported {len(result.exported)} asset(s) to {result.destination}")
    if result.ignored_paths:
        print(f"Left out {len(result.ignored_paths)} ignored asset(s)")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.cmd is None:
        parser.print_help()
        return 0

    try:
        project_root = configure(project_root=args.project).project_root
        settings_path = args.settings or default_settings_path(project_root)
        config = load_config(project_root, settings_path=settings_path)
        if args.cmd == "settings":
            return _run_settings(args, config, settings_path)
        return _run_export(config)
    except (PackageExporterError, OSError) as exc:
        logger.debug("Command %s failed", args.cmd, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
