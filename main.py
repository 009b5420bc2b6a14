from __future__ import annotations

import argparse
from pathlib import Path

from loguru import logger

from app.viewmodels.main_vm import MainVM
from core.config import LabelerConfig
from core.services.index_service import IndexService
from core.services.rename_service import RenameService
from core.services.task_runner import BoundedTaskRunner
from infrastructure.filesystem import LocalFileSystem
from infrastructure.logging import init_logging
from infrastructure.metadata_reader import MediaMetadataReader
from infrastructure.settings import JsonSettings, load_settings

BASE_DIR = Path(__file__).parent


def _parse_default_sort(settings: JsonSettings | None) -> list[tuple[str, bool]]:
    # Expect a list like: [{"field":"taken_date","asc":true}, ...]
    if settings is None:
        return []
    raw = settings.get("sorting.defaults", [])
    result: list[tuple[str, bool]] = []
    if isinstance(raw, list):
        for item in raw:
            if isinstance(item, dict) and "field" in item:
                field = str(item.get("field"))
                asc = bool(item.get("asc", True))
                result.append((field, asc))
    return result


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        prog="photo-labeler",
        description="Rename photos after the captions embedded in their metadata.",
    )
    parser.add_argument("--settings", type=Path, default=BASE_DIR / "settings.json")
    parser.add_argument("--log-dir", default=None, help="Directory for rotating log files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="Show derived labels and dates")
    list_cmd.add_argument("folder")
    list_cmd.add_argument("-r", "--recursive", action="store_true")

    rename_cmd = sub.add_parser("rename", help="Rename labelled photos")
    rename_cmd.add_argument("folder")
    rename_cmd.add_argument("-r", "--recursive", action="store_true")
    prefix = rename_cmd.add_mutually_exclusive_group()
    prefix.add_argument("--prefix", dest="prefix", action="store_true", default=None)
    prefix.add_argument("--no-prefix", dest="prefix", action="store_false")
    return parser


def build_view_model(settings: JsonSettings | None) -> MainVM:
    """Wire services from `settings` (defaults when None)."""
    config = LabelerConfig.from_settings(settings)
    runner = BoundedTaskRunner(config.concurrency)
    fs = LocalFileSystem()
    indexer = IndexService(MediaMetadataReader(), fs, config=config, runner=runner)
    renamer = RenameService(fs, config=config, runner=runner)
    return MainVM(indexer, renamer, default_sort=_parse_default_sort(settings))


def _print_folders(vm: MainVM) -> None:
    for folder in vm.folders:
        print(f"\n{folder.folder_path}")
        for row in vm.rows(folder):
            print(f"  {row.taken_text:<19}  {row.file_name}  ->  {row.label_text}")
        for message in folder.errors:
            print(f"  ! {message}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    init_logging(args.log_dir, level="DEBUG" if args.verbose else "INFO")
    settings = load_settings(args.settings)

    folder = Path(args.folder)
    if not folder.is_dir():
        logger.error("Not a folder: {}", folder)
        return 2

    vm = build_view_model(settings)
    vm.load_folder(str(folder), recursive=args.recursive)

    if args.command == "list":
        _print_folders(vm)
        return 0

    results = vm.rename_all(add_sort_prefix=args.prefix)
    failed = False
    for path, result in results.items():
        print(
            f"{path}: {result.files_renamed} of {result.total_files} renamed, "
            f"{len(result.errors)} errors"
        )
        for message in result.errors:
            print(f"  ! {message}")
        failed = failed or result.has_errors
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
