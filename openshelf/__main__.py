"""
OpenShelf command line.

Usage:
    python -m openshelf [--config PATH] refresh [--reset]
    python -m openshelf [--config PATH] show
"""

import argparse
import asyncio
import json
import sys
from datetime import datetime

from .cache.metainfo import MetaInfoCache
from .config import get_config_path, load_config
from .database.connection import close_db, init_db
from .database.store import MetadataStore
from .errors import ConfigurationError
from .index.reader import MetaInfoReader
from .metadata.refresh_task import LibraryRefresher
from .tasks.scan_task import ScanTaskStatus, ScanTaskTracker
from .utils.config_updater import ConfigUpdater
from .utils.logging_setup import setup_logging_from_config


async def run_refresh(args: argparse.Namespace) -> int:
    """Run one library scan and wait for it."""
    config = load_config(args.config)
    # stdout carries the task JSON
    setup_logging_from_config(config.logging, console_stream=sys.stderr)

    await init_db()
    try:
        refresher = LibraryRefresher(
            store=MetadataStore(),
            cache=MetaInfoCache(
                ttl=config.cache.metainfo_ttl_seconds, max_entries=config.cache.max_entries
            ),
            tracker=ScanTaskTracker(retention_seconds=config.refresh.task_retention_seconds),
            config=config,
            config_updater=ConfigUpdater(get_config_path()),
        )

        try:
            started = await refresher.start_refresh(reset_index=args.reset)
        except ConfigurationError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return 1

        task = await refresher.join(started["task_id"])
        print(json.dumps(task.to_dict(), indent=2, ensure_ascii=False))
        return 0 if task.status == ScanTaskStatus.COMPLETED else 1
    finally:
        await close_db()


async def run_show(args: argparse.Namespace) -> int:
    """Print a summary of the stored index."""
    config = load_config(args.config)
    setup_logging_from_config(config.logging, log_to_console=False)

    await init_db()
    try:
        reader = MetaInfoReader(
            MetadataStore(),
            MetaInfoCache(
                ttl=config.cache.metainfo_ttl_seconds, max_entries=config.cache.max_entries
            ),
            key=config.refresh.metainfo_key,
        )
        meta_info = await reader.get(config.openlist.root_path)
    finally:
        await close_db()

    if meta_info is None:
        print("No metainfo stored yet. Run 'refresh' first.")
        return 1

    last_refresh = datetime.fromtimestamp(meta_info.last_refresh / 1000)
    print(f"Folders:      {len(meta_info.folders)}")
    print(f"Unmatched:    {meta_info.failed_count}")
    print(f"Last refresh: {last_refresh:%Y-%m-%d %H:%M:%S}")
    print()

    for key, info in sorted(meta_info.folders.items(), key=lambda item: item[1].folder_name):
        if info.failed:
            detail = "unmatched"
        elif info.season_number is not None:
            detail = f"{info.media_type} S{info.season_number:02d} tmdb:{info.tmdb_id}"
        else:
            detail = f"{info.media_type} tmdb:{info.tmdb_id}"
        print(f"{key}  {info.folder_name}  ->  {info.title}  [{detail}]")

    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="openshelf",
        description="Index an OpenList media library against TMDB",
    )
    parser.add_argument(
        "--config",
        help="Path to config.yaml (default: ./config.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    refresh_parser = subparsers.add_parser("refresh", help="Scan the library and update the index")
    refresh_parser.add_argument(
        "--reset",
        action="store_true",
        help="Discard the stored index and resolve every folder again",
    )
    refresh_parser.set_defaults(handler=run_refresh)

    show_parser = subparsers.add_parser("show", help="Print the stored index")
    show_parser.set_defaults(handler=run_show)

    args = parser.parse_args(argv)
    return asyncio.run(args.handler(args))


if __name__ == "__main__":
    sys.exit(main())
