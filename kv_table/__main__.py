"""Interface for ``python -m kv_table``."""

from __future__ import annotations

import logging
import os
from argparse import ArgumentParser
from typing import TYPE_CHECKING

from ._version import version
from .persistence import load, save
from .stores import FileStore, RedisStore


if TYPE_CHECKING:
    from collections.abc import Sequence

    from .stores import Store


__all__ = ["main"]

logger = logging.getLogger(__name__)


def _build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="kv_table", description="Inspect and transform saved tables.")
    _ = parser.add_argument("-v", "--version", action="version", version=version)
    _ = parser.add_argument(
        "--redis-url",
        default=os.environ.get("KV_TABLE_REDIS_URL"),
        help="read and write tables in Redis instead of local files (default: $KV_TABLE_REDIS_URL)",
    )
    _ = parser.add_argument("--log-level", default="WARNING", help="logging level (default: WARNING)")
    commands = parser.add_subparsers(dest="command")

    show = commands.add_parser("show", help="print a saved table")
    _ = show.add_argument("path")

    flatten = commands.add_parser("flatten", help="flatten a saved table into a new one")
    _ = flatten.add_argument("path")
    _ = flatten.add_argument("out")
    _ = flatten.add_argument("--overwrite", action="store_true", help="replace OUT if it exists")
    return parser


def main(args: Sequence[str] | None = None) -> None:
    """Argument parser for the CLI."""
    parser = _build_parser()
    options = parser.parse_args(args)
    logging.basicConfig(level=options.log_level.upper())

    if options.command is None:
        parser.print_help()
        return

    store: Store = RedisStore(options.redis_url) if options.redis_url else FileStore()
    try:
        table = load(options.path, store=store)
        if options.command == "show":
            print(table)  # noqa: T201
        elif options.command == "flatten":
            flat = table.flatten()
            _ = save(flat, options.out, options.overwrite, store=store)
            logger.info("flattened %s into %s (%d leaves)", options.path, options.out, len(flat))
    finally:
        store.close()


if __name__ == "__main__":
    main()
