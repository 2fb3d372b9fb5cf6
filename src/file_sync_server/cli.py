"""Command-line interface for path-mapping sync.

Subcommands:

- ``tree [PATH]`` -- print a directory tree (default: working directory).
- ``sync [ID ...]`` -- run all enabled mappings, or the named ones.
- ``mappings list|add|remove|enable|disable`` -- manage stored mappings.
- ``workdir [PATH]`` -- show or set the working directory.

Exit status: 0 on success, 1 if any mapping failed, 2 on usage or
configuration errors.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from . import __version__
from .config import resolve_runtime_config
from .core.session import SyncSession
from .logger import setup_logging
from .sync.models import BatchSyncResult
from .sync.reporter import (
    format_sync_report,
    format_tree,
    report_to_json,
    summarize,
    tree_to_json,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="file-sync",
        description="Mirror declared source paths onto target paths",
    )
    parser.add_argument("--store", help="Mapping store JSON file")
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="Log record format (default: text)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"file-sync version {__version__}",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    tree = sub.add_parser("tree", help="Print a directory tree")
    tree.add_argument("path", nargs="?", help="Directory (default: workdir)")
    tree.add_argument("--depth", type=int, help="Levels to expand")
    tree.add_argument("--json", action="store_true", help="JSON output")

    sync = sub.add_parser("sync", help="Run sync mappings")
    sync.add_argument("ids", nargs="*", help="Mapping ids (default: all)")
    sync.add_argument(
        "--dry-run", action="store_true", help="Preview without copying"
    )
    sync.add_argument("--json", action="store_true", help="JSON output")

    mappings = sub.add_parser("mappings", help="Manage sync mappings")
    msub = mappings.add_subparsers(dest="action", required=True)
    msub.add_parser("list", help="List mappings")
    add = msub.add_parser("add", help="Add a mapping")
    add.add_argument("id")
    add.add_argument("source")
    add.add_argument("target")
    add.add_argument(
        "--disabled", action="store_true", help="Store it disabled"
    )
    for name in ("remove", "enable", "disable"):
        p = msub.add_parser(name, help=f"{name.capitalize()} a mapping")
        p.add_argument("id")

    workdir = sub.add_parser("workdir", help="Show or set the working dir")
    workdir.add_argument("path", nargs="?")

    return parser


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_tree(session: SyncSession, args: argparse.Namespace) -> int:
    if args.depth is not None:
        session.tree_depth = args.depth
    root = args.path or session.get_work_dir()
    if not root:
        raise ValueError("No path given and no working directory set")

    unreadable: list[str] = []
    nodes = session.read_tree(root, unreadable)
    if args.json:
        print(
            json.dumps(
                {
                    "root": root,
                    "nodes": tree_to_json(nodes),
                    "unreadable": unreadable,
                },
                indent=2,
            )
        )
    else:
        print(format_tree(nodes))
        for path in unreadable:
            print(f"warning: could not read {path}", file=sys.stderr)
    return EXIT_OK


def _cmd_sync(session: SyncSession, args: argparse.Namespace) -> int:
    if args.ids:
        mappings = []
        for mapping_id in args.ids:
            mapping = session.find_mapping(mapping_id)
            if mapping is None:
                raise ValueError(f"No mapping with id '{mapping_id}'")
            # Explicitly named mappings run even when disabled
            mappings.append(mapping.model_copy(update={"enabled": True}))
        batch = session.sync_all(mappings, dry_run=args.dry_run)
    else:
        batch = session.sync_all(dry_run=args.dry_run)

    _print_batch(batch, args.json)
    return EXIT_OK if summarize(batch.results).all_succeeded else EXIT_FAILED


def _print_batch(batch: BatchSyncResult, as_json: bool) -> None:
    if as_json:
        print(json.dumps(report_to_json(batch), indent=2))
    else:
        print(format_sync_report(batch))


def _cmd_mappings(session: SyncSession, args: argparse.Namespace) -> int:
    match args.action:
        case "list":
            for m in session.get_mappings():
                flag = "x" if m.enabled else " "
                print(f"[{flag}] {m.id}: {m.source} -> {m.target}")
        case "add":
            m = session.add_mapping(
                args.id, args.source, args.target, enabled=not args.disabled
            )
            print(f"Added mapping {m.id}")
        case "remove":
            session.remove_mapping(args.id)
            print(f"Removed mapping {args.id}")
        case "enable" | "disable":
            session.set_enabled(args.id, args.action == "enable")
            print(f"Mapping {args.id} {args.action}d")
    return EXIT_OK


def _cmd_workdir(session: SyncSession, args: argparse.Namespace) -> int:
    if args.path:
        print(session.set_work_dir(args.path))
    else:
        work_dir = session.get_work_dir()
        if not work_dir:
            print("No working directory set", file=sys.stderr)
            return EXIT_FAILED
        print(work_dir)
    return EXIT_OK


_COMMANDS = {
    "tree": _cmd_tree,
    "sync": _cmd_sync,
    "mappings": _cmd_mappings,
    "workdir": _cmd_workdir,
}


def main(argv: list[str] | None = None) -> int:
    """Parse *argv*, run the command and return its exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides: dict = {}
    if args.store:
        overrides["store_path"] = args.store
    if args.debug:
        overrides["debug"] = True

    try:
        config, _ = resolve_runtime_config(overrides)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(
        mode="cli",
        debug=config.debug,
        log_file=args.log_file or config.log_file,
        debug_format=args.log_format,
        level=config.log_level,
    )

    session = SyncSession.from_config(config)
    try:
        return _COMMANDS[args.command](session, args)
    except ValueError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
