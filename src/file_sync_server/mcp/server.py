"""stdio MCP server exposing the file sync tools.

The server holds one ``SyncSession`` (created by ``server_lifespan``) and
one ``ToolRegistry`` (filtered by an optional permissions file).  Protocol
handlers look both up through the accessors below.
"""

import argparse
import asyncio
import logging
import sys

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from .. import __version__
from ..core.session import SyncSession
from ..logger import DEFAULT_MCP_LOG_FILE, setup_logging
from .lifespan import server_lifespan
from .tools import (
    ALL_SPECS,
    ToolRegistry,
    build_error_response,
    load_permissions_file,
)
from .tools.registry import ToolSpec

logger = logging.getLogger(__name__)

SERVER_NAME = "file-sync-server"

server = Server(SERVER_NAME)

_session: SyncSession | None = None
_registry: ToolRegistry | None = None


async def _handle_ping(
    session: SyncSession, args: dict
) -> types.CallToolResult:
    text = f"File sync server {__version__} running. Store: {session.store.path}"
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)]
    )


# Needs no permission so that clients can always probe the server
PING_SPEC = ToolSpec(
    tool=types.Tool(
        name="ping",
        description="Report that the file sync server is up, with its version and store path",
        annotations=types.ToolAnnotations(readOnlyHint=True),
        inputSchema={"type": "object", "properties": {}, "required": []},
    ),
    permissions=frozenset(),
    handler=_handle_ping,
)


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------


def get_session() -> SyncSession:
    """Return the active session.

    Raises:
        RuntimeError: Outside of ``server_lifespan``.
    """
    if _session is None:
        raise RuntimeError(
            "SyncSession not initialized. Server lifespan not started."
        )
    return _session


def set_session(session: SyncSession | None) -> None:
    global _session
    _session = session


def get_registry() -> ToolRegistry:
    """Return the active registry.

    Raises:
        RuntimeError: Before ``main()`` has built it.
    """
    if _registry is None:
        raise RuntimeError("ToolRegistry not initialized.")
    return _registry


def set_registry(registry: ToolRegistry | None) -> None:
    global _registry
    _registry = registry


# ---------------------------------------------------------------------------
# Protocol handlers
# ---------------------------------------------------------------------------


@server.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    return get_registry().list_tools()


@server.call_tool()
async def handle_call_tool(
    name: str, arguments: dict | None
) -> types.CallToolResult:
    """Dispatch a ``tools/call`` request through the registry."""
    session = get_session()
    try:
        return await get_registry().call_tool(name, arguments, session)
    except ValueError as e:
        return build_error_response(
            "unknown_tool",
            str(e),
            "Use list_tools to see available tools.",
        )


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------


def build_registry(permissions_file: str | None = None) -> ToolRegistry:
    """Register ``ping`` plus every built-in tool the grant set allows."""
    allowed = None
    if permissions_file:
        allowed = load_permissions_file(permissions_file)
        logger.info(
            "Granted %s from %s", ", ".join(sorted(allowed)), permissions_file
        )

    specs = [PING_SPEC, *ALL_SPECS]
    registry = ToolRegistry(specs, allowed)
    logger.info("Exposing %d of %d tools", registry.tool_count(), len(specs))
    return registry


async def main(config_overrides: dict | None = None):
    """Serve until the client disconnects.

    Args:
        config_overrides: ``store_path``, ``tree_depth`` and ``debug`` go to
            config resolution; ``log_file`` and ``permissions_file`` are
            consumed here.
    """
    overrides = dict(config_overrides or {})
    log_file = overrides.pop("log_file", None)
    permissions_file = overrides.pop("permissions_file", None)

    # Before stdio_server takes over stdout
    setup_logging(
        mode="mcp", debug=overrides.get("debug", False), log_file=log_file
    )

    registry = build_registry(permissions_file)
    if permissions_file:
        print(
            f"Permissions file: {permissions_file} "
            f"({registry.tool_count()} of {len(ALL_SPECS) + 1} tools enabled)",
            file=sys.stderr,
        )
    set_registry(registry)

    init_options = InitializationOptions(
        server_name=SERVER_NAME,
        server_version=__version__,
        capabilities=server.get_capabilities(
            notification_options=NotificationOptions(),
            experimental_capabilities={},
        ),
    )
    async with server_lifespan(config_overrides=overrides or None) as ctx:
        set_session(ctx["session"])
        try:
            async with mcp.server.stdio.stdio_server() as (reader, writer):
                await server.run(reader, writer, init_options)
        finally:
            set_session(None)
            set_registry(None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="file-sync-server",
        description="Serve path-mapping file sync over MCP (stdio)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  file-sync-server --store ./.file_sync/store.json\n"
            "  file-sync-server --permissions-file read-only.permissions\n"
            "\n"
            "stdout carries JSON-RPC; status messages go to stderr."
        ),
    )
    parser.add_argument(
        "--store", help="Mapping store JSON file (overrides FILE_SYNC_STORE)"
    )
    parser.add_argument(
        "--tree-depth",
        type=int,
        help="Levels expanded by fs_read_tree (default: 10)",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--log-file",
        default=DEFAULT_MCP_LOG_FILE,
        help=f"Log file (default: {DEFAULT_MCP_LOG_FILE})",
    )
    parser.add_argument(
        "--permissions-file",
        help="Only expose tools whose permissions are listed in this file "
        "(TREE_VIEW, SYNC_EXECUTE, CONFIG_VIEW, CONFIG_ADMIN)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"file-sync-server version {__version__}",
    )
    return parser


def overrides_from_args(args: argparse.Namespace) -> dict:
    """Keep only the options the user actually set."""
    candidates = {
        "store_path": args.store,
        "tree_depth": args.tree_depth,
        "debug": args.debug or None,
        "log_file": args.log_file,
        "permissions_file": args.permissions_file,
    }
    return {k: v for k, v in candidates.items() if v is not None}


def run() -> None:
    """Console script entry point."""
    args = build_parser().parse_args()
    try:
        asyncio.run(main(overrides_from_args(args) or None))
    except RuntimeError:
        # server_lifespan already reported the problem on stderr
        sys.exit(1)
    except (ValueError, FileNotFoundError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    run()
