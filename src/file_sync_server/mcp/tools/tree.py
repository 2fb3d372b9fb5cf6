"""Directory tree tool handler for MCP server.

``fs_read_tree`` lists a directory (default: the stored working directory)
with dotfiles and ``node_modules`` hidden, directories first.
"""

from typing import Any

import mcp.types as types

from ...core.async_utils import run_sync
from ...core.session import SyncSession
from ...sync.reporter import format_tree, tree_to_json
from .errors import build_error_response
from .registry import ToolSpec

TREE_TOOLS = [
    types.Tool(
        name="fs_read_tree",
        description=(
            "List a directory recursively (depth set by server config). "
            "Hidden entries other than .gitignore and node_modules are "
            "omitted. Directories that cannot be read appear empty and are "
            "reported in 'unreadable'. Defaults to the working directory."
        ),
        annotations=types.ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=False,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "Directory to list (absolute path)",
                },
            },
            "required": [],
        },
    )
]


async def _handle_read_tree(
    session: SyncSession, args: dict[str, Any]
) -> types.CallToolResult:
    """Handle ``fs_read_tree``."""
    root = args.get("path") or session.get_work_dir()
    if not root:
        return build_error_response(
            "validation_error",
            "No path given and no working directory configured",
            "Pass 'path', or set one with workdir_set.",
        )

    unreadable: list[str] = []
    nodes = await run_sync(session.read_tree, root, unreadable)

    text = format_tree(nodes) or "(empty)"
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        structuredContent={
            "root": str(root),
            "nodes": tree_to_json(nodes),
            "unreadable": unreadable,
        },
    )


TREE_SPECS = [
    ToolSpec(
        tool=TREE_TOOLS[0],
        permissions=frozenset({"TREE_VIEW"}),
        handler=_handle_read_tree,
    )
]
