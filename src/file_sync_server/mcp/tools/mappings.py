"""Mapping and working-directory management tools for MCP server.

This module implements the configuration tools: list/add/remove/toggle sync
mappings, and get/set the working directory.  All changes are persisted
through the session's ``ConfigStore``.
"""

from typing import Any

import mcp.types as types

from ...core.async_utils import run_sync
from ...core.session import SyncSession
from .errors import build_error_response
from .registry import ToolSpec

_ID_PROPERTY = {"type": "string", "description": "Mapping id (required)"}

MAPPING_TOOLS = [
    types.Tool(
        name="sync_mapping_list",
        description="List stored sync mappings in execution order with their enabled flags.",
        annotations=types.ToolAnnotations(readOnlyHint=True),
        inputSchema={"type": "object", "properties": {}, "required": []},
    ),
    types.Tool(
        name="sync_mapping_add",
        description="Add a sync mapping. Paths may be absolute or relative to the server's working directory. Ids must be unique.",
        annotations=types.ToolAnnotations(readOnlyHint=False),
        inputSchema={
            "type": "object",
            "properties": {
                "id": _ID_PROPERTY,
                "source": {
                    "type": "string",
                    "description": "Source file or directory (required)",
                },
                "target": {
                    "type": "string",
                    "description": "Target file or directory (required)",
                },
                "enabled": {"type": "boolean", "default": True},
            },
            "required": ["id", "source", "target"],
        },
    ),
    types.Tool(
        name="sync_mapping_remove",
        description="Remove a stored sync mapping by id.",
        annotations=types.ToolAnnotations(
            readOnlyHint=False, destructiveHint=True
        ),
        inputSchema={
            "type": "object",
            "properties": {"id": _ID_PROPERTY},
            "required": ["id"],
        },
    ),
    types.Tool(
        name="sync_mapping_set_enabled",
        description="Enable or disable a stored sync mapping. Disabled mappings are skipped by sync_all.",
        annotations=types.ToolAnnotations(
            readOnlyHint=False, idempotentHint=True
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "id": _ID_PROPERTY,
                "enabled": {
                    "type": "boolean",
                    "description": "New enabled state (required)",
                },
            },
            "required": ["id", "enabled"],
        },
    ),
    types.Tool(
        name="workdir_get",
        description="Get the configured working directory.",
        annotations=types.ToolAnnotations(readOnlyHint=True),
        inputSchema={"type": "object", "properties": {}, "required": []},
    ),
    types.Tool(
        name="workdir_set",
        description="Set the working directory used by fs_read_tree. The directory must exist.",
        annotations=types.ToolAnnotations(
            readOnlyHint=False, idempotentHint=True
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "Existing directory (required)",
                }
            },
            "required": ["path"],
        },
    ),
]


def _text(text: str, structured: dict) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        structuredContent=structured,
    )


def _require(args: dict[str, Any], key: str) -> Any:
    value = args.get(key)
    if value is None or value == "":
        raise ValueError(f"{key} is required")
    return value


async def _handle_list(
    session: SyncSession, args: dict[str, Any]
) -> types.CallToolResult:
    mappings = await run_sync(session.get_mappings)
    if not mappings:
        text = "No sync mappings configured."
    else:
        lines = [f"{len(mappings)} sync mappings:"]
        for m in mappings:
            flag = "x" if m.enabled else " "
            lines.append(f"  [{flag}] {m.id}: {m.source} -> {m.target}")
        text = "\n".join(lines)
    return _text(
        text, {"mappings": [m.model_dump(mode="json") for m in mappings]}
    )


async def _handle_add(
    session: SyncSession, args: dict[str, Any]
) -> types.CallToolResult:
    mapping = await run_sync(
        session.add_mapping,
        _require(args, "id"),
        _require(args, "source"),
        _require(args, "target"),
        bool(args.get("enabled", True)),
    )
    return _text(
        f"Added mapping {mapping.id}: {mapping.source} -> {mapping.target}",
        {"mapping": mapping.model_dump(mode="json")},
    )


async def _handle_remove(
    session: SyncSession, args: dict[str, Any]
) -> types.CallToolResult:
    mapping_id = _require(args, "id")
    if session.find_mapping(mapping_id) is None:
        return build_error_response(
            "not_found",
            f"No mapping with id '{mapping_id}'",
            "Use sync_mapping_list to see the stored mapping ids.",
        )
    removed = await run_sync(session.remove_mapping, mapping_id)
    return _text(
        f"Removed mapping {mapping_id}",
        {"id": mapping_id, "removed": removed},
    )


async def _handle_set_enabled(
    session: SyncSession, args: dict[str, Any]
) -> types.CallToolResult:
    mapping_id = _require(args, "id")
    if "enabled" not in args:
        raise ValueError("enabled is required")
    if session.find_mapping(mapping_id) is None:
        return build_error_response(
            "not_found",
            f"No mapping with id '{mapping_id}'",
            "Use sync_mapping_list to see the stored mapping ids.",
        )
    mapping = await run_sync(
        session.set_enabled, mapping_id, bool(args["enabled"])
    )
    state = "enabled" if mapping.enabled else "disabled"
    return _text(
        f"Mapping {mapping_id} {state}",
        {"mapping": mapping.model_dump(mode="json")},
    )


async def _handle_workdir_get(
    session: SyncSession, args: dict[str, Any]
) -> types.CallToolResult:
    work_dir = await run_sync(session.get_work_dir)
    text = work_dir or "No working directory configured."
    return _text(text, {"work_dir": work_dir})


async def _handle_workdir_set(
    session: SyncSession, args: dict[str, Any]
) -> types.CallToolResult:
    work_dir = await run_sync(session.set_work_dir, _require(args, "path"))
    return _text(f"Working directory set to {work_dir}", {"work_dir": work_dir})


_HANDLERS = {
    "sync_mapping_list": (_handle_list, "CONFIG_VIEW"),
    "sync_mapping_add": (_handle_add, "CONFIG_ADMIN"),
    "sync_mapping_remove": (_handle_remove, "CONFIG_ADMIN"),
    "sync_mapping_set_enabled": (_handle_set_enabled, "CONFIG_ADMIN"),
    "workdir_get": (_handle_workdir_get, "CONFIG_VIEW"),
    "workdir_set": (_handle_workdir_set, "CONFIG_ADMIN"),
}

MAPPING_SPECS = [
    ToolSpec(
        tool=tool,
        permissions=frozenset({_HANDLERS[tool.name][1]}),
        handler=_HANDLERS[tool.name][0],
    )
    for tool in MAPPING_TOOLS
]
