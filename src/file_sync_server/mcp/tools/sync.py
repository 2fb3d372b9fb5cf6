"""MCP tool handlers for running sync mappings.

Defines two tools:

- ``sync_all`` -- run every enabled stored mapping (or an explicit list).
- ``sync_one`` -- run a single mapping, by stored id or inline.

Both run the blocking copy in a worker thread and return the batch/result
as text plus ``structuredContent``.  Per-mapping failures are part of a
normal (non-error) response; only invalid arguments produce ``isError``.
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types
from pydantic import ValidationError

from ...core.async_utils import run_sync
from ...core.session import SyncSession
from ...sync.models import SyncMapping
from ...sync.reporter import (
    format_result,
    format_sync_report,
    report_to_json,
    result_to_json,
)
from .errors import build_error_response
from .registry import ToolSpec

logger = logging.getLogger(__name__)

_MAPPING_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "string", "description": "Mapping id"},
        "source": {
            "type": "string",
            "description": "Source file or directory",
        },
        "target": {
            "type": "string",
            "description": "Target file or directory",
        },
        "enabled": {"type": "boolean", "default": True},
    },
    "required": ["id", "source", "target"],
}


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------


SYNC_TOOLS: list[types.Tool] = [
    types.Tool(
        name="sync_all",
        description=(
            "Copy every enabled mapping's source onto its target, in order. "
            "Existing target files are overwritten; extra target files are "
            "kept. Uses the stored mapping list unless 'mappings' is given."
        ),
        annotations=types.ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=True,
            idempotentHint=True,
            openWorldHint=False,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "mappings": {
                    "type": "array",
                    "items": _MAPPING_SCHEMA,
                    "description": "Explicit mappings instead of the stored list",
                },
                "dry_run": {
                    "type": "boolean",
                    "default": False,
                    "description": "Preview destinations without copying",
                },
            },
            "required": [],
        },
    ),
    types.Tool(
        name="sync_one",
        description=(
            "Run a single mapping, even if it is disabled. Give either 'id' "
            "of a stored mapping or an inline 'mapping'."
        ),
        annotations=types.ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=True,
            idempotentHint=True,
            openWorldHint=False,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "id": {
                    "type": "string",
                    "description": "Id of a stored mapping",
                },
                "mapping": _MAPPING_SCHEMA,
                "dry_run": {
                    "type": "boolean",
                    "default": False,
                    "description": "Preview the destination without copying",
                },
            },
            "required": [],
        },
    ),
]


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _parse_mapping(raw: Any) -> SyncMapping:
    try:
        return SyncMapping.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid mapping: {exc}") from exc


async def _handle_sync_all(
    session: SyncSession, args: dict[str, Any]
) -> types.CallToolResult:
    """Handle the ``sync_all`` tool."""
    dry_run = bool(args.get("dry_run", False))
    raw_mappings = args.get("mappings")
    mappings = None
    if raw_mappings is not None:
        if not isinstance(raw_mappings, list):
            raise ValueError("mappings must be an array")
        mappings = [_parse_mapping(m) for m in raw_mappings]

    batch = await run_sync(session.sync_all, mappings, dry_run=dry_run)

    return types.CallToolResult(
        content=[
            types.TextContent(type="text", text=format_sync_report(batch))
        ],
        structuredContent=report_to_json(batch),
    )


async def _handle_sync_one(
    session: SyncSession, args: dict[str, Any]
) -> types.CallToolResult:
    """Handle the ``sync_one`` tool."""
    dry_run = bool(args.get("dry_run", False))
    mapping_id = args.get("id")
    raw_mapping = args.get("mapping")

    if raw_mapping is not None:
        target: SyncMapping | str = _parse_mapping(raw_mapping)
    elif mapping_id:
        if not session.has_mapping(mapping_id):
            return build_error_response(
                "not_found",
                f"No mapping with id '{mapping_id}'",
                "Use sync_mapping_list to see the stored mapping ids.",
            )
        target = mapping_id
    else:
        return build_error_response(
            "validation_error",
            "Either 'id' or 'mapping' is required",
            "Pass the id of a stored mapping, or an inline mapping object.",
        )

    result = await run_sync(session.sync_one, target, dry_run=dry_run)

    return types.CallToolResult(
        content=[types.TextContent(type="text", text=format_result(result))],
        structuredContent=result_to_json(result),
    )


SYNC_SPECS: list[ToolSpec] = [
    ToolSpec(
        tool=SYNC_TOOLS[0],
        permissions=frozenset({"SYNC_EXECUTE"}),
        handler=_handle_sync_all,
    ),
    ToolSpec(
        tool=SYNC_TOOLS[1],
        permissions=frozenset({"SYNC_EXECUTE"}),
        handler=_handle_sync_one,
    ),
]
