"""MCP tool handlers for file sync operations.

This package contains MCP tool implementations that wrap a SyncSession
with async handlers, text/structured output, and structured error responses.
"""

from .errors import build_error_response, translate_os_error
from .mappings import MAPPING_SPECS, MAPPING_TOOLS
from .registry import ToolRegistry, ToolSpec, load_permissions_file
from .sync import SYNC_SPECS, SYNC_TOOLS
from .tree import TREE_SPECS, TREE_TOOLS

ALL_SPECS: list[ToolSpec] = TREE_SPECS + SYNC_SPECS + MAPPING_SPECS

__all__ = [
    "build_error_response",
    "translate_os_error",
    # Registry
    "ToolSpec",
    "ToolRegistry",
    "load_permissions_file",
    # ToolSpec lists
    "ALL_SPECS",
    "MAPPING_SPECS",
    "SYNC_SPECS",
    "TREE_SPECS",
    # Tool lists
    "MAPPING_TOOLS",
    "SYNC_TOOLS",
    "TREE_TOOLS",
]
