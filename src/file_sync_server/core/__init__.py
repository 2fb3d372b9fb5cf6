"""Core session handle shared between the CLI and the MCP server."""

from .async_utils import run_sync
from .session import SyncSession

__all__ = ["SyncSession", "run_sync"]
