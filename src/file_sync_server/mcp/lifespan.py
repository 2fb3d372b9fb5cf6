"""Lifespan management for MCP server startup and shutdown."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from ..config import resolve_runtime_config
from ..core.session import SyncSession

logger = logging.getLogger(__name__)


def _stderr_print(msg: str) -> None:
    """Print message to stderr for user feedback (safe in MCP mode)."""
    print(msg, file=sys.stderr, flush=True)


@asynccontextmanager
async def server_lifespan(
    config_overrides: dict[str, Any] | None = None,
) -> AsyncIterator[dict[str, Any]]:
    """
    Manage server startup and shutdown lifecycle.

    On startup:
    - Load .env, YAML config and CLI overrides (CLI > env > .env > YAML > defaults)
    - Open the mapping store and check that it is readable
    - Fail fast on invalid configuration

    Args:
        config_overrides: Optional dict with values from CLI (store_path, tree_depth, debug)

    Yields:
        Dict with 'session' key containing the initialized SyncSession

    Raises:
        RuntimeError: If configuration or the store is invalid.
    """
    logger.info("MCP server starting...")
    _stderr_print("File Sync MCP Server starting...")

    try:
        config, sources = resolve_runtime_config(config_overrides)
        source_desc = ", ".join(sources)
        logger.info("Configuration loaded from: %s", source_desc)
        _stderr_print(f"  Configuration loaded from: {source_desc}")

        session = SyncSession.from_config(config)
        mappings = session.get_mappings()
        logger.info(
            "Store %s: %d mappings", config.store_path, len(mappings)
        )
        _stderr_print(f"  Store: {config.store_path}")
        _stderr_print(f"  Mappings: {len(mappings)}")
        _stderr_print("Server ready. Waiting for MCP client connection...")
    except (ValueError, OSError) as e:
        logger.error("Configuration error: %s", e)
        _stderr_print(f"ERROR: Configuration error: {e}")
        raise RuntimeError(f"Configuration error: {e}") from e

    yield {"session": session, "config": config}

    logger.info("MCP server shutting down")
    _stderr_print("File Sync MCP Server shutting down.")
