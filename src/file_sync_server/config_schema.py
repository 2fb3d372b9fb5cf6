"""Configuration schema for file_sync_server.

Pydantic models for the YAML config file, with sections for the mapping
store, tree listing and logging.  Every section has defaults, so
``UnifiedConfig()`` is always valid.

Usage:
    from file_sync_server.config_schema import build_config

    raw = load_hierarchical_config()
    unified = build_config(raw)
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = str(
    Path("~") / ".config" / "file_sync" / "store.json"
)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class StoreConfig(BaseModel):
    """Location of the persisted working directory and mapping list."""

    path: str = Field(
        default=DEFAULT_STORE_PATH,
        description="JSON store file (``~`` is expanded)",
    )

    model_config = {"frozen": True}


class TreeConfig(BaseModel):
    """Directory tree listing settings."""

    max_depth: int = Field(
        default=10,
        ge=0,
        le=64,
        description="Directory levels expanded by tree listings (0-64)",
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level configuration aggregating all sections."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    tree: TreeConfig = Field(default_factory=TreeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Build a ``UnifiedConfig`` from ``load_hierarchical_config()`` output.

    Missing sections get defaults.

    Raises:
        pydantic.ValidationError: If a section has invalid values.
    """
    if not raw_data:
        return UnifiedConfig()
    return UnifiedConfig(**raw_data)


# ---------------------------------------------------------------------------
# Adapter: UnifiedConfig -> load_config() fallbacks
# ---------------------------------------------------------------------------


def to_fallbacks(unified: UnifiedConfig) -> dict:
    """Flatten a ``UnifiedConfig`` into the ``yaml_fallbacks`` dict
    accepted by ``config.load_config()``.

    Args:
        unified: The config produced by ``build_config()``.

    Returns:
        Dict with ``store_path``, ``tree_depth``, ``log_level`` and
        ``log_file`` keys.
    """
    return {
        "store_path": unified.store.path,
        "tree_depth": unified.tree.max_depth,
        "log_level": unified.logging.level,
        "log_file": unified.logging.file,
    }
