"""Runtime configuration for the CLI and MCP server.

Reads settings from CLI args, environment variables, .env files, and YAML
config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    FILE_SYNC_STORE: Path of the JSON mapping store
        (optional, default: ~/.config/file_sync/store.json)
    FILE_SYNC_TREE_DEPTH: Directory levels for tree listings
        (optional, default: 10)
    FILE_SYNC_DEBUG: Enable debug logging (optional, default: false)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from .config_loader import discover_config_files, load_hierarchical_config
from .config_schema import DEFAULT_STORE_PATH, build_config, to_fallbacks

logger = logging.getLogger(__name__)

MAX_TREE_DEPTH = 64


@dataclass
class Config:
    store_path: str = DEFAULT_STORE_PATH
    tree_depth: int = 10
    debug: bool = False
    log_level: str = "INFO"
    log_file: str | None = None


def validate_config(config: Config) -> None:
    """Validate and normalize configuration values in place.

    Args:
        config: Config instance to validate.

    Raises:
        ValueError: If the store path is empty or points at a directory,
            or the tree depth is out of range.
    """
    if not config.store_path.strip():
        raise ValueError(
            "Store path cannot be empty. Set FILE_SYNC_STORE or store.path."
        )

    config.store_path = str(Path(config.store_path.strip()).expanduser())
    if Path(config.store_path).is_dir():
        raise ValueError(
            f"Invalid store path '{config.store_path}': is a directory"
        )

    if not (0 <= config.tree_depth <= MAX_TREE_DEPTH):
        raise ValueError(
            f"Invalid tree depth {config.tree_depth}: "
            f"must be between 0 and {MAX_TREE_DEPTH}"
        )

    if config.log_level.upper() not in logging.getLevelNamesMapping():
        logger.warning(
            "Unknown log level '%s', falling back to INFO", config.log_level
        )
        config.log_level = "INFO"


def _get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset."""
    val = os.getenv(key)
    if val is None:
        return None
    return val.lower() in ("true", "1", "yes", "on")


def load_config(
    store_path: str | None = None,
    tree_depth: int | None = None,
    debug: bool = False,
    yaml_fallbacks: dict | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` first so that
    .env values are visible through ``os.getenv()``.

    Args:
        store_path: Override store path.
        tree_depth: Override tree listing depth.
        debug: Enable debug logging (CLI flag).
        yaml_fallbacks: Flattened values from the YAML config, with keys
            ``store_path``, ``tree_depth``, ``log_level``, ``log_file``.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If any value is invalid.
    """
    fb = yaml_fallbacks or {}

    final_store = (
        store_path
        or os.getenv("FILE_SYNC_STORE")
        or fb.get("store_path")
        or DEFAULT_STORE_PATH
    )

    if tree_depth is not None:
        final_depth = tree_depth
    else:
        depth_raw = os.getenv("FILE_SYNC_TREE_DEPTH")
        if depth_raw is not None:
            try:
                final_depth = int(depth_raw)
            except ValueError:
                raise ValueError(
                    f"Invalid FILE_SYNC_TREE_DEPTH '{depth_raw}': "
                    f"must be a number between 0 and {MAX_TREE_DEPTH}"
                ) from None
        else:
            final_depth = int(fb.get("tree_depth", 10))

    if debug:
        final_debug = True
    else:
        env_debug = _get_bool_env("FILE_SYNC_DEBUG")
        final_debug = env_debug if env_debug is not None else False

    config = Config(
        store_path=final_store,
        tree_depth=final_depth,
        debug=final_debug,
        log_level=fb.get("log_level") or "INFO",
        log_file=fb.get("log_file"),
    )

    validate_config(config)

    return config


def resolve_runtime_config(
    overrides: dict[str, Any] | None = None,
) -> tuple[Config, list[str]]:
    """Merge .env, YAML config files and CLI overrides into a ``Config``.

    Args:
        overrides: CLI values (``store_path``, ``tree_depth``, ``debug``).

    Returns:
        The validated config and a list describing the sources used.

    Raises:
        ValueError: If any source holds an invalid value.
    """
    # .env first so ${VAR} interpolation in YAML can see its values
    load_dotenv()

    yaml_fallbacks: dict[str, Any] | None = None
    sources: list[str] = []
    config_files = discover_config_files()
    if config_files:
        try:
            unified = build_config(load_hierarchical_config())
        except ValidationError as e:
            raise ValueError(f"Invalid config file: {e}") from e
        yaml_fallbacks = to_fallbacks(unified)
        sources.append(f"config file: {config_files[0]}")

    overrides = overrides or {}
    config = load_config(
        store_path=overrides.get("store_path"),
        tree_depth=overrides.get("tree_depth"),
        debug=overrides.get("debug", False),
        yaml_fallbacks=yaml_fallbacks,
    )
    if overrides:
        sources.append("CLI arguments")
    sources.append("environment variables")
    return config, sources
