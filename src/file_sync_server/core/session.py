"""Sync session: the caller-facing handle over store, executor and reader.

A ``SyncSession`` bundles one ``ConfigStore`` with the sync engine so that
front ends (MCP tools, CLI) never touch module-level state.  The three
engine operations -- ``read_tree``, ``sync_all`` and ``sync_one`` -- always
return result objects; mapping management methods raise ``ValueError`` on
invalid input and leave the translation to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from ..config import Config
from ..store import MAPPINGS_KEY, WORK_DIR_KEY, ConfigStore
from ..sync.engine import MappingExecutor
from ..sync.models import (
    BatchSyncResult,
    FileTreeNode,
    SyncMapping,
    SyncResult,
)
from ..sync.tree import DEFAULT_MAX_DEPTH, DirectoryTreeReader
from ..validators import validate_mapping_fields

logger = logging.getLogger(__name__)


class SyncSession:
    """Run syncs and manage mappings against one config store.

    Args:
        store: The key/value store holding ``work_dir`` and mappings.
        executor: Mapping executor (defaults to a CWD-relative one).
        tree_reader: Directory tree reader (defaults to the standard
            dotfile/``node_modules`` filter).
        tree_depth: Depth used by ``read_tree``.
    """

    def __init__(
        self,
        store: ConfigStore,
        executor: MappingExecutor | None = None,
        tree_reader: DirectoryTreeReader | None = None,
        tree_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.store = store
        self.executor = executor or MappingExecutor()
        self.tree_reader = tree_reader or DirectoryTreeReader()
        self.tree_depth = tree_depth

    @classmethod
    def from_config(cls, config: Config) -> SyncSession:
        """Build a session from a validated runtime ``Config``."""
        return cls(
            store=ConfigStore(config.store_path),
            tree_depth=config.tree_depth,
        )

    # ------------------------------------------------------------------
    # Engine operations
    # ------------------------------------------------------------------

    def read_tree(
        self,
        root: str | Path | None = None,
        unreadable: list[str] | None = None,
    ) -> tuple[FileTreeNode, ...]:
        """List *root* (default: the stored work dir) as a tree.

        Returns an empty tuple when no root is given and no work dir is
        stored.
        """
        target = root or self.get_work_dir()
        if not target:
            logger.debug("read_tree: no root and no work dir configured")
            return ()
        return self.tree_reader.read_tree(
            target, self.tree_depth, unreadable
        )

    def sync_all(
        self,
        mappings: Iterable[SyncMapping] | None = None,
        dry_run: bool = False,
    ) -> BatchSyncResult:
        """Execute *mappings* (default: the stored list) as one batch."""
        if mappings is None:
            mappings = self._runnable_mappings()
        return self.executor.execute_all(mappings, dry_run=dry_run)

    def sync_one(
        self, mapping: SyncMapping | str, dry_run: bool = False
    ) -> SyncResult:
        """Execute one mapping, given directly or by stored id.

        An unknown id, or a stored entry that fails validation, produces a
        failed result rather than an exception.  The first stored mapping
        with a matching id is used.
        """
        if isinstance(mapping, str):
            mapping_id = mapping
            for index, item in enumerate(self._stored_entries()):
                if not isinstance(item, dict) or item.get("id") != mapping_id:
                    continue
                try:
                    mapping = SyncMapping.model_validate(item)
                except ValidationError as exc:
                    return SyncResult(
                        id=mapping_id,
                        success=False,
                        error=f"Stored mapping #{index} is invalid: {exc}",
                    )
                break
            else:
                return SyncResult(
                    id=mapping_id,
                    success=False,
                    error=f"No mapping with id '{mapping_id}'",
                )
        return self.executor.execute_one(mapping, dry_run=dry_run)

    # ------------------------------------------------------------------
    # Working directory
    # ------------------------------------------------------------------

    def get_work_dir(self) -> str | None:
        return self.store.get(WORK_DIR_KEY)

    def set_work_dir(self, path: str | Path) -> str:
        """Store the absolute form of *path* as the working directory.

        Raises:
            ValueError: If *path* is not an existing directory.
        """
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_dir():
            raise ValueError(f"Working directory not found: {resolved}")
        self.store.set(WORK_DIR_KEY, str(resolved))
        logger.info("Working directory set to %s", resolved)
        return str(resolved)

    # ------------------------------------------------------------------
    # Mapping management
    # ------------------------------------------------------------------

    def get_mappings(self) -> list[SyncMapping]:
        """Return the stored mappings in order.

        Raises:
            ValueError: If a stored entry is not a valid mapping.
        """
        mappings: list[SyncMapping] = []
        for index, item in enumerate(self._stored_entries()):
            try:
                mappings.append(SyncMapping.model_validate(item))
            except ValidationError as exc:
                raise ValueError(
                    f"Stored mapping #{index} is invalid: {exc}"
                ) from exc
        return mappings

    def find_mapping(self, mapping_id: str) -> SyncMapping | None:
        for mapping in self.get_mappings():
            if mapping.id == mapping_id:
                return mapping
        return None

    def has_mapping(self, mapping_id: str) -> bool:
        """Whether any stored entry, valid or not, uses *mapping_id*."""
        return any(
            isinstance(item, dict) and item.get("id") == mapping_id
            for item in self._stored_entries()
        )

    def add_mapping(
        self,
        mapping_id: str,
        source: str,
        target: str,
        enabled: bool = True,
    ) -> SyncMapping:
        """Append a new mapping to the store.

        Raises:
            ValueError: If a field is invalid or the id is already used.
        """
        ok, message = validate_mapping_fields(mapping_id, source, target)
        if not ok:
            raise ValueError(message)

        mappings = self.get_mappings()
        if any(m.id == mapping_id for m in mappings):
            raise ValueError(f"Mapping id '{mapping_id}' already exists")

        mapping = SyncMapping(
            id=mapping_id, source=source, target=target, enabled=enabled
        )
        mappings.append(mapping)
        self._save_mappings(mappings)
        logger.info("Added mapping %s: %s -> %s", mapping_id, source, target)
        return mapping

    def update_mapping(
        self,
        mapping_id: str,
        source: str | None = None,
        target: str | None = None,
        enabled: bool | None = None,
    ) -> SyncMapping:
        """Replace fields of every stored mapping with *mapping_id*.

        Returns:
            The first updated mapping.

        Raises:
            ValueError: If no mapping has the id or a new value is invalid.
        """
        changes: dict = {}
        if source is not None:
            changes["source"] = source
        if target is not None:
            changes["target"] = target
        if enabled is not None:
            changes["enabled"] = enabled

        mappings = self.get_mappings()
        updated: list[SyncMapping] = []
        first: SyncMapping | None = None
        for m in mappings:
            if m.id == mapping_id:
                candidate = m.model_copy(update=changes)
                ok, message = validate_mapping_fields(
                    candidate.id, candidate.source, candidate.target
                )
                if not ok:
                    raise ValueError(message)
                first = first or candidate
                updated.append(candidate)
            else:
                updated.append(m)

        if first is None:
            raise ValueError(f"No mapping with id '{mapping_id}'")
        self._save_mappings(updated)
        return first

    def set_enabled(self, mapping_id: str, enabled: bool) -> SyncMapping:
        return self.update_mapping(mapping_id, enabled=enabled)

    def remove_mapping(self, mapping_id: str) -> int:
        """Remove every stored mapping with *mapping_id*.

        Returns:
            Number of mappings removed.

        Raises:
            ValueError: If no mapping has the id.
        """
        mappings = self.get_mappings()
        kept = [m for m in mappings if m.id != mapping_id]
        removed = len(mappings) - len(kept)
        if not removed:
            raise ValueError(f"No mapping with id '{mapping_id}'")
        self._save_mappings(kept)
        logger.info("Removed mapping %s", mapping_id)
        return removed

    def _stored_entries(self) -> list:
        return self.store.get(MAPPINGS_KEY) or []

    def _runnable_mappings(self) -> list[SyncMapping]:
        """Stored mappings for a batch run, skipping invalid entries."""
        mappings: list[SyncMapping] = []
        for index, item in enumerate(self._stored_entries()):
            try:
                mappings.append(SyncMapping.model_validate(item))
            except ValidationError as exc:
                logger.warning(
                    "Skipping invalid stored mapping #%d: %s", index, exc
                )
        return mappings

    def _save_mappings(self, mappings: list[SyncMapping]) -> None:
        self.store.set(
            MAPPINGS_KEY, [m.model_dump(mode="json") for m in mappings]
        )
