"""Mapping executor that runs source -> target copies.

``MappingExecutor`` ties together the resolver and copy engine.  For each
mapping it:

1. Resolves both endpoints to absolute paths.
2. Fails fast (without writing) when the source is missing.
3. Classifies the path-shape case:

   * directory source -> populate ``target`` as a directory,
   * file source, ``target`` is an existing directory -> copy into it,
     keeping the source file name,
   * file source, anything else -> write ``target`` verbatim.

4. Runs the copy and converts any error into a failed ``SyncResult``.

Error handling is per-mapping: a single failure never aborts a batch.
Batches run strictly in input order, one mapping at a time.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from .copier import CancelSignal, CopyEngine, SyncCancelled
from .models import (
    BatchSyncResult,
    SyncErrorKind,
    SyncKind,
    SyncMapping,
    SyncResult,
)
from .resolver import PathResolver

logger = logging.getLogger(__name__)


class MappingExecutor:
    """Execute sync mappings one by one.

    Args:
        resolver: Resolver for mapping endpoints (defaults to CWD-relative).
        copier: Copy engine; defaults to one sharing *cancel_event*.
        cancel_event: Optional signal that stops the current copy and the
            remaining mappings of a batch.
    """

    def __init__(
        self,
        resolver: PathResolver | None = None,
        copier: CopyEngine | None = None,
        cancel_event: CancelSignal | None = None,
    ) -> None:
        self.resolver = resolver or PathResolver()
        self.cancel_event = cancel_event
        self.copier = copier or CopyEngine(cancel_event=cancel_event)

    # ------------------------------------------------------------------
    # Single mapping
    # ------------------------------------------------------------------

    def execute_one(
        self, mapping: SyncMapping, dry_run: bool = False
    ) -> SyncResult:
        """Execute a single mapping regardless of its ``enabled`` flag.

        Args:
            mapping: The mapping to execute.
            dry_run: If ``True``, classify and report the destination
                without touching the filesystem.

        Returns:
            A ``SyncResult``; never raises for filesystem errors.  A copy
            that fails after classification keeps ``kind`` and
            ``destination``.
        """
        kind: SyncKind | None = None
        destination: Path | None = None
        try:
            source = self.resolver.resolve(mapping.source)
            target = self.resolver.resolve(mapping.target)

            if not source.exists():
                logger.warning(
                    "Mapping %s: source does not exist: %s",
                    mapping.id,
                    source,
                )
                return SyncResult(
                    id=mapping.id,
                    success=False,
                    error=f"Source path does not exist: {source}",
                    error_kind=SyncErrorKind.MISSING_SOURCE,
                )

            kind, destination = self._classify(source, target)
            detail = self._copy(kind, source, destination, dry_run)
            logger.info("Mapping %s: %s", mapping.id, detail)
            return SyncResult(
                id=mapping.id,
                success=True,
                detail=detail,
                kind=kind,
                destination=str(destination),
            )

        except SyncCancelled as exc:
            logger.info("Mapping %s cancelled", mapping.id)
            error_kind = SyncErrorKind.CANCELLED
            error = str(exc)
        except Exception as exc:
            logger.error("Error syncing mapping %s: %s", mapping.id, exc)
            error_kind = SyncErrorKind.IO_FAILURE
            error = str(exc)

        return SyncResult(
            id=mapping.id,
            success=False,
            error=error,
            error_kind=error_kind,
            kind=kind,
            destination=str(destination) if destination else None,
        )

    @staticmethod
    def _classify(source: Path, target: Path) -> tuple[SyncKind, Path]:
        """Return the path-shape case and the effective destination."""
        if source.is_dir():
            return SyncKind.DIRECTORY, target
        if target.is_dir():
            return SyncKind.FILE_INTO_DIRECTORY, target / source.name
        return SyncKind.FILE, target

    def _copy(
        self,
        kind: SyncKind,
        source: Path,
        destination: Path,
        dry_run: bool,
    ) -> str:
        label = "Directory" if kind == SyncKind.DIRECTORY else "File"
        if dry_run:
            return f"{label} would be synced: {source} -> {destination}"
        if kind == SyncKind.DIRECTORY:
            count = self.copier.copy_directory(source, destination)
            return (
                f"Directory synced: {source} -> {destination} ({count} files)"
            )
        self.copier.copy_file(source, destination)
        return f"File synced: {source} -> {destination}"

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def execute_all(
        self, mappings: Iterable[SyncMapping], dry_run: bool = False
    ) -> BatchSyncResult:
        """Execute every enabled mapping in input order.

        Disabled mappings are skipped and produce no result.  If the cancel
        signal is set, the remaining mappings are not started.

        Args:
            mappings: Ordered mappings to execute.
            dry_run: Preview without writing.

        Returns:
            A ``BatchSyncResult`` whose ``success`` is always True.
        """
        started_at = datetime.now(timezone.utc).isoformat()
        results: list[SyncResult] = []

        for mapping in mappings:
            if not mapping.enabled:
                logger.debug("Skipping disabled mapping %s", mapping.id)
                continue
            if self._cancelled():
                logger.info(
                    "Batch cancelled; remaining mappings not started"
                )
                break
            results.append(self.execute_one(mapping, dry_run=dry_run))

        batch = BatchSyncResult(
            success=True,
            results=results,
            dry_run=dry_run,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
        )
        if batch.failed:
            logger.warning(
                "%d of %d mappings failed", batch.failed, batch.executed
            )
        return batch

    def _cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()
