"""Pydantic models for the path-mapping sync engine.

Defines the core data contracts used across all sync modules:

- ``SyncMapping``: A declared source -> target association.
- ``FileTreeNode``: One entry of a directory tree listing.
- ``SyncKind``: The path-shape case a mapping was classified into.
- ``SyncErrorKind``: Why a mapping failed.
- ``SyncResult``: Outcome of executing one mapping.
- ``BatchSyncResult``: Ordered results for one batch execution.
- ``SyncSummary``: Executed/failed counts derived from results.

All models are frozen (immutable) for safety.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class SyncKind(str, Enum):
    """Path-shape case a mapping resolved to."""

    DIRECTORY = "directory"
    FILE = "file"
    FILE_INTO_DIRECTORY = "file_into_directory"


class SyncErrorKind(str, Enum):
    """Failure categories for a single mapping."""

    MISSING_SOURCE = "missing_source"
    IO_FAILURE = "io_failure"
    CANCELLED = "cancelled"


class SyncMapping(BaseModel):
    """A declared source -> target mapping.

    Attributes:
        id: Caller-assigned identifier. Not required to be unique within
            a batch; duplicates are executed independently.
        source: Source file or directory path (absolute or relative).
        target: Target file or directory path (absolute or relative).
        enabled: Disabled mappings are skipped by batch execution.
    """

    id: str = Field(min_length=1)
    source: str = Field(min_length=1)
    target: str = Field(min_length=1)
    enabled: bool = True

    model_config = {"frozen": True}


class FileTreeNode(BaseModel):
    """A read-only snapshot of one directory entry.

    Attributes:
        name: Entry name (final path component).
        path: Absolute path of the entry.
        is_directory: Whether the entry is a directory.
        children: Child nodes, only set for directories.
    """

    name: str
    path: str
    is_directory: bool
    children: tuple[FileTreeNode, ...] | None = None

    model_config = {"frozen": True}


class SyncResult(BaseModel):
    """Result of executing one mapping.

    Attributes:
        id: Id of the mapping that produced this result.
        success: Whether the copy completed.
        error: Error message if the mapping failed.
        detail: Human-readable summary of what was synced.
        kind: Classified path-shape case, if classification happened.
        error_kind: Failure category when ``success`` is False.
        destination: Effective destination path, when known.
    """

    id: str
    success: bool
    error: str | None = None
    detail: str | None = None
    kind: SyncKind | None = None
    error_kind: SyncErrorKind | None = None
    destination: str | None = None

    model_config = {"frozen": True}


class SyncSummary(BaseModel):
    """Executed and failed counts over a result sequence."""

    executed: int = 0
    failed: int = 0

    model_config = {"frozen": True}

    @property
    def succeeded(self) -> int:
        return self.executed - self.failed

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0


class BatchSyncResult(BaseModel):
    """Aggregate result for one batch execution.

    ``success`` only reports that the batch call itself completed; callers
    must inspect ``results`` (or ``failed``) for per-mapping failures.

    Attributes:
        success: Always True once the batch has run.
        results: Results of executed mappings, in input order.
        dry_run: Whether the batch was a preview (no files written).
        started_at: ISO 8601 timestamp when the batch started.
        completed_at: ISO 8601 timestamp when the batch completed.
    """

    success: bool = True
    results: list[SyncResult] = []
    dry_run: bool = False
    started_at: str | None = None
    completed_at: str | None = None

    model_config = {"frozen": True}

    @property
    def executed(self) -> int:
        """Number of mappings that were executed."""
        return len(self.results)

    @property
    def failed(self) -> int:
        """Number of executed mappings that failed."""
        return len(self.errors)

    @property
    def errors(self) -> list[SyncResult]:
        """Results where success is False."""
        return [r for r in self.results if not r.success]
