"""Sync report aggregation and formatting.

Provides the reduction and output helpers for sync batches:

- ``summarize`` -- executed/failed counts over a result sequence.
- ``format_sync_report`` -- human-readable post-sync summary.
- ``report_to_json`` -- structured dict for MCP tool output.
- ``format_tree`` -- indented text rendering of a tree listing.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from .models import SyncSummary

if TYPE_CHECKING:
    from .models import BatchSyncResult, FileTreeNode, SyncResult


def summarize(results: Iterable[SyncResult]) -> SyncSummary:
    """Count executed and failed results.

    Args:
        results: Per-mapping results.

    Returns:
        ``SyncSummary`` with ``executed`` and ``failed`` counts.
    """
    executed = 0
    failed = 0
    for r in results:
        executed += 1
        if not r.success:
            failed += 1
    return SyncSummary(executed=executed, failed=failed)


# ------------------------------------------------------------------
# Human-readable report
# ------------------------------------------------------------------


def format_sync_report(batch: BatchSyncResult) -> str:
    """Format a batch result as human-readable text.

    Args:
        batch: The completed batch.

    Returns:
        Multi-line formatted string.
    """
    summary = summarize(batch.results)
    lines: list[str] = []

    header = "Sync report"
    if batch.dry_run:
        header += " (DRY RUN)"
    lines.append(header)
    if batch.started_at:
        lines.append(f"Started: {batch.started_at}")
    if batch.completed_at:
        lines.append(f"Completed: {batch.completed_at}")
    lines.append("")

    if summary.executed == 0:
        lines.append("No enabled mappings to sync.")
        return "\n".join(lines).rstrip()

    lines.append(
        f"Synced {summary.executed} mappings: "
        f"{summary.succeeded} succeeded, {summary.failed} failed"
    )
    lines.append("")

    succeeded = [r for r in batch.results if r.success]
    if succeeded:
        lines.append("Completed:")
        for r in succeeded:
            lines.append(f"  [{r.id}] {r.detail or 'ok'}")
        lines.append("")

    if batch.errors:
        lines.append("Errors:")
        for r in batch.errors:
            lines.append(f"  [{r.id}] {r.error}")
        lines.append("")

    return "\n".join(lines).rstrip()


def format_result(result: SyncResult) -> str:
    """One-line description of a single mapping result."""
    if result.success:
        return f"[{result.id}] {result.detail or 'ok'}"
    return f"[{result.id}] failed: {result.error}"


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def result_to_json(result: SyncResult) -> dict:
    """Convert one result to a plain dict, omitting unset fields."""
    return result.model_dump(mode="json", exclude_none=True)


def report_to_json(batch: BatchSyncResult) -> dict:
    """Convert a batch result to a structured dict for JSON serialisation.

    Args:
        batch: The batch result.

    Returns:
        Dict with timestamps, counts, and per-result details.
    """
    summary = summarize(batch.results)
    return {
        "success": batch.success,
        "dry_run": batch.dry_run,
        "started_at": batch.started_at,
        "completed_at": batch.completed_at,
        "counts": {
            "executed": summary.executed,
            "succeeded": summary.succeeded,
            "failed": summary.failed,
        },
        "results": [result_to_json(r) for r in batch.results],
    }


# ------------------------------------------------------------------
# Tree listing
# ------------------------------------------------------------------


def format_tree(nodes: Sequence[FileTreeNode], indent: str = "  ") -> str:
    """Render tree nodes as an indented listing.

    Directories get a trailing ``/``.
    """
    lines: list[str] = []

    def _walk(level: Sequence[FileTreeNode], depth: int) -> None:
        for node in level:
            suffix = "/" if node.is_directory else ""
            lines.append(f"{indent * depth}{node.name}{suffix}")
            if node.children:
                _walk(node.children, depth + 1)

    _walk(nodes, 0)
    return "\n".join(lines)


def tree_to_json(nodes: Sequence[FileTreeNode]) -> list[dict]:
    """Convert tree nodes to nested dicts (children omitted for files)."""
    return [n.model_dump(mode="json", exclude_none=True) for n in nodes]
