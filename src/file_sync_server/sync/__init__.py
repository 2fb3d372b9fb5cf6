"""Path-mapping sync engine.

Public API for mirroring declared source paths onto target paths, and for
reading depth-bounded directory trees.

Architecture
------------
Every run is a full copy with *additive overwrite* semantics: files that
exist in the source replace their counterparts at the target, everything
else at the target is left alone.  Mappings run sequentially in input
order, and a failing mapping never stops the batch.

Modules:

- ``resolver`` -- ``PathResolver``: lexical absolute-path resolution.
- ``tree``     -- ``DirectoryTreeReader``: filtered, ordered listings.
- ``copier``   -- ``CopyEngine``: file and directory copy primitives.
- ``engine``   -- ``MappingExecutor``: per-mapping case classification
  and batch execution.
- ``models``   -- ``SyncMapping``, ``FileTreeNode``, ``SyncResult``,
  ``BatchSyncResult``, ``SyncSummary``: core data contracts.
- ``reporter`` -- ``summarize`` plus text and JSON formatting.

Usage example
-------------
::

    from file_sync_server.sync import (
        MappingExecutor, SyncMapping, format_sync_report,
    )

    executor = MappingExecutor()
    batch = executor.execute_all([
        SyncMapping(id="docs", source="docs", target="/srv/site/docs"),
        SyncMapping(id="cfg", source="app.toml", target="/etc/app/"),
    ])
    print(format_sync_report(batch))
"""

from .copier import CopyEngine, SyncCancelled
from .engine import MappingExecutor
from .models import (
    BatchSyncResult,
    FileTreeNode,
    SyncErrorKind,
    SyncKind,
    SyncMapping,
    SyncResult,
    SyncSummary,
)
from .reporter import (
    format_sync_report,
    format_tree,
    report_to_json,
    summarize,
)
from .resolver import PathResolver
from .tree import DirectoryTreeReader, default_include

__all__ = [
    "BatchSyncResult",
    "CopyEngine",
    "DirectoryTreeReader",
    "FileTreeNode",
    "MappingExecutor",
    "PathResolver",
    "SyncCancelled",
    "SyncErrorKind",
    "SyncKind",
    "SyncMapping",
    "SyncResult",
    "SyncSummary",
    "default_include",
    "format_sync_report",
    "format_tree",
    "report_to_json",
    "summarize",
]
