"""Tests for MappingExecutor.

Covers:
- directory, file, and file-into-directory classification
- missing source fails without writing
- per-mapping error isolation in batches
- disabled mappings skipped, input order kept, duplicate ids
- dry-run preview and cancellation
"""

import threading
from unittest.mock import MagicMock

from file_sync_server.sync.copier import CopyEngine
from file_sync_server.sync.engine import MappingExecutor
from file_sync_server.sync.models import (
    SyncErrorKind,
    SyncKind,
    SyncMapping,
)
from file_sync_server.sync.resolver import PathResolver


def _executor(base, **kwargs):
    return MappingExecutor(resolver=PathResolver(base), **kwargs)


def _m(id, source, target, enabled=True):
    return SyncMapping(id=id, source=source, target=target, enabled=enabled)


# ---------------------------------------------------------------------------
# execute_one
# ---------------------------------------------------------------------------


class TestExecuteOne:
    def test_directory_source(self, workspace, make_files):
        make_files(workspace, {"src/a.txt": "A", "src/sub/b.txt": "B"})

        result = _executor(workspace).execute_one(_m("d", "src", "out/site"))

        assert result.success
        assert result.kind == SyncKind.DIRECTORY
        assert result.destination == str(workspace / "out" / "site")
        assert "(2 files)" in result.detail
        assert (workspace / "out/site/sub/b.txt").read_text() == "B"

    def test_file_into_existing_directory(self, workspace, make_files):
        make_files(workspace, {"app.toml": "cfg"})
        (workspace / "etc").mkdir()

        result = _executor(workspace).execute_one(_m("f", "app.toml", "etc"))

        assert result.success
        assert result.kind == SyncKind.FILE_INTO_DIRECTORY
        assert (workspace / "etc" / "app.toml").read_text() == "cfg"

    def test_file_to_new_path(self, workspace, make_files):
        make_files(workspace, {"a.txt": "A"})

        result = _executor(workspace).execute_one(
            _m("f", "a.txt", "new/dir/b.txt")
        )

        assert result.success
        assert result.kind == SyncKind.FILE
        assert (workspace / "new" / "dir" / "b.txt").read_text() == "A"

    def test_file_overwrites_existing_file(self, workspace, make_files):
        make_files(workspace, {"a.txt": "new", "b.txt": "old"})
        result = _executor(workspace).execute_one(_m("f", "a.txt", "b.txt"))
        assert result.kind == SyncKind.FILE
        assert (workspace / "b.txt").read_text() == "new"

    def test_missing_source(self, workspace):
        result = _executor(workspace).execute_one(_m("x", "nope", "out"))

        assert not result.success
        assert result.error_kind == SyncErrorKind.MISSING_SOURCE
        assert result.error.startswith("Source path does not exist:")
        assert str(workspace / "nope") in result.error
        assert not (workspace / "out").exists()

    def test_io_error_becomes_failed_result(self, workspace, make_files):
        make_files(workspace, {"a.txt": "A"})
        copier = MagicMock(spec=CopyEngine)
        copier.copy_file.side_effect = PermissionError("denied")

        result = _executor(workspace, copier=copier).execute_one(
            _m("f", "a.txt", "b.txt")
        )

        assert not result.success
        assert result.error == "denied"
        assert result.error_kind == SyncErrorKind.IO_FAILURE
        assert result.kind == SyncKind.FILE
        assert result.destination == str(workspace / "b.txt")

    def test_directory_copy_failure_keeps_classification(
        self, workspace, make_files
    ):
        make_files(workspace, {"src/a.txt": "A"})
        copier = MagicMock(spec=CopyEngine)
        copier.copy_directory.side_effect = OSError("disk full")

        result = _executor(workspace, copier=copier).execute_one(
            _m("d", "src", "out")
        )

        assert not result.success
        assert result.kind == SyncKind.DIRECTORY
        assert result.destination == str(workspace / "out")

    def test_missing_source_is_unclassified(self, workspace):
        result = _executor(workspace).execute_one(_m("x", "nope", "out"))
        assert result.kind is None
        assert result.destination is None

    def test_file_into_its_own_directory(self, workspace, make_files):
        make_files(workspace, {"a/b.txt": "B"})

        result = _executor(workspace).execute_one(_m("f", "a/b.txt", "a"))

        assert result.success
        assert result.kind == SyncKind.FILE_INTO_DIRECTORY
        assert result.destination == str(workspace / "a" / "b.txt")
        assert (workspace / "a" / "b.txt").read_text() == "B"

    def test_file_onto_itself(self, workspace, make_files):
        make_files(workspace, {"a.txt": "A"})
        result = _executor(workspace).execute_one(_m("f", "a.txt", "a.txt"))
        assert result.success
        assert result.kind == SyncKind.FILE
        assert (workspace / "a.txt").read_text() == "A"

    def test_directory_onto_itself(self, workspace, make_files):
        make_files(workspace, {"src/a.txt": "A", "src/sub/b.txt": "B"})
        result = _executor(workspace).execute_one(_m("d", "src", "src"))
        assert result.success
        assert (workspace / "src" / "sub" / "b.txt").read_text() == "B"

    def test_disabled_mapping_still_runs(self, workspace, make_files):
        make_files(workspace, {"a.txt": "A"})
        result = _executor(workspace).execute_one(
            _m("f", "a.txt", "b.txt", enabled=False)
        )
        assert result.success

    def test_dry_run_writes_nothing(self, workspace, make_files):
        make_files(workspace, {"src/a.txt": "A", "f.txt": "F"})
        executor = _executor(workspace)

        d = executor.execute_one(_m("d", "src", "out"), dry_run=True)
        f = executor.execute_one(_m("f", "f.txt", "copy.txt"), dry_run=True)

        assert d.success and f.success
        assert "would be synced" in d.detail
        assert f.destination == str(workspace / "copy.txt")
        assert not (workspace / "out").exists()
        assert not (workspace / "copy.txt").exists()

    def test_idempotent(self, workspace, make_files):
        make_files(workspace, {"src/a.txt": "A"})
        executor = _executor(workspace)
        first = executor.execute_one(_m("d", "src", "out"))
        second = executor.execute_one(_m("d", "src", "out"))
        assert first.success and second.success
        assert (workspace / "out" / "a.txt").read_text() == "A"


# ---------------------------------------------------------------------------
# execute_all
# ---------------------------------------------------------------------------


class TestExecuteAll:
    def test_empty_batch(self, workspace):
        batch = _executor(workspace).execute_all([])
        assert batch.success
        assert batch.results == []

    def test_failure_does_not_stop_batch(self, workspace, make_files):
        make_files(workspace, {"a.txt": "A", "c.txt": "C"})

        batch = _executor(workspace).execute_all(
            [
                _m("a", "a.txt", "out/a.txt"),
                _m("b", "missing.txt", "out/b.txt"),
                _m("c", "c.txt", "out/c.txt"),
            ]
        )

        assert batch.success
        assert [r.id for r in batch.results] == ["a", "b", "c"]
        assert [r.success for r in batch.results] == [True, False, True]
        assert batch.failed == 1
        assert (workspace / "out" / "c.txt").exists()

    def test_disabled_skipped_without_result(self, workspace, make_files):
        make_files(workspace, {"a.txt": "A"})

        batch = _executor(workspace).execute_all(
            [
                _m("off", "a.txt", "off.txt", enabled=False),
                _m("on", "a.txt", "on.txt"),
            ]
        )

        assert [r.id for r in batch.results] == ["on"]
        assert not (workspace / "off.txt").exists()

    def test_all_disabled(self, workspace):
        batch = _executor(workspace).execute_all(
            [_m("a", "x", "y", enabled=False)]
        )
        assert batch.success
        assert batch.results == []

    def test_later_mapping_wins_on_collision(self, workspace, make_files):
        make_files(workspace, {"one.txt": "1", "two.txt": "2"})

        _executor(workspace).execute_all(
            [_m("1", "one.txt", "out.txt"), _m("2", "two.txt", "out.txt")]
        )

        assert (workspace / "out.txt").read_text() == "2"

    def test_duplicate_ids_run_independently(self, workspace, make_files):
        make_files(workspace, {"a.txt": "A"})

        batch = _executor(workspace).execute_all(
            [_m("dup", "a.txt", "x.txt"), _m("dup", "missing", "y.txt")]
        )

        assert [r.id for r in batch.results] == ["dup", "dup"]
        assert [r.success for r in batch.results] == [True, False]

    def test_timestamps_and_dry_run_flag(self, workspace):
        batch = _executor(workspace).execute_all([], dry_run=True)
        assert batch.dry_run
        assert batch.started_at is not None
        assert batch.completed_at >= batch.started_at

    def test_cancel_before_start_runs_nothing(self, workspace, make_files):
        make_files(workspace, {"a.txt": "A"})
        event = threading.Event()
        event.set()

        batch = _executor(workspace, cancel_event=event).execute_all(
            [_m("a", "a.txt", "b.txt")]
        )

        assert batch.results == []
        assert not (workspace / "b.txt").exists()

    def test_cancel_mid_directory_copy(self, workspace, make_files):
        make_files(workspace, {"src/a.txt": "A"})
        event = MagicMock()
        # Batch check passes, first copy check trips
        event.is_set.side_effect = [False, True, True]

        batch = _executor(workspace, cancel_event=event).execute_all(
            [_m("d", "src", "out"), _m("e", "src", "out2")]
        )

        assert len(batch.results) == 1
        assert batch.results[0].error_kind == SyncErrorKind.CANCELLED
