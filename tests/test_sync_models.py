"""Tests for sync Pydantic models.

Covers:
- SyncMapping validation and immutability
- FileTreeNode children handling
- SyncResult / BatchSyncResult derived properties
- SyncSummary counts
"""

import pytest
from pydantic import ValidationError

from file_sync_server.sync.models import (
    BatchSyncResult,
    FileTreeNode,
    SyncErrorKind,
    SyncKind,
    SyncMapping,
    SyncResult,
    SyncSummary,
)


class TestSyncMapping:
    def test_defaults_to_enabled(self):
        m = SyncMapping(id="a", source="src", target="dst")
        assert m.enabled is True

    def test_frozen(self):
        m = SyncMapping(id="a", source="src", target="dst")
        with pytest.raises(ValidationError):
            m.source = "other"

    @pytest.mark.parametrize("field", ["id", "source", "target"])
    def test_empty_field_rejected(self, field):
        data = {"id": "a", "source": "src", "target": "dst", field: ""}
        with pytest.raises(ValidationError):
            SyncMapping(**data)

    def test_model_validate_from_dict(self):
        m = SyncMapping.model_validate(
            {"id": "x", "source": "a", "target": "b", "enabled": False}
        )
        assert m.enabled is False

    def test_equal_mappings_compare_equal(self):
        a = SyncMapping(id="a", source="s", target="t")
        b = SyncMapping(id="a", source="s", target="t")
        assert a == b


class TestFileTreeNode:
    def test_file_has_no_children(self):
        node = FileTreeNode(name="a.txt", path="/x/a.txt", is_directory=False)
        assert node.children is None

    def test_directory_children_are_tuple(self):
        child = FileTreeNode(name="b", path="/x/d/b", is_directory=False)
        node = FileTreeNode(
            name="d", path="/x/d", is_directory=True, children=[child]
        )
        assert node.children == (child,)


class TestSyncResult:
    def test_success_result(self):
        r = SyncResult(id="a", success=True, kind=SyncKind.FILE)
        assert r.error is None
        assert r.kind == SyncKind.FILE

    def test_failed_result(self):
        r = SyncResult(
            id="a",
            success=False,
            error="boom",
            error_kind=SyncErrorKind.IO_FAILURE,
        )
        assert r.error_kind.value == "io_failure"


class TestSyncSummary:
    def test_succeeded_is_difference(self):
        s = SyncSummary(executed=5, failed=2)
        assert s.succeeded == 3
        assert not s.all_succeeded

    def test_empty_summary_all_succeeded(self):
        assert SyncSummary().all_succeeded


class TestBatchSyncResult:
    def test_defaults(self):
        batch = BatchSyncResult()
        assert batch.success is True
        assert batch.results == []
        assert batch.executed == 0
        assert batch.failed == 0

    def test_errors_and_counts(self):
        batch = BatchSyncResult(
            results=[
                SyncResult(id="a", success=True),
                SyncResult(id="b", success=False, error="x"),
                SyncResult(id="c", success=False, error="y"),
            ]
        )
        assert batch.executed == 3
        assert batch.failed == 2
        assert [r.id for r in batch.errors] == ["b", "c"]
