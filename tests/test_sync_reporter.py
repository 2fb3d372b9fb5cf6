"""Tests for sync reporter aggregation and formatting.

Covers:
- summarize counts
- format_sync_report with various result combinations
- format_result single-line output
- report_to_json structure
- format_tree / tree_to_json rendering
"""

from __future__ import annotations

from file_sync_server.sync.models import (
    BatchSyncResult,
    FileTreeNode,
    SyncErrorKind,
    SyncKind,
    SyncResult,
)
from file_sync_server.sync.reporter import (
    format_result,
    format_sync_report,
    format_tree,
    report_to_json,
    result_to_json,
    summarize,
    tree_to_json,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _batch(
    results: list[SyncResult] | None = None, dry_run: bool = False
) -> BatchSyncResult:
    return BatchSyncResult(
        results=results or [],
        dry_run=dry_run,
        started_at="2026-02-07T10:00:00+00:00",
        completed_at="2026-02-07T10:01:00+00:00",
    )


def _ok(id: str = "docs", detail: str = "File synced: a -> b") -> SyncResult:
    return SyncResult(id=id, success=True, detail=detail, kind=SyncKind.FILE)


def _fail(id: str = "bad", error: str = "boom") -> SyncResult:
    return SyncResult(
        id=id,
        success=False,
        error=error,
        error_kind=SyncErrorKind.IO_FAILURE,
    )


# ---------------------------------------------------------------------------
# summarize
# ---------------------------------------------------------------------------


class TestSummarize:
    def test_empty(self):
        s = summarize([])
        assert (s.executed, s.failed) == (0, 0)

    def test_mixed(self):
        s = summarize([_ok(), _fail(), _ok(), _fail()])
        assert (s.executed, s.failed, s.succeeded) == (4, 2, 2)

    def test_accepts_generator(self):
        s = summarize(r for r in [_ok(), _fail()])
        assert s.executed == 2

    def test_failures_at_most_executed(self):
        s = summarize([_fail(), _fail()])
        assert s.failed <= s.executed


# ---------------------------------------------------------------------------
# format_sync_report
# ---------------------------------------------------------------------------


class TestFormatSyncReport:
    def test_header(self):
        text = format_sync_report(_batch())
        assert text.startswith("Sync report")
        assert "Started: 2026-02-07T10:00:00+00:00" in text

    def test_dry_run_indicator(self):
        assert "DRY RUN" in format_sync_report(_batch(dry_run=True))
        assert "DRY RUN" not in format_sync_report(_batch())

    def test_empty_batch(self):
        text = format_sync_report(_batch())
        assert "No enabled mappings to sync." in text
        assert "Errors:" not in text

    def test_counts_line(self):
        text = format_sync_report(_batch([_ok(), _fail()]))
        assert "Synced 2 mappings: 1 succeeded, 1 failed" in text

    def test_sections(self):
        text = format_sync_report(
            _batch([_ok("docs"), _fail("cfg", "Source path does not exist: /x")])
        )
        assert "Completed:" in text
        assert "[docs] File synced: a -> b" in text
        assert "Errors:" in text
        assert "[cfg] Source path does not exist: /x" in text

    def test_no_errors_section_when_all_ok(self):
        assert "Errors:" not in format_sync_report(_batch([_ok()]))


class TestFormatResult:
    def test_success(self):
        assert format_result(_ok("a", "done")) == "[a] done"

    def test_failure(self):
        assert format_result(_fail("a", "nope")) == "[a] failed: nope"


# ---------------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------------


class TestReportToJson:
    def test_structure(self):
        data = report_to_json(_batch([_ok(), _fail()], dry_run=True))
        assert data["success"] is True
        assert data["dry_run"] is True
        assert data["counts"] == {"executed": 2, "succeeded": 1, "failed": 1}
        assert len(data["results"]) == 2

    def test_result_enums_serialized(self):
        data = result_to_json(_fail())
        assert data["error_kind"] == "io_failure"
        assert "detail" not in data

    def test_result_order_preserved(self):
        data = report_to_json(_batch([_ok("z"), _ok("a")]))
        assert [r["id"] for r in data["results"]] == ["z", "a"]


# ---------------------------------------------------------------------------
# Tree rendering
# ---------------------------------------------------------------------------


def _tree() -> tuple[FileTreeNode, ...]:
    return (
        FileTreeNode(
            name="src",
            path="/p/src",
            is_directory=True,
            children=(
                FileTreeNode(name="main.py", path="/p/src/main.py", is_directory=False),
            ),
        ),
        FileTreeNode(name=".gitignore", path="/p/.gitignore", is_directory=False),
    )


class TestFormatTree:
    def test_indented_listing(self):
        assert format_tree(_tree()) == "src/\n  main.py\n.gitignore"

    def test_empty(self):
        assert format_tree(()) == ""

    def test_tree_to_json_omits_file_children(self):
        data = tree_to_json(_tree())
        assert data[0]["children"][0] == {
            "name": "main.py",
            "path": "/p/src/main.py",
            "is_directory": False,
        }
        assert "children" not in data[1]
