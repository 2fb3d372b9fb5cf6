"""Tests for DirectoryTreeReader.

Covers:
- default filter (dotfiles, .gitignore, node_modules)
- directories-first, locale-aware ordering
- depth limiting (0, 1, nested)
- unreadable directories yield empty subtrees
- pluggable include predicate
"""

import os

import pytest

from file_sync_server.sync.tree import (
    DirectoryTreeReader,
    collation_key,
    default_include,
)


def _names(nodes):
    return [n.name for n in nodes]


class _Entry:
    def __init__(self, name):
        self.name = name


class TestDefaultInclude:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("src", True),
            (".gitignore", True),
            (".git", False),
            (".env", False),
            ("node_modules", False),
            ("readme.md", True),
        ],
    )
    def test_filter(self, name, expected):
        assert default_include(_Entry(name)) is expected


class TestCollationKey:
    def test_case_insensitive_then_lowercase_first(self):
        names = ["B", "a", "b", "A"]
        assert sorted(names, key=collation_key) == ["a", "A", "b", "B"]

    def test_accents_sort_next_to_base_letter(self):
        names = ["f", "é", "e"]
        assert sorted(names, key=collation_key) == ["e", "é", "f"]


class TestReadTree:
    def test_default_filter_and_order(self, tmp_path, make_files):
        (tmp_path / ".git").mkdir()
        (tmp_path / "node_modules").mkdir()
        (tmp_path / "src").mkdir()
        make_files(tmp_path, {".gitignore": "*.pyc\n"})

        nodes = DirectoryTreeReader().read_tree(tmp_path)

        assert _names(nodes) == ["src", ".gitignore"]
        assert nodes[0].is_directory
        assert nodes[0].children == ()
        assert not nodes[1].is_directory
        assert nodes[1].children is None

    def test_directories_before_files(self, tmp_path, make_files):
        make_files(tmp_path, {"a.txt": "", "z/inner.txt": "", "m.txt": ""})
        nodes = DirectoryTreeReader().read_tree(tmp_path)
        assert _names(nodes) == ["z", "a.txt", "m.txt"]

    def test_paths_are_absolute(self, tmp_path, make_files):
        make_files(tmp_path, {"d/f.txt": "x"})
        nodes = DirectoryTreeReader().read_tree(tmp_path)
        assert nodes[0].path == str(tmp_path / "d")
        assert nodes[0].children[0].path == str(tmp_path / "d" / "f.txt")

    def test_depth_zero_is_empty(self, tmp_path, make_files):
        make_files(tmp_path, {"a.txt": ""})
        assert DirectoryTreeReader().read_tree(tmp_path, max_depth=0) == ()

    def test_depth_one_does_not_expand(self, tmp_path, make_files):
        make_files(tmp_path, {"d/f.txt": ""})
        nodes = DirectoryTreeReader().read_tree(tmp_path, max_depth=1)
        assert _names(nodes) == ["d"]
        assert nodes[0].children == ()

    def test_depth_limits_nesting(self, tmp_path, make_files):
        make_files(tmp_path, {"a/b/c/d.txt": ""})
        nodes = DirectoryTreeReader().read_tree(tmp_path, max_depth=2)
        b = nodes[0].children[0]
        assert b.name == "b"
        assert b.children == ()

    def test_missing_root_is_empty(self, tmp_path):
        unreadable = []
        nodes = DirectoryTreeReader().read_tree(
            tmp_path / "missing", unreadable=unreadable
        )
        assert nodes == ()
        assert unreadable == [str(tmp_path / "missing")]

    def test_unreadable_subdirectory_is_empty(
        self, tmp_path, make_files, monkeypatch
    ):
        make_files(tmp_path, {"locked/secret.txt": "", "open/ok.txt": ""})
        locked = str(tmp_path / "locked")
        real_scandir = os.scandir

        def fake_scandir(path):
            if os.fspath(path) == locked:
                raise PermissionError(13, "Permission denied", locked)
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", fake_scandir)
        unreadable = []
        nodes = DirectoryTreeReader().read_tree(tmp_path, unreadable=unreadable)

        assert _names(nodes) == ["locked", "open"]
        assert nodes[0].children == ()
        assert _names(nodes[1].children) == ["ok.txt"]
        assert unreadable == [locked]

    def test_custom_predicate(self, tmp_path, make_files):
        make_files(tmp_path, {"keep.py": "", "drop.txt": "", ".hidden": ""})
        reader = DirectoryTreeReader(
            should_include=lambda e: not e.name.endswith(".txt")
        )
        assert _names(reader.read_tree(tmp_path)) == [".hidden", "keep.py"]

    def test_symlinked_directory_is_followed(self, tmp_path, make_files):
        make_files(tmp_path, {"real/f.txt": ""})
        try:
            os.symlink(tmp_path / "real", tmp_path / "alias")
        except OSError:
            pytest.skip("symlinks not supported")
        nodes = DirectoryTreeReader().read_tree(tmp_path)
        alias = next(n for n in nodes if n.name == "alias")
        assert alias.is_directory
        assert _names(alias.children) == ["f.txt"]
