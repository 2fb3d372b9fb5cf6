"""Depth-bounded directory tree reader.

Builds a read-only ``FileTreeNode`` snapshot of a directory for the
presentation layer.  Three concerns are kept apart:

* **Filtering** -- an injected ``should_include(entry)`` predicate decides
  which entries appear.  ``default_include`` hides dotfiles (except
  ``.gitignore``) and ``node_modules``.
* **Ordering** -- directories first, then a locale-aware name order
  (see ``collation_key``).
* **Failure policy** -- a directory that cannot be listed yields an empty
  subtree; traversal carries on with its siblings.  Callers that need to
  tell "empty" apart from "unreadable" pass an ``unreadable`` list.
"""

from __future__ import annotations

import logging
import os
import unicodedata
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from .models import FileTreeNode

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10


class NamedEntry(Protocol):
    """Minimal view of a directory entry handed to filter predicates."""

    @property
    def name(self) -> str: ...


EntryPredicate = Callable[[NamedEntry], bool]


def default_include(entry: NamedEntry) -> bool:
    """Hide dotfiles except ``.gitignore``, and ``node_modules``."""
    name = entry.name
    if name.startswith(".") and name != ".gitignore":
        return False
    return name != "node_modules"


def collation_key(name: str) -> tuple[str, str, str]:
    """Sort key approximating locale-aware string comparison.

    Compares base letters first (ignoring case and accents), then accents,
    then case with lowercase ahead of uppercase.
    """
    decomposed = unicodedata.normalize("NFD", name)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return (base.casefold(), decomposed.casefold(), decomposed.swapcase())


def _node_sort_key(node: FileTreeNode) -> tuple[bool, tuple[str, str, str]]:
    return (not node.is_directory, collation_key(node.name))


class DirectoryTreeReader:
    """Read directory trees with a pluggable inclusion policy.

    Args:
        should_include: Predicate applied to every ``os.DirEntry``.
            Defaults to ``default_include``.
    """

    def __init__(self, should_include: EntryPredicate | None = None) -> None:
        self.should_include = should_include or default_include

    def read_tree(
        self,
        root: str | Path,
        max_depth: int = DEFAULT_MAX_DEPTH,
        unreadable: list[str] | None = None,
    ) -> tuple[FileTreeNode, ...]:
        """List *root* recursively, expanding at most *max_depth* levels.

        Args:
            root: Directory to list.
            max_depth: Number of directory levels to produce.  ``0`` yields
                an empty tuple, ``1`` lists *root* without expanding
                subdirectories.
            unreadable: Optional list that receives the path of every
                directory that could not be listed.

        Returns:
            Top-level nodes of *root*, directories first.
        """
        if max_depth <= 0:
            return ()

        root_path = os.path.abspath(root)
        try:
            with os.scandir(root_path) as it:
                entries = list(it)
        except OSError as exc:
            logger.debug("Cannot list %s: %s", root_path, exc)
            if unreadable is not None:
                unreadable.append(root_path)
            return ()

        nodes: list[FileTreeNode] = []
        for entry in entries:
            if not self.should_include(entry):
                continue
            full_path = os.path.join(root_path, entry.name)
            is_dir = _is_dir(entry)
            children = None
            if is_dir:
                children = self.read_tree(
                    full_path, max_depth - 1, unreadable
                )
            nodes.append(
                FileTreeNode(
                    name=entry.name,
                    path=full_path,
                    is_directory=is_dir,
                    children=children,
                )
            )

        nodes.sort(key=_node_sort_key)
        return tuple(nodes)


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir()
    except OSError:
        return False
