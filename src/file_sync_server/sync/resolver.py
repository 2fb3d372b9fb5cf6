"""Path resolution for mapping endpoints.

Turns the possibly-relative paths stored in a mapping into canonical
absolute paths.  Resolution is purely lexical: ``.`` and ``..`` segments
and duplicate separators are collapsed, symlinks are *not* dereferenced,
and the result is not checked for existence.
"""

from __future__ import annotations

import os
from pathlib import Path


class PathResolver:
    """Resolve mapping endpoints to absolute paths.

    Args:
        base_dir: Directory relative paths are resolved against.  When
            ``None`` the process working directory at call time is used.
    """

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self._base_dir = (
            os.path.abspath(base_dir) if base_dir is not None else None
        )

    @property
    def base_dir(self) -> str:
        """Directory used for relative paths."""
        return self._base_dir or os.getcwd()

    def resolve(self, path: str | Path) -> Path:
        """Return the normalized absolute form of *path*.

        Args:
            path: Absolute or relative path.

        Returns:
            Absolute ``Path``.

        Raises:
            ValueError: If *path* is empty.
        """
        raw = os.fspath(path)
        if not raw:
            raise ValueError("Path cannot be empty")
        joined = os.path.join(self.base_dir, raw)
        return Path(os.path.normpath(joined))
