"""File and directory copy primitives.

Copies are *additive overwrites*: colliding destination files are fully
replaced, destination entries with no counterpart in the source are left
alone.  Nothing is rolled back on failure, so an interrupted copy can leave
a partially written destination file.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class CancelSignal(Protocol):
    """Anything with an ``is_set()`` method, e.g. ``threading.Event``."""

    def is_set(self) -> bool: ...


class SyncCancelled(Exception):
    """Raised when a copy is interrupted by its cancel signal."""


class CopyEngine:
    """Copy files and directory trees onto a destination.

    Args:
        cancel_event: Optional signal checked between directory entries.
    """

    def __init__(self, cancel_event: CancelSignal | None = None) -> None:
        self.cancel_event = cancel_event

    def copy_file(self, src: str | Path, dst: str | Path) -> None:
        """Copy the bytes of *src* to *dst*, replacing *dst* if it exists.

        Missing parent directories of *dst* are created.  Copying a file onto
        itself is a no-op.

        Raises:
            OSError: On any read, write, or mkdir failure.
        """
        dst = Path(dst)
        dst.parent.mkdir(parents=True, exist_ok=True)
        _copy_bytes(src, dst)

    def copy_directory(self, src: str | Path, dst: str | Path) -> int:
        """Recursively copy the contents of *src* into *dst*.

        *dst* (and its ancestors) are created when missing.

        Returns:
            Number of files copied.

        Raises:
            OSError: On any filesystem failure.
            SyncCancelled: If the cancel signal is set mid-copy.
        """
        src = Path(src)
        dst = Path(dst)
        dst.mkdir(parents=True, exist_ok=True)

        copied = 0
        with os.scandir(src) as it:
            entries = list(it)
        for entry in entries:
            self._check_cancelled()
            src_path = src / entry.name
            dst_path = dst / entry.name
            if entry.is_dir():
                copied += self.copy_directory(src_path, dst_path)
            else:
                _copy_bytes(src_path, dst_path)
                copied += 1
        return copied

    def _check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise SyncCancelled("Sync cancelled")


def _copy_bytes(src: str | Path, dst: str | Path) -> None:
    try:
        shutil.copyfile(src, dst)
    except shutil.SameFileError:
        logger.debug("Skipped %s: destination is the source itself", src)
        return
    logger.debug("Copied %s -> %s", src, dst)
