"""Persistent key/value store for the working directory and mappings.

A ``ConfigStore`` wraps one JSON file.  It is an explicit handle: nothing
in the package keeps a module-level store, so independent sessions (and
tests) can each point at their own file.

Known keys:

* ``work_dir`` -- the working directory shown by the presentation layer.
* ``sync_mappings`` -- list of mapping dicts (``id``, ``source``,
  ``target``, ``enabled``).

Key design choices:

* **Atomic writes** -- ``set()`` writes to a temp file then calls
  ``os.replace()`` so readers never see partial data.
* **Defaults** -- unknown or missing keys fall back to ``DEFAULTS``.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

WORK_DIR_KEY = "work_dir"
MAPPINGS_KEY = "sync_mappings"

DEFAULTS: dict[str, Any] = {
    WORK_DIR_KEY: None,
    MAPPINGS_KEY: [],
}


class ConfigStore:
    """Load and save key/value data in a JSON file.

    Args:
        path: Path of the JSON file.  Parent directories are created on
            first write.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> dict[str, Any]:
        """Return all stored data merged over ``DEFAULTS``.

        Raises:
            ValueError: If the file exists but is not a JSON object.
        """
        data = copy.deepcopy(DEFAULTS)
        if not self._path.exists():
            return data
        with open(self._path, encoding="utf-8") as fh:
            try:
                stored = json.load(fh)
            except json.JSONDecodeError as exc:
                raise ValueError(
                    f"Store file {self._path} is not valid JSON: {exc}"
                ) from exc
        if not isinstance(stored, dict):
            raise ValueError(
                f"Store file {self._path} must contain a JSON object"
            )
        data.update(stored)
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for *key*, falling back to its default."""
        data = self.load()
        if key in data:
            return data[key]
        return default

    def set(self, key: str, value: Any) -> bool:
        """Persist *value* under *key*.

        Returns:
            ``True`` once the file has been replaced.
        """
        data = self.load()
        data[key] = value
        self._write(data)
        logger.debug("Store %s: updated %s", self._path, key)
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self._path.parent), suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp_path, self._path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
