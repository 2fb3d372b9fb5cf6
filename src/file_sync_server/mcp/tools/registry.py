"""Tool registry with permission gating.

Every tool is described by a ``ToolSpec``: the MCP ``Tool`` definition,
the permission names it needs, and an async ``(session, args)`` handler.
``ToolRegistry`` keeps only the specs an operator allows and dispatches
calls to them, turning handler exceptions into error results.

Permission names:
    TREE_VIEW     -- list directories (``fs_read_tree``)
    SYNC_EXECUTE  -- copy files (``sync_all``, ``sync_one``)
    CONFIG_VIEW   -- read mappings and the working directory
    CONFIG_ADMIN  -- change mappings and the working directory

A permissions file lists the granted names, one or more per line
(comma or whitespace separated); ``#`` starts a comment.
"""

import logging
import re
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

import mcp.types as types

from ...core.session import SyncSession
from .errors import build_error_response, translate_os_error

logger = logging.getLogger(__name__)

KNOWN_PERMISSIONS = frozenset(
    {"TREE_VIEW", "SYNC_EXECUTE", "CONFIG_VIEW", "CONFIG_ADMIN"}
)

ToolHandler = Callable[[SyncSession, dict], Awaitable[types.CallToolResult]]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """One registrable tool.

    An empty ``permissions`` set means the tool is always exposed.
    """

    tool: types.Tool
    permissions: frozenset[str]
    handler: ToolHandler


def is_permitted(
    spec: ToolSpec, allowed: frozenset[str] | None
) -> bool:
    """Whether *spec* may be exposed under the *allowed* grant set.

    ``None`` grants everything.
    """
    if allowed is None or not spec.permissions:
        return True
    return spec.permissions <= allowed


class ToolRegistry:
    """Permitted tool specs, keyed by tool name."""

    def __init__(
        self,
        specs: Iterable[ToolSpec],
        allowed_permissions: frozenset[str] | None = None,
    ):
        self._specs: dict[str, ToolSpec] = {
            spec.tool.name: spec
            for spec in specs
            if is_permitted(spec, allowed_permissions)
        }

    def list_tools(self) -> list[types.Tool]:
        return [spec.tool for spec in self._specs.values()]

    def tool_count(self) -> int:
        return len(self._specs)

    async def call_tool(
        self,
        name: str,
        arguments: dict | None,
        session: SyncSession,
    ) -> types.CallToolResult:
        """Run the handler registered under *name*.

        ``ValueError`` from a handler becomes a ``validation_error`` result,
        ``OSError`` is mapped by ``translate_os_error``, and anything else
        becomes a logged ``server_error`` result.

        Raises:
            ValueError: If *name* is unknown or was filtered out.
        """
        spec = self._specs.get(name)
        if spec is None:
            raise ValueError(f"Unknown tool: {name}")

        try:
            return await spec.handler(session, arguments or {})
        except ValueError as e:
            return build_error_response(
                "validation_error",
                str(e),
                "Check parameter values and retry.",
            )
        except OSError as e:
            logger.warning("Filesystem error in %s: %s", name, e)
            return translate_os_error(e)
        except Exception as e:
            logger.exception("Unexpected error in tool %s", name)
            return build_error_response(
                "server_error",
                str(e),
                "Check the server log and retry.",
            )


_SEPARATORS = re.compile(r"[\s,]+")


def load_permissions_file(path: str | Path) -> frozenset[str]:
    """Read the granted permission names from *path*.

    Example file::

        # read-only agent
        TREE_VIEW, CONFIG_VIEW

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: On an unknown name, or if no name is granted.
    """
    path = Path(path)
    granted: set[str] = set()
    for line_num, line in enumerate(path.read_text().splitlines(), 1):
        content = line.split("#", 1)[0]
        for name in filter(None, _SEPARATORS.split(content)):
            if name not in KNOWN_PERMISSIONS:
                raise ValueError(
                    f"Invalid permission '{name}' at line {line_num} in "
                    f"{path}. Expected one of: "
                    f"{', '.join(sorted(KNOWN_PERMISSIONS))}."
                )
            granted.add(name)
    if not granted:
        raise ValueError(f"No permissions found in {path}.")
    return frozenset(granted)
