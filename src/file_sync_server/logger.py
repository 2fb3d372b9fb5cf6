"""Logging setup for the CLI and the MCP server.

The MCP server talks JSON-RPC over stdout, so in ``mcp`` mode records only
go to a log file.  The CLI logs to stderr and can mirror records into a
file.
"""

import json
import logging
import os
import sys

DEFAULT_MCP_LOG_FILE = "/tmp/file-sync-server.log"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
TEXT_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
FILE_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record: ``ts``, ``level``, ``logger``, ``msg``
    and, for exceptions, ``exc``."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _formatter(debug_format: str, fmt: str) -> logging.Formatter:
    if debug_format == "json":
        return JsonFormatter(datefmt=DATE_FORMAT)
    return logging.Formatter(fmt, datefmt=DATE_FORMAT)


def _resolve_level(mode: str, debug: bool, level: str | None) -> int:
    """``debug`` > ``LOG_LEVEL`` env > config *level* > mode default."""
    if debug:
        return logging.DEBUG
    fallback = level or ("WARNING" if mode == "mcp" else "INFO")
    name = os.getenv("LOG_LEVEL", fallback).upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def _cli_handlers(
    log_file: str | None, debug_format: str
) -> list[logging.Handler]:
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(_formatter(debug_format, TEXT_FORMAT))
    handlers: list[logging.Handler] = [stderr_handler]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(_formatter(debug_format, FILE_FORMAT))
        handlers.append(file_handler)
    return handlers


def setup_logging(
    mode: str = "cli",
    debug: bool = False,
    log_file: str | None = None,
    debug_format: str = "text",
    level: str | None = None,
) -> None:
    """Configure the root logger for *mode* (``"cli"`` or ``"mcp"``).

    Args:
        mode: ``"mcp"`` logs to a file only, ``"cli"`` logs to stderr.
        debug: Force DEBUG regardless of other settings.
        log_file: Log file path.  In MCP mode falls back to ``LOG_FILE``
            and then ``DEFAULT_MCP_LOG_FILE``; in CLI mode it is optional.
        debug_format: ``"text"`` or ``"json"`` (CLI mode only).
        level: Level name from the config file, used when ``LOG_LEVEL``
            is unset.
    """
    log_level = _resolve_level(mode, debug, level)

    if mode == "mcp":
        logging.basicConfig(
            level=log_level,
            format=TEXT_FORMAT,
            datefmt=DATE_FORMAT,
            filename=log_file or os.getenv("LOG_FILE", DEFAULT_MCP_LOG_FILE),
            filemode="a",
        )
    else:
        logging.basicConfig(
            level=log_level, handlers=_cli_handlers(log_file, debug_format)
        )

    # The MCP SDK is chatty at INFO
    if log_level != logging.DEBUG:
        logging.getLogger("mcp").setLevel(logging.WARNING)
