# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for hvmbench.

Every diagnostic the harness emits (build failures, per-run timings, where a
CSV landed) is one JSON object per line, so a benchmark session can be
grepped or loaded into a notebook afterwards. print() is not used anywhere.

How this works:
  - The stdlib `logging` module does the routing. JsonFormatter serializes
    every record into a single JSON line.
  - All handlers hang off the package logger "hvmbench". Module loggers
    (hvmbench.runner.loop, hvmbench.harness.runner, ...) carry no handlers
    of their own and propagate up, so one call to configure_logging changes
    the level and destination for the whole harness.
  - Loggers outside the package namespace are configured on their own, the
    same way, the first time they're requested.

The JSON structure looks like:
  {"ts": "2026-...", "level": "INFO", "module": "hvmbench.runner.loop", "msg": "Build failed", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "hvmbench"

# LogRecord attributes that are plumbing, not context.
_STANDARD_ATTRS = frozenset({
    "name",
    "msg",
    "args",
    "created",
    "relativeCreated",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "pathname",
    "filename",
    "module",
    "levelno",
    "levelname",
    "processName",
    "process",
    "threadName",
    "thread",
    "message",
    "msecs",
    "taskName",
})


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Each log entry contains four mandatory fields:
      ts     — ISO 8601 UTC timestamp
      level  — log level name
      module — the logger name (usually the Python module path)
      msg    — the formatted message string

    Anything passed through `extra` (program, evaluator, input_size,
    elapsed_seconds, ...) is merged in as additional fields. When the call
    carried exc_info, the formatted traceback goes under "exc".
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def _attach_handlers(
    logger: logging.Logger,
    level: int,
    log_file: Optional[Path],
) -> None:
    formatter = JsonFormatter()

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)


def configure_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """
    (Re)configure a logger tree: level, stdout handler, optional file handler.

    Existing handlers on the target logger are closed and replaced, so
    calling this twice (CLI bootstrap after a default, or across tests)
    never duplicates output.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional path to a log file. If provided, logs go to both
                  stdout and the file.
        name: Logger to configure; the package logger by default.

    Returns:
        The configured logger.
    """
    level = _resolve_log_level(log_level)
    logger = logging.getLogger(name)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(level)
    _attach_handlers(logger, level, log_file)

    # Output is handled here, not by the root logger.
    logger.propagate = False
    return logger


def get_logger(
    name: str,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Get a structured JSON logger.

    This is the only sanctioned way to get a logger in hvmbench. Modules call
    get_logger(__name__) once at import time.

    For names under the package namespace the returned logger simply
    propagates to the package logger, which gets a default INFO setup if
    nobody has configured it yet. Passing log_level or log_file for such a
    name reconfigures the package logger.

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: Optional level override.
        log_file: Optional path to a log file.

    Returns:
        A logging.Logger that outputs structured JSON.
    """
    in_package = name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + ".")
    root_name = PACKAGE_LOGGER if in_package else name
    root = logging.getLogger(root_name)

    if log_level is not None or log_file is not None:
        configure_logging(log_level or "INFO", log_file, name=root_name)
    elif not root.handlers:
        configure_logging("INFO", None, name=root_name)

    return logging.getLogger(name)
