# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for sparsefm.

Every log entry is a single JSON line carrying a timestamp, the level, the
emitting module and the message, plus whatever context the caller attached
through ``extra``. The solver, the readers and the training loops all log
this way so a run can be replayed from its log with ``jq``.

Loggers are handed out by ``get_logger``; nothing else in the package builds
``logging.Logger`` objects directly.

Example line:
  {"ts": "2026-...", "level": "INFO", "module": "sparsefm.solver.prescan",
   "msg": "Pre-scan complete", "max_feature": 1024, "max_field": 0}
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Attributes every LogRecord carries. Anything else on the record came from
# the caller's ``extra`` and belongs in the JSON object.
_RESERVED_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Mandatory keys: ``ts`` (ISO 8601 UTC), ``level``, ``module`` (logger
    name) and ``msg``. Exceptions logged with ``exc_info`` land under
    ``exc`` as the formatted traceback.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def resolve_log_level(level_name: str) -> int:
    """Turn a level name into the matching ``logging`` constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(_VALID_LOG_LEVELS)}"
        )
    return getattr(logging, upper)


def _file_handler(log_file: Path, level: int) -> logging.FileHandler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(str(log_file), encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter())
    return handler


def get_logger(
    name: str,
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Create (or fetch) a structured JSON logger.

    Calling this twice for the same name does not stack handlers; the
    second call only adjusts the level.

    Args:
        name: Logger name, normally ``__name__`` of the calling module.
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional file that receives a copy of every line.

    Returns:
        A configured ``logging.Logger``.
    """
    logger = logging.getLogger(name)
    level = resolve_log_level(log_level)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    formatter = JsonFormatter()

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    if log_file is not None:
        logger.addHandler(_file_handler(log_file, level))

    logger.propagate = False

    return logger


def set_package_log_level(log_level: str, log_file: Optional[Path] = None) -> None:
    """
    Apply a level (and optionally a log file) to every sparsefm logger
    created so far.

    A logger already writing to another file is moved to ``log_file``; its
    old file handler is closed.

    Module loggers are created at import time with the default level, so the
    CLI calls this once the run's configured level is known.
    """
    level = resolve_log_level(log_level)
    target = os.path.abspath(log_file) if log_file is not None else None
    # Opened on first use, shared by every logger that needs it.
    file_handler: Optional[logging.FileHandler] = None

    for name, candidate in list(logging.Logger.manager.loggerDict.items()):
        if not name.startswith("sparsefm") or not isinstance(candidate, logging.Logger):
            continue
        candidate.setLevel(level)
        for handler in candidate.handlers:
            handler.setLevel(level)
        if target is None:
            continue

        current = [h for h in candidate.handlers if isinstance(h, logging.FileHandler)]
        if any(h.baseFilename == target for h in current):
            continue
        for handler in current:
            candidate.removeHandler(handler)
            handler.close()
        if file_handler is None:
            file_handler = _file_handler(Path(target), level)
        candidate.addHandler(file_handler)
