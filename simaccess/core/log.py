"""
Core logging functionality for simaccess.

Every log type gets its own file under ``config.LOG_DIR``.  Bus traffic goes
to the DEBUG log, user-facing lines to the GENERAL log (and stdout).
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from . import config

# Re-export log type constants for external modules
LOG__GENERAL = config.LOG__GENERAL
LOG__DEBUG = config.LOG__DEBUG

_LOG_PATHS: Dict[str, Path] = {
    LOG__GENERAL: config.LOG_DIR / "general.log",
    LOG__DEBUG: config.LOG_DIR / "debug.log",
}

# Raw message only
_formatter = logging.Formatter("%(message)s")

_handlers: Dict[str, logging.Handler] = {}
for log_type, path in _LOG_PATHS.items():
    handler = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
    handler.setFormatter(_formatter)
    _handlers[log_type] = handler


def _env_level() -> str:
    level = os.getenv("SIMACCESS_LOG_LEVEL", "INFO").upper()
    # unknown names must not break import
    return level if level in config.LOG_LEVELS else "INFO"


# Root logger for simaccess
_logger = logging.getLogger("simaccess")
_logger.setLevel(_env_level())
_logger.addHandler(_handlers[LOG__GENERAL])

del log_type, path, handler


def _emit(line: str, log_type: str) -> None:
    record = logging.LogRecord(
        name=f"simaccess.{log_type.lower()}",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg=line.rstrip("\n"),
        args=(),
        exc_info=None,
    )
    _handlers.get(log_type, _handlers[LOG__GENERAL]).handle(record)


def logging__debug_log(msg: str) -> None:
    """Write to debug log."""
    _emit(msg, LOG__DEBUG)


def logging__general_log(msg: str) -> None:
    """Write to general log."""
    _emit(msg, LOG__GENERAL)


_log_func_map = {
    LOG__GENERAL: logging__general_log,
    LOG__DEBUG: logging__debug_log,
}


def logging__log_event(log_type: str, string_to_log: str) -> None:
    """Log an event to the specified log type."""
    _log_func_map.get(log_type, logging__general_log)(string_to_log)


def print_and_log(output_string: str, log_type: str = LOG__GENERAL) -> None:
    """Print to stdout and log to the specified log type."""
    if log_type != LOG__DEBUG:
        print(output_string)
    logging__log_event(log_type, output_string)


def set_level(level: str) -> None:
    _logger.setLevel(level.upper())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger with the specified name.

    Records propagate to the ``simaccess`` root logger and end up in the
    GENERAL log file.
    """
    if name:
        if name.startswith("simaccess."):
            name = name[len("simaccess."):]
        return _logger.getChild(name)
    return _logger
