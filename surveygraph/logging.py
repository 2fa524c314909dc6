"""Logging for the CLI and the server.

The terminal shows WARNING and above, or everything with ``--verbose``.
Runs that have an output directory also append to a rotating file at
``<output_dir>/.surveygraph/surveygraph.log``, filtered by
``SURVEYGRAPH_LOG_LEVEL`` (INFO when unset).
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_LEVEL_ENV = "SURVEYGRAPH_LOG_LEVEL"

_LOG_DIRNAME = ".surveygraph"
_LOG_FILENAME = "surveygraph.log"
_MAX_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2

_TERMINAL_FORMAT = "%(levelname)s | %(name)s | %(message)s"
_FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Request and access chatter from these stays out of both handlers.
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def _parse_log_level(level_str: str) -> int:
    numeric = getattr(logging, level_str.upper(), None)
    return numeric if isinstance(numeric, int) else logging.INFO


def log_path_for(output_dir: Path) -> Path:
    return output_dir / _LOG_DIRNAME / _LOG_FILENAME


def _terminal_handler(verbose: bool) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handler.setFormatter(logging.Formatter(_TERMINAL_FORMAT))
    return handler


def _file_handler(output_dir: Path) -> logging.Handler:
    path = log_path_for(output_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8"
    )
    handler.setLevel(_parse_log_level(os.environ.get(LOG_LEVEL_ENV, "INFO")))
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler


def setup_logging(*, output_dir: Path | None = None, verbose: bool = False) -> None:
    """Install the terminal handler, plus the file handler when *output_dir* is set.

    Handlers from an earlier call are closed and replaced.
    """
    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()

    # Level filtering happens per handler.
    root.setLevel(logging.DEBUG)
    root.addHandler(_terminal_handler(verbose))
    if output_dir is not None:
        root.addHandler(_file_handler(output_dir))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
