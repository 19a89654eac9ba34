"""Logging configuration built around structlog JSON logging."""

from __future__ import annotations

import logging
import logging.config
import os
from collections import deque
from pathlib import Path

import structlog

LOGGER_NAME = "airport_sync"

# (log_dir, verbose) the stdlib handlers were last built for.
_HANDLERS_KEY: tuple[Path, bool] | None = None
_STRUCTLOG_CONFIGURED = False


def _default_log_dir() -> Path:
    root = os.environ.get("AIRPORT_SYNC_HOME")
    base = Path(root).expanduser() if root else Path.cwd()
    return base.resolve() / "logs"


def sync_log_path() -> Path:
    return _default_log_dir() / "sync.log"


def error_log_path() -> Path:
    return _default_log_dir() / "error.log"


def _handler_config(log_dir: Path, verbose: bool) -> dict:
    level = "DEBUG" if verbose else "INFO"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            # One JSON line per event, shared by every handler
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "json",
            },
            # Full run history: sync_started, page_fetched, snapshot_published ...
            "sync_file": {
                "class": "logging.FileHandler",
                "level": "INFO",
                "filename": str(log_dir / "sync.log"),
                "formatter": "json",
                "encoding": "utf-8",
            },
            # Failed runs only (sync_failed)
            "error_file": {
                "class": "logging.FileHandler",
                "level": "ERROR",
                "filename": str(log_dir / "error.log"),
                "formatter": "json",
                "encoding": "utf-8",
            },
        },
        "loggers": {
            LOGGER_NAME: {
                "handlers": ["console", "sync_file", "error_file"],
                "level": level,
                "propagate": False,
            },
        },
    }


def configure_logging(verbose: bool | None = None) -> structlog.BoundLogger:
    """Point the ``airport_sync`` logger at the current home's log files.

    Handlers are rebuilt whenever the log directory or verbosity differs from
    the previous call. ``verbose=None`` keeps the current verbosity. structlog
    itself is configured once per process.
    """

    global _HANDLERS_KEY, _STRUCTLOG_CONFIGURED
    log_dir = _default_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    sync_log_path().touch(exist_ok=True)
    error_log_path().touch(exist_ok=True)

    if verbose is None:
        verbose = _HANDLERS_KEY[1] if _HANDLERS_KEY is not None else False
    key = (log_dir, verbose)
    if _HANDLERS_KEY != key:
        previous = logging.getLogger(LOGGER_NAME)
        for handler in list(previous.handlers):
            previous.removeHandler(handler)
            handler.close()
        logging.config.dictConfig(_handler_config(log_dir, verbose))
        _HANDLERS_KEY = key

    if not _STRUCTLOG_CONFIGURED:
        # structlog renders nothing itself; the JSON formatter on each handler does.
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _STRUCTLOG_CONFIGURED = True
    return structlog.get_logger(LOGGER_NAME)


def tail_log(path: Path, line_count: int = 50) -> list[str]:
    """Last ``line_count`` lines of ``path``; empty when the file does not exist yet."""

    if line_count <= 0 or not path.exists():
        return []
    with path.open("r", encoding="utf-8", errors="replace") as stream:
        return list(deque(stream, maxlen=line_count))


__all__ = ["LOGGER_NAME", "configure_logging", "error_log_path", "sync_log_path", "tail_log"]
