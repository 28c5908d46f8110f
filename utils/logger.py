"""
utils/logger.py

Logging utility for the price list assistant.
Provides `get_logger()` which returns a configured `logging.Logger` instance
writing to a rotating file under `settings.LOGS_DIR` (size-based or time-based),
with optional console output and an optional one-line JSON formatter.

Example:
    from utils.logger import get_logger
    logger = get_logger("ingest", rotation="time")
    logger.info("Import started", extra={"rows": 120})

"""
from __future__ import annotations

import json
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from config.settings import settings

# Attributes every LogRecord carries; anything else came in through `extra=`
_RESERVED_ATTRS = frozenset(
    (
        "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
        "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
        "created", "msecs", "relativeCreated", "thread", "threadName",
        "processName", "process", "taskName", "message", "asctime",
    )
)


def _extra_fields(record: logging.LogRecord) -> dict:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger name, message and extras."""

    def format(self, record: logging.LogRecord) -> str:
        record_dict = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            record_dict["exc_info"] = self.formatException(record.exc_info)
        extras = _extra_fields(record)
        if extras:
            record_dict["extra"] = extras  # type: ignore
        return json.dumps(record_dict, default=str, ensure_ascii=False)


class ExtrasFormatter(logging.Formatter):
    """Human-readable formatter that appends `extra=` fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extra_fields(record)
        if extras:
            line += " | " + " ".join(f"{k}={v}" for k, v in extras.items())
        return line


def get_logger(
    name: str,
    log_file: Optional[str] = None,
    level: int = logging.INFO,
    rotation: str = "size",
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
    when: str = "midnight",
    interval: int = 1,
    console: bool = False,
    use_json: bool = False,
    fmt: Optional[str] = None,
    datefmt: str = "%Y-%m-%d %H:%M:%S",
) -> logging.Logger:
    """Return a configured logger.

    Parameters
    ----------
    name: str
        Logger name (also used for default file name when log_file is None).
    log_file: Optional[str]
        Path to the log file. If omitted, defaults to `{settings.LOGS_DIR}/{name}.log`.
    level: int
        Logging level from the `logging` module.
    rotation: str
        One of `"size"` (RotatingFileHandler) or `"time"` (TimedRotatingFileHandler).
    max_bytes: int
        Max bytes for size-based rotation.
    backup_count: int
        Number of backup files to keep.
    when: str
        When to rotate for time-based rotation (see TimedRotatingFileHandler docs).
    interval: int
        Interval multiplier for time-based rotation.
    console: bool
        Add a stderr handler in addition to the file handler. Off by default
        so log lines do not interleave with CLI output.
    use_json: bool
        Use JSON formatter for logs.
    fmt: Optional[str]
        Format string for human-readable logs.
    datefmt: str
        Date format used in logs.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove all existing handlers so reconfiguring works predictably
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    if not log_file:
        logs_dir = Path(settings.LOGS_DIR)
        logs_dir.mkdir(parents=True, exist_ok=True)
        log_file = str(logs_dir / f"{name}.log")
    else:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    if use_json:
        formatter: logging.Formatter = JsonFormatter(datefmt=datefmt)
    else:
        human_fmt = fmt or "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        formatter = ExtrasFormatter(human_fmt, datefmt=datefmt)

    if rotation == "time":
        file_handler: logging.Handler = logging.handlers.TimedRotatingFileHandler(
            filename=log_file,
            when=when,
            interval=interval,
            backupCount=backup_count,
            encoding="utf-8",
        )
    else:
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )

    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    # Propagate False so logs don't get duplicated by root logger
    logger.propagate = False

    return logger


# Convenience aliases
def get_ingest_logger(**kwargs) -> logging.Logger:
    return get_logger("ingest", **kwargs)


def get_assistant_logger(**kwargs) -> logging.Logger:
    return get_logger("assistant", **kwargs)
