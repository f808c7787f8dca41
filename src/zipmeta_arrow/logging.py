"""Logging setup with archive context.

Records may carry ``extra_fields`` (a dict passed through ``extra=``) and
``bound_fields`` (set by ArchiveLogContext). The console formatters show the
``zip_id`` and ``entry_index`` fields as a prefix; the JSON formatter emits
every field.
"""

import logging
import logging.handlers
import json
import sys
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from pathlib import Path

# Rotation limits for the optional log file
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 5


def _archive_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields bound by ArchiveLogContext, overridden by the call's own extra_fields."""
    fields = dict(getattr(record, "bound_fields", None) or {})
    fields.update(getattr(record, "extra_fields", None) or {})
    return fields


def _archive_prefix(record: logging.LogRecord) -> str:
    """``[zip_id#entry_index] `` for records bound to an archive, else empty."""
    fields = _archive_fields(record)
    zip_id = fields.get("zip_id")
    if zip_id is None:
        return ""
    entry_index = fields.get("entry_index")
    if entry_index is None:
        return f"[{zip_id}] "
    return f"[{zip_id}#{entry_index}] "


class StructuredFormatter(logging.Formatter):
    """JSON formatter, one object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(_archive_fields(record))

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(log_data, default=str)


class ArchiveConsoleFormatter(logging.Formatter):
    """Console formatter that prefixes messages with the bound archive."""

    SIMPLE_FMT = "%(levelname)-8s | %(name)s | %(archive)s%(message)s"
    DETAILED_FMT = (
        "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | "
        "%(archive)s%(message)s"
    )

    def __init__(self, detailed: bool = False) -> None:
        if detailed:
            super().__init__(fmt=self.DETAILED_FMT, datefmt="%Y-%m-%d %H:%M:%S")
        else:
            super().__init__(fmt=self.SIMPLE_FMT)

    def format(self, record: logging.LogRecord) -> str:
        record.archive = _archive_prefix(record)
        return super().format(record)


def setup_logging(level: str = "INFO", format: str = "simple", log_file: Optional[Path] = None) -> None:
    """Configure the root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: Console format (simple, detailed, json)
        log_file: Optional rotating log file, always written as JSON
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    # stderr only, stdout carries the table
    console_handler = logging.StreamHandler(sys.stderr)
    if format == "json":
        console_handler.setFormatter(StructuredFormatter())
    else:
        console_handler.setFormatter(ArchiveConsoleFormatter(detailed=(format == "detailed")))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUP_COUNT,
        )
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)


class ArchiveLogContext:
    """Bind ``zip_id`` (and any other fields) to every record logged inside the block."""

    def __init__(self, zip_id: str, **fields: Any) -> None:
        self.fields = {"zip_id": zip_id, **fields}
        self.old_factory = None

    def __enter__(self) -> "ArchiveLogContext":
        self.old_factory = logging.getLogRecordFactory()
        old_factory = self.old_factory
        fields = self.fields

        def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = old_factory(*args, **kwargs)
            # Not extra_fields: callers pass that name through extra=
            record.bound_fields = {**getattr(record, "bound_fields", {}), **fields}
            return record

        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        logging.setLogRecordFactory(self.old_factory)
