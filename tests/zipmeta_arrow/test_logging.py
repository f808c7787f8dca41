"""Tests for logging setup, formatters and archive context."""

import json
import logging
import sys

import pytest

from zipmeta_arrow.logging import (
    ArchiveConsoleFormatter,
    ArchiveLogContext,
    StructuredFormatter,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way it was."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(msg="hello", **extra):
    record = logging.LogRecord(
        name="zipmeta_arrow.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Test JSON output."""

    def test_fields(self):
        output = StructuredFormatter().format(
            _record(extra_fields={"zip_id": "a.zip", "entry_index": 3})
        )
        data = json.loads(output)

        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["logger"] == "zipmeta_arrow.test"
        assert data["zip_id"] == "a.zip"
        assert data["entry_index"] == 3

    def test_call_fields_override_bound_fields(self):
        record = _record(
            bound_fields={"zip_id": "outer.zip", "stage": "load"},
            extra_fields={"zip_id": "inner.zip"},
        )
        data = json.loads(StructuredFormatter().format(record))

        assert data["zip_id"] == "inner.zip"
        assert data["stage"] == "load"

    def test_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()

        data = json.loads(StructuredFormatter().format(record))

        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "boom"


class TestArchiveConsoleFormatter:
    """Test console output with archive prefix."""

    def test_no_archive(self):
        output = ArchiveConsoleFormatter().format(_record())
        assert output == "INFO     | zipmeta_arrow.test | hello"

    def test_archive_prefix(self):
        output = ArchiveConsoleFormatter().format(_record(bound_fields={"zip_id": "a.zip"}))
        assert output == "INFO     | zipmeta_arrow.test | [a.zip] hello"

    def test_entry_prefix(self):
        output = ArchiveConsoleFormatter().format(
            _record(extra_fields={"zip_id": "a.zip", "entry_index": 3})
        )
        assert output.endswith("| [a.zip#3] hello")

    def test_entry_index_zero(self):
        output = ArchiveConsoleFormatter().format(
            _record(extra_fields={"zip_id": "a.zip", "entry_index": 0})
        )
        assert output.endswith("| [a.zip#0] hello")

    def test_detailed(self):
        output = ArchiveConsoleFormatter(detailed=True).format(
            _record(bound_fields={"zip_id": "a.zip"})
        )
        assert "zipmeta_arrow.test:" in output
        assert output.endswith("| [a.zip] hello")


class TestSetupLogging:
    """Test logging configuration."""

    def test_json_console(self, restore_root_logger):
        setup_logging(level="debug", format="json")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)

    def test_console_writes_to_stderr(self, restore_root_logger):
        setup_logging(level="INFO", format="detailed")

        handler = restore_root_logger.handlers[0]
        assert handler.stream is sys.stderr
        assert isinstance(handler.formatter, ArchiveConsoleFormatter)

    def test_file_handler(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "app.log"

        setup_logging(level="INFO", format="simple", log_file=log_file)
        with ArchiveLogContext("a.zip"):
            logging.getLogger("zipmeta_arrow.test").info("to file")
        for handler in restore_root_logger.handlers:
            handler.flush()

        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        data = json.loads(line)
        assert data["message"] == "to file"
        assert data["zip_id"] == "a.zip"


class TestArchiveLogContext:
    """Test fields bound to records inside the block."""

    def test_fields_added_and_removed(self):
        original_factory = logging.getLogRecordFactory()

        with ArchiveLogContext("ctx.zip", stage="load"):
            record = logging.getLogRecordFactory()(
                "n", logging.INFO, __file__, 1, "m", (), None
            )
            assert record.bound_fields == {"zip_id": "ctx.zip", "stage": "load"}

        assert logging.getLogRecordFactory() is original_factory

    def test_nested_contexts_merge(self):
        with ArchiveLogContext("outer.zip", stage="load"):
            with ArchiveLogContext("inner.zip"):
                record = logging.getLogRecordFactory()(
                    "n", logging.INFO, __file__, 1, "m", (), None
                )

        assert record.bound_fields == {"zip_id": "inner.zip", "stage": "load"}

    def test_coexists_with_call_extra_fields(self, caplog):
        logger = logging.getLogger("zipmeta_arrow.test")

        with caplog.at_level(logging.INFO, logger="zipmeta_arrow.test"):
            with ArchiveLogContext("ctx.zip"):
                logger.info("entry", extra={"extra_fields": {"entry_index": 2}})

        record = caplog.records[-1]
        assert record.bound_fields == {"zip_id": "ctx.zip"}
        assert record.extra_fields == {"entry_index": 2}
