"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from studyhabits import config as app_config
from studyhabits.logging_config import JSONFormatter, get_logger, log_file_path, setup_logging


def _record(level=logging.INFO, msg="Test message", exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    return record


def test_json_formatter():
    """JSONFormatter emits one JSON object with the standard fields."""
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(JSONFormatter().format(_record(logging.ERROR, "Error occurred", exc_info)))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_json_formatter_includes_extra_fields():
    record = _record()
    record.user = "Ana"
    record.habit_id = "abc123"

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"user": "Ana", "habit_id": "abc123"}


def test_setup_logging(tmp_path):
    """Logging setup creates the rotating JSON log under the data directory."""
    config = app_config.TestConfig(tmp_path)
    config.DEV_MODE = True

    logger = setup_logging(config)

    assert logger.name == "studyhabits"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "studyhabits.log"
    assert log_file_path(config) == log_file
    assert log_file.exists()

    get_logger("tests").warning("Test warning message", extra={"user": "Ana"})
    for handler in logger.handlers:
        handler.flush()

    lines = [line for line in log_file.read_text(encoding="utf-8").splitlines() if line.strip()]
    assert len(lines) >= 2
    entries = [json.loads(line) for line in lines]
    for entry in entries:
        assert "timestamp" in entry
        assert "level" in entry
        assert "message" in entry
    assert entries[-1]["message"] == "Test warning message"
    assert entries[-1]["extra"] == {"user": "Ana"}


def test_setup_logging_twice_does_not_stack_handlers(tmp_path):
    config = app_config.TestConfig(tmp_path)
    setup_logging(config)
    logger = setup_logging(config)
    assert len(logger.handlers) == 2


def test_get_logger():
    """get_logger namespaces under the package logger without double prefixes."""
    logger1 = get_logger("module1")
    logger2 = get_logger("module2")

    assert logger1.name == "studyhabits.module1"
    assert logger2.name == "studyhabits.module2"
    assert logger1 != logger2
    assert get_logger("studyhabits.services.session").name == "studyhabits.services.session"


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(tmp_path, dev_mode):
    """Console logging level adjusts based on dev mode."""
    config = app_config.TestConfig(tmp_path)
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = None
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(
            handler, logging.handlers.RotatingFileHandler
        ):
            console_handler = handler
            break

    assert console_handler is not None
    expected_level = logging.INFO if dev_mode else logging.WARNING
    assert console_handler.level == expected_level
