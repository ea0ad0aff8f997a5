"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from habittracker.config import BaseConfig
from habittracker.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITTRACKER_DATA_DIR", str(tmp_path))
    cfg = BaseConfig()
    yield cfg
    logger = logging.getLogger("habittracker")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_json_formatter():
    """JSONFormatter emits the core fields plus extras."""
    formatter = JSONFormatter()

    record = logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname="test.py",
        lineno=42,
        msg="Habit %s",
        args=("created",),
        exc_info=None,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    record.habit_id = 7

    log_data = json.loads(formatter.format(record))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Habit created"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert log_data["extra"] == {"habit_id": 7}
    assert "timestamp" in log_data


def test_json_formatter_ignores_fields_set_by_other_formatters():
    """A console formatter running first must not leak asctime into extras."""
    record = logging.makeLogRecord({"name": "habittracker.test", "msg": "hi", "levelno": logging.INFO})
    logging.Formatter("%(asctime)s %(message)s").format(record)
    assert hasattr(record, "asctime")

    log_data = json.loads(JSONFormatter().format(record))

    assert "extra" not in log_data
    assert log_data["message"] == "hi"


def test_json_formatter_with_exception():
    """JSONFormatter correctly handles exceptions."""
    formatter = JSONFormatter()

    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    record = logging.LogRecord(
        name="test.logger",
        level=logging.ERROR,
        pathname="test.py",
        lineno=42,
        msg="Error occurred",
        args=(),
        exc_info=exc_info,
    )

    log_data = json.loads(formatter.format(record))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_setup_logging(config, tmp_path):
    """Logging setup creates the rotating JSON log file."""
    config.DEV_MODE = True

    logger = setup_logging(config)

    assert logger.name == "habittracker"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "habittracker.log"
    assert log_file.exists()

    get_logger("services.habits").warning("Habit deleted", extra={"habit_id": 3})
    for handler in logger.handlers:
        handler.flush()

    lines = [line for line in log_file.read_text(encoding="utf-8").splitlines() if line.strip()]
    entries = [json.loads(line) for line in lines]
    assert entries[0]["message"] == "Logging initialized"
    assert entries[-1]["logger"] == "habittracker.services.habits"
    assert entries[-1]["extra"] == {"habit_id": 3}


def test_setup_logging_is_idempotent(config):
    setup_logging(config)
    logger = setup_logging(config)
    assert len(logger.handlers) == 2


def test_get_logger():
    """get_logger returns loggers namespaced under the package logger."""
    assert get_logger("module1").name == "habittracker.module1"
    assert get_logger("habittracker.services.stats").name == "habittracker.services.stats"
    assert get_logger("module1") is not get_logger("module2")


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(config, dev_mode):
    """Console logging level adjusts based on dev mode."""
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    expected_level = logging.INFO if dev_mode else logging.WARNING
    assert console_handler.level == expected_level
