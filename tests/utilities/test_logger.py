"""
Tests for the structured logging setup.
"""

import json
import logging

import pytest

from utilities.logger import get_logger, setup_logging


@pytest.fixture
def reset_logging():
    yield
    setup_logging(log_level="INFO", log_format="json")


def _file_handlers():
    return [
        handler for handler in logging.getLogger().handlers
        if isinstance(handler, logging.FileHandler)
    ]


def test_json_events_written_to_log_file(tmp_path, reset_logging):
    log_file = tmp_path / "logs" / "api.log"
    setup_logging(log_level="INFO", log_format="json", log_file=log_file)

    get_logger("tests.logger").info("Book created", book_id=7)
    for handler in _file_handlers():
        handler.flush()

    events = [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
    created = [event for event in events if event["event"] == "Book created"]
    assert len(created) == 1
    assert created[0]["book_id"] == 7
    assert created[0]["level"] == "info"
    assert created[0]["logger"] == "tests.logger"
    assert "timestamp" in created[0]


def test_reconfigure_replaces_file_handler(tmp_path, reset_logging):
    setup_logging(log_file=tmp_path / "first.log")
    setup_logging(log_file=tmp_path / "second.log")

    handlers = _file_handlers()
    assert len(handlers) == 1
    assert handlers[0].baseFilename.endswith("second.log")


def test_level_filters_events(tmp_path, reset_logging):
    log_file = tmp_path / "api.log"
    setup_logging(log_level="WARNING", log_format="json", log_file=log_file)

    logger = get_logger("tests.logger")
    logger.info("Quiet event")
    logger.warning("Loud event")
    for handler in _file_handlers():
        handler.flush()

    content = log_file.read_text()
    assert "Loud event" in content
    assert "Quiet event" not in content
