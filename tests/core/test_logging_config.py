"""
Tests for root logger setup.
"""

import json
import logging

import pytest

from core.logging_config import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Handler and formatter installation."""

    def test_single_handler_and_level(self, restore_root_logger):
        logger = setup_logging("debug")

        assert logger.name == "indexer"
        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert logging.getLogger("aiohttp.access").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        setup_logging("chatty")

        assert restore_root_logger.level == logging.INFO

    def test_json_format(self, restore_root_logger):
        setup_logging("INFO", log_format="json", correlation_id="run-1")
        formatter = restore_root_logger.handlers[0].formatter
        record = logging.LogRecord("indexer", logging.INFO, __file__, 1, "stored 3 offers", None, None)

        line = json.loads(formatter.format(record))

        assert line["message"] == "stored 3 offers"
        assert line["correlation_id"] == "run-1"
        assert line["level"] == "INFO"

    def test_text_format(self, restore_root_logger):
        setup_logging("INFO", correlation_id="run-2")
        formatter = restore_root_logger.handlers[0].formatter
        record = logging.LogRecord("indexer", logging.WARNING, __file__, 1, "rejected", None, None)

        assert formatter.format(record).endswith("| WARNING  | indexer | run-2 | rejected")

    def test_json_format_escapes_message(self, restore_root_logger):
        """Quotes and newlines in a message still give one valid JSON line."""
        setup_logging("INFO", log_format="json")
        formatter = restore_root_logger.handlers[0].formatter
        message = 'HttpStatusError: body={"title": "Rate Limit Exceeded"}\nretry later'
        record = logging.LogRecord("horizon.client", logging.ERROR, __file__, 1, message, None, None)

        line = formatter.format(record)

        assert "\n" not in line
        assert json.loads(line)["message"] == message
        assert json.loads(line)["correlation_id"] == ""
