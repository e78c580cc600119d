"""
Core Module - Logging Setup.

============================================================
RESPONSIBILITY
============================================================
Configures process-wide logging for the indexer.

- One stdout handler on the root logger
- Text (pipe separated) or JSON lines
- Correlation id stamped on every line

============================================================
"""

import json
import logging
import sys
from typing import Optional


LOG_FORMATS = ("text", "json")


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record; the message is escaped like any field."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        super().__init__()
        self.correlation_id = correlation_id or ""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": self.correlation_id,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    correlation_id: Optional[str] = None,
) -> logging.Logger:
    """
    Set up structured logging.

    Args:
        level: Log level
        log_format: Output format (json or text)
        correlation_id: Correlation ID for tracing

    Returns:
        Configured logger
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter: logging.Formatter
    if log_format == "json":
        formatter = JsonLogFormatter(correlation_id)
    else:
        formatter = logging.Formatter(
            f"%(asctime)s | %(levelname)-8s | %(name)s | {correlation_id or ''} | %(message)s"
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    # aiohttp logs every request at INFO
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)

    return logging.getLogger("indexer")
