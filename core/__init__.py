"""
Core Module Package.

Shared infrastructure for the offer indexer.

Components:
- config: Environment-driven configuration
- exceptions: Custom exception hierarchy
- logging_config: Root logger setup
- constants: System-wide constants
"""

from .config import IndexerConfig
from .exceptions import (
    ConfigurationError,
    ErrorClassification,
    IndexerException,
    InvalidConfigError,
    MissingConfigError,
    Severity,
)
from .logging_config import LOG_FORMATS, setup_logging


__all__ = [
    "IndexerConfig",
    "ConfigurationError",
    "ErrorClassification",
    "IndexerException",
    "InvalidConfigError",
    "MissingConfigError",
    "Severity",
    "LOG_FORMATS",
    "setup_logging",
]
