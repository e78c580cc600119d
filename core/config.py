"""
Core Module - Configuration.

============================================================
RESPONSIBILITY
============================================================
Loads the indexer configuration from environment variables.

============================================================
VARIABLES
============================================================
STELLAR_HORIZON_URL   Horizon base URL (required), e.g.
                      https://horizon.stellar.org or
                      https://horizon-testnet.stellar.org
DATABASE_URL          Storage connection string for the offer sink
                      (default memory://)
POLL_INTERVAL_SECS    Seconds between polling runs (default 2)
HORIZON_LIMIT         Records per page, 1..200 (default 200)
HORIZON_TIMEOUT_SECS  Total timeout per Horizon request (default none)
CURSOR_STATE_PATH     JSON file holding the last cursor (default none,
                      cursor kept in memory)
LOG_LEVEL             Logging level (default INFO)
LOG_FORMAT            text or json (default text)

============================================================
"""

import os
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, TypeVar

from core.constants import (
    DEFAULT_PAGE_LIMIT,
    DEFAULT_POLL_INTERVAL_SECS,
    MAX_PAGE_LIMIT,
    MIN_PAGE_LIMIT,
)
from core.exceptions import InvalidConfigError, MissingConfigError
from core.logging_config import LOG_FORMATS


N = TypeVar("N", int, float)


def _parse_number(
    environ: Mapping[str, str],
    key: str,
    cast: Callable[[str], N],
    default: Optional[N],
) -> Optional[N]:
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise InvalidConfigError(key, raw, f"expected {cast.__name__}") from None


@dataclass(frozen=True)
class IndexerConfig:
    """Runtime configuration of the offer indexer."""

    stellar_horizon_url: str
    """Horizon base URL."""

    database_url: str = "memory://"
    """Storage connection string, handed to the sink factory."""

    poll_interval_secs: int = DEFAULT_POLL_INTERVAL_SECS
    """Poll interval for Horizon when streaming is not used."""

    horizon_limit: int = DEFAULT_PAGE_LIMIT
    """Max records to request per page."""

    horizon_timeout_secs: Optional[float] = None
    """Total timeout per Horizon request; None disables it."""

    cursor_state_path: Optional[str] = None
    """Where the last processed cursor is persisted."""

    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "IndexerConfig":
        """
        Load configuration from environment variables.

        Raises:
            MissingConfigError: STELLAR_HORIZON_URL is not set
            InvalidConfigError: A numeric variable does not parse
        """
        env = os.environ if environ is None else environ

        horizon_url = env.get("STELLAR_HORIZON_URL", "").strip()
        if not horizon_url:
            raise MissingConfigError("STELLAR_HORIZON_URL")

        return cls(
            stellar_horizon_url=horizon_url,
            database_url=env.get("DATABASE_URL") or "memory://",
            poll_interval_secs=_parse_number(
                env, "POLL_INTERVAL_SECS", int, DEFAULT_POLL_INTERVAL_SECS
            ),
            horizon_limit=_parse_number(env, "HORIZON_LIMIT", int, DEFAULT_PAGE_LIMIT),
            horizon_timeout_secs=_parse_number(env, "HORIZON_TIMEOUT_SECS", float, None),
            cursor_state_path=env.get("CURSOR_STATE_PATH") or None,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            log_format=env.get("LOG_FORMAT", "text").lower(),
        )

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if not self.stellar_horizon_url.startswith(("http://", "https://")):
            errors.append("stellar_horizon_url must be an http(s) URL")

        if self.poll_interval_secs < 0:
            errors.append("poll_interval_secs must not be negative")

        if not MIN_PAGE_LIMIT <= self.horizon_limit <= MAX_PAGE_LIMIT:
            errors.append(
                f"horizon_limit must be between {MIN_PAGE_LIMIT} and {MAX_PAGE_LIMIT}"
            )

        if self.horizon_timeout_secs is not None and self.horizon_timeout_secs <= 0:
            errors.append("horizon_timeout_secs must be positive")

        if self.log_format not in LOG_FORMATS:
            errors.append(f"log_format must be one of {', '.join(LOG_FORMATS)}")

        return errors
