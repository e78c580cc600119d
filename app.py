#!/usr/bin/env python3
"""
SDEX Offer Indexer - Main Application Entry Point.

============================================================
SINGLE ENTRYPOINT
============================================================
Polls Horizon for open SDEX offers, validates them and writes the
accepted ones to the configured sink.

- Compatible with PM2 / systemd process management
- Resumes from the checkpointed cursor after a restart
- Handles SIGINT / SIGTERM gracefully

============================================================
USAGE
============================================================
Direct execution:
    STELLAR_HORIZON_URL=https://horizon.stellar.org python app.py

Drain the stream once and exit:
    python app.py --once

Start from an explicit cursor:
    python app.py --once --cursor 164555927

============================================================
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.absolute()
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.config import IndexerConfig
from core.constants import MAX_PAGE_LIMIT, MIN_PAGE_LIMIT, SYSTEM_NAME
from core.exceptions import ConfigurationError
from core.logging_config import setup_logging
from horizon.client import HorizonClient
from ingestion.checkpoint import (
    CursorCheckpoint,
    InMemoryCursorCheckpoint,
    JsonFileCursorCheckpoint,
)
from ingestion.driver import IngestionDriver
from ingestion.sinks import create_sink
from ingestion.types import DriverConfig, IngestionStatus


logger = logging.getLogger("indexer")


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog=SYSTEM_NAME,
        description="Index open SDEX offers from a Horizon server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Configuration is read from the environment (STELLAR_HORIZON_URL,
DATABASE_URL, POLL_INTERVAL_SECS, HORIZON_LIMIT, HORIZON_TIMEOUT_SECS,
CURSOR_STATE_PATH, LOG_LEVEL, LOG_FORMAT). Options below override it.

Examples:
  %(prog)s                          # Poll forever
  %(prog)s --once                   # Drain the offer stream once
  %(prog)s --once --limit 50        # Smaller pages
        """
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single ingestion pass and exit",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help=f"Records per page ({MIN_PAGE_LIMIT}-{MAX_PAGE_LIMIT}, default: HORIZON_LIMIT)",
    )
    parser.add_argument(
        "--cursor",
        type=str,
        default=None,
        help="Start from this cursor instead of the checkpointed one",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="Stop a pass after this many pages",
    )
    parser.add_argument(
        "--log-level", "-l",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (default: LOG_LEVEL)",
    )

    return parser


def validate_args(args: argparse.Namespace) -> List[str]:
    """Validate command line arguments."""
    errors = []
    if args.limit is not None and not MIN_PAGE_LIMIT <= args.limit <= MAX_PAGE_LIMIT:
        errors.append(f"--limit must be between {MIN_PAGE_LIMIT} and {MAX_PAGE_LIMIT}")
    if args.max_pages is not None and args.max_pages < 1:
        errors.append("--max-pages must be at least 1")
    return errors


def build_checkpoint(config: IndexerConfig, cursor: Optional[str]) -> CursorCheckpoint:
    """Pick the checkpoint store; an explicit cursor seeds it."""
    if config.cursor_state_path:
        checkpoint: CursorCheckpoint = JsonFileCursorCheckpoint(Path(config.cursor_state_path))
    else:
        checkpoint = InMemoryCursorCheckpoint()
    if cursor is not None:
        checkpoint.save(cursor)
    return checkpoint


# ============================================================
# APPLICATION
# ============================================================

def install_signal_handlers(stop_event: asyncio.Event) -> None:
    """Set ``stop_event`` on SIGINT / SIGTERM."""
    if sys.platform == "win32":
        # KeyboardInterrupt handles Ctrl+C there
        return
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, stop_event.set)


async def run_application(args: argparse.Namespace, config: IndexerConfig) -> int:
    """
    Wire client, sink and checkpoint, then run the driver.

    Returns:
        Exit code
    """
    driver_config = DriverConfig(
        page_limit=args.limit or config.horizon_limit,
        poll_interval_seconds=config.poll_interval_secs,
        max_pages_per_run=args.max_pages,
    )
    sink = create_sink(config.database_url)
    checkpoint = build_checkpoint(config, args.cursor)

    async with HorizonClient(
        config.stellar_horizon_url,
        timeout=config.horizon_timeout_secs,
    ) as client:
        driver = IngestionDriver(client, sink, checkpoint, driver_config)
        try:
            if args.once:
                result = await driver.run_once()
                return 0 if result.status != IngestionStatus.FAILED else 1

            stop_event = asyncio.Event()
            install_signal_handlers(stop_event)
            await driver.run_forever(stop_event)
            return 0
        finally:
            await sink.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    errors = validate_args(args)
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    # Variables already in the environment win over .env
    load_dotenv()

    try:
        config = IndexerConfig.from_env()
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    setup_logging(args.log_level or config.log_level, config.log_format)
    logger.info(f"Indexing offers from {config.stellar_horizon_url}")

    try:
        return asyncio.run(run_application(args, config))
    except ConfigurationError as e:
        logger.error(e.to_log_format())
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


# ============================================================
# ENTRY POINT
# ============================================================

if __name__ == "__main__":
    sys.exit(main())
