"""
Ingestion - Offer Ingestion Driver.

============================================================
RESPONSIBILITY
============================================================
Owns the polling cadence and cursor persistence.

- Fetches offer pages from Horizon in strict cursor order
- Converts each raw record into a validated Offer
- Hands accepted offers to the sink
- Checkpoints the cursor once a page is stored

============================================================
FAILURE ISOLATION
============================================================
- Record level (AssetParseError / OfferError): the record is rejected,
  logged and counted; the rest of the page continues
- Page level (FetchError / StorageError): the run stops, the cursor is
  left where it was and the same page is requested on the next tick

There is no backoff: a failed page is retried after the regular poll
interval.

============================================================
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from horizon.client import HorizonClient
from horizon.exceptions import FetchError
from horizon.models import HorizonPage, RawOfferRecord
from ingestion.checkpoint import CursorCheckpoint, InMemoryCursorCheckpoint
from ingestion.sinks import OfferSink
from ingestion.types import (
    DriverConfig,
    IngestionMetrics,
    IngestionResult,
    IngestionStatus,
    RecordRejection,
    StorageError,
)
from offers.exceptions import OfferError
from offers.offer import Offer


logger = logging.getLogger(__name__)


def convert_records(
    records: Sequence[RawOfferRecord],
    cursor: Optional[str] = None,
) -> Tuple[List[Offer], List[RecordRejection]]:
    """
    Convert raw records, isolating failures per record.

    Returns:
        (accepted offers, rejections) in input order
    """
    offers: List[Offer] = []
    rejections: List[RecordRejection] = []
    for record in records:
        try:
            offers.append(Offer.from_raw(record))
        except OfferError as e:
            rejections.append(RecordRejection.from_error(e, cursor=cursor))
            logger.warning(f"Rejected offer {e.offer_id}: {e.to_log_format()}")
    return offers, rejections


class IngestionDriver:
    """
    Polls Horizon for offers and feeds the sink.

    ============================================================
    USAGE
    ============================================================
    ```python
    driver = IngestionDriver(client, sink, checkpoint, DriverConfig())

    # Drain the stream once
    result = await driver.run_once()

    # Or poll until stop_event is set
    await driver.run_forever(stop_event)
    ```

    ============================================================
    """

    def __init__(
        self,
        client: HorizonClient,
        sink: OfferSink,
        checkpoint: Optional[CursorCheckpoint] = None,
        config: Optional[DriverConfig] = None,
    ) -> None:
        self._client = client
        self._sink = sink
        self._checkpoint = checkpoint or InMemoryCursorCheckpoint()
        self._config = config or DriverConfig()
        self._metrics = IngestionMetrics()
        self._running = False

    @property
    def metrics(self) -> IngestionMetrics:
        return self._metrics

    @property
    def is_running(self) -> bool:
        return self._running

    # =========================================================
    # SINGLE RUN
    # =========================================================

    async def run_once(self) -> IngestionResult:
        """
        Fetch pages from the checkpointed cursor until the stream is drained.

        The stream is drained when a page has no records, has no next link,
        or its next cursor does not advance.
        """
        cursor = self._checkpoint.load()
        result = IngestionResult(
            started_at=datetime.now(timezone.utc),
            start_cursor=cursor,
            end_cursor=cursor,
        )
        logger.info(f"Starting offer ingestion from cursor {cursor or '<start>'}")

        try:
            while not self._page_budget_spent(result):
                page = await self._client.fetch_offers(self._config.page_limit, cursor)
                result.pages_fetched += 1
                result.records_fetched += len(page.records)

                if not page.records:
                    break

                await self._process_page(page, cursor, result)

                next_cursor = self._resume_cursor(page)
                if next_cursor is None or next_cursor == cursor:
                    break
                self._checkpoint.save(next_cursor)
                cursor = next_cursor
                result.end_cursor = cursor

                if not page.has_next:
                    break

        except FetchError as e:
            result.mark_failed(f"Fetch error: {e.to_log_format()}")
            logger.error(
                f"Fetch failed at cursor {cursor or '<start>'} "
                f"(retryable={e.retryable}): {e.to_log_format()}"
            )

        except StorageError as e:
            result.mark_failed(f"Storage error: {e.to_log_format()}")
            logger.error(f"Storage failed at cursor {cursor or '<start>'}: {e.to_log_format()}")

        result.mark_complete(datetime.now(timezone.utc))
        self._metrics.record_result(result)
        self._log_result(result)
        return result

    async def _process_page(
        self,
        page: HorizonPage[RawOfferRecord],
        cursor: Optional[str],
        result: IngestionResult,
    ) -> None:
        offers, rejections = convert_records(page.records, cursor=cursor)
        for rejection in rejections:
            result.add_rejection(rejection, keep=self._config.max_rejections_kept)
        if offers:
            result.records_stored += await self._sink.store_offers(offers)

    @staticmethod
    def _resume_cursor(page: HorizonPage[RawOfferRecord]) -> Optional[str]:
        # Without a next link, resume after the last record seen
        if page.next_cursor is not None:
            return page.next_cursor
        return page.records[-1].paging_token if page.records else None

    def _page_budget_spent(self, result: IngestionResult) -> bool:
        limit = self._config.max_pages_per_run
        return limit is not None and result.pages_fetched >= limit

    def _log_result(self, result: IngestionResult) -> None:
        """Log the ingestion result."""
        log_data = result.to_dict()

        if result.status == IngestionStatus.SUCCESS:
            logger.info(f"Ingestion complete: {log_data}")
        elif result.status == IngestionStatus.PARTIAL:
            logger.warning(f"Ingestion partial: {log_data}")
        else:
            logger.error(f"Ingestion failed: {log_data}")

    # =========================================================
    # POLLING LOOP
    # =========================================================

    async def run_forever(self, stop_event: asyncio.Event) -> IngestionMetrics:
        """
        Run ingestion every ``poll_interval_seconds`` until ``stop_event`` is set.

        Returns:
            Metrics aggregated over all runs
        """
        self._running = True
        logger.info(
            f"Polling Horizon every {self._config.poll_interval_seconds}s "
            f"(limit={self._config.page_limit})"
        )
        try:
            while not stop_event.is_set():
                await self.run_once()
                try:
                    await asyncio.wait_for(
                        stop_event.wait(),
                        timeout=self._config.poll_interval_seconds,
                    )
                except asyncio.TimeoutError:
                    continue
        finally:
            self._running = False
            logger.info(f"Polling stopped: {self._metrics.to_dict()}")
        return self._metrics
