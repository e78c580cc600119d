"""
Horizon Client - Paginated access to the Horizon ``/offers`` collection.

Issues exactly one HTTP request per call and maps every failure onto the
FetchError hierarchy. Retry, backoff and rate limiting belong to the
caller (see ingestion.driver).
"""

import asyncio
import logging
import time
from typing import Any, Optional
from urllib.parse import urlencode

import aiohttp

from core.constants import MAX_PAGE_LIMIT, MIN_PAGE_LIMIT, OFFERS_PATH, USER_AGENT
from horizon.exceptions import DecodeError, HttpStatusError, TransportError
from horizon.models import HorizonPage, RawOfferRecord
from offers.asset import Asset
from offers.asset_parser import parse_asset


logger = logging.getLogger(__name__)


class HorizonClient:
    """
    Async client for a Horizon server.

    Session handling:
    - An injected ``aiohttp.ClientSession`` is borrowed and never closed
    - Otherwise a session is created lazily and closed by ``close()``

    No timeout is applied unless one is passed; the caller is expected to
    configure it (``HORIZON_TIMEOUT_SECS``) or cancel the task.
    """

    name = "horizon"

    def __init__(
        self,
        base_url: str,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def offers_url(self, limit: int, cursor: Optional[str] = None) -> str:
        """Build ``{base_url}/offers?limit=..[&cursor=..]``."""
        params: dict[str, Any] = {"limit": limit}
        if cursor is not None:
            params["cursor"] = cursor
        return f"{self._base_url}{OFFERS_PATH}?{urlencode(params)}"

    async def fetch_offers(
        self,
        limit: int,
        cursor: Optional[str] = None,
    ) -> HorizonPage[RawOfferRecord]:
        """
        Fetch one page of offers.

        Args:
            limit: Page size (1..200)
            cursor: Paging token to resume after; None starts from the beginning

        Returns:
            Decoded page with its records and the next cursor, if any

        Raises:
            ValueError: limit outside the range Horizon accepts
            TransportError: Network-level failure
            HttpStatusError: Non-success HTTP status
            DecodeError: Body is not a valid offers page
        """
        if not MIN_PAGE_LIMIT <= limit <= MAX_PAGE_LIMIT:
            raise ValueError(f"limit must be between {MIN_PAGE_LIMIT} and {MAX_PAGE_LIMIT}")

        url = self.offers_url(limit, cursor)
        data = await self._get_json(url)

        try:
            page = HorizonPage.from_dict(data, RawOfferRecord.from_dict)
        except DecodeError as e:
            e.request_url = url
            e.context["request_url"] = url
            raise

        logger.debug(
            f"[{self.name}] Fetched {len(page.records)} offers "
            f"(cursor={cursor}, next={page.next_cursor})"
        )
        return page

    def parse_asset(self, value: Any) -> Asset:
        """Convert a Horizon asset JSON object into a typed Asset."""
        return parse_asset(value)

    # =========================================================
    # HTTP
    # =========================================================

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers=self._get_default_headers(),
            )
            self._owns_session = True
        return self._session

    def _get_default_headers(self) -> dict[str, str]:
        """Get default HTTP headers."""
        return {
            "Accept": "application/hal+json, application/json",
            "User-Agent": USER_AGENT,
        }

    async def _get_json(self, url: str) -> Any:
        session = await self._get_session()

        start_time = time.time()
        try:
            async with session.get(url) as response:
                latency_ms = (time.time() - start_time) * 1000

                if response.status >= 300:
                    body = await response.text()
                    raise HttpStatusError(
                        status_code=response.status,
                        request_url=url,
                        response_body=body,
                    )

                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise DecodeError(
                        message=f"Response is not valid JSON: {e}",
                        request_url=url,
                        cause=e,
                    ) from e

                logger.debug(f"[{self.name}] Request completed in {latency_ms:.1f}ms")
                return data

        except aiohttp.ClientError as e:
            raise TransportError(
                message=f"Connection error: {e}",
                request_url=url,
                cause=e,
            ) from e
        except asyncio.TimeoutError as e:
            raise TransportError(
                message="Request timed out",
                request_url=url,
                cause=e,
            ) from e

    async def close(self) -> None:
        """Close resources."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "HorizonClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(base_url={self._base_url})>"
