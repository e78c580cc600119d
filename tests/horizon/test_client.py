"""
Tests for HorizonClient against a local aiohttp server.

============================================================
TEST SCENARIOS
============================================================
1. URL building: limit / cursor query, trailing slash stripped
2. Success: records decoded, next cursor extracted
3. Scenario C: no next link -> caller sees has_next False
4. Non-2xx -> HttpStatusError with status
5. Bad body -> DecodeError
6. Unreachable host / timeout -> TransportError
7. Session ownership

============================================================
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer, unused_port

from horizon.client import HorizonClient
from horizon.exceptions import (
    DecodeError,
    FetchError,
    HttpStatusError,
    TransportError,
)
from tests.conftest import offer_payload, page_payload


Handler = Callable[[web.Request], Any]


@asynccontextmanager
async def horizon_stub(handler: Handler) -> AsyncIterator[TestServer]:
    """Serve ``handler`` on GET /offers."""
    app = web.Application()
    app.router.add_get("/offers", handler)
    server = TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


def base_url(server: TestServer) -> str:
    # make_url("/") keeps a trailing slash the client must strip
    return str(server.make_url("/"))


def recording_handler(payload: Dict[str, Any], seen: List[Dict[str, str]]) -> Handler:
    async def handler(request: web.Request) -> web.Response:
        seen.append(dict(request.query))
        return web.json_response(payload)
    return handler


# ============================================================
# TEST: URL BUILDING
# ============================================================

class TestOffersUrl:
    """Request URL construction."""

    def test_trailing_slash_is_stripped(self):
        client = HorizonClient("https://horizon.stellar.org///")

        assert client.base_url == "https://horizon.stellar.org"

    def test_limit_only(self):
        client = HorizonClient("https://horizon.stellar.org/")

        assert client.offers_url(200) == "https://horizon.stellar.org/offers?limit=200"

    def test_limit_and_cursor(self):
        client = HorizonClient("https://horizon.stellar.org")

        assert client.offers_url(10, "164555927") == (
            "https://horizon.stellar.org/offers?limit=10&cursor=164555927"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, 201, -1])
    async def test_invalid_limit_rejected_before_request(self, limit):
        session = aiohttp.ClientSession()
        try:
            client = HorizonClient("http://127.0.0.1:1", session=session)
            with pytest.raises(ValueError):
                await client.fetch_offers(limit)
        finally:
            await session.close()


# ============================================================
# TEST: SUCCESSFUL FETCH
# ============================================================

class TestFetchOffers:
    """Decoding of successful responses."""

    @pytest.mark.asyncio
    async def test_fetch_first_page(self):
        seen: List[Dict[str, str]] = []
        payload = page_payload(
            [offer_payload(), offer_payload(id="12346", paging_token="12346")],
            next_href="https://horizon.test/offers?cursor=12346&limit=2",
        )

        async with horizon_stub(recording_handler(payload, seen)) as server:
            async with HorizonClient(base_url(server)) as client:
                page = await client.fetch_offers(limit=2)

        assert seen == [{"limit": "2"}]
        assert [r.id for r in page.records] == ["12345", "12346"]
        assert page.next_cursor == "12346"

    @pytest.mark.asyncio
    async def test_cursor_is_forwarded(self):
        seen: List[Dict[str, str]] = []
        payload = page_payload([], next_href="https://horizon.test/offers?cursor=99&limit=5")

        async with horizon_stub(recording_handler(payload, seen)) as server:
            async with HorizonClient(base_url(server)) as client:
                await client.fetch_offers(limit=5, cursor="98")

        assert seen == [{"limit": "5", "cursor": "98"}]

    @pytest.mark.asyncio
    async def test_scenario_c_no_next_link(self):
        """A page without _links.next terminates pagination."""
        seen: List[Dict[str, str]] = []
        payload = {"_embedded": {"records": [offer_payload()]}}

        async with horizon_stub(recording_handler(payload, seen)) as server:
            async with HorizonClient(base_url(server)) as client:
                page = await client.fetch_offers(limit=200)

        assert len(page.records) == 1
        assert page.next_cursor is None
        assert not page.has_next
        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_hal_content_type_is_accepted(self):
        """Horizon answers with application/hal+json."""
        async def handler(request: web.Request) -> web.Response:
            return web.json_response(page_payload([]), content_type="application/hal+json")

        async with horizon_stub(handler) as server:
            async with HorizonClient(base_url(server)) as client:
                page = await client.fetch_offers(limit=1)

        assert page.records == []


# ============================================================
# TEST: ERROR MAPPING
# ============================================================

class TestFetchErrors:
    """Failures map onto the FetchError taxonomy."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,retryable", [(400, False), (404, False), (429, True), (500, True), (503, True)])
    async def test_http_status(self, status, retryable):
        async def handler(request: web.Request) -> web.Response:
            return web.json_response({"title": "error", "status": status}, status=status)

        async with horizon_stub(handler) as server:
            async with HorizonClient(base_url(server)) as client:
                with pytest.raises(HttpStatusError) as exc_info:
                    await client.fetch_offers(limit=10)

        error = exc_info.value
        assert error.status_code == status
        assert error.retryable is retryable
        assert "limit=10" in error.request_url
        assert "error" in error.response_body

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        async def handler(request: web.Request) -> web.Response:
            return web.Response(text="<html>gateway</html>", content_type="text/html")

        async with horizon_stub(handler) as server:
            async with HorizonClient(base_url(server)) as client:
                with pytest.raises(DecodeError) as exc_info:
                    await client.fetch_offers(limit=10)

        assert not exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_wrong_page_shape(self):
        async def handler(request: web.Request) -> web.Response:
            return web.json_response({"records": []})

        async with horizon_stub(handler) as server:
            async with HorizonClient(base_url(server)) as client:
                with pytest.raises(DecodeError) as exc_info:
                    await client.fetch_offers(limit=10)

        assert exc_info.value.request_url.endswith("/offers?limit=10")

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        client = HorizonClient(f"http://127.0.0.1:{unused_port()}")
        try:
            with pytest.raises(TransportError) as exc_info:
                await client.fetch_offers(limit=10)
        finally:
            await client.close()

        assert exc_info.value.retryable
        assert isinstance(exc_info.value, FetchError)

    @pytest.mark.asyncio
    async def test_timeout(self):
        async def handler(request: web.Request) -> web.Response:
            await asyncio.sleep(1)
            return web.json_response(page_payload([]))

        async with horizon_stub(handler) as server:
            async with HorizonClient(base_url(server), timeout=0.05) as client:
                with pytest.raises(TransportError):
                    await client.fetch_offers(limit=10)


# ============================================================
# TEST: SESSION OWNERSHIP
# ============================================================

class TestSessionOwnership:
    """Injected sessions are borrowed, own sessions are closed."""

    @pytest.mark.asyncio
    async def test_injected_session_stays_open(self):
        seen: List[Dict[str, str]] = []

        async with horizon_stub(recording_handler(page_payload([]), seen)) as server:
            async with aiohttp.ClientSession() as session:
                async with HorizonClient(base_url(server), session=session) as client:
                    await client.fetch_offers(limit=1)

                assert not session.closed

    @pytest.mark.asyncio
    async def test_own_session_closed(self):
        seen: List[Dict[str, str]] = []

        async with horizon_stub(recording_handler(page_payload([]), seen)) as server:
            client = HorizonClient(base_url(server))
            await client.fetch_offers(limit=1)
            session = client._session
            await client.close()

        assert session is not None and session.closed
