"""
Horizon Package - Client for the Horizon ledger-query REST service.

Quick Start:
    from horizon import HorizonClient

    async with HorizonClient("https://horizon.stellar.org") as client:
        page = await client.fetch_offers(limit=200)
        while page.records:
            for record in page.records:
                print(record.id, record.amount, record.price)
            if not page.has_next:
                break
            page = await client.fetch_offers(limit=200, cursor=page.next_cursor)

Pages must be requested in cursor order: each call's cursor is the
previous page's ``next_cursor``.
"""

from horizon.exceptions import (
    DecodeError,
    FetchError,
    HttpStatusError,
    TransportError,
)
from horizon.models import (
    HorizonLink,
    HorizonPage,
    PriceRatio,
    RawOfferRecord,
)
from horizon.client import HorizonClient


__all__ = [
    # Client
    "HorizonClient",

    # Models
    "HorizonPage",
    "HorizonLink",
    "RawOfferRecord",
    "PriceRatio",

    # Exceptions
    "FetchError",
    "TransportError",
    "HttpStatusError",
    "DecodeError",
]
