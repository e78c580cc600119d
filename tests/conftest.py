"""
Shared test fixtures: raw Horizon offer payloads and records.
"""

from typing import Any, Callable, Dict

import pytest

from horizon.models import RawOfferRecord


SELLER = "GA5ZSEJYB37JRC5AVCIA5MOP4RHTM335X2KGX3IHOJAPP5RE34K4KZVN"
ISSUER = "GDUKMGUGDZQK6YHYA5Z6AY2G4XDSZPSZ3SW5UN3ARVMO6QSRDWP5YLEX"


def offer_payload(**overrides: Any) -> Dict[str, Any]:
    """A valid Horizon offer record as decoded JSON."""
    payload: Dict[str, Any] = {
        "id": "12345",
        "paging_token": "12345",
        "seller": SELLER,
        "selling": {"asset_type": "native"},
        "buying": {
            "asset_type": "credit_alphanum4",
            "asset_code": "USDC",
            "asset_issuer": SELLER,
        },
        "amount": "100.0",
        "price": "1.5",
        "price_r": {"n": 3, "d": 2},
        "last_modified_ledger": 12345,
    }
    payload.update(overrides)
    return payload


def page_payload(records: list, next_href: Any = None) -> Dict[str, Any]:
    """A Horizon page envelope around ``records``."""
    links: Dict[str, Any] = {"self": {"href": "https://horizon.test/offers?limit=200"}}
    if next_href is not None:
        links["next"] = {"href": next_href}
    return {"_embedded": {"records": records}, "_links": links}


@pytest.fixture
def make_record() -> Callable[..., RawOfferRecord]:
    """Factory for RawOfferRecord with per-field overrides."""
    def _make(**overrides: Any) -> RawOfferRecord:
        return RawOfferRecord.from_dict(offer_payload(**overrides))
    return _make
