"""
Horizon Models - Wire shapes of the Horizon REST API.

Provides strict decoding of the HAL page envelope and of raw offer records.
Anything that does not match the expected shape raises DecodeError.

Page envelope:
    {
        "_embedded": {"records": [...]},
        "_links": {"self": {"href": "..."}, "next": {"href": "...?cursor=...&limit=..."}}
    }
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, TypeVar
from urllib.parse import parse_qs, urlsplit

from horizon.exceptions import DecodeError


T = TypeVar("T")


def _present(data: dict[str, Any], key: str, what: str) -> Any:
    if key not in data:
        raise DecodeError(f"{what}: missing field '{key}'")
    return data[key]


def _require(data: dict[str, Any], key: str, expected: type, what: str) -> Any:
    value = _present(data, key, what)
    # bool is an int subclass; JSON true/false is never a valid integer here
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise DecodeError(
            f"{what}: field '{key}' expected {expected.__name__}, got {type(value).__name__}"
        )
    return value


def _optional(data: dict[str, Any], key: str, expected: type, what: str) -> Any:
    if data.get(key) is None:
        return None
    return _require(data, key, expected, what)


# ============================================================
# OFFER RECORD
# ============================================================

@dataclass(frozen=True)
class PriceRatio:
    """Exact price as a fraction n/d (Horizon ``price_r``)."""
    n: int
    d: int

    @classmethod
    def from_dict(cls, data: Any) -> "PriceRatio":
        if not isinstance(data, dict):
            raise DecodeError("price_r: expected object")
        return cls(
            n=_require(data, "n", int, "price_r"),
            d=_require(data, "d", int, "price_r"),
        )


@dataclass(frozen=True)
class RawOfferRecord:
    """
    One offer exactly as Horizon returns it.

    ``selling`` and ``buying`` stay untyped JSON values of any shape; only
    the asset parser looks inside them, so a malformed asset rejects its
    record instead of the page.
    """
    id: str
    seller: str
    selling: Any
    buying: Any
    amount: str
    price: str
    last_modified_ledger: int
    paging_token: Optional[str] = None
    price_r: Optional[PriceRatio] = None

    @classmethod
    def from_dict(cls, data: Any) -> "RawOfferRecord":
        """Decode one record of the ``/offers`` collection."""
        if not isinstance(data, dict):
            raise DecodeError("offer record: expected object")
        what = f"offer {data.get('id', '?')}"
        price_r = data.get("price_r")
        return cls(
            id=_require(data, "id", str, what),
            paging_token=_optional(data, "paging_token", str, what),
            seller=_require(data, "seller", str, what),
            selling=_present(data, "selling", what),
            buying=_present(data, "buying", what),
            amount=_require(data, "amount", str, what),
            price=_require(data, "price", str, what),
            price_r=PriceRatio.from_dict(price_r) if price_r is not None else None,
            last_modified_ledger=_require(data, "last_modified_ledger", int, what),
        )


# ============================================================
# PAGE ENVELOPE
# ============================================================

@dataclass(frozen=True)
class HorizonLink:
    """A HAL link."""
    href: str

    @classmethod
    def from_dict(cls, data: Any, name: str) -> "HorizonLink":
        if not isinstance(data, dict):
            raise DecodeError(f"_links.{name}: expected object")
        return cls(href=_require(data, "href", str, f"_links.{name}"))

    @property
    def cursor(self) -> Optional[str]:
        """The ``cursor`` query parameter of the link, if any."""
        values = parse_qs(urlsplit(self.href).query).get("cursor")
        return values[0] if values else None


@dataclass(frozen=True)
class HorizonPage(Generic[T]):
    """Generic Horizon collection page."""
    records: list[T] = field(default_factory=list)
    next_link: Optional[HorizonLink] = None
    self_link: Optional[HorizonLink] = None

    @property
    def next_href(self) -> Optional[str]:
        return self.next_link.href if self.next_link else None

    @property
    def next_cursor(self) -> Optional[str]:
        """Cursor to pass to the following request; None when the stream ends here."""
        return self.next_link.cursor if self.next_link else None

    @property
    def has_next(self) -> bool:
        return self.next_cursor is not None

    @classmethod
    def from_dict(
        cls,
        data: Any,
        record_parser: Callable[[Any], T],
    ) -> "HorizonPage[T]":
        """
        Decode a page envelope, converting each record with ``record_parser``.

        Raises:
            DecodeError: Envelope or any record does not match the shape
        """
        if not isinstance(data, dict):
            raise DecodeError("page: expected JSON object")

        embedded = _require(data, "_embedded", dict, "page")
        raw_records = _require(embedded, "records", list, "_embedded")

        next_link = None
        self_link = None
        links = data.get("_links")
        if links is not None:
            if not isinstance(links, dict):
                raise DecodeError("page: '_links' expected object")
            if links.get("next") is not None:
                next_link = HorizonLink.from_dict(links["next"], "next")
            if links.get("self") is not None:
                self_link = HorizonLink.from_dict(links["self"], "self")

        return cls(
            records=[record_parser(raw) for raw in raw_records],
            next_link=next_link,
            self_link=self_link,
        )
