"""
Offer Model - Normalized, validated SDEX offer.

An Offer is built once from exactly one raw Horizon record. Construction
either yields a fully validated, immutable value or raises an OfferError;
there is no partially-valid intermediate state.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Optional

from core.constants import (
    ACCOUNT_ID_LENGTH,
    ACCOUNT_ID_PREFIX,
    INT32_MAX,
    INT32_MIN,
    UINT64_MAX,
)
from offers.asset import Asset
from offers.asset_parser import parse_asset
from offers.exceptions import (
    AssetParseError,
    InvalidAmountError,
    InvalidAssetError,
    InvalidIdError,
    InvalidLedgerError,
    InvalidPriceError,
    InvalidSellerError,
    PriceRatioOutOfRangeError,
    SameAssetError,
    ZeroDenominatorError,
)

if TYPE_CHECKING:
    from horizon.models import PriceRatio, RawOfferRecord


def _parse_offer_id(raw_id: str) -> int:
    # str.isdigit() also accepts non-ASCII digits, which int() would decode
    if not (raw_id.isascii() and raw_id.isdigit()):
        raise InvalidIdError(f"Invalid offer ID: {raw_id}", offer_id=raw_id, value=raw_id)
    offer_id = int(raw_id)
    if offer_id > UINT64_MAX:
        raise InvalidIdError(f"Offer ID out of range: {raw_id}", offer_id=raw_id, value=raw_id)
    return offer_id


def _parse_side(raw_asset: Any, side: str, offer_id: str) -> Asset:
    try:
        return parse_asset(raw_asset)
    except AssetParseError as e:
        raise InvalidAssetError(side, e, offer_id=offer_id) from e


def _price_ratio(price_r: Optional["PriceRatio"], offer_id: str) -> tuple[int, int]:
    if price_r is None:
        return 0, 1
    for name, component in (("n", price_r.n), ("d", price_r.d)):
        if not INT32_MIN <= component <= INT32_MAX:
            raise PriceRatioOutOfRangeError(
                f"Price ratio component {name}={component} does not fit in 32 bits",
                offer_id=offer_id,
                value=component,
            )
    return price_r.n, price_r.d


# Plain decimal literal: no whitespace, digit grouping or special values
DECIMAL_LITERAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def _parse_ledger(ledger: int, offer_id: str) -> int:
    if not 0 <= ledger <= UINT64_MAX:
        raise InvalidLedgerError(
            f"Ledger sequence out of range: {ledger}",
            offer_id=offer_id,
            value=ledger,
        )
    return ledger


def _is_positive_decimal(text: str) -> bool:
    if not DECIMAL_LITERAL.fullmatch(text):
        return False
    try:
        value = Decimal(text)
    except (InvalidOperation, TypeError, ValueError):
        return False
    return value.is_finite() and value > 0


@dataclass(frozen=True)
class Offer:
    """Normalized offer from SDEX."""

    id: int
    seller: str
    selling: Asset
    buying: Asset
    amount: str
    price: str
    price_numerator: int
    price_denominator: int
    last_modified_ledger: int
    last_modified_time: Optional[datetime] = None

    @classmethod
    def from_raw(cls, record: "RawOfferRecord") -> "Offer":
        """
        Build and validate an Offer from one raw Horizon record.

        Raises:
            OfferError: The first failing check, in construction order
        """
        offer_id = _parse_offer_id(record.id)
        selling = _parse_side(record.selling, "selling", record.id)
        buying = _parse_side(record.buying, "buying", record.id)
        price_n, price_d = _price_ratio(record.price_r, record.id)
        ledger = _parse_ledger(record.last_modified_ledger, record.id)

        offer = cls(
            id=offer_id,
            seller=record.seller,
            selling=selling,
            buying=buying,
            amount=record.amount,
            price=record.price,
            price_numerator=price_n,
            price_denominator=price_d,
            last_modified_ledger=ledger,
            # Horizon doesn't provide this directly
            last_modified_time=None,
        )
        offer.validate()
        return offer

    def validate(self) -> None:
        """Run the offer invariants in order; the first failure is raised."""
        offer_id = str(self.id)

        if len(self.seller) != ACCOUNT_ID_LENGTH or not self.seller.startswith(ACCOUNT_ID_PREFIX):
            raise InvalidSellerError(
                f"Invalid seller address: {self.seller}",
                offer_id=offer_id,
                value=self.seller,
            )

        if not _is_positive_decimal(self.amount):
            raise InvalidAmountError(
                f"Amount must be a positive decimal: {self.amount}",
                offer_id=offer_id,
                value=self.amount,
            )

        if not _is_positive_decimal(self.price):
            raise InvalidPriceError(
                f"Price must be a positive decimal: {self.price}",
                offer_id=offer_id,
                value=self.price,
            )

        if self.price_denominator == 0:
            raise ZeroDenominatorError(
                "Price denominator cannot be zero",
                offer_id=offer_id,
                value=self.price_denominator,
            )

        if self.selling == self.buying:
            raise SameAssetError(
                f"Selling and buying assets must be different: {self.selling}",
                offer_id=offer_id,
                value=self.selling.canonical_name(),
            )

    @property
    def amount_decimal(self) -> Decimal:
        return Decimal(self.amount)

    @property
    def price_decimal(self) -> Decimal:
        return Decimal(self.price)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "seller": self.seller,
            "selling": self.selling.to_dict(),
            "buying": self.buying.to_dict(),
            "amount": self.amount,
            "price": self.price,
            "price_numerator": self.price_numerator,
            "price_denominator": self.price_denominator,
            "last_modified_ledger": self.last_modified_ledger,
            "last_modified_time": (
                self.last_modified_time.isoformat() if self.last_modified_time else None
            ),
        }
