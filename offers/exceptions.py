"""
Offer Exceptions - Record-level errors for asset parsing and offer validation.

Every error here describes one malformed upstream record. They never
propagate past the record boundary: the ingestion driver turns them into
rejections and moves on to the next record.
"""

from typing import Any, Optional

from core.exceptions import ErrorClassification, IndexerException, Severity


# ============================================================
# ASSET PARSE ERRORS
# ============================================================

class AssetParseError(IndexerException):
    """Base exception for asset decoding failures (upstream schema drift)."""

    default_severity = Severity.LOW
    default_classification = ErrorClassification.NON_RECOVERABLE


class MissingFieldError(AssetParseError):
    """A required asset field is absent or not a string."""

    def __init__(self, field: str) -> None:
        super().__init__(
            message=f"missing {field}",
            context={"field": field},
        )
        self.field = field


class UnknownAssetTypeError(AssetParseError):
    """The asset_type discriminator is not one of the supported encodings."""

    def __init__(self, asset_type: str) -> None:
        super().__init__(
            message=f"unknown asset_type: {asset_type}",
            context={"field": "asset_type", "asset_type": asset_type},
        )
        self.field = "asset_type"
        self.asset_type = asset_type


# ============================================================
# OFFER ERRORS
# ============================================================

class OfferError(IndexerException):
    """
    Base exception for offer construction failures.

    Carries the raw offer id and the name of the failing field so that a
    rejection can be reported without holding on to the raw record.
    """

    default_severity = Severity.LOW
    default_classification = ErrorClassification.NON_RECOVERABLE
    field_name: str = ""

    def __init__(
        self,
        message: str,
        offer_id: Optional[str] = None,
        value: Optional[Any] = None,
        field: Optional[str] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        self.offer_id = offer_id
        self.field = field or self.field_name
        context: dict[str, Any] = {"field": self.field}
        if offer_id is not None:
            context["offer_id"] = offer_id
        if value is not None:
            context["value"] = str(value)[:100]
        super().__init__(message, context=context, cause=cause)


class InvalidIdError(OfferError):
    """Offer id is not an unsigned 64-bit integer."""
    field_name = "id"


class InvalidAssetError(OfferError):
    """The selling or buying asset could not be parsed."""

    def __init__(
        self,
        side: str,
        cause: AssetParseError,
        offer_id: Optional[str] = None,
    ) -> None:
        super().__init__(
            message=f"Invalid {side} asset: {cause.message}",
            offer_id=offer_id,
            field=side,
            cause=cause,
        )
        self.side = side


class PriceRatioOutOfRangeError(OfferError):
    """A price_r component does not fit a signed 32-bit integer."""
    field_name = "price_r"


class InvalidSellerError(OfferError):
    """Seller is not shaped like a public account id."""
    field_name = "seller"


class InvalidAmountError(OfferError):
    """Amount is not a finite, strictly positive decimal."""
    field_name = "amount"


class InvalidPriceError(OfferError):
    """Price is not a finite, strictly positive decimal."""
    field_name = "price"


class ZeroDenominatorError(OfferError):
    """Price ratio denominator is zero."""
    field_name = "price_r"


class InvalidLedgerError(OfferError):
    """last_modified_ledger is not an unsigned 64-bit integer."""
    field_name = "last_modified_ledger"


class SameAssetError(OfferError):
    """Selling and buying assets are identical."""
    field_name = "buying"
