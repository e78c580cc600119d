"""
Offers Package - Typed SDEX offer model.

Turns untyped Horizon offer records into validated, immutable offers.

Quick Start:
    from offers import Offer, OfferError

    try:
        offer = Offer.from_raw(record)
    except OfferError as e:
        print(f"rejected {e.offer_id}: {e.field}")
"""

from offers.asset import (
    Asset,
    AssetKey,
    AssetType,
    CreditAlphanum4Asset,
    CreditAlphanum12Asset,
    CreditAsset,
    NativeAsset,
)
from offers.asset_parser import parse_asset
from offers.exceptions import (
    AssetParseError,
    InvalidAmountError,
    InvalidAssetError,
    InvalidIdError,
    InvalidLedgerError,
    InvalidPriceError,
    InvalidSellerError,
    MissingFieldError,
    OfferError,
    PriceRatioOutOfRangeError,
    SameAssetError,
    UnknownAssetTypeError,
    ZeroDenominatorError,
)
from offers.offer import Offer


__all__ = [
    # Assets
    "Asset",
    "AssetKey",
    "AssetType",
    "NativeAsset",
    "CreditAsset",
    "CreditAlphanum4Asset",
    "CreditAlphanum12Asset",
    "parse_asset",

    # Offer
    "Offer",

    # Exceptions
    "AssetParseError",
    "MissingFieldError",
    "UnknownAssetTypeError",
    "OfferError",
    "InvalidIdError",
    "InvalidAssetError",
    "PriceRatioOutOfRangeError",
    "InvalidLedgerError",
    "InvalidSellerError",
    "InvalidAmountError",
    "InvalidPriceError",
    "ZeroDenominatorError",
    "SameAssetError",
]
