"""
Asset Parser - Converts Horizon asset JSON into the typed Asset union.

Horizon uses objects like:
    {"asset_type": "native"}
    {"asset_type": "credit_alphanum4", "asset_code": "USDC", "asset_issuer": "G..."}
"""

from collections.abc import Mapping
from typing import Any

from offers.asset import (
    Asset,
    AssetType,
    CreditAlphanum4Asset,
    CreditAlphanum12Asset,
    NativeAsset,
)
from offers.exceptions import MissingFieldError, UnknownAssetTypeError


CREDIT_ASSET_CLASSES = {
    AssetType.CREDIT_ALPHANUM4: CreditAlphanum4Asset,
    AssetType.CREDIT_ALPHANUM12: CreditAlphanum12Asset,
}


def _require_str(value: Mapping[str, Any], field: str) -> str:
    raw = value.get(field)
    if not isinstance(raw, str):
        raise MissingFieldError(field)
    return raw


def parse_asset(value: Any) -> Asset:
    """
    Parse one Horizon asset object.

    Args:
        value: Decoded JSON value (normally a dict)

    Returns:
        The matching Asset variant, code and issuer copied verbatim

    Raises:
        MissingFieldError: asset_type, asset_code or asset_issuer absent
        UnknownAssetTypeError: asset_type outside the supported encodings
    """
    if not isinstance(value, Mapping):
        raise MissingFieldError("asset_type")

    raw_type = _require_str(value, "asset_type")
    try:
        asset_type = AssetType(raw_type)
    except ValueError:
        raise UnknownAssetTypeError(raw_type) from None

    if asset_type is AssetType.NATIVE:
        return NativeAsset()

    asset_cls = CREDIT_ASSET_CLASSES[asset_type]
    return asset_cls(
        code=_require_str(value, "asset_code"),
        issuer=_require_str(value, "asset_issuer"),
    )
