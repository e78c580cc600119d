"""
Tests for the asset union and the asset parser.

============================================================
TEST SCENARIOS
============================================================
1. The three canonical encodings parse and serialize back unchanged
2. Missing / non-string discriminator -> MissingFieldError("asset_type")
3. Unknown discriminator -> UnknownAssetTypeError
4. Credit assets without code or issuer -> MissingFieldError(name)
5. Equality and identity keys

============================================================
"""

import pytest

from horizon.client import HorizonClient
from offers.asset import (
    Asset,
    AssetType,
    CreditAlphanum4Asset,
    CreditAlphanum12Asset,
    NativeAsset,
)
from offers.asset_parser import parse_asset
from offers.exceptions import AssetParseError, MissingFieldError, UnknownAssetTypeError
from tests.conftest import ISSUER


CANONICAL_ASSETS = [
    {"asset_type": "native"},
    {"asset_type": "credit_alphanum4", "asset_code": "USDC", "asset_issuer": ISSUER},
    {"asset_type": "credit_alphanum12", "asset_code": "LONGCODE123", "asset_issuer": ISSUER},
]


# ============================================================
# TEST: VALID ENCODINGS
# ============================================================

class TestParseValidAssets:
    """Known-good shapes."""

    def test_native(self):
        """Native asset has no payload."""
        asset = parse_asset({"asset_type": "native"})

        assert asset == NativeAsset()
        assert asset.is_native
        assert asset.asset_type is AssetType.NATIVE

    def test_credit_alphanum4(self):
        """4-char credit asset copies code and issuer verbatim."""
        asset = parse_asset(CANONICAL_ASSETS[1])

        assert isinstance(asset, CreditAlphanum4Asset)
        assert asset.code == "USDC"
        assert asset.issuer == ISSUER
        assert not asset.is_native

    def test_credit_alphanum12(self):
        """12-char credit asset maps to its own variant."""
        asset = parse_asset(CANONICAL_ASSETS[2])

        assert isinstance(asset, CreditAlphanum12Asset)
        assert asset.code == "LONGCODE123"

    @pytest.mark.parametrize("payload", CANONICAL_ASSETS)
    def test_round_trip(self, payload):
        """to_dict(parse(json)) reproduces the canonical encoding."""
        assert parse_asset(payload).to_dict() == payload

    def test_extra_fields_are_ignored(self):
        """Horizon may add fields; they do not leak into the asset."""
        payload = dict(CANONICAL_ASSETS[1], liquidity_pool_id=None, num_accounts=7)

        assert parse_asset(payload).to_dict() == CANONICAL_ASSETS[1]

    def test_deterministic(self):
        """Parsing the same value twice gives equal assets."""
        assert parse_asset(CANONICAL_ASSETS[1]) == parse_asset(CANONICAL_ASSETS[1])

    def test_client_exposes_parser(self):
        """HorizonClient.parse_asset is the same conversion."""
        client = HorizonClient("https://horizon.test")

        assert client.parse_asset(CANONICAL_ASSETS[2]) == parse_asset(CANONICAL_ASSETS[2])


# ============================================================
# TEST: REJECTIONS
# ============================================================

class TestParseInvalidAssets:
    """Schema drift is reported, never guessed around."""

    @pytest.mark.parametrize("payload", [
        {},
        {"asset_code": "USDC", "asset_issuer": ISSUER},
        {"asset_type": None},
        {"asset_type": 4},
        [],
        "native",
        None,
    ])
    def test_missing_asset_type(self, payload):
        """No usable discriminator -> MissingFieldError('asset_type')."""
        with pytest.raises(MissingFieldError) as exc_info:
            parse_asset(payload)

        assert exc_info.value.field == "asset_type"

    @pytest.mark.parametrize("asset_type", [
        "liquidity_pool_shares",
        "NATIVE",
        "credit_alphanum",
        "",
    ])
    def test_unknown_asset_type(self, asset_type):
        """Any tag outside the three encodings is rejected."""
        with pytest.raises(UnknownAssetTypeError) as exc_info:
            parse_asset({"asset_type": asset_type})

        assert exc_info.value.asset_type == asset_type
        assert asset_type in str(exc_info.value)

    @pytest.mark.parametrize("asset_type", ["credit_alphanum4", "credit_alphanum12"])
    @pytest.mark.parametrize("missing", ["asset_code", "asset_issuer"])
    def test_credit_missing_field(self, asset_type, missing):
        """Credit assets need both code and issuer."""
        payload = {"asset_type": asset_type, "asset_code": "ABC", "asset_issuer": ISSUER}
        del payload[missing]

        with pytest.raises(MissingFieldError) as exc_info:
            parse_asset(payload)

        assert exc_info.value.field == missing

    def test_credit_non_string_field(self):
        """A non-string code counts as missing."""
        payload = {"asset_type": "credit_alphanum4", "asset_code": 42, "asset_issuer": ISSUER}

        with pytest.raises(MissingFieldError, match="asset_code"):
            parse_asset(payload)

    def test_errors_share_base_class(self):
        """Both failures are AssetParseError and are not recoverable."""
        with pytest.raises(AssetParseError) as exc_info:
            parse_asset({"asset_type": "pool"})

        assert not exc_info.value.is_recoverable
        assert exc_info.value.to_dict()["type"] == "UnknownAssetTypeError"


# ============================================================
# TEST: EQUALITY AND KEYS
# ============================================================

class TestAssetIdentity:
    """Equality covers variant and payload; keys are stable."""

    def test_native_key(self):
        assert NativeAsset().key() == ("native", None, None)

    def test_credit_key(self):
        asset = CreditAlphanum4Asset(code="USDC", issuer=ISSUER)

        assert asset.key() == ("credit_alphanum4", "USDC", ISSUER)

    def test_variant_participates_in_equality(self):
        """Same code/issuer under different variants are different assets."""
        short = CreditAlphanum4Asset(code="ABC", issuer=ISSUER)
        long = CreditAlphanum12Asset(code="ABC", issuer=ISSUER)

        assert short != long
        assert short.key() != long.key()

    def test_payload_participates_in_equality(self):
        assert CreditAlphanum4Asset("USDC", ISSUER) != CreditAlphanum4Asset("USDT", ISSUER)

    def test_assets_are_hashable(self):
        """Assets can group offers in dicts and sets."""
        assets = {NativeAsset(), NativeAsset(), CreditAlphanum4Asset("USDC", ISSUER)}

        assert len(assets) == 2

    def test_canonical_name(self):
        assert NativeAsset().canonical_name() == "native"
        assert str(CreditAlphanum4Asset("USDC", ISSUER)) == f"USDC:{ISSUER}"

    def test_base_class_is_abstract(self):
        """Only the concrete variants can be instantiated."""
        with pytest.raises(TypeError):
            Asset()
