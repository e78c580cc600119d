"""
Asset Models - Closed union of the three ledger asset encodings.

Horizon describes an asset as a JSON object whose shape depends on the
``asset_type`` discriminator. Inside the indexer an asset is always one of
the three frozen dataclasses below; nothing downstream sees the raw JSON.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Optional


class AssetType(str, Enum):
    """Asset encodings accepted by the indexer."""
    NATIVE = "native"
    CREDIT_ALPHANUM4 = "credit_alphanum4"
    CREDIT_ALPHANUM12 = "credit_alphanum12"


AssetKey = tuple[str, Optional[str], Optional[str]]


class Asset(ABC):
    """
    Base of the asset union.

    Subclasses are frozen dataclasses, so equality covers the variant and
    every payload field, and assets can be used as dict keys.
    """

    asset_type: ClassVar[AssetType]

    @abstractmethod
    def key(self) -> AssetKey:
        """Stable identity key: (tag, code or None, issuer or None)."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Canonical Horizon JSON encoding."""

    @abstractmethod
    def canonical_name(self) -> str:
        """Horizon query notation: ``native`` or ``CODE:ISSUER``."""

    @property
    def is_native(self) -> bool:
        return self.asset_type is AssetType.NATIVE


@dataclass(frozen=True)
class NativeAsset(Asset):
    """The ledger's native currency (lumens)."""

    asset_type: ClassVar[AssetType] = AssetType.NATIVE

    def key(self) -> AssetKey:
        return (self.asset_type.value, None, None)

    def to_dict(self) -> dict[str, Any]:
        return {"asset_type": self.asset_type.value}

    def canonical_name(self) -> str:
        return "native"

    def __str__(self) -> str:
        return self.canonical_name()


@dataclass(frozen=True)
class CreditAsset(Asset):
    """Issued asset: a short code plus the issuing account."""

    code: str
    issuer: str

    def key(self) -> AssetKey:
        return (self.asset_type.value, self.code, self.issuer)

    def to_dict(self) -> dict[str, Any]:
        return {
            "asset_type": self.asset_type.value,
            "asset_code": self.code,
            "asset_issuer": self.issuer,
        }

    def canonical_name(self) -> str:
        return f"{self.code}:{self.issuer}"

    def __str__(self) -> str:
        return self.canonical_name()


@dataclass(frozen=True)
class CreditAlphanum4Asset(CreditAsset):
    """Credit asset with a code of up to 4 characters."""

    asset_type: ClassVar[AssetType] = AssetType.CREDIT_ALPHANUM4


@dataclass(frozen=True)
class CreditAlphanum12Asset(CreditAsset):
    """Credit asset with a code of 5 to 12 characters."""

    asset_type: ClassVar[AssetType] = AssetType.CREDIT_ALPHANUM12
