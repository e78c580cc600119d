"""
Ingestion - Offer Sinks.

============================================================
PURPOSE
============================================================
Destination for validated offers.

The storage engine is pluggable: the driver only talks to the OfferSink
interface. Two sinks ship with the indexer:

- InMemoryOfferSink: upserts by offer id, for tests and dry runs
- JsonLinesOfferSink: appends one JSON document per offer to a file

============================================================
CONNECTION STRINGS
============================================================
memory://              InMemoryOfferSink
file:///path/to.jsonl  JsonLinesOfferSink

============================================================
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Sequence
from urllib.parse import urlsplit

from core.exceptions import InvalidConfigError
from ingestion.types import StorageError
from offers.offer import Offer


logger = logging.getLogger(__name__)


class OfferSink(ABC):
    """Abstract destination for validated offers."""

    name: str = "sink"

    @abstractmethod
    async def store_offers(self, offers: Sequence[Offer]) -> int:
        """
        Persist a batch of offers.

        Returns:
            Number of offers written

        Raises:
            StorageError: The batch could not be persisted
        """
        pass

    async def close(self) -> None:
        """Release resources."""


class InMemoryOfferSink(OfferSink):
    """Keeps the latest version of each offer, keyed by offer id."""

    name = "memory"

    def __init__(self) -> None:
        self._offers: Dict[int, Offer] = {}

    async def store_offers(self, offers: Sequence[Offer]) -> int:
        written = 0
        for offer in offers:
            current = self._offers.get(offer.id)
            # Older ledger versions never overwrite newer ones
            if current is not None and current.last_modified_ledger > offer.last_modified_ledger:
                continue
            self._offers[offer.id] = offer
            written += 1
        return written

    def get(self, offer_id: int) -> Optional[Offer]:
        return self._offers.get(offer_id)

    def all(self) -> List[Offer]:
        return [self._offers[k] for k in sorted(self._offers)]

    def __len__(self) -> int:
        return len(self._offers)


class JsonLinesOfferSink(OfferSink):
    """Appends offers as JSON lines; consumers dedupe by ``id``."""

    name = "jsonl"

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def store_offers(self, offers: Sequence[Offer]) -> int:
        if not offers:
            return 0
        lines = "".join(
            json.dumps(offer.to_dict(), sort_keys=True) + "\n" for offer in offers
        )
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as fh:
                fh.write(lines)
        except OSError as e:
            raise StorageError(
                f"Failed to append {len(offers)} offers to {self._path}: {e}",
                operation="store_offers",
                cause=e,
            ) from e
        return len(offers)


def create_sink(database_url: str) -> OfferSink:
    """
    Build the sink named by a storage connection string.

    Raises:
        InvalidConfigError: Unsupported scheme
    """
    parts = urlsplit(database_url)
    if parts.scheme == "memory":
        return InMemoryOfferSink()
    if parts.scheme == "file":
        path = parts.netloc + parts.path
        if not path:
            raise InvalidConfigError("DATABASE_URL", database_url, "file:// URL needs a path")
        return JsonLinesOfferSink(Path(path))
    raise InvalidConfigError(
        "DATABASE_URL",
        database_url,
        f"unsupported storage scheme '{parts.scheme}'",
    )
