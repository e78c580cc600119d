"""
Ingestion Package.

Drives the Horizon offer stream into a storage sink.

Modules:
- driver: Polling loop, cursor sequencing and per-record isolation
- sinks: Storage interface for validated offers
- checkpoint: Resume-cursor persistence
- types: Configs, results, metrics and rejections
"""

from ingestion.checkpoint import (
    CursorCheckpoint,
    InMemoryCursorCheckpoint,
    JsonFileCursorCheckpoint,
)
from ingestion.driver import IngestionDriver, convert_records
from ingestion.sinks import (
    InMemoryOfferSink,
    JsonLinesOfferSink,
    OfferSink,
    create_sink,
)
from ingestion.types import (
    DriverConfig,
    IngestionMetrics,
    IngestionResult,
    IngestionStatus,
    RecordRejection,
    StorageError,
)


__all__ = [
    # Driver
    "IngestionDriver",
    "convert_records",
    # Sinks
    "OfferSink",
    "InMemoryOfferSink",
    "JsonLinesOfferSink",
    "create_sink",
    # Checkpoints
    "CursorCheckpoint",
    "InMemoryCursorCheckpoint",
    "JsonFileCursorCheckpoint",
    # Types
    "DriverConfig",
    "IngestionMetrics",
    "IngestionResult",
    "IngestionStatus",
    "RecordRejection",
    "StorageError",
]
