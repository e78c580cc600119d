"""
Ingestion - Type Definitions.

============================================================
PURPOSE
============================================================
Shared types for the offer ingestion layer.

- Driver configuration
- Ingestion result types
- Metric tracking types
- Per-record rejection records

============================================================
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from core.constants import DEFAULT_PAGE_LIMIT, DEFAULT_POLL_INTERVAL_SECS
from core.exceptions import ErrorClassification, IndexerException, Severity
from offers.exceptions import OfferError


# =============================================================
# ENUMS
# =============================================================

class IngestionStatus(str, Enum):
    """Status of an ingestion run."""
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


# =============================================================
# CONFIGURATION TYPES
# =============================================================

@dataclass(frozen=True)
class DriverConfig:
    """Configuration for the ingestion driver."""
    page_limit: int = DEFAULT_PAGE_LIMIT
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECS
    # Safety valve for one run; None drains the stream
    max_pages_per_run: Optional[int] = None
    max_rejections_kept: int = 100


# =============================================================
# REJECTIONS
# =============================================================

@dataclass(frozen=True)
class RecordRejection:
    """One raw offer that failed construction."""
    offer_id: Optional[str]
    error_type: str
    field: str
    message: str
    cursor: Optional[str] = None

    @classmethod
    def from_error(cls, error: OfferError, cursor: Optional[str] = None) -> "RecordRejection":
        return cls(
            offer_id=error.offer_id,
            error_type=type(error).__name__,
            field=error.field,
            message=error.message,
            cursor=cursor,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offer_id": self.offer_id,
            "error_type": self.error_type,
            "field": self.field,
            "message": self.message,
            "cursor": self.cursor,
        }


# =============================================================
# INGESTION RESULT TYPES
# =============================================================

@dataclass
class IngestionResult:
    """Result of a single ingestion run."""
    run_id: UUID = field(default_factory=uuid4)
    status: IngestionStatus = IngestionStatus.SUCCESS

    # Cursor position
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None

    # Counts
    pages_fetched: int = 0
    records_fetched: int = 0
    records_stored: int = 0
    records_rejected: int = 0

    # Timing
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_seconds: float = 0.0

    # Errors
    rejections: List[RecordRejection] = field(default_factory=list)
    rejection_counts: Dict[str, int] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    def mark_complete(self, completed_at: datetime) -> None:
        """Mark the run as complete and calculate duration."""
        self.completed_at = completed_at
        if self.started_at:
            delta = completed_at - self.started_at
            self.duration_seconds = delta.total_seconds()

    def add_rejection(self, rejection: RecordRejection, keep: int) -> None:
        """Count a rejected record, keeping at most ``keep`` details."""
        self.records_rejected += 1
        self.rejection_counts[rejection.error_type] = (
            self.rejection_counts.get(rejection.error_type, 0) + 1
        )
        if len(self.rejections) < keep:
            self.rejections.append(rejection)
        if self.status == IngestionStatus.SUCCESS:
            self.status = IngestionStatus.PARTIAL

    def add_error(self, error: str) -> None:
        """Add an error message."""
        self.errors.append(error)
        if self.status == IngestionStatus.SUCCESS:
            self.status = IngestionStatus.PARTIAL

    def mark_failed(self, error: str) -> None:
        """Mark the run as failed."""
        self.status = IngestionStatus.FAILED
        self.errors.append(error)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/monitoring."""
        return {
            "run_id": str(self.run_id),
            "status": self.status.value,
            "start_cursor": self.start_cursor,
            "end_cursor": self.end_cursor,
            "pages_fetched": self.pages_fetched,
            "records_fetched": self.records_fetched,
            "records_stored": self.records_stored,
            "records_rejected": self.records_rejected,
            "rejection_counts": dict(self.rejection_counts),
            "duration_seconds": self.duration_seconds,
            "error_count": len(self.errors),
            "errors": self.errors[:5],  # Limit for logging
            "rejections": [r.to_dict() for r in self.rejections[:5]],
        }


@dataclass
class IngestionMetrics:
    """Aggregated metrics across ingestion runs."""
    total_runs: int = 0
    successful_runs: int = 0
    partial_runs: int = 0
    failed_runs: int = 0

    total_pages_fetched: int = 0
    total_records_fetched: int = 0
    total_records_stored: int = 0
    total_records_rejected: int = 0

    # Rejections by error type
    rejections_by_type: Dict[str, int] = field(default_factory=dict)

    last_run_at: Optional[datetime] = None
    last_success_at: Optional[datetime] = None
    last_failure_at: Optional[datetime] = None

    def record_result(self, result: IngestionResult) -> None:
        """Record an ingestion result."""
        self.total_runs += 1
        self.last_run_at = result.completed_at

        self.total_pages_fetched += result.pages_fetched
        self.total_records_fetched += result.records_fetched
        self.total_records_stored += result.records_stored
        self.total_records_rejected += result.records_rejected

        for error_type, count in result.rejection_counts.items():
            self.rejections_by_type[error_type] = (
                self.rejections_by_type.get(error_type, 0) + count
            )

        if result.status == IngestionStatus.SUCCESS:
            self.successful_runs += 1
            self.last_success_at = result.completed_at
        elif result.status == IngestionStatus.PARTIAL:
            self.partial_runs += 1
            self.last_success_at = result.completed_at
        else:
            self.failed_runs += 1
            self.last_failure_at = result.completed_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_runs": self.total_runs,
            "successful_runs": self.successful_runs,
            "partial_runs": self.partial_runs,
            "failed_runs": self.failed_runs,
            "total_pages_fetched": self.total_pages_fetched,
            "total_records_fetched": self.total_records_fetched,
            "total_records_stored": self.total_records_stored,
            "total_records_rejected": self.total_records_rejected,
            "rejections_by_type": dict(self.rejections_by_type),
            "last_run_at": self.last_run_at.isoformat() if self.last_run_at else None,
        }


# =============================================================
# ERROR TYPES
# =============================================================

class StorageError(IndexerException):
    """The offer sink or cursor checkpoint could not persist a page."""

    default_severity = Severity.HIGH
    default_classification = ErrorClassification.TRANSIENT

    def __init__(
        self,
        message: str,
        operation: str,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, context={"operation": operation}, cause=cause)
        self.operation = operation
