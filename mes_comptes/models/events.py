"""
Persistence Event Models

Every load and save produces a short trail of events describing which
path was taken (first run, legacy format, fallback, failure). The events
are for operator visibility only: callers of the persistence layer never
see them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class PersistenceEventType(str, Enum):
    """Types of events emitted by the persistence layer."""
    # Load
    LOAD_STARTED = "load_started"
    LOAD_COMPLETED = "load_completed"
    FIRST_RUN = "first_run"
    DECODE_FAILED = "decode_failed"
    PLAIN_JSON_FALLBACK = "plain_json_fallback"
    UNREADABLE_DOCUMENT = "unreadable_document"

    # Migration
    LEGACY_TRANSACTION_LIST = "legacy_transaction_list"
    CATEGORIES_MIGRATED = "categories_migrated"
    RECORDS_REPAIRED = "records_repaired"

    # Save
    SAVE_COMPLETED = "save_completed"
    SAVE_FAILED = "save_failed"

    # Store
    STORE_UNAVAILABLE = "store_unavailable"
    UNEXPECTED_ERROR = "unexpected_error"


class EventSeverity(str, Enum):
    """Severity level for persistence events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PersistenceEvent(BaseModel):
    """A single diagnostic event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=_utcnow)

    event_type: PersistenceEventType
    severity: EventSeverity = EventSeverity.INFO

    # Ties together all events of one load or save call
    correlation_id: Optional[UUID] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class PersistenceEventBuilder:
    """
    Helper class to build events with common patterns.

    Usage:
        event = PersistenceEventBuilder.first_run(correlation_id)
        event = PersistenceEventBuilder.save_failed("disk full", correlation_id)
    """

    @staticmethod
    def load_started(store: str, correlation_id: UUID) -> PersistenceEvent:
        return PersistenceEvent(
            event_type=PersistenceEventType.LOAD_STARTED,
            severity=EventSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Loading app data from {store}",
            details={"store": store},
        )

    @staticmethod
    def load_completed(
        transaction_count: int,
        has_categories: bool,
        correlation_id: UUID,
    ) -> PersistenceEvent:
        return PersistenceEvent(
            event_type=PersistenceEventType.LOAD_COMPLETED,
            correlation_id=correlation_id,
            description=f"Loaded {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
                "has_categories": has_categories,
            },
        )

    @staticmethod
    def first_run(correlation_id: UUID) -> PersistenceEvent:
        return PersistenceEvent(
            event_type=PersistenceEventType.FIRST_RUN,
            correlation_id=correlation_id,
            description="No saved document, starting from the empty state",
        )

    @staticmethod
    def decode_failed(
        kind: str,
        message: str,
        correlation_id: UUID,
    ) -> PersistenceEvent:
        return PersistenceEvent(
            event_type=PersistenceEventType.DECODE_FAILED,
            severity=EventSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Stored document could not be decoded ({kind})",
            details={"kind": kind},
            error_message=message,
        )

    @staticmethod
    def plain_json_fallback(correlation_id: UUID) -> PersistenceEvent:
        return PersistenceEvent(
            event_type=PersistenceEventType.PLAIN_JSON_FALLBACK,
            correlation_id=correlation_id,
            description="Read stored document as plain JSON",
        )

    @staticmethod
    def unreadable_document(
        message: str,
        correlation_id: UUID,
    ) -> PersistenceEvent:
        return PersistenceEvent(
            event_type=PersistenceEventType.UNREADABLE_DOCUMENT,
            severity=EventSeverity.ERROR,
            correlation_id=correlation_id,
            description="Stored document is neither encoded nor plain JSON",
            error_message=message,
        )

    @staticmethod
    def legacy_transaction_list(
        transaction_count: int,
        correlation_id: UUID,
    ) -> PersistenceEvent:
        return PersistenceEvent(
            event_type=PersistenceEventType.LEGACY_TRANSACTION_LIST,
            correlation_id=correlation_id,
            description="Upgraded a bare transaction list",
            details={"transaction_count": transaction_count},
        )

    @staticmethod
    def categories_migrated(
        category_count: int,
        correlation_id: UUID,
    ) -> PersistenceEvent:
        return PersistenceEvent(
            event_type=PersistenceEventType.CATEGORIES_MIGRATED,
            correlation_id=correlation_id,
            description=f"Migrated {category_count} legacy category names",
            details={"category_count": category_count},
        )

    @staticmethod
    def records_repaired(
        transactions: int,
        categories: int,
        skipped_categories: int,
        correlation_id: UUID,
    ) -> PersistenceEvent:
        return PersistenceEvent(
            event_type=PersistenceEventType.RECORDS_REPAIRED,
            severity=EventSeverity.WARNING,
            correlation_id=correlation_id,
            description="Repaired records that did not match the data model",
            details={
                "repaired_transactions": transactions,
                "repaired_categories": categories,
                "skipped_categories": skipped_categories,
            },
        )

    @staticmethod
    def save_completed(
        transaction_count: int,
        size: int,
        correlation_id: UUID,
    ) -> PersistenceEvent:
        return PersistenceEvent(
            event_type=PersistenceEventType.SAVE_COMPLETED,
            correlation_id=correlation_id,
            description=f"Saved {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
                "encoded_size": size,
            },
        )

    @staticmethod
    def save_failed(message: str, correlation_id: UUID) -> PersistenceEvent:
        return PersistenceEvent(
            event_type=PersistenceEventType.SAVE_FAILED,
            severity=EventSeverity.ERROR,
            correlation_id=correlation_id,
            description="App data could not be saved",
            error_message=message,
        )

    @staticmethod
    def store_unavailable(
        operation: str,
        message: str,
        correlation_id: UUID,
    ) -> PersistenceEvent:
        return PersistenceEvent(
            event_type=PersistenceEventType.STORE_UNAVAILABLE,
            severity=EventSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Blob store unavailable during {operation}",
            details={"operation": operation},
            error_message=message,
        )

    @staticmethod
    def unexpected_error(
        operation: str,
        error_type: str,
        message: str,
        correlation_id: UUID,
    ) -> PersistenceEvent:
        return PersistenceEvent(
            event_type=PersistenceEventType.UNEXPECTED_ERROR,
            severity=EventSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Unexpected {error_type} during {operation}",
            details={"operation": operation, "error_type": error_type},
            error_message=message,
        )
