"""
Persistence Logger

DESIGN DECISION: The persistence layer never raises to its callers, so
the only trace of a fallback or a failure is what gets logged here. Every
load and save gets a correlation ID so the events of one call can be
read together.

The logger itself must never break a load or a save: failures while
logging are swallowed after a best-effort report to the standard
library's logging.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from mes_comptes.models.events import (
    EventSeverity,
    PersistenceEvent,
    PersistenceEventBuilder,
)


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "info") -> None:
    """Route structlog output to stderr at the given level."""
    logging.basicConfig(format="%(message)s", level=level.upper())
    logging.getLogger("mes_comptes").setLevel(level.upper())


class PersistenceLogger:
    """Emits persistence events as structured log lines."""

    def __init__(self, name: str = "mes_comptes.persistence"):
        self._logger = structlog.get_logger(name)

    def log(self, event: PersistenceEvent) -> None:
        """Log an event at the level matching its severity."""
        try:
            log_dict = event.to_log_dict()
            if event.severity == EventSeverity.ERROR:
                self._logger.error("persistence_event", **log_dict)
            elif event.severity == EventSeverity.WARNING:
                self._logger.warning("persistence_event", **log_dict)
            elif event.severity == EventSeverity.DEBUG:
                self._logger.debug("persistence_event", **log_dict)
            else:
                self._logger.info("persistence_event", **log_dict)
        except Exception:
            logging.getLogger(__name__).exception("Failed to log persistence event")

    def log_load_started(self, store: str, correlation_id: UUID) -> None:
        self.log(PersistenceEventBuilder.load_started(store, correlation_id))

    def log_load_completed(
        self,
        transaction_count: int,
        has_categories: bool,
        correlation_id: UUID,
    ) -> None:
        self.log(PersistenceEventBuilder.load_completed(
            transaction_count=transaction_count,
            has_categories=has_categories,
            correlation_id=correlation_id,
        ))

    def log_first_run(self, correlation_id: UUID) -> None:
        self.log(PersistenceEventBuilder.first_run(correlation_id))

    def log_decode_failed(
        self,
        kind: str,
        message: str,
        correlation_id: UUID,
    ) -> None:
        self.log(PersistenceEventBuilder.decode_failed(kind, message, correlation_id))

    def log_plain_json_fallback(self, correlation_id: UUID) -> None:
        self.log(PersistenceEventBuilder.plain_json_fallback(correlation_id))

    def log_unreadable_document(self, message: str, correlation_id: UUID) -> None:
        self.log(PersistenceEventBuilder.unreadable_document(message, correlation_id))

    def log_legacy_transaction_list(
        self,
        transaction_count: int,
        correlation_id: UUID,
    ) -> None:
        self.log(PersistenceEventBuilder.legacy_transaction_list(
            transaction_count, correlation_id
        ))

    def log_categories_migrated(
        self,
        category_count: int,
        correlation_id: UUID,
    ) -> None:
        self.log(PersistenceEventBuilder.categories_migrated(
            category_count, correlation_id
        ))

    def log_records_repaired(
        self,
        transactions: int,
        categories: int,
        skipped_categories: int,
        correlation_id: UUID,
    ) -> None:
        self.log(PersistenceEventBuilder.records_repaired(
            transactions, categories, skipped_categories, correlation_id
        ))

    def log_save_completed(
        self,
        transaction_count: int,
        size: int,
        correlation_id: UUID,
    ) -> None:
        self.log(PersistenceEventBuilder.save_completed(
            transaction_count, size, correlation_id
        ))

    def log_save_failed(self, message: str, correlation_id: UUID) -> None:
        self.log(PersistenceEventBuilder.save_failed(message, correlation_id))

    def log_store_unavailable(
        self,
        operation: str,
        message: str,
        correlation_id: UUID,
    ) -> None:
        self.log(PersistenceEventBuilder.store_unavailable(
            operation, message, correlation_id
        ))

    def log_unexpected_error(
        self,
        operation: str,
        error: BaseException,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(PersistenceEventBuilder.unexpected_error(
            operation=operation,
            error_type=type(error).__name__,
            message=str(error),
            correlation_id=correlation_id or create_correlation_id(),
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use one per load or save call.
    """
    return uuid4()
