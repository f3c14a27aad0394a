"""
Data Models Package

Pydantic models for the persisted data set and for the diagnostic events
emitted while loading and saving it.
"""

from mes_comptes.models.finance import (
    CATEGORY_PALETTE,
    DEFAULT_CATEGORIES,
    AppData,
    CategoryDef,
    FinancialSummary,
    Transaction,
    TransactionType,
    empty_app_data,
    find_default_category,
)
from mes_comptes.models.events import (
    EventSeverity,
    PersistenceEvent,
    PersistenceEventBuilder,
    PersistenceEventType,
)

__all__ = [
    # Finance models
    "CATEGORY_PALETTE",
    "DEFAULT_CATEGORIES",
    "AppData",
    "CategoryDef",
    "FinancialSummary",
    "Transaction",
    "TransactionType",
    "empty_app_data",
    "find_default_category",
    # Event models
    "EventSeverity",
    "PersistenceEvent",
    "PersistenceEventBuilder",
    "PersistenceEventType",
]
