"""Diagnostic logging package."""

from mes_comptes.audit.logger import (
    PersistenceLogger,
    configure_logging,
    create_correlation_id,
)

__all__ = ["PersistenceLogger", "configure_logging", "create_correlation_id"]
