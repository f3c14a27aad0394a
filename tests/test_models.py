"""
Tests for Mes Comptes models

Test strategy:
1. Unit tests for the data model and its JSON shape
2. Unit tests for the diagnostic event models
3. No real stores in this module
"""

import pytest
from uuid import uuid4

from pydantic import ValidationError

from mes_comptes.models.finance import (
    CATEGORY_PALETTE,
    DEFAULT_CATEGORIES,
    AppData,
    CategoryDef,
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


def make_transaction(**overrides) -> Transaction:
    fields = {
        "id": "t1",
        "date": "2024-01-01",
        "amount": 10,
        "description": "Courses",
        "category": "Alimentation",
        "type": "expense",
    }
    fields.update(overrides)
    return Transaction.model_validate(fields)


class TestFinanceModels:
    """Tests for transactions, categories and app data."""

    def test_transaction_creation(self):
        """Test Transaction model creation from JSON field names."""
        tx = make_transaction(statementNumber="R-12")
        assert tx.id == "t1"
        assert tx.amount == 10.0
        assert tx.type == TransactionType.EXPENSE
        assert tx.statement_number == "R-12"

    def test_transaction_accepts_python_names(self):
        """Test snake_case attribute names are accepted too."""
        tx = Transaction(
            id="t2",
            date="2024-02-01",
            amount=-3.5,
            description="",
            category="Autre",
            type=TransactionType.INCOME,
            statement_number="7",
        )
        assert tx.statement_number == "7"

    def test_transaction_rejects_unknown_type(self):
        """Test type must be income or expense."""
        with pytest.raises(ValidationError):
            make_transaction(type="transfer")

    def test_transaction_requires_id(self):
        """Test a transaction without id is invalid."""
        with pytest.raises(ValidationError):
            Transaction.model_validate({
                "date": "2024-01-01",
                "amount": 1,
                "category": "Autre",
                "type": "income",
            })

    def test_unknown_fields_are_kept(self):
        """Test extra fields survive a dump."""
        tx = make_transaction(tags=["weekly"])
        assert tx.model_dump(mode="json", by_alias=True)["tags"] == ["weekly"]

    def test_to_document_uses_camel_case(self):
        """Test the JSON document uses the stored field names."""
        data = AppData(
            transactions=[make_transaction(statementNumber="R-1")],
            initial_balance=150.25,
        )
        doc = data.to_document()
        assert doc["initialBalance"] == 150.25
        assert doc["transactions"][0]["statementNumber"] == "R-1"
        assert doc["transactions"][0]["type"] == "expense"

    def test_to_document_omits_unset_optionals(self):
        """Test categories and statementNumber are left out when unset."""
        doc = AppData(transactions=[make_transaction()]).to_document()
        assert "categories" not in doc
        assert "statementNumber" not in doc["transactions"][0]

    def test_to_document_keeps_explicit_nulls(self):
        """Test a stored null statementNumber and null extra fields are written back."""
        tx = make_transaction(statementNumber=None, note=None)
        record = tx.to_document()
        assert record["statementNumber"] is None
        assert record["note"] is None

    def test_explicit_null_survives_reload(self):
        """Test explicit nulls are still there after a dump and re-validate."""
        data = AppData(transactions=[make_transaction(statementNumber=None, note=None)])
        reloaded = AppData.model_validate(data.to_document())
        record = reloaded.to_document()["transactions"][0]
        assert "statementNumber" in record and record["statementNumber"] is None
        assert "note" in record and record["note"] is None

    def test_empty_app_data(self):
        """Test the first-run state."""
        data = empty_app_data()
        assert data.transactions == []
        assert data.initial_balance == 0
        assert data.categories is None

    def test_summary(self):
        """Test balance, income and expense totals."""
        data = AppData(
            transactions=[
                make_transaction(id="a", amount=1200, type="income"),
                make_transaction(id="b", amount=-300, type="expense"),
                make_transaction(id="c", amount=50.5, type="expense"),
            ],
            initial_balance=100,
        )
        summary = data.summary()
        assert summary.total_income == 1200
        assert summary.total_expenses == 350.5
        assert summary.total_balance == 949.5


class TestDefaultRegistry:
    """Tests for the default category registry."""

    def test_registry_names(self):
        """Test the registry holds the historical category names in order."""
        names = [c.name for c in DEFAULT_CATEGORIES]
        assert names == [
            "Alimentation", "Logement", "Transport", "Factures", "Santé",
            "Loisirs", "Autre", "Salaire", "Investissement",
        ]

    def test_registry_ids_are_unique(self):
        """Test default ids do not collide."""
        ids = [c.id for c in DEFAULT_CATEGORIES]
        assert len(ids) == len(set(ids))

    def test_find_default_category_exact_match(self):
        """Test lookup is by exact name."""
        assert find_default_category("Santé").id == "health"
        assert find_default_category("santé") is None
        assert find_default_category("CustomCat") is None

    def test_palette_colors_are_hex(self):
        """Test palette entries look like hex colours."""
        for color in CATEGORY_PALETTE:
            assert color.startswith("#") and len(color) == 7

    def test_category_def_creation(self):
        """Test CategoryDef model creation."""
        cat = CategoryDef(id="x", name="Vacances", color="#ffffff")
        assert cat.name == "Vacances"


class TestEventModels:
    """Tests for persistence event models."""

    def test_event_creation(self):
        """Test PersistenceEvent defaults."""
        event = PersistenceEvent(
            event_type=PersistenceEventType.FIRST_RUN,
            description="No saved document",
        )
        assert event.severity == EventSeverity.INFO
        assert event.correlation_id is None

    def test_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        correlation_id = uuid4()
        event = PersistenceEventBuilder.decode_failed(
            kind="transform",
            message="Incorrect padding",
            correlation_id=correlation_id,
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "decode_failed"
        assert log_dict["severity"] == "warning"
        assert log_dict["correlation_id"] == str(correlation_id)
        assert log_dict["details"]["kind"] == "transform"
        assert log_dict["error_message"] == "Incorrect padding"

    def test_builder_save_failed(self):
        """Test PersistenceEventBuilder.save_failed."""
        correlation_id = uuid4()
        event = PersistenceEventBuilder.save_failed("disk full", correlation_id)
        assert event.event_type == PersistenceEventType.SAVE_FAILED
        assert event.severity == EventSeverity.ERROR
        assert event.correlation_id == correlation_id

    def test_builder_records_repaired(self):
        """Test PersistenceEventBuilder.records_repaired details."""
        event = PersistenceEventBuilder.records_repaired(2, 1, 3, uuid4())
        assert event.event_type == PersistenceEventType.RECORDS_REPAIRED
        assert event.severity == EventSeverity.WARNING
        assert event.details == {
            "repaired_transactions": 2,
            "repaired_categories": 1,
            "skipped_categories": 3,
        }


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
