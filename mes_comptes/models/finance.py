"""
Core Data Models for Mes Comptes

These models define the current shape of the application's data set:
transactions, the category registry, and the opening balance.

DESIGN DECISION: JSON field names stay camelCase (initialBalance,
statementNumber) because documents written by every earlier version of the
application use them. Python code uses snake_case attributes; both names
are accepted when building a model.

Unknown fields are kept (extra="allow") so that a document written by a
newer client survives a load/save cycle untouched.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


# =============================================================================
# RECORDS
# =============================================================================

class Transaction(BaseModel):
    """
    A single recorded transaction.

    Identity is `id`. The category is a free-form identifier or name,
    not a reference that must resolve in the registry.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(
        ...,
        description="Unique transaction identifier"
    )
    date: str = Field(
        ...,
        description="ISO-8601 date of the transaction"
    )
    amount: float = Field(
        ...,
        allow_inf_nan=False,
        description="Signed amount in currency units"
    )
    description: str = Field(
        default="",
        description="Free text entered by the user"
    )
    category: str = Field(
        ...,
        description="Category identifier or name"
    )
    type: TransactionType = Field(
        ...,
        description="income or expense"
    )
    statement_number: Optional[str] = Field(
        default=None,
        alias="statementNumber",
        description="Bank statement number, when imported from one"
    )

    def to_document(self) -> dict:
        """
        Convert to the JSON record shape.

        statementNumber is left out only when it was never given; an
        explicit null and null-valued extra fields are written back.
        """
        document = self.model_dump(mode="json", by_alias=True)
        if self.statement_number is None and "statement_number" not in self.model_fields_set:
            del document["statementNumber"]
        return document


class CategoryDef(BaseModel):
    """A category registry entry."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., description="Unique category identifier")
    name: str = Field(..., description="Display name")
    color: str = Field(..., description="Hex colour, e.g. #22c55e")


class FinancialSummary(BaseModel):
    """Totals derived from an AppData value."""
    total_balance: float
    total_income: float
    total_expenses: float


class AppData(BaseModel):
    """
    The whole persisted data set.

    `categories` is optional: None means the caller should apply the
    default registry.
    """
    model_config = ConfigDict(populate_by_name=True)

    transactions: list[Transaction] = Field(
        default_factory=list,
        description="Ordered transactions, never None"
    )
    initial_balance: float = Field(
        default=0.0,
        allow_inf_nan=False,
        alias="initialBalance",
        description="Opening balance before any transaction"
    )
    categories: Optional[list[CategoryDef]] = Field(
        default=None,
        description="Category registry, None to use the defaults"
    )

    def to_document(self) -> dict:
        """
        Convert to the JSON document shape.

        categories is left out when None, matching what the application
        has always written for "use the default registry".
        """
        document = {
            "transactions": [tx.to_document() for tx in self.transactions],
            "initialBalance": self.initial_balance,
        }
        if self.categories is not None:
            document["categories"] = [
                category.model_dump(mode="json") for category in self.categories
            ]
        return document

    def summary(self) -> FinancialSummary:
        """Compute balance, income and expense totals."""
        income = sum(
            abs(tx.amount) for tx in self.transactions
            if tx.type == TransactionType.INCOME
        )
        expenses = sum(
            abs(tx.amount) for tx in self.transactions
            if tx.type == TransactionType.EXPENSE
        )
        return FinancialSummary(
            total_balance=self.initial_balance + income - expenses,
            total_income=income,
            total_expenses=expenses,
        )


def empty_app_data() -> AppData:
    """The first-run state: no transactions, zero balance, default categories."""
    return AppData(transactions=[], initial_balance=0.0, categories=None)


# =============================================================================
# DEFAULT REGISTRY
# =============================================================================

# Names are the ones older versions stored as bare strings, in their order.
DEFAULT_CATEGORIES: tuple[CategoryDef, ...] = (
    CategoryDef(id="food", name="Alimentation", color="#22c55e"),
    CategoryDef(id="housing", name="Logement", color="#3b82f6"),
    CategoryDef(id="transport", name="Transport", color="#f59e0b"),
    CategoryDef(id="utilities", name="Factures", color="#ef4444"),
    CategoryDef(id="health", name="Santé", color="#ec4899"),
    CategoryDef(id="leisure", name="Loisirs", color="#8b5cf6"),
    CategoryDef(id="other", name="Autre", color="#6b7280"),
    CategoryDef(id="salary", name="Salaire", color="#10b981"),
    CategoryDef(id="investment", name="Investissement", color="#0ea5e9"),
)

# Colours for migrated categories that are not in the default registry
CATEGORY_PALETTE: tuple[str, ...] = (
    "#f97316",
    "#14b8a6",
    "#a855f7",
    "#eab308",
    "#06b6d4",
    "#f43f5e",
    "#84cc16",
    "#6366f1",
)


def find_default_category(name: str) -> Optional[CategoryDef]:
    """Look up a default category by exact name."""
    for category in DEFAULT_CATEGORIES:
        if category.name == name:
            return category
    return None
