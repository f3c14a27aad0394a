"""
Schema Normalizer

Turns any decoded JSON value into the current AppData shape. Three
generations of the document exist, each adding fields to the previous one
without renaming anything:

1. A bare JSON array of transactions.
2. An object {transactions, initialBalance, categories}, where categories
   is a list of names.
3. The same object, where categories is a list of {id, name, color}.

DESIGN DECISION: Detection is an explicit, ordered chain of shape
detectors. Each detector returns a result for the shape it recognises or
None, and the chain falls through to the empty state. Nothing in here
raises: a value that matches no shape normalises to the empty state.

Transactions are never dropped. A stored record that does not fit the
model (numeric id, missing category, unknown type...) is repaired: the
offending fields get usable values and the values they replaced are kept
under "repairedFrom" on the same record, so the next save writes them
back.

Migrating an already-migrated document is a no-op, so normalize() can be
applied any number of times.
"""

import json
import math
from enum import Enum
from typing import Any, Callable, Optional
from uuid import NAMESPACE_URL, uuid5

from pydantic import BaseModel, ValidationError

from mes_comptes.models.finance import (
    CATEGORY_PALETTE,
    AppData,
    CategoryDef,
    Transaction,
    TransactionType,
    empty_app_data,
    find_default_category,
)


# Namespaces for ids synthesised during migration
LEGACY_CATEGORY_NAMESPACE = uuid5(NAMESPACE_URL, "mes-comptes:legacy-category")
LEGACY_TRANSACTION_NAMESPACE = uuid5(NAMESPACE_URL, "mes-comptes:legacy-transaction")

# Extra field holding the stored values a repair replaced
REPAIRED_FROM_FIELD = "repairedFrom"

# Category given to a transaction stored without a usable one
FALLBACK_CATEGORY = "Autre"


class DataShape(str, Enum):
    """Which generation of the document was recognised."""
    TRANSACTION_LIST = "transaction_list"
    APP_DATA = "app_data"
    UNRECOGNIZED = "unrecognized"


class CategoryFormat(str, Enum):
    """How the categories of the document were stored."""
    ABSENT = "absent"
    LEGACY_NAMES = "legacy_names"
    STRUCTURED = "structured"


class NormalizationResult(BaseModel):
    """Normalised data plus what it took to get there."""
    data: AppData
    shape: DataShape
    category_format: CategoryFormat = CategoryFormat.ABSENT
    repaired_transactions: int = 0
    repaired_categories: int = 0
    # Category entries with nothing to recover (numbers, null, nested lists)
    skipped_categories: int = 0

    @property
    def migrated(self) -> bool:
        """True when an older generation was upgraded."""
        return (
            self.shape == DataShape.TRANSACTION_LIST
            or self.category_format == CategoryFormat.LEGACY_NAMES
        )


# =============================================================================
# FIELD HELPERS
# =============================================================================

def _as_finite_float(value: Any, allow_text: bool = False) -> Optional[float]:
    """The value as a finite float, or None when it is not one."""
    if isinstance(value, bool):
        return None
    if allow_text and isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _as_text(value: Any) -> Optional[str]:
    """Strings as-is, numbers as their text; anything else is None."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        return None
    return str(int(value)) if value.is_integer() else repr(value)


def _json_safe(value: Any) -> Any:
    """Replace non-finite floats, which JSON cannot carry, by their text."""
    if isinstance(value, float) and not math.isfinite(value):
        return repr(value)
    if isinstance(value, list):
        return [_json_safe(item) for item in value]
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    return value


def legacy_category_id(index: int, name: str) -> str:
    """Stable id for a migrated category that is not a default."""
    return str(uuid5(LEGACY_CATEGORY_NAMESPACE, f"{index}:{name}"))


def legacy_transaction_id(index: int, record: Any) -> str:
    """Stable id for a stored transaction that had no usable one."""
    key = json.dumps(_json_safe(record), sort_keys=True, default=str)
    return str(uuid5(LEGACY_TRANSACTION_NAMESPACE, f"{index}:{key}"))


# =============================================================================
# TRANSACTION REPAIR
# =============================================================================

def _repair_transaction(index: int, item: Any) -> Transaction:
    """
    Build a valid transaction out of a stored record that failed validation.

    Every replaced value is recorded under REPAIRED_FROM_FIELD. A value
    that is not an object at all is kept whole under "record".
    """
    if isinstance(item, dict):
        record = _json_safe(item)
        replaced = {}
    else:
        record = {}
        replaced = {"record": _json_safe(item)}

    def replace(field: str, value: Any) -> None:
        if field in record:
            replaced[field] = record[field]
        record[field] = value

    tx_id = _as_text(record.get("id"))
    if not tx_id:
        replace("id", legacy_transaction_id(index, item))
    elif tx_id != record["id"]:
        replace("id", tx_id)

    if not isinstance(record.get("date"), str):
        replace("date", "")

    stored_amount = record.get("amount")
    amount = _as_finite_float(stored_amount, allow_text=True)
    if amount is None:
        replace("amount", 0.0)
    elif _as_finite_float(stored_amount) is None:
        replace("amount", amount)

    if "description" in record and not isinstance(record["description"], str):
        replace("description", _as_text(record["description"]) or "")

    if not isinstance(record.get("category"), str):
        replace("category", _as_text(record.get("category")) or FALLBACK_CATEGORY)

    stored_type = record.get("type")
    known_types = {t.value for t in TransactionType}
    if stored_type not in known_types:
        if isinstance(stored_type, str) and stored_type.strip().lower() in known_types:
            replace("type", stored_type.strip().lower())
        elif record["amount"] < 0:
            replace("type", TransactionType.EXPENSE.value)
        else:
            replace("type", TransactionType.INCOME.value)

    statement = record.get("statementNumber")
    if statement is not None and not isinstance(statement, str):
        replace("statementNumber", _as_text(statement))

    if replaced:
        previous = record.get(REPAIRED_FROM_FIELD)
        if isinstance(previous, dict):
            replaced = {**previous, **replaced}
        record[REPAIRED_FROM_FIELD] = replaced

    try:
        return Transaction.model_validate(record)
    except (ValueError, OverflowError):
        # Fields under their Python names can still clash; keep the lot.
        return Transaction(
            id=legacy_transaction_id(index, item),
            date="",
            amount=0.0,
            category=FALLBACK_CATEGORY,
            type=TransactionType.INCOME,
            **{REPAIRED_FROM_FIELD: {"record": _json_safe(item)}},
        )


def _load_transactions(items: list) -> tuple[list[Transaction], int]:
    """Validate each entry, repairing the ones that do not fit. Order is kept."""
    transactions = []
    repaired = 0
    for index, item in enumerate(items):
        try:
            transactions.append(Transaction.model_validate(item))
        except (ValueError, OverflowError):
            transactions.append(_repair_transaction(index, item))
            repaired += 1
    return transactions, repaired


# =============================================================================
# CATEGORY DETECTORS
# =============================================================================

# (categories, format, repaired, skipped)
CategoryResult = tuple[list[CategoryDef], CategoryFormat, int, int]


def _category_from_name(
    index: int,
    name: str,
    used_default_ids: set[str],
) -> CategoryDef:
    """
    Map one legacy name to a registry entry.

    A default name reuses the default's id and colour the first time it
    appears; repeats are treated like custom names so ids stay unique.
    """
    default = find_default_category(name)
    if default is not None and default.id not in used_default_ids:
        used_default_ids.add(default.id)
        return CategoryDef(id=default.id, name=name, color=default.color)
    return CategoryDef(
        id=legacy_category_id(index, name),
        name=name,
        color=CATEGORY_PALETTE[index % len(CATEGORY_PALETTE)],
    )


def _repair_category(index: int, item: dict) -> CategoryDef:
    """Build a valid entry out of a stored record that failed validation."""
    record = _json_safe(item)
    replaced = {}

    name = _as_text(record.get("name"))
    if name is None:
        name = _as_text(record.get("id")) or f"Catégorie {index + 1}"
    if name != record.get("name"):
        if "name" in record:
            replaced["name"] = record["name"]
        record["name"] = name

    category_id = _as_text(record.get("id"))
    if not category_id:
        category_id = legacy_category_id(index, name)
    if category_id != record.get("id"):
        if "id" in record:
            replaced["id"] = record["id"]
        record["id"] = category_id

    if not isinstance(record.get("color"), str):
        if "color" in record:
            replaced["color"] = record["color"]
        record["color"] = CATEGORY_PALETTE[index % len(CATEGORY_PALETTE)]

    if replaced:
        record[REPAIRED_FROM_FIELD] = replaced
    return CategoryDef.model_validate(record)


def _detect_legacy_names(items: list) -> Optional[CategoryResult]:
    """
    A list whose first element is a string holds bare names.

    Names found in the default registry (exact match) reuse its id and
    colour. Other names get a synthesised id and the palette colour at
    their position. Non-string elements are skipped but still take up
    their position.
    """
    if not isinstance(items[0], str):
        return None

    categories = []
    used_default_ids: set[str] = set()
    skipped = 0
    for index, name in enumerate(items):
        if not isinstance(name, str):
            skipped += 1
            continue
        categories.append(_category_from_name(index, name, used_default_ids))
    return categories, CategoryFormat.LEGACY_NAMES, 0, skipped


def _detect_structured(items: list) -> Optional[CategoryResult]:
    """
    Anything else is taken as CategoryDef records and passed through.

    Records that do not validate are repaired; stray bare names are
    migrated like legacy names.
    """
    categories = []
    used_default_ids = {
        item["id"] for item in items
        if isinstance(item, dict) and isinstance(item.get("id"), str)
    }
    repaired = 0
    skipped = 0
    for index, item in enumerate(items):
        if isinstance(item, str):
            categories.append(_category_from_name(index, item, used_default_ids))
            repaired += 1
            continue
        if not isinstance(item, dict):
            skipped += 1
            continue
        try:
            categories.append(CategoryDef.model_validate(item))
        except ValidationError:
            categories.append(_repair_category(index, item))
            repaired += 1
    return categories, CategoryFormat.STRUCTURED, repaired, skipped


CATEGORY_DETECTORS: tuple[Callable[[list], Optional[CategoryResult]], ...] = (
    _detect_legacy_names,
    _detect_structured,
)


def migrate_categories(raw: Any) -> CategoryResult:
    """
    Upgrade a stored categories value.

    Absent, empty, or non-list values yield an empty list with format
    ABSENT, which callers turn into "use the defaults".
    """
    if not isinstance(raw, list) or not raw:
        return [], CategoryFormat.ABSENT, 0, 0
    for detector in CATEGORY_DETECTORS:
        result = detector(raw)
        if result is not None:
            return result
    return [], CategoryFormat.ABSENT, 0, len(raw)


# =============================================================================
# DOCUMENT DETECTORS
# =============================================================================

def _detect_transaction_list(raw: Any) -> Optional[NormalizationResult]:
    """Oldest format: the document is just the transaction array."""
    if not isinstance(raw, list):
        return None
    transactions, repaired = _load_transactions(raw)
    return NormalizationResult(
        data=AppData(transactions=transactions, initial_balance=0.0),
        shape=DataShape.TRANSACTION_LIST,
        repaired_transactions=repaired,
    )


def _detect_app_data(raw: Any) -> Optional[NormalizationResult]:
    """Object format, with categories in either generation."""
    if not isinstance(raw, dict):
        return None

    stored_transactions = raw.get("transactions")
    if isinstance(stored_transactions, list):
        transactions, repaired = _load_transactions(stored_transactions)
    else:
        transactions, repaired = [], 0

    initial_balance = _as_finite_float(raw.get("initialBalance"))

    categories, category_format, repaired_categories, skipped_categories = (
        migrate_categories(raw.get("categories"))
    )

    return NormalizationResult(
        data=AppData(
            transactions=transactions,
            initial_balance=initial_balance if initial_balance is not None else 0.0,
            categories=categories or None,
        ),
        shape=DataShape.APP_DATA,
        category_format=category_format if categories else CategoryFormat.ABSENT,
        repaired_transactions=repaired,
        repaired_categories=repaired_categories,
        skipped_categories=skipped_categories,
    )


DOCUMENT_DETECTORS: tuple[Callable[[Any], Optional[NormalizationResult]], ...] = (
    _detect_transaction_list,
    _detect_app_data,
)


# =============================================================================
# PUBLIC API
# =============================================================================

def normalize_detailed(raw: Any) -> NormalizationResult:
    """Normalise `raw` and report which shape and migrations applied."""
    if isinstance(raw, AppData):
        raw = raw.to_document()
    for detector in DOCUMENT_DETECTORS:
        result = detector(raw)
        if result is not None:
            return result
    return NormalizationResult(data=empty_app_data(), shape=DataShape.UNRECOGNIZED)


def normalize(raw: Any) -> AppData:
    """Normalise any decoded JSON value (or AppData) to the current shape."""
    return normalize_detailed(raw).data
