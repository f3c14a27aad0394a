"""
Persistence Facade

Ties the codec, the normaliser and a blob store into the two calls the
rest of the application uses:

    data = await service.load_app_data()
    ok = await service.save_app_data(data)

DESIGN DECISION: Both calls are total. load_app_data() always returns an
AppData (the empty state when nothing usable is stored) and
save_app_data() always returns a bool. Which failure happened is logged
with a correlation ID, not raised.

Load order:
1. Nothing stored (or empty text) -> empty state, the normal first run.
2. Base64 document -> decode, normalise.
3. Not base64 -> parse as plain JSON (documents from before encoding
   existed), normalise.
4. Neither -> empty state.

The service holds no lock. Callers issue one load or save at a time; the
store overwrites the whole document, so the last save wins.
"""

from typing import Optional

from mes_comptes.audit import PersistenceLogger, configure_logging, create_correlation_id
from mes_comptes.config import Settings, StorageSettings, get_settings
from mes_comptes.models.finance import AppData, empty_app_data
from mes_comptes.persistence.codec import (
    DecodeFailure,
    decode,
    encode,
    parse_plain_json,
)
from mes_comptes.persistence.normalizer import (
    CategoryFormat,
    DataShape,
    normalize_detailed,
)
from mes_comptes.services.storage import (
    BlobStoreInterface,
    FileBlobStore,
    KeyValueBlobStore,
    StorageError,
)


class PersistenceService:
    """Loads and saves the whole app data document."""

    def __init__(
        self,
        store: BlobStoreInterface,
        logger: Optional[PersistenceLogger] = None,
    ):
        self._store = store
        self._logger = logger or PersistenceLogger()

    @property
    def store(self) -> BlobStoreInterface:
        return self._store

    async def load_app_data(self) -> AppData:
        """Load, decode and migrate the stored document. Never raises."""
        correlation_id = create_correlation_id()
        self._logger.log_load_started(self._store.location, correlation_id)

        try:
            text = await self._store.read()
            if not text:
                self._logger.log_first_run(correlation_id)
                return empty_app_data()

            outcome = decode(text)
            if isinstance(outcome, DecodeFailure):
                self._logger.log_decode_failed(
                    outcome.kind.value, outcome.message, correlation_id
                )
                outcome = parse_plain_json(text)
                if isinstance(outcome, DecodeFailure):
                    self._logger.log_unreadable_document(
                        outcome.message, correlation_id
                    )
                    return empty_app_data()
                self._logger.log_plain_json_fallback(correlation_id)

            result = normalize_detailed(outcome.value)
        except StorageError as e:
            self._logger.log_store_unavailable("load", str(e), correlation_id)
            return empty_app_data()
        except Exception as e:
            self._logger.log_unexpected_error("load", e, correlation_id)
            return empty_app_data()

        if result.shape == DataShape.TRANSACTION_LIST:
            self._logger.log_legacy_transaction_list(
                len(result.data.transactions), correlation_id
            )
        if result.category_format == CategoryFormat.LEGACY_NAMES:
            self._logger.log_categories_migrated(
                len(result.data.categories or []), correlation_id
            )
        if (
            result.repaired_transactions
            or result.repaired_categories
            or result.skipped_categories
        ):
            self._logger.log_records_repaired(
                result.repaired_transactions,
                result.repaired_categories,
                result.skipped_categories,
                correlation_id,
            )
        self._logger.log_load_completed(
            transaction_count=len(result.data.transactions),
            has_categories=result.data.categories is not None,
            correlation_id=correlation_id,
        )
        return result.data

    async def save_app_data(self, data: AppData) -> bool:
        """Encode and overwrite the stored document. Never raises."""
        correlation_id = create_correlation_id()
        try:
            encoded = encode(data)
            written = await self._store.write(encoded)
        except StorageError as e:
            self._logger.log_store_unavailable("save", str(e), correlation_id)
            self._logger.log_save_failed(str(e), correlation_id)
            return False
        except Exception as e:
            self._logger.log_unexpected_error("save", e, correlation_id)
            self._logger.log_save_failed(str(e), correlation_id)
            return False

        if not written:
            self._logger.log_save_failed("store rejected the write", correlation_id)
            return False

        self._logger.log_save_completed(
            transaction_count=len(data.transactions),
            size=len(encoded),
            correlation_id=correlation_id,
        )
        return True


def create_blob_store(settings: Optional[StorageSettings] = None) -> BlobStoreInterface:
    """
    Build the configured blob store.

    Called once at process start; the result is injected into
    PersistenceService.
    """
    settings = settings or get_settings().storage
    if settings.backend == "key_value":
        if settings.shelf_path is not None:
            return KeyValueBlobStore.open_shelf(settings.shelf_path, settings.storage_key)
        return KeyValueBlobStore(key=settings.storage_key)
    return FileBlobStore(settings.data_file_path)


def create_persistence_service(
    settings: Optional[Settings] = None,
) -> PersistenceService:
    """
    Factory function wiring settings, logging and the store together.

    Returns:
        A ready PersistenceService
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)
    return PersistenceService(create_blob_store(settings.storage))
