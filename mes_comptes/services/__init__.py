"""Services package."""

from mes_comptes.services.storage import (
    DEFAULT_STORAGE_KEY,
    BlobStoreInterface,
    FileBlobStore,
    KeyValueBlobStore,
    StorageError,
    StoreUnavailable,
)

__all__ = [
    "DEFAULT_STORAGE_KEY",
    "BlobStoreInterface",
    "FileBlobStore",
    "KeyValueBlobStore",
    "StorageError",
    "StoreUnavailable",
]
