"""
Storage Services Package

Provides the abstract blob store interface and its two concrete backends:
a process-local file and a key in a key/value namespace.
"""

from mes_comptes.services.storage.interface import (
    BlobStoreInterface,
    StorageError,
    StoreUnavailable,
)
from mes_comptes.services.storage.file_store import FileBlobStore
from mes_comptes.services.storage.key_value import (
    DEFAULT_STORAGE_KEY,
    KeyValueBlobStore,
)

__all__ = [
    # Interface
    "BlobStoreInterface",
    # Exceptions
    "StorageError",
    "StoreUnavailable",
    # Implementations
    "DEFAULT_STORAGE_KEY",
    "FileBlobStore",
    "KeyValueBlobStore",
]
