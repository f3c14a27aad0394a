"""
Key/Value Blob Store

Stores the document under one key of a key/value namespace, the way a
browser build keeps it in local storage. Any MutableMapping[str, str]
works as the namespace: a plain dict (in-memory, handy in tests) or a
shelf file for persistence across runs.
"""

import shelve
from collections.abc import MutableMapping
from pathlib import Path
from typing import Optional, Union

from mes_comptes.services.storage.interface import (
    BlobStoreInterface,
    StoreUnavailable,
)

DEFAULT_STORAGE_KEY = "mes_comptes_data_v1"


class KeyValueBlobStore(BlobStoreInterface):
    """Single-key store over a mapping namespace."""

    def __init__(
        self,
        namespace: Optional[MutableMapping] = None,
        key: str = DEFAULT_STORAGE_KEY,
    ):
        self._namespace = namespace if namespace is not None else {}
        self._key = key

    @classmethod
    def open_shelf(
        cls,
        path: Union[str, Path],
        key: str = DEFAULT_STORAGE_KEY,
    ) -> "KeyValueBlobStore":
        """Create a store backed by a shelf file, writing through on every set."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            namespace = shelve.open(str(path), writeback=False)
        except OSError as e:
            raise StoreUnavailable(f"Failed to open shelf {path}: {e}") from e
        return cls(namespace, key)

    @property
    def key(self) -> str:
        return self._key

    @property
    def location(self) -> str:
        return f"key:{self._key}"

    async def read(self) -> Optional[str]:
        try:
            value = self._namespace.get(self._key)
        except Exception as e:
            raise StoreUnavailable(f"Failed to read key {self._key}: {e}") from e
        if value is not None and not isinstance(value, str):
            raise StoreUnavailable(
                f"Key {self._key} holds {type(value).__name__}, expected text"
            )
        return value

    async def write(self, text: str) -> bool:
        try:
            self._namespace[self._key] = text
            sync = getattr(self._namespace, "sync", None)
            if callable(sync):
                sync()
        except Exception as e:
            raise StoreUnavailable(f"Failed to write key {self._key}: {e}") from e
        return True

    def close(self) -> None:
        """Close the underlying namespace if it supports closing."""
        close = getattr(self._namespace, "close", None)
        if callable(close):
            close()
