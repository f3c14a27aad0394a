"""
Abstract Blob Store Interface

DESIGN DECISION: The persistence layer only needs two primitives against
an opaque text store: read the whole document, overwrite the whole
document. Anything that can do both (a file, a key in a key/value
namespace, an in-memory dict for tests) can back the application.

"Absent" is not an error: read() returns None when nothing was ever
saved. Every other failure is raised as a StorageError subclass.
"""

from abc import ABC, abstractmethod
from typing import Optional


class BlobStoreInterface(ABC):
    """
    Abstract interface for a single-document text store.

    Implementations overwrite the whole document on every write and
    perform no merging: the last writer wins.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable description of where the document lives."""
        pass

    @abstractmethod
    async def read(self) -> Optional[str]:
        """
        Read the stored document.

        Returns:
            The stored text, or None if nothing has been saved yet

        Raises:
            StoreUnavailable: If the store exists but cannot be read
        """
        pass

    @abstractmethod
    async def write(self, text: str) -> bool:
        """
        Replace the stored document.

        A failed write must leave the previous document intact.

        Args:
            text: The full document to store

        Returns:
            True if written successfully

        Raises:
            StoreUnavailable: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for blob store operations."""
    pass


class StoreUnavailable(StorageError):
    """The store could not be read or written."""
    pass
