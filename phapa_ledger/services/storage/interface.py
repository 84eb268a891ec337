"""
Abstract Storage Interface

DESIGN DECISION: The ledger persists into one slot of a key-value
store, the same shape as browser localStorage. Defining the interface
separately allows us to:
1. Keep the ledger on a local JSON file for the dashboard
2. Use in-memory storage for testing
3. Swap in another backend without touching the record store

The interface is intentionally tiny - string keys, string values.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for a string key-value store.

    Values are opaque strings; serialization is the caller's job.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            StorageWriteError: If the write fails (e.g. quota exceeded)
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is not an error.

        Raises:
            StorageWriteError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored data could not be read."""
    pass


class StorageWriteError(StorageError):
    """Data could not be written (disk full, quota exceeded, ...)."""
    pass
