"""
Storage Services Package

Provides the key-value storage interface and its local implementations.
"""

from phapa_ledger.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from phapa_ledger.services.storage.local import (
    InMemoryStorage,
    JsonFileStorage,
)

__all__ = [
    # Interfaces
    "KeyValueStorageInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
