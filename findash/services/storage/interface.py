"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep data in JSON files on the user's device
2. Use in-memory storage for testing
3. Keep the entity store decoupled from where bytes end up

The interface is intentionally a plain key-value store: one text value per
key. Serialization of entities is the entity store's job, not the backend's.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorage(ABC):
    """
    Abstract interface for local key-value storage.

    Any storage implementation (JSON files, in-memory, ...) must
    implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored text, or None if nothing is stored

        Raises:
            StorageReadError: If the value exists but cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Storage key
            value: Text to store

        Raises:
            StorageWriteError: If the value cannot be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if something was removed
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List stored keys."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored data exists but could not be read or parsed."""
    pass


class StorageWriteError(StorageError):
    """Data could not be written."""
    pass
