"""
Storage Services Package

Provides the key-value storage interface and its implementations.
JSON files on disk are the default backend; the in-memory backend is
used for tests.
"""

from typing import Optional

from findash.services.storage.interface import (
    KeyValueStorage,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from findash.services.storage.json_file import JsonFileStorage
from findash.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "KeyValueStorage",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
    # Factory
    "create_storage",
]


def create_storage(backend: Optional[str] = None) -> KeyValueStorage:
    """Build the storage backend named in settings (or explicitly)."""
    from findash.config import get_settings

    settings = get_settings().storage
    backend = backend or settings.backend
    if backend == "memory":
        return InMemoryStorage()
    return JsonFileStorage(settings.data_dir)
