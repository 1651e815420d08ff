"""Services package."""

from findash.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    StorageError,
    StorageReadError,
    StorageWriteError,
    create_storage,
)

__all__ = [
    # Storage services
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "create_storage",
]
