"""
Adapter layer for Fossil Store.

Contains the generic storage interface the backup engine programs against and
the adapter that maps it onto a versioned object store.
"""

from fossil_store.adapters.base import FileInfo, Storage, StorageCapabilities
from fossil_store.adapters.client import VersionedObjectClient
from fossil_store.adapters.versioned import VersionedStorage, create_versioned_storage

__all__ = [
    "FileInfo",
    "Storage",
    "StorageCapabilities",
    "VersionedObjectClient",
    "VersionedStorage",
    "create_versioned_storage",
]
