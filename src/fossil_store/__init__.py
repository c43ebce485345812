"""
Fossil Store

Storage backend that presents a versioned S3 bucket to a backup engine as a
flat filesystem, projecting hide markers as ``.fsl`` fossil names.
"""

from fossil_store.adapters import Storage, StorageCapabilities, VersionedStorage, create_versioned_storage
from fossil_store.exceptions import BucketNotVersionedError, StorageContractError, StorageError

__version__ = "0.1.0"

__all__ = [
    "BucketNotVersionedError",
    "Storage",
    "StorageCapabilities",
    "StorageContractError",
    "StorageError",
    "VersionedStorage",
    "__version__",
    "create_versioned_storage",
]
