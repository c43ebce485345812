"""S3 implementation of the versioned object client."""

from fossil_store.s3.client_pool import S3ClientPool
from fossil_store.s3.versioned_client import S3VersionedClient

__all__ = ["S3ClientPool", "S3VersionedClient"]
