"""Versioned object client backed by an S3 bucket with versioning enabled.

S3 delete markers play the role of hide markers: deleting a key without a
version id stacks a marker on top of its history, deleting with a version id
removes that one version for good.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, BinaryIO, Dict, List, Optional, Tuple

from fossil_store.adapters.client import VersionedObjectClient
from fossil_store.exceptions import BucketNotVersionedError, StorageError
from fossil_store.s3.client_pool import S3ClientPool
from fossil_store.utils.ratelimit import RateLimitedReader
from fossil_store.versions import VersionAction, VersionEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _ListedVersion:
    entry: VersionEntry
    is_latest: bool
    last_modified: datetime

    def sort_key(self) -> Tuple[bool, float, bool]:
        # Newest first. S3 timestamps have one-second resolution, so on a tie
        # the delete marker goes first: it was stacked on the version it hides.
        return (not self.is_latest, -self.last_modified.timestamp(), not self.entry.is_hidden)


class S3VersionedClient(VersionedObjectClient):
    """Versioned object client for one S3 bucket, one pooled client per worker."""

    def __init__(self, pool: S3ClientPool):
        self.pool = pool
        self.threads = pool.threads
        self.bucket_name: Optional[str] = None

    def _bucket(self) -> str:
        if self.bucket_name is None:
            raise StorageError("No bucket selected; call find_bucket() first")
        return self.bucket_name

    def authorize_account(self) -> None:
        response = self.pool.get_client(0).list_buckets()
        logger.info(f"Authorized; account can see {len(response.get('Buckets', []))} bucket(s)")

    def find_bucket(self, name: str) -> None:
        client = self.pool.get_client(0)
        client.head_bucket(Bucket=name)
        status = client.get_bucket_versioning(Bucket=name).get("Status")
        if status != "Enabled":
            raise BucketNotVersionedError(
                f"Bucket '{name}' has versioning status {status!r}; hide markers need 'Enabled'"
            )
        self.bucket_name = name
        logger.info(f"Using S3 bucket: {name}")

    def list_file_names(
        self,
        worker: int,
        prefix: str,
        single_name_only: bool,
        include_hidden: bool,
    ) -> List[VersionEntry]:
        client = self.pool.get_client(worker)
        by_key: Dict[str, List[_ListedVersion]] = {}

        paginator = client.get_paginator("list_object_versions")
        for page in paginator.paginate(Bucket=self._bucket(), Prefix=prefix):
            for obj in page.get("Versions", []):
                by_key.setdefault(obj["Key"], []).append(
                    _ListedVersion(
                        entry=VersionEntry(
                            name=obj["Key"],
                            version_id=obj["VersionId"],
                            action=VersionAction.ACTIVE,
                            size=obj.get("Size", 0),
                        ),
                        is_latest=obj.get("IsLatest", False),
                        last_modified=obj["LastModified"],
                    )
                )
            for marker in page.get("DeleteMarkers", []):
                by_key.setdefault(marker["Key"], []).append(
                    _ListedVersion(
                        entry=VersionEntry(
                            name=marker["Key"],
                            version_id=marker["VersionId"],
                            action=VersionAction.HIDDEN,
                        ),
                        is_latest=marker.get("IsLatest", False),
                        last_modified=marker["LastModified"],
                    )
                )

        entries: List[VersionEntry] = []
        for key in sorted(by_key):
            if single_name_only and key != prefix:
                continue
            versions = sorted(by_key[key], key=_ListedVersion.sort_key)
            if include_hidden:
                entries.extend(version.entry for version in versions)
            elif not versions[0].entry.is_hidden:
                entries.append(versions[0].entry)

        logger.debug(
            f"Listed {len(entries)} version(s) under '{prefix}' on worker {worker} "
            f"(single={single_name_only}, hidden={include_hidden})"
        )
        return entries

    def delete_file(self, worker: int, name: str, version_id: str) -> None:
        self.pool.get_client(worker).delete_object(
            Bucket=self._bucket(),
            Key=name,
            VersionId=version_id,
        )
        logger.debug(f"Deleted version {version_id} of '{name}'")

    def hide_file(self, worker: int, name: str) -> str:
        response = self.pool.get_client(worker).delete_object(Bucket=self._bucket(), Key=name)
        version_id = response.get("VersionId", "")
        logger.debug(f"Hid '{name}' under marker {version_id}")
        return version_id

    def upload_file(self, worker: int, name: str, content: bytes, rate_limit: int) -> None:
        body = RateLimitedReader(content, rate_limit, f"upload:{worker}") if rate_limit > 0 else content
        self.pool.get_client(worker).put_object(
            Bucket=self._bucket(),
            Key=name,
            Body=body,
            ContentLength=len(content),
            ContentType="application/octet-stream",
        )
        logger.debug(f"Uploaded {len(content)} bytes to '{name}'")

    def download_file(self, worker: int, name: str) -> Tuple[BinaryIO, Dict[str, Any]]:
        response = self.pool.get_client(worker).get_object(Bucket=self._bucket(), Key=name)
        metadata = {
            "version_id": response.get("VersionId"),
            "size": response.get("ContentLength", 0),
            "etag": response.get("ETag", "").strip('"'),
        }
        return response["Body"], metadata
