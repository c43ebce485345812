"""In-memory versioned object client for adapter tests."""
import io
import itertools
from typing import Dict, List

import pytest
from botocore.exceptions import ClientError

from fossil_store.adapters import VersionedObjectClient, VersionedStorage
from fossil_store.versions import VersionAction, VersionEntry


class InMemoryVersionedClient(VersionedObjectClient):
    """Keeps every version of every name, newest first, and records calls."""

    def __init__(self, threads: int = 1):
        self.threads = threads
        self.bucket_name = None
        self.authorized = False
        self.versions: Dict[str, List[VersionEntry]] = {}
        self.contents: Dict[str, bytes] = {}
        self.deleted: List[tuple] = []
        self.upload_rate_limits: List[int] = []
        self._ids = itertools.count(1)

    def authorize_account(self) -> None:
        self.authorized = True

    def find_bucket(self, name: str) -> None:
        self.bucket_name = name

    def list_file_names(self, worker, prefix, single_name_only, include_hidden):
        entries = []
        for name in sorted(self.versions):
            if not name.startswith(prefix) or (single_name_only and name != prefix):
                continue
            versions = self.versions[name]
            if include_hidden:
                entries.extend(versions)
            elif not versions[0].is_hidden:
                entries.append(versions[0])
        return entries

    def delete_file(self, worker, name, version_id):
        self.deleted.append((name, version_id))
        remaining = [v for v in self.versions.get(name, []) if v.version_id != version_id]
        if remaining:
            self.versions[name] = remaining
        else:
            self.versions.pop(name, None)

    def hide_file(self, worker, name):
        version_id = f"v{next(self._ids)}"
        marker = VersionEntry(name=name, version_id=version_id, action=VersionAction.HIDDEN)
        self.versions.setdefault(name, []).insert(0, marker)
        return version_id

    def upload_file(self, worker, name, content, rate_limit):
        version_id = f"v{next(self._ids)}"
        entry = VersionEntry(
            name=name,
            version_id=version_id,
            action=VersionAction.ACTIVE,
            size=len(content),
        )
        self.versions.setdefault(name, []).insert(0, entry)
        self.contents[version_id] = content
        self.upload_rate_limits.append(rate_limit)

    def download_file(self, worker, name):
        versions = self.versions.get(name)
        if not versions or versions[0].is_hidden:
            raise ClientError(
                {"Error": {"Code": "NoSuchKey", "Message": f"{name} not found"}},
                "GetObject",
            )
        newest = versions[0]
        return io.BytesIO(self.contents[newest.version_id]), {"version_id": newest.version_id}

    def put(self, name: str, content: bytes) -> None:
        """Upload without going through the adapter."""
        self.upload_file(0, name, content, 0)


@pytest.fixture
def memory_client():
    return InMemoryVersionedClient(threads=4)


@pytest.fixture
def storage(memory_client):
    return VersionedStorage(memory_client)
