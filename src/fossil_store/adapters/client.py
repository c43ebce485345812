"""Contract of the versioned object client the storage adapter drives."""

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict, List, Tuple

from fossil_store.versions import VersionEntry


class VersionedObjectClient(ABC):
    """Authenticated access to one bucket of a versioned object store.

    Every call takes the index of the pooled session to use; ``threads`` is
    the size of that pool. Errors are raised as-is, nothing is retried.
    """

    threads: int = 1

    @abstractmethod
    def authorize_account(self) -> None:
        """Verify the credentials against the store."""

    @abstractmethod
    def find_bucket(self, name: str) -> None:
        """Select the bucket all later calls operate on."""

    @abstractmethod
    def list_file_names(
        self,
        worker: int,
        prefix: str,
        single_name_only: bool,
        include_hidden: bool,
    ) -> List[VersionEntry]:
        """List versions under *prefix*, sorted by name, newest first per name.

        With ``include_hidden`` every version, hide markers included, is
        returned. Without it only names whose newest version is active appear,
        one entry each. ``single_name_only`` keeps entries named exactly
        *prefix*.
        """

    @abstractmethod
    def delete_file(self, worker: int, name: str, version_id: str) -> None:
        """Permanently delete one version of *name*."""

    @abstractmethod
    def hide_file(self, worker: int, name: str) -> str:
        """Add a hide marker on top of *name*; returns the marker's version id."""

    @abstractmethod
    def upload_file(self, worker: int, name: str, content: bytes, rate_limit: int) -> None:
        """Store *content* as a new active version of *name*."""

    @abstractmethod
    def download_file(self, worker: int, name: str) -> Tuple[BinaryIO, Dict[str, Any]]:
        """Open the newest active version of *name* for reading."""
