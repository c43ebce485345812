"""
Storage interface consumed by the backup engine.

Every backend exposes the same flat-filesystem operations plus a static
capability descriptor the engine uses to adapt its own behaviour.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, List, NamedTuple, Tuple


@dataclass(frozen=True)
class StorageCapabilities:
    """What a backend guarantees.

    Attributes:
        cache_needed: Engine should keep a local snapshot cache
        move_implemented: ``move_file`` is supported
        strong_consistent: Reads observe preceding writes immediately
        fast_listing: Bulk prefix listing exists, no per-file stat loop needed
    """
    cache_needed: bool
    move_implemented: bool
    strong_consistent: bool
    fast_listing: bool


class FileInfo(NamedTuple):
    exists: bool
    is_dir: bool
    size: int


class Storage(ABC):
    """Base class for storage backends.

    All operations take the index of the worker making the call; backends
    use it to pick a pooled connection. Rate limits are global budgets in
    KB/s (0 means unlimited).
    """

    capabilities: StorageCapabilities = StorageCapabilities(
        cache_needed=False,
        move_implemented=False,
        strong_consistent=False,
        fast_listing=False,
    )

    download_rate_limit: int = 0
    upload_rate_limit: int = 0

    def set_rate_limits(self, download_rate_limit: int, upload_rate_limit: int) -> None:
        self.download_rate_limit = download_rate_limit
        self.upload_rate_limit = upload_rate_limit

    @abstractmethod
    def list_files(self, worker: int, dir: str) -> Tuple[List[str], List[int]]:
        """List files and subdirectories directly under *dir*.

        Subdirectories end with ``/``. Sizes are only filled in where the
        backend gets them for free.
        """

    @abstractmethod
    def delete_file(self, worker: int, path: str) -> None:
        """Delete *path*; deleting something that does not exist succeeds."""

    @abstractmethod
    def move_file(self, worker: int, from_path: str, to_path: str) -> None:
        """Rename *from_path* to *to_path*."""

    @abstractmethod
    def create_directory(self, worker: int, dir: str) -> None:
        """Create *dir*."""

    @abstractmethod
    def get_file_info(self, worker: int, path: str) -> FileInfo:
        """Return whether *path* exists, whether it is a directory, and its size."""

    @abstractmethod
    def download_file(self, worker: int, path: str, destination: BinaryIO) -> None:
        """Write the content of *path* into *destination*."""

    @abstractmethod
    def upload_file(self, worker: int, path: str, content: bytes) -> None:
        """Write *content* to *path*."""

    def is_cache_needed(self) -> bool:
        return self.capabilities.cache_needed

    def is_move_file_implemented(self) -> bool:
        return self.capabilities.move_implemented

    def is_strong_consistent(self) -> bool:
        return self.capabilities.strong_consistent

    def is_fast_listing(self) -> bool:
        return self.capabilities.fast_listing
