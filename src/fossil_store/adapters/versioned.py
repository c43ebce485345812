"""
Storage adapter for versioned object stores.

Presents a bucket of versioned objects as a flat filesystem. Hidden objects
show up as fossils: a chunk ``chunks/<hash>`` whose newest version is a hide
marker is listed as ``<hash>.fsl``. Moving ``n`` to ``n.fsl`` hides it, moving
it back removes the marker, and deleting ``n.fsl`` purges the marker together
with everything it shadows.
"""

import logging
from typing import BinaryIO, List, Optional, Tuple

from fossil_store.adapters.base import FileInfo, Storage, StorageCapabilities
from fossil_store.adapters.client import VersionedObjectClient
from fossil_store.config.settings import Settings, get_settings
from fossil_store.exceptions import StorageContractError
from fossil_store.fossil import parse_logical_path, project, to_fossil
from fossil_store.utils.decorators import log_transfer
from fossil_store.utils.ratelimit import per_worker_budget, rate_limited_copy
from fossil_store.versions import Active, Hidden, newest_per_name, newest_state

logger = logging.getLogger(__name__)

SNAPSHOTS_DIR = "snapshots"
CHUNKS_DIR = "chunks"


class VersionedStorage(Storage):
    """Flat-filesystem view over a :class:`VersionedObjectClient`.

    The adapter keeps no state between calls apart from the rate limits; the
    client owns the connection pool selected by each call's worker index.
    """

    capabilities = StorageCapabilities(
        cache_needed=True,
        move_implemented=True,
        strong_consistent=True,
        fast_listing=True,
    )

    def __init__(self, client: VersionedObjectClient):
        self.client = client

    def list_files(self, worker: int, dir: str) -> Tuple[List[str], List[int]]:
        dir = dir.rstrip("/")
        prefix = dir + "/" if dir else ""

        if dir == SNAPSHOTS_DIR:
            entries = self.client.list_file_names(worker, prefix, False, False)
            snapshot_ids = {entry.name[len(prefix):].split("/")[0] + "/" for entry in entries}
            return sorted(snapshot_ids), []

        if dir == CHUNKS_DIR:
            files: List[str] = []
            sizes: List[int] = []
            entries = self.client.list_file_names(worker, prefix, False, True)
            for entry in newest_per_name(entries):
                files.append(project(entry.name[len(prefix):], entry.state))
                sizes.append(entry.size)
            return files, sizes

        entries = self.client.list_file_names(worker, prefix, False, False)
        return [entry.name[len(prefix):] for entry in entries], []

    def delete_file(self, worker: int, path: str) -> None:
        name, fossil = parse_logical_path(path)

        if fossil:
            self._delete_fossil_chain(worker, name)
            return

        entries = self.client.list_file_names(worker, name, True, True)
        if not entries:
            return
        self.client.delete_file(worker, name, entries[0].version_id)
        logger.debug(f"Deleted newest version {entries[0].version_id} of '{name}'")

    def _delete_fossil_chain(self, worker: int, name: str) -> None:
        """Delete the first hide marker of *name* and every older version.

        Active versions newer than that marker are left alone.
        """
        entries = self.client.list_file_names(worker, name, True, True)
        deleting = False
        deleted = 0
        for entry in entries:
            if entry.name != name or (not deleting and not entry.is_hidden):
                continue
            deleting = True
            self.client.delete_file(worker, name, entry.version_id)
            deleted += 1

        if deleted:
            logger.info(f"Deleted fossil '{to_fossil(name)}' ({deleted} version(s))")

    def move_file(self, worker: int, from_path: str, to_path: str) -> None:
        name, from_fossil = parse_logical_path(from_path)

        if from_fossil and name == to_path:
            self._resurrect(worker, to_path)
            return

        if not from_fossil and to_path == to_fossil(from_path):
            self._fossilize(worker, from_path)
            return

        logger.critical(f"Moving file '{from_path}' to '{to_path}' is not supported")
        raise StorageContractError(f"Moving file '{from_path}' to '{to_path}' is not supported")

    def _fossilize(self, worker: int, name: str) -> None:
        """Hide *name* unless its newest version is already hidden or missing.

        A repeated hide must not stack a second marker, or a single resurrect
        would leave the chunk hidden.
        """
        entries = self.client.list_file_names(worker, name, True, True)
        state = newest_state(entries, name)
        if not isinstance(state, Active):
            logger.debug(f"'{name}' has no active version; nothing to fossilize")
            return
        version_id = self.client.hide_file(worker, name)
        logger.info(f"Fossilized '{name}' (marker {version_id})")

    def _resurrect(self, worker: int, name: str) -> None:
        """Remove the hide marker on top of *name*, exposing the version below."""
        entries = self.client.list_file_names(worker, name, True, True)
        state = newest_state(entries, name)
        if not isinstance(state, Hidden):
            logger.debug(f"'{name}' is not a fossil; nothing to resurrect")
            return
        self.client.delete_file(worker, name, state.version_id)
        logger.info(f"Resurrected '{name}' (removed marker {state.version_id})")

    def create_directory(self, worker: int, dir: str) -> None:
        # Object stores have no directories.
        return None

    def get_file_info(self, worker: int, path: str) -> FileInfo:
        name, fossil = parse_logical_path(path)

        entries = self.client.list_file_names(worker, name, True, fossil)
        state = newest_state(entries, name)
        if state is None or isinstance(state, Hidden) != fossil:
            return FileInfo(exists=False, is_dir=False, size=0)
        return FileInfo(exists=True, is_dir=False, size=state.size)

    @log_transfer
    def download_file(self, worker: int, path: str, destination: BinaryIO) -> None:
        stream, _ = self.client.download_file(worker, path)
        try:
            rate_limited_copy(
                destination,
                stream,
                per_worker_budget(self.download_rate_limit, self.client.threads),
                f"download:{worker}",
            )
        finally:
            stream.close()

    @log_transfer
    def upload_file(self, worker: int, path: str, content: bytes) -> None:
        self.client.upload_file(
            worker,
            path,
            content,
            per_worker_budget(self.upload_rate_limit, self.client.threads),
        )


def create_versioned_storage(
    settings: Optional[Settings] = None,
    client: Optional[VersionedObjectClient] = None,
) -> VersionedStorage:
    """Connect to the configured bucket and return a ready storage adapter.

    Args:
        settings: Settings to use; defaults to the cached process settings
        client: Versioned client to use instead of an S3 client built from settings

    Raises:
        botocore.exceptions.ClientError: If authorization or bucket lookup fails
        BucketNotVersionedError: If the bucket does not keep object versions
    """
    settings = settings or get_settings()

    if client is None:
        from fossil_store.s3 import S3ClientPool, S3VersionedClient

        client = S3VersionedClient(S3ClientPool(settings))

    client.authorize_account()
    client.find_bucket(settings.s3_bucket_name)

    storage = VersionedStorage(client)
    storage.set_rate_limits(settings.download_rate_limit, settings.upload_rate_limit)
    logger.info(f"Storage ready on bucket '{settings.s3_bucket_name}' with {client.threads} worker(s)")
    return storage
