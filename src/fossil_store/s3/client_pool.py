"""Pool of S3 clients, one per worker thread."""
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import boto3
from botocore.config import Config

from fossil_store.config.settings import Settings, get_settings

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)


class S3ClientPool:
    """Owns one boto3 session and S3 client per worker index.

    boto3 sessions are not thread safe, so each worker gets its own session
    instead of sharing a client across threads.
    """

    def __init__(self, settings: Optional[Settings] = None, threads: Optional[int] = None):
        self.settings = settings or get_settings()
        self.threads = threads or self.settings.storage_threads

        logger.info("Initializing S3ClientPool")
        logger.info(f"  Region: {self.settings.aws_region}")
        logger.info(f"  Endpoint: {self.settings.aws_endpoint_url}")
        logger.info(f"  Workers: {self.threads}")

        self._clients: List["S3Client"] = [self._create_client(i) for i in range(self.threads)]

    def _create_client(self, worker: int) -> "S3Client":
        client_kwargs: Dict[str, Any] = dict(self.settings.client_kwargs)
        client_kwargs['config'] = Config(
            signature_version="s3v4",
            retries={"max_attempts": 3, "mode": "standard"},
        )
        try:
            session = boto3.session.Session()
            client = session.client('s3', **client_kwargs)
            logger.debug(f"Created s3 client for worker {worker}")
            return client
        except Exception as e:
            logger.error(f"Error creating s3 client for worker {worker}: {str(e)}")
            raise

    def get_client(self, worker: int) -> "S3Client":
        """Get the client reserved for *worker*."""
        if not 0 <= worker < self.threads:
            raise IndexError(f"Worker index {worker} out of range for a pool of {self.threads}")
        return self._clients[worker]

    def __len__(self) -> int:
        return self.threads
