"""
Byte-rate limiting for uploads and downloads.

Budgets are expressed in KB/s and enforced with a pyrate-limiter ``Limiter``
where one token is one KB. A budget of 0 (or less) disables throttling.
"""

import io
import logging
import math
import threading
from typing import BinaryIO, Dict, Optional, Tuple

from pyrate_limiter import Duration, Limiter, Rate

logger = logging.getLogger(__name__)

KB = 1024
# Largest single read when copying, throttled or not
COPY_BUFFER_SIZE = 64 * KB
# How long one acquire may sleep waiting for tokens (ms)
_MAX_DELAY_MS = 5000


def per_worker_budget(rate_limit: int, threads: int) -> int:
    """Split a global KB/s budget evenly across *threads* workers.

    0 stays unlimited; a positive budget never rounds down to unlimited.
    """
    if rate_limit <= 0:
        return 0
    return max(1, rate_limit // max(1, threads))


class ByteThrottle:
    """Blocks callers so that at most ``rate_limit`` KB pass per second."""

    def __init__(self, rate_limit: int):
        self.rate_limit = rate_limit
        self._limiter = Limiter(
            Rate(rate_limit, Duration.SECOND),
            raise_when_fail=False,
            max_delay=_MAX_DELAY_MS,
        )

    @property
    def piece_size(self) -> int:
        """Largest piece whose token weight fits in one second's budget."""
        return min(COPY_BUFFER_SIZE, self.rate_limit * KB)

    def consume(self, nbytes: int) -> None:
        if nbytes <= 0:
            return
        weight = math.ceil(nbytes / KB)
        while not self._limiter.try_acquire("bytes", weight=weight):
            logger.debug(f"Throttle at {self.rate_limit} KB/s still waiting for {weight} KB")


# One throttle per (channel, budget); every Limiter runs its own leaker thread.
_throttles: Dict[Tuple[str, int], ByteThrottle] = {}
_throttles_lock = threading.Lock()


def get_throttle(rate_limit: int, channel: str = "default") -> Optional[ByteThrottle]:
    """Shared throttle for *channel* at *rate_limit* KB/s, None when unlimited.

    Use one channel per worker and direction so workers do not share budgets.
    """
    if rate_limit <= 0:
        return None
    key = (channel, rate_limit)
    throttle = _throttles.get(key)
    if throttle is None:
        with _throttles_lock:
            throttle = _throttles.get(key)
            if throttle is None:  # double-checked locking
                throttle = ByteThrottle(rate_limit)
                _throttles[key] = throttle
                logger.debug(f"Created throttle for '{channel}' at {rate_limit} KB/s")
    return throttle


def rate_limited_copy(
    destination: BinaryIO,
    source: BinaryIO,
    rate_limit: int,
    channel: str = "default",
) -> int:
    """Copy *source* into *destination*, at most *rate_limit* KB/s.

    Returns:
        Number of bytes copied
    """
    throttle = get_throttle(rate_limit, channel)
    piece_size = throttle.piece_size if throttle else COPY_BUFFER_SIZE
    copied = 0
    while True:
        data = source.read(piece_size)
        if not data:
            break
        if throttle:
            throttle.consume(len(data))
        destination.write(data)
        copied += len(data)
    return copied


class RateLimitedReader(io.BytesIO):
    """In-memory upload body that hands out bytes at most *rate_limit* KB/s.

    It stays seekable so the S3 client can rewind it for checksums and retries.
    """

    def __init__(self, content: bytes, rate_limit: int, channel: str = "default"):
        super().__init__(content)
        self._throttle = get_throttle(rate_limit, channel)

    def read(self, size: Optional[int] = -1) -> bytes:
        if self._throttle is None:
            return super().read(size)
        if size is None or size < 0:
            return b"".join(iter(lambda: self.read(self._throttle.piece_size), b""))
        data = super().read(min(size, self._throttle.piece_size))
        self._throttle.consume(len(data))
        return data
