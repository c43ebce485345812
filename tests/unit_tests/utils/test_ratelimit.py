import io
import threading

import pytest

from fossil_store.utils.ratelimit import (
    COPY_BUFFER_SIZE,
    ByteThrottle,
    RateLimitedReader,
    get_throttle,
    per_worker_budget,
    rate_limited_copy,
)

PAYLOAD = bytes(range(256)) * 40


@pytest.mark.parametrize(
    "rate_limit, threads, expected",
    [
        (0, 4, 0),
        (1000, 4, 250),
        (1000, 1, 1000),
        (3, 4, 1),
        (100, 0, 100),
    ],
)
def test_per_worker_budget(rate_limit, threads, expected):
    assert per_worker_budget(rate_limit, threads) == expected


def test_unlimited_copy():
    destination = io.BytesIO()

    copied = rate_limited_copy(destination, io.BytesIO(PAYLOAD), 0)

    assert copied == len(PAYLOAD)
    assert destination.getvalue() == PAYLOAD


def test_throttled_copy_keeps_content():
    destination = io.BytesIO()

    copied = rate_limited_copy(destination, io.BytesIO(PAYLOAD), 1024)

    assert copied == len(PAYLOAD)
    assert destination.getvalue() == PAYLOAD


def test_piece_size_fits_one_second_budget():
    assert ByteThrottle(1).piece_size == 1024
    assert ByteThrottle(10_000).piece_size == COPY_BUFFER_SIZE


def test_rate_limited_reader_reads_everything():
    reader = RateLimitedReader(PAYLOAD, 1024)

    assert reader.read() == PAYLOAD
    reader.seek(0)
    assert reader.read(10) == PAYLOAD[:10]
    assert reader.tell() == 10


def test_unthrottled_reader_behaves_like_bytesio():
    reader = RateLimitedReader(PAYLOAD, 0)

    assert reader.read(5) == PAYLOAD[:5]
    assert reader.read() == PAYLOAD[5:]


def test_throttles_are_shared_per_channel_and_budget():
    assert get_throttle(0) is None
    assert get_throttle(1000, "download:0") is get_throttle(1000, "download:0")
    assert get_throttle(1000, "download:0") is not get_throttle(1000, "download:1")
    assert get_throttle(1000, "download:0") is not get_throttle(500, "download:0")


def test_repeated_throttled_copies_do_not_start_threads():
    rate_limited_copy(io.BytesIO(), io.BytesIO(b"x" * 100), 1000, "download:0")
    RateLimitedReader(b"x" * 100, 1000, "upload:0").read()
    baseline = threading.active_count()

    for _ in range(20):
        rate_limited_copy(io.BytesIO(), io.BytesIO(b"x" * 100), 1000, "download:0")
        RateLimitedReader(b"x" * 100, 1000, "upload:0").read()

    assert threading.active_count() == baseline
