"""Unit tests for the RateLimitMemoryDAO

Test coverage includes:

1. Sliding window admission (limit, window edge, per-client isolation).
2. Retry-after computation.
3. Atomic admission under concurrent writers.
4. Dropping windows of clients that stopped writing.
"""

import threading
from datetime import datetime, timedelta, UTC

import pytest

from linkdump.dao.memory import RateLimitMemoryDAO


T0 = datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


def seconds(n: float) -> datetime:
    return T0 + timedelta(seconds=n)


@pytest.fixture
def limiter():
    return RateLimitMemoryDAO()


# -------------------------------
# 1. Sliding window admission
# -------------------------------


def test_fourth_write_within_window_is_rejected(limiter):
    assert [limiter.admit('203.0.113.7', seconds(n)) for n in (0, 10, 20, 30)] == [True, True, True, False]


def test_write_is_admitted_after_window_slides(limiter):
    for n in (0, 1, 2):
        limiter.admit('203.0.113.7', seconds(n))

    assert limiter.admit('203.0.113.7', seconds(60)) is False
    assert limiter.admit('203.0.113.7', seconds(61)) is True
    assert limiter.admit('203.0.113.7', seconds(61)) is False


def test_rejected_writes_are_not_recorded(limiter):
    for n in (0, 1, 2):
        limiter.admit('203.0.113.7', seconds(n))
    for n in range(3, 60):
        assert limiter.admit('203.0.113.7', seconds(n)) is False

    assert limiter.admit('203.0.113.7', seconds(61)) is True


def test_clients_are_isolated(limiter):
    for _ in range(3):
        limiter.admit('203.0.113.7', T0)

    assert limiter.admit('203.0.113.7', T0) is False
    assert limiter.admit('198.51.100.1', T0) is True


def test_custom_limits():
    limiter = RateLimitMemoryDAO(max_writes=1, window_seconds=5)
    assert limiter.admit('unknown', seconds(0)) is True
    assert limiter.admit('unknown', seconds(5)) is False
    assert limiter.admit('unknown', seconds(6)) is True


@pytest.mark.parametrize('kwargs', [{'max_writes': 0}, {'window_seconds': 0}])
def test_invalid_limits(kwargs):
    with pytest.raises(ValueError):
        RateLimitMemoryDAO(**kwargs)


# -------------------------------
# 2. Retry-after
# -------------------------------


def test_retry_after(limiter):
    assert limiter.retry_after('203.0.113.7', T0) == 0

    for n in (0, 5, 10):
        limiter.admit('203.0.113.7', seconds(n))

    assert limiter.retry_after('203.0.113.7', seconds(10)) == 51
    assert limiter.retry_after('203.0.113.7', seconds(59.5)) == 1
    assert limiter.admit('203.0.113.7', seconds(60.5)) is True


# -------------------------------
# 3. Concurrency
# -------------------------------


def test_concurrent_admission_never_exceeds_limit(limiter):
    barrier = threading.Barrier(16)
    admitted = []

    def write():
        barrier.wait()
        admitted.append(limiter.admit('203.0.113.7', T0))

    threads = [threading.Thread(target=write) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert admitted.count(True) == 3


# -------------------------------
# 4. Registry pruning
# -------------------------------


def test_idle_client_windows_are_dropped(limiter):
    for n in range(5_000):
        limiter.admit(f'198.51.100.{n}', T0)
    assert len(limiter) == 5_000

    assert limiter.admit('203.0.113.7', T0 + timedelta(days=1)) is True
    assert len(limiter._windows) == 1


def test_active_client_windows_are_kept(limiter):
    limiter.admit('198.51.100.1', seconds(0))
    limiter.admit('198.51.100.2', seconds(30))

    limiter.admit('203.0.113.7', seconds(61))

    assert set(limiter._windows) == {'198.51.100.2', '203.0.113.7'}


def test_pruning_keeps_limits_intact(limiter):
    limiter.admit('198.51.100.1', seconds(0))
    for n in (0, 1, 2):
        limiter.admit('203.0.113.7', seconds(50 + n))

    # triggers a prune; 203.0.113.7 still holds three writes inside its window
    limiter.admit('198.51.100.2', seconds(61))
    assert '198.51.100.1' not in limiter._windows

    assert limiter.admit('203.0.113.7', seconds(62)) is False
    assert limiter.retry_after('203.0.113.7', seconds(62)) == 49


def test_retry_after_does_not_track_unknown_clients(limiter):
    assert limiter.retry_after('203.0.113.7', T0) == 0
    assert len(limiter) == 0


def test_admit_never_records_into_dropped_window(monkeypatch, limiter):
    limiter.admit('203.0.113.7', seconds(0))
    stale = limiter._windows['203.0.113.7']
    limiter.admit('198.51.100.1', seconds(61))
    assert stale.retired

    # a writer that fetched the window just before it was dropped
    fetch_window = limiter._window
    handed_out = iter([stale])
    monkeypatch.setattr(limiter, '_window', lambda client_id, now: next(handed_out, None) or fetch_window(client_id, now))

    assert limiter.admit('203.0.113.7', seconds(62)) is True
    assert list(stale.timestamps) == [seconds(0)]
    assert list(limiter._windows['203.0.113.7'].timestamps) == [seconds(62)]
