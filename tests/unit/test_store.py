"""Unit tests for DumpStore in store.py

Test coverage includes:

1. Publishing
   - Parses text into items, resolves the deadline, and stores the dump.
   - Rejects unsupported expiry options, oversized text, and pastes without content.
   - A dump that never expires reads back the same items now and years later.

2. Rate limiting
   - Rejects the fourth publish within a window with a retry-after hint.
   - Never consumes a slug for rejected writes.

3. Slug allocation
   - Regenerates slugs on collision, never overwriting.
   - Gives up with DataStoreError after repeated collisions.

4. Fetching
   - Serves dumps up to and including their deadline.
   - Distinguishes expired dumps from unknown slugs.

5. Sweeping expired dumps.
"""

import itertools
from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest

from linkdump.store import DumpStore
from linkdump.models import DumpModel, HeaderItem, LinkItem, TextItem
from linkdump.constants import Content
from linkdump.exceptions import EmptyDumpError, InvalidExpiryOptionError, TextTooLongError
from linkdump.dao.base import RateLimitBaseDAO
from linkdump.dao.exceptions import DataStoreError, DumpExpiredError, DumpNotFoundError, DumpUnavailableError, RateLimitedError
from linkdump.dao.memory import DumpMemoryDAO, RateLimitMemoryDAO


T0 = datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)
PASTE = '# Reading list\n[Docs](https://docs.python.org)\n\nhttps://example.com\nremember to read these'


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def dump_dao():
    return DumpMemoryDAO()


@pytest.fixture
def rate_limiter():
    return RateLimitMemoryDAO()


@pytest.fixture
def store(dump_dao, rate_limiter):
    return DumpStore(dump_dao=dump_dao, rate_limiter=rate_limiter, clock=lambda: T0)


def sequence(*slugs):
    it = iter(slugs)
    return lambda: next(it)


# -------------------------------
# 1. Publishing
# -------------------------------


def test_publish(store, dump_dao):
    dump = store.publish(PASTE, expiry_option=10, client_id='203.0.113.7')

    assert dump.items == (
        HeaderItem(level=1, text='Reading list'),
        LinkItem(url='https://docs.python.org', title='Docs'),
        LinkItem(url='https://example.com'),
        TextItem(body='remember to read these'),
    )
    assert dump.created_at == T0
    assert dump.expires_at == T0 + timedelta(minutes=10)
    assert len(dump.slug) == 10
    assert dump_dao.get(dump.slug) == dump


def test_publish_never_expiring_dump(store):
    dump = store.publish('# Keep\nhttps://a.com\nforever notes', expiry_option='never', client_id='203.0.113.7')
    expected_items = (HeaderItem(level=1, text='Keep'), LinkItem(url='https://a.com'), TextItem(body='forever notes'))

    assert dump.expires_at is None
    for now in (T0, T0 + timedelta(days=3650)):
        fetched = store.fetch(dump.slug, now=now)
        assert fetched.items == expected_items
        assert fetched == dump
        assert fetched.remaining(now) is None


def test_publish_text_at_length_limit(store):
    dump = store.publish('a' * Content.MAX_TEXT_LENGTH, expiry_option=10, client_id='203.0.113.7')
    assert dump.items == (TextItem(body='a' * Content.MAX_TEXT_LENGTH),)


def test_publish_text_over_length_limit(store, dump_dao, rate_limiter):
    with pytest.raises(TextTooLongError):
        store.publish('[' * (Content.MAX_TEXT_LENGTH + 1), expiry_option=10, client_id='203.0.113.7')

    assert len(dump_dao) == 0
    assert rate_limiter.retry_after('203.0.113.7', T0) == 0


@pytest.mark.parametrize('option', [2, 0, -10, 'forever', 10.0, True])
def test_publish_with_unsupported_expiry(store, dump_dao, option):
    with pytest.raises(InvalidExpiryOptionError):
        store.publish(PASTE, expiry_option=option, client_id='203.0.113.7')
    assert len(dump_dao) == 0


@pytest.mark.parametrize('text', ['', '   ', '\n\n  \t\n'])
def test_publish_without_content(store, rate_limiter, text):
    with pytest.raises(EmptyDumpError):
        store.publish(text, expiry_option=10, client_id='203.0.113.7')

    # an empty paste does not count against the limit
    assert rate_limiter.retry_after('203.0.113.7', T0) == 0


def test_published_slugs_are_unique(dump_dao):
    store = DumpStore(dump_dao=dump_dao, clock=lambda: T0)
    slugs = {store.publish('https://a.com', expiry_option=10, client_id='203.0.113.7').slug for _ in range(200)}
    assert len(slugs) == 200


# -------------------------------
# 2. Rate limiting
# -------------------------------


def test_fourth_publish_within_window_is_rate_limited(store, dump_dao):
    for n in range(3):
        store.publish('https://a.com', expiry_option=10, client_id='203.0.113.7', now=T0 + timedelta(seconds=n * 10))

    with pytest.raises(RateLimitedError) as e:
        store.publish('https://a.com', expiry_option=10, client_id='203.0.113.7', now=T0 + timedelta(seconds=30))

    assert e.value.retry_after == 31
    assert len(dump_dao) == 3


def test_publish_is_admitted_once_window_slides(store):
    for _ in range(3):
        store.publish('https://a.com', expiry_option=10, client_id='203.0.113.7', now=T0)

    dump = store.publish('https://a.com', expiry_option=10, client_id='203.0.113.7', now=T0 + timedelta(seconds=61))
    assert dump.created_at == T0 + timedelta(seconds=61)


def test_rate_limit_is_per_client(store):
    for _ in range(3):
        store.publish('https://a.com', expiry_option=10, client_id='203.0.113.7')

    assert store.publish('https://a.com', expiry_option=10, client_id='198.51.100.1').origin == '198.51.100.1'


def test_rejected_write_does_not_consume_slug(dump_dao):
    rate_limiter = MagicMock(spec=RateLimitBaseDAO)
    rate_limiter.admit.return_value = False
    rate_limiter.retry_after.return_value = 42
    slug_generator = MagicMock(return_value='V1StGXR8_Z')
    store = DumpStore(dump_dao=dump_dao, rate_limiter=rate_limiter, slug_generator=slug_generator, clock=lambda: T0)

    with pytest.raises(RateLimitedError, match='Try again in 42 seconds'):
        store.create((TextItem(body='x'),), None, client_id='203.0.113.7')

    rate_limiter.admit.assert_called_once_with('203.0.113.7', T0)
    slug_generator.assert_not_called()


# -------------------------------
# 3. Slug allocation
# -------------------------------


def test_slug_collision_is_regenerated(store, dump_dao):
    original = store.publish('https://a.com', expiry_option=10, client_id='203.0.113.7')
    store.slug_generator = sequence(original.slug, 'Fresh_Slug')

    dump = store.publish('https://b.com', expiry_option=10, client_id='198.51.100.1')

    assert dump.slug == 'Fresh_Slug'
    assert dump_dao.get(original.slug) == original


def test_slug_allocation_gives_up(store, dump_dao):
    store.publish('https://a.com', expiry_option=10, client_id='203.0.113.7')
    taken = next(iter(dump_dao._records))
    store.slug_generator = lambda: taken

    with pytest.raises(DataStoreError, match='after 5 attempts'):
        store.publish('https://b.com', expiry_option=10, client_id='198.51.100.1')
    assert len(dump_dao) == 1


def test_slug_allocation_attempts_are_configurable(dump_dao):
    dump_dao.insert(DumpModel(slug='TakenSlug0', items=(TextItem(body='x'),), created_at=T0))
    generated = itertools.count()

    def slug_generator():
        next(generated)
        return 'TakenSlug0'

    store = DumpStore(dump_dao=dump_dao, slug_generator=slug_generator, clock=lambda: T0, max_slug_attempts=2)
    with pytest.raises(DataStoreError):
        store.create((TextItem(body='y'),), None, client_id='203.0.113.7')
    assert next(generated) == 2


# -------------------------------
# 4. Fetching
# -------------------------------


def test_fetch_before_deadline(store):
    dump = store.publish(PASTE, expiry_option=1, client_id='203.0.113.7')

    assert store.fetch(dump.slug, now=T0 + timedelta(seconds=59)) == dump
    assert store.fetch(dump.slug, now=T0 + timedelta(minutes=1)) == dump


def test_fetch_after_deadline(store):
    dump = store.publish(PASTE, expiry_option=1, client_id='203.0.113.7')

    with pytest.raises(DumpExpiredError):
        store.fetch(dump.slug, now=T0 + timedelta(minutes=1, seconds=1))


def test_fetch_unknown_slug(store):
    with pytest.raises(DumpNotFoundError):
        store.fetch('NoSuchSlug')


def test_expired_and_unknown_are_both_unavailable(store):
    dump = store.publish(PASTE, expiry_option=1, client_id='203.0.113.7')

    for slug, now in ((dump.slug, T0 + timedelta(hours=1)), ('NoSuchSlug', T0)):
        with pytest.raises(DumpUnavailableError):
            store.fetch(slug, now=now)


def test_fetch_uses_clock(dump_dao):
    clock = MagicMock(side_effect=[T0, T0 + timedelta(minutes=5, seconds=1)])
    store = DumpStore(dump_dao=dump_dao, clock=clock)
    dump = store.publish('https://a.com', expiry_option=5, client_id='203.0.113.7')

    with pytest.raises(DumpExpiredError):
        store.fetch(dump.slug)


# -------------------------------
# 5. Sweeping
# -------------------------------


def test_sweep(store, dump_dao):
    store.publish('https://a.com', expiry_option=1, client_id='203.0.113.7')
    store.publish('https://b.com', expiry_option='never', client_id='203.0.113.7')

    assert store.sweep(now=T0 + timedelta(minutes=2)) == 1
    assert len(dump_dao) == 1
