"""Ephemeral content store

DumpStore ties the pieces of publishing and reading a dump together:

    publish:  parse text -> resolve expiry -> rate limit -> mint slug -> insert
    fetch:    look up slug -> hide it if past its deadline

Storage, rate limiting, slug generation, and the clock are all injected, so
the store holds no global state and runs the same over Redis or in memory.
A store built without a rate limiter (e.g. for read-only use) admits every write.

Example:
    >>> store = DumpStore(dump_dao=DumpMemoryDAO(), rate_limiter=RateLimitMemoryDAO())
    >>> dump = store.publish('# Reading list\\nhttps://a.com', expiry_option=10, client_id='203.0.113.7')
    >>> store.fetch(dump.slug).items
    (HeaderItem(level=1, text='Reading list'), LinkItem(url='https://a.com', title=None))
"""

import logging
from datetime import datetime

from linkdump.constants import Content, Slug
from linkdump.exceptions import EmptyDumpError, TextTooLongError
from linkdump.models import ContentItem, DumpModel
from linkdump.dao.base import DumpBaseDAO, RateLimitBaseDAO
from linkdump.dao.exceptions import DataStoreError, DumpAlreadyExistsError, DumpExpiredError, RateLimitedError
from linkdump.types import Clock, ExpiryOption, SlugGenerator
from linkdump.utils.expiry import resolve_expiry
from linkdump.utils.helpers import utc_now
from linkdump.utils.logging import client_digest
from linkdump.utils.parser import parse_content
from linkdump.utils.slug import generate_slug


logger = logging.getLogger(__name__)


class DumpStore:
    def __init__(
        self,
        dump_dao: DumpBaseDAO,
        rate_limiter: RateLimitBaseDAO | None = None,
        slug_generator: SlugGenerator = generate_slug,
        clock: Clock = utc_now,
        max_slug_attempts: int = Slug.MAX_ATTEMPTS,
    ):
        self.dump_dao = dump_dao
        self.rate_limiter = rate_limiter
        self.slug_generator = slug_generator
        self.clock = clock
        self.max_slug_attempts = max_slug_attempts

    def publish(self, text: str, expiry_option: ExpiryOption, client_id: str, now: datetime | None = None) -> DumpModel:
        """Parse pasted text and publish it as a new dump.

        Raises:
            InvalidExpiryOptionError: if expiry_option is not a selectable lifetime.
            TextTooLongError: if the text is longer than Content.MAX_TEXT_LENGTH.
            EmptyDumpError: if the text holds no content items.
            RateLimitedError: if the client has published too often.
            DataStoreError: if the data store fails.
        """
        now = now or self.clock()
        expires_at = resolve_expiry(expiry_option, now)
        if len(text) > Content.MAX_TEXT_LENGTH:
            raise TextTooLongError(f'Pasted text exceeds {Content.MAX_TEXT_LENGTH} characters (given length: {len(text)}).')
        items = parse_content(text)
        if not items:
            raise EmptyDumpError('Pasted text holds no content.')

        slug = self.create(items, expires_at, client_id, now=now)
        return DumpModel(slug=slug, items=tuple(items), created_at=now, expires_at=expires_at, origin=client_id)

    def create(
        self,
        items: list[ContentItem] | tuple[ContentItem, ...],
        expires_at: datetime | None,
        client_id: str,
        now: datetime | None = None,
    ) -> str:
        """Persist a new dump and return its slug.

        A slug that is already taken is regenerated, never overwritten. After
        `max_slug_attempts` collisions in a row the store gives up.

        Raises:
            RateLimitedError: if the client has published too often.
            DataStoreError: if the data store fails or no free slug was found.
        """
        now = now or self.clock()

        if self.rate_limiter is not None and not self.rate_limiter.admit(client_id, now):
            retry_after = self.rate_limiter.retry_after(client_id, now)
            logger.info('Client exceeded the write rate limit.', extra={'client': client_digest(client_id), 'retryAfter': retry_after})
            raise RateLimitedError(f'Too many dumps published. Try again in {retry_after} seconds.', retry_after=retry_after)

        for attempt in range(1, self.max_slug_attempts + 1):
            dump = DumpModel(slug=self.slug_generator(), items=tuple(items), created_at=now, expires_at=expires_at, origin=client_id)
            try:
                self.dump_dao.insert(dump)
            except DumpAlreadyExistsError:
                logger.warning('Slug collision. Regenerating slug.', extra={'slug': dump.slug, 'attempt': attempt})
                continue
            logger.debug('Dump stored.', extra={'slug': dump.slug, 'itemCount': len(dump.items)})
            return dump.slug

        raise DataStoreError(f'Could not allocate a free slug after {self.max_slug_attempts} attempts.')

    def fetch(self, slug: str, now: datetime | None = None) -> DumpModel:
        """Return a visible dump.

        Raises:
            DumpNotFoundError: if no dump was ever stored under the slug.
            DumpExpiredError: if the dump's deadline has passed.
            DataStoreError: if the data store fails.
        """
        now = now or self.clock()
        dump = self.dump_dao.get(slug)
        if dump.is_expired(now):
            raise DumpExpiredError(f"Dump with slug '{slug}' expired at {dump.expires_at.isoformat()}.")
        return dump

    def sweep(self, now: datetime | None = None) -> int:
        """Physically remove expired dumps where the backend supports it."""
        removed = self.dump_dao.sweep(now or self.clock())
        logger.info('Swept expired dumps.', extra={'removed': removed})
        return removed
