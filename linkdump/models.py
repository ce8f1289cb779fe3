"""Data models for published dumps.

A dump is an ordered sequence of content items. Each pasted line becomes
exactly one item, which is one of three variants:

    LinkItem    a URL with an optional title ([title](url) or a bare URL)
    HeaderItem  a markdown header (# .. ######)
    TextItem    any other non-blank line

`ContentItem` is the union of the three. Consumers match on it exhaustively:

    >>> match item:
    ...     case LinkItem(url=url, title=title): ...
    ...     case HeaderItem(level=level, text=text): ...
    ...     case TextItem(body=body): ...
    ...     case _: assert_never(item)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta


# fmt: off
@dataclass(frozen=True)
class LinkItem:
    url: str                    # Verbatim URL (not normalized)
    title: str | None = None    # None unless explicitly supplied


@dataclass(frozen=True)
class HeaderItem:
    level: int                  # 1..6, number of leading '#'
    text: str


@dataclass(frozen=True)
class TextItem:
    body: str
# fmt: on


type ContentItem = LinkItem | HeaderItem | TextItem


@dataclass(frozen=True)
class DumpModel:
    """Represent a published dump.

    Attributes:
        slug (str):
            Unique random identifier, the sole lookup key.
        items (tuple[ContentItem, ...]):
            Content items in pasted line order.
        created_at (datetime):
            Moment the dump was published (UTC).
        expires_at (datetime | None):
            Deadline after which the dump is logically gone. None never expires.
        origin (str):
            Identity of the publishing client. Only used for rate limiting,
            never returned to readers.

    Example:
        >>> dump = DumpModel(
        ...     slug='V1StGXR8_Z',
        ...     items=(HeaderItem(level=1, text='Reading list'),),
        ...     created_at=datetime(2025, 10, 15, tzinfo=UTC),
        ...     expires_at=datetime(2025, 10, 15, 0, 10, tzinfo=UTC),
        ... )
        >>> dump.remaining(datetime(2025, 10, 15, 0, 4, tzinfo=UTC))
        datetime.timedelta(seconds=360)
    """

    slug: str
    items: tuple[ContentItem, ...]
    created_at: datetime
    expires_at: datetime | None = None
    origin: str = ''

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now > self.expires_at

    def remaining(self, now: datetime) -> timedelta | None:
        """Return time left until the deadline (never negative), or None if the dump never expires."""
        if self.expires_at is None:
            return None
        return max(self.expires_at - now, timedelta(0))
