"""Dump lifetime policy

Functions:
    resolve_expiry(option, now) -> datetime | None
        Map a selectable lifetime to an absolute deadline.
    parse_expiry_option(raw) -> ExpiryOption
        Coerce a request payload value into a selectable lifetime.

Example:
    >>> resolve_expiry(10, datetime(2025, 10, 15, tzinfo=UTC))
    datetime.datetime(2025, 10, 15, 0, 10, tzinfo=datetime.timezone.utc)
    >>> resolve_expiry('never', datetime(2025, 10, 15, tzinfo=UTC)) is None
    True
"""

from datetime import datetime, timedelta
from typing import Any

from linkdump.constants import Expiry
from linkdump.exceptions import InvalidExpiryOptionError
from linkdump.types import ExpiryOption


def resolve_expiry(option: ExpiryOption, now: datetime) -> datetime | None:
    if option == Expiry.NEVER:
        return None
    if isinstance(option, bool) or not isinstance(option, int) or option not in Expiry.OPTIONS_MINUTES:
        raise InvalidExpiryOptionError(f'Unsupported expiry option: {option!r}.')
    return now + timedelta(minutes=option)


def parse_expiry_option(raw: Any) -> ExpiryOption:
    """Coerce a raw payload value into an expiry option.

    Accepts the option minutes as int or numeric string, or 'never'
    (case-insensitive). A missing value selects the default lifetime.

    Raises:
        InvalidExpiryOptionError: if the value is not a selectable lifetime.
    """
    if raw is None:
        return Expiry.DEFAULT_OPTION
    if isinstance(raw, str):
        value = raw.strip().lower()
        if value == Expiry.NEVER:
            return Expiry.NEVER
        if not value.isdigit():
            raise InvalidExpiryOptionError(f'Unsupported expiry option: {raw!r}.')
        raw = int(value)
    if isinstance(raw, bool) or not isinstance(raw, int) or raw not in Expiry.OPTIONS_MINUTES:
        raise InvalidExpiryOptionError(f'Unsupported expiry option: {raw!r}.')
    return raw
