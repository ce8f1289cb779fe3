"""Pasted text parser

Turns a block of pasted text into an ordered list of content items, one per
non-blank line. Each line is classified independently, first match wins:

    1. Header         '# Title' .. '###### Title'
    2. Markdown link  '[title](url)' anywhere in the line (first occurrence)
    3. Bare URL       an absolute URL with scheme and authority
    4. Text           anything else

Parsing is total: every string yields a (possibly empty) list, nothing raises.

Example:
    >>> parse_content('# Title\\nhttps://a.com\\n[B](https://b.com)\\nplain')
    [HeaderItem(level=1, text='Title'), LinkItem(url='https://a.com', title=None),
     LinkItem(url='https://b.com', title='B'), TextItem(body='plain')]

NOTE:
    A markdown link embedded in other text ('see [docs](https://x.io) first')
    still becomes a LinkItem and the surrounding text is dropped. This loose
    match is intentional.
"""

import re
from urllib.parse import urlsplit

from linkdump.models import ContentItem, HeaderItem, LinkItem, TextItem


HEADER_PATTERN = re.compile(r'^(#{1,6})\s+(.+)$')
LINE_BREAK_PATTERN = re.compile(r'\r\n|\r|\n')


def parse_content(raw: str) -> list[ContentItem]:
    return [classify_line(line) for line in map(str.strip, split_lines(raw)) if line]


def split_lines(raw: str) -> list[str]:
    """Split on '\\n', '\\r\\n' and '\\r' only. Other separators (form feed, U+2028, ...) stay inside the line."""
    return LINE_BREAK_PATTERN.split(raw)


def classify_line(line: str) -> ContentItem:
    """Classify one stripped, non-blank line."""
    if match := HEADER_PATTERN.match(line):
        marker, text = match.groups()
        return HeaderItem(level=len(marker), text=text.strip())

    if link := find_markdown_link(line):
        title, url = link
        return LinkItem(url=url, title=title or None)

    if is_absolute_url(line):
        return LinkItem(url=line)

    return TextItem(body=line)


def find_markdown_link(line: str) -> tuple[str, str] | None:
    """Return (title, url) of the first '[title](url)' in line, or None.

    Matches what r'\\[(.*?)\\]\\((.*?)\\)' would find, in a single left-to-right
    pass: the earliest '[' that is followed by '](' and then ')' is taken, with
    the shortest title and url.
    """
    start = line.find('[')
    if start == -1:
        return None
    middle = line.find('](', start + 1)
    if middle == -1:
        return None
    end = line.find(')', middle + 2)
    if end == -1:
        return None
    return line[start + 1 : middle], line[middle + 2 : end]


def is_absolute_url(candidate: str) -> bool:
    """Return True if candidate is a well-formed absolute URL (scheme + authority)."""
    if not candidate or any(ch.isspace() for ch in candidate):
        return False
    try:
        parts = urlsplit(candidate)
        parts.port  # noqa: B018 raises ValueError on out-of-range or non-numeric ports
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.hostname)
