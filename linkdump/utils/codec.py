"""Persisted representation of dumps

Content items are stored as a JSON array of tagged objects:

    {"type": "link", "url": "https://b.com", "title": "B"}   # title omitted when None
    {"type": "header", "level": 1, "text": "Title"}
    {"type": "text", "body": "plain"}

A dump record wraps the items together with its metadata:

    {
        "slug": "V1StGXR8_Z",
        "items": [...],
        "created_at": "2025-10-15T00:00:00+00:00",
        "expires_at": "2025-10-15T00:10:00+00:00",   # or null
        "origin": "203.0.113.7"
    }

Decoding raises MalformedRecordError for anything it does not recognize.
"""

import json
from datetime import datetime
from typing import assert_never

from linkdump.dao.exceptions import MalformedRecordError
from linkdump.models import ContentItem, DumpModel, HeaderItem, LinkItem, TextItem
from linkdump.types import DumpRecord, EncodedItem


def encode_item(item: ContentItem) -> EncodedItem:
    match item:
        case LinkItem(url=url, title=None):
            return {'type': 'link', 'url': url}
        case LinkItem(url=url, title=title):
            return {'type': 'link', 'url': url, 'title': title}
        case HeaderItem(level=level, text=text):
            return {'type': 'header', 'level': level, 'text': text}
        case TextItem(body=body):
            return {'type': 'text', 'body': body}
        case _:
            assert_never(item)


def decode_item(data: EncodedItem) -> ContentItem:
    match data:
        case {'type': 'link', 'url': str(url)}:
            title = data.get('title')
            if title is not None and not isinstance(title, str):
                raise MalformedRecordError(f'Link title must be a string (given value: {title!r}).')
            return LinkItem(url=url, title=title)
        case {'type': 'header', 'level': int(level), 'text': str(text)} if 1 <= level <= 6:
            return HeaderItem(level=level, text=text)
        case {'type': 'text', 'body': str(body)}:
            return TextItem(body=body)
    raise MalformedRecordError(f'Unrecognized content item: {data!r}.')


def encode_items(items: list[ContentItem] | tuple[ContentItem, ...]) -> list[EncodedItem]:
    return [encode_item(item) for item in items]


def decode_items(data: list[EncodedItem]) -> tuple[ContentItem, ...]:
    if not isinstance(data, list):
        raise MalformedRecordError(f'Content items must be a list (given type: {type(data)}).')
    return tuple(decode_item(item) for item in data)


def dump_to_record(dump: DumpModel) -> DumpRecord:
    return {
        'slug': dump.slug,
        'items': encode_items(dump.items),
        'created_at': dump.created_at.isoformat(),
        'expires_at': None if dump.expires_at is None else dump.expires_at.isoformat(),
        'origin': dump.origin,
    }


def dump_from_record(record: DumpRecord) -> DumpModel:
    try:
        expires_at = record['expires_at']
        return DumpModel(
            slug=record['slug'],
            items=decode_items(record['items']),
            created_at=datetime.fromisoformat(record['created_at']),
            expires_at=None if expires_at is None else datetime.fromisoformat(expires_at),
            origin=record.get('origin', ''),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedRecordError(f'Malformed dump record: {e}') from e


def serialize_dump(dump: DumpModel) -> str:
    return json.dumps(dump_to_record(dump))


def deserialize_dump(payload: str) -> DumpModel:
    try:
        record = json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedRecordError('Invalid JSON in dump record') from e
    if not isinstance(record, dict):
        raise MalformedRecordError(f'Dump record must be a JSON object (given type: {type(record)}).')
    return dump_from_record(record)
