"""Slug generation utility

Slugs are the only thing standing between a dump and a stranger, so they are
drawn from the `secrets` CSPRNG. With 64 symbols and 10 characters there are
2**60 possible slugs.

Example:
    >>> from linkdump.utils import generate_slug
    >>> generate_slug()
    'V1StGXR8_Z'
"""

import secrets

from linkdump.constants import Slug


def generate_slug(length: int = Slug.LENGTH, alphabet: str = Slug.ALPHABET) -> str:
    """Generate a random URL-safe slug.

    Args:
        length (int, optional):
            Number of characters. Defaults to 10, must be at least 10.

        alphabet (str, optional):
            Symbols to draw from. Defaults to [A-Za-z0-9_-].

    Returns:
        str: random slug

    Raises:
        ValueError: if the length is too short or the alphabet is empty.
    """
    if length < Slug.MIN_LENGTH:
        raise ValueError(f'Slug length must be at least {Slug.MIN_LENGTH} (given value: {length}).')
    if not alphabet:
        raise ValueError('Slug alphabet must be a non-empty string.')

    return ''.join(secrets.choice(alphabet) for _ in range(length))
