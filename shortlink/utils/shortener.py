"""Alias generation utility

This module provides a helper function for generating random, fixed-length
Base62 aliases for short URLs.

Functions:
    generate_alias(length=5):
        Generate a random alias suitable for use as a URL slug.

Example:
    >>> from shortlink.utils import generate_alias
    >>> generate_alias()
    'q3ZxA'
    >>> generate_alias(8)
    '0bTq9LmZ'
"""

import secrets

from shortlink.constants import ALIAS_ALPHABET, Defaults


def generate_alias(length: int = Defaults.ALIAS_LENGTH) -> str:
    """Generate a random Base62 alias of exactly `length` characters.

    Each character is drawn uniformly at random (with replacement) from
    [0-9a-zA-Z] using the `secrets` CSPRNG, which is safe to call from any
    number of concurrent invocations.

    Args:
        length (int, optional):
            Number of characters in the alias. Defaults to 5.
            A length of 0 yields an empty string.

    Returns:
        str: A random alphanumeric alias.

    NOTE:
        - Uniqueness is NOT guaranteed. With 62^5 (~916 million) possible aliases
          collisions are unlikely, and a collision is still rejected by the alias
          store's uniqueness constraint.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length < 0:
        raise ValueError(f'Length must be a non-negative integer (given value: {length}).')

    return ''.join(secrets.choice(ALIAS_ALPHABET) for _ in range(length))
