"""Unit tests for the RedisKeySchema class in redis_key_schema.py.

Test coverage includes:

1. Link record key generation
2. Link clicks key generation
3. Rate window key generation
4. Prefix behavior
   - Confirms keys are not prefixed when no prefix is provided.
   - Confirms keys are correctly prefixed when a valid prefix is provided.
   - Ensures improper prefix types raise TypeError.
"""

import pytest

from shortlink.dao.redis.redis_key_schema import RedisKeySchema


# -------------------------------
# 1. Link record key generation
# -------------------------------


@pytest.mark.parametrize(
    'alias, expected',
    [
        ('abc12', 'links:abc12'),
        ('my-promo_1', 'links:my-promo_1'),
    ],
)
def test_link_record_key(alias, expected):
    keys = RedisKeySchema()
    assert keys.link_record_key(alias) == expected


# -------------------------------
# 2. Link clicks key generation
# -------------------------------


def test_link_clicks_key():
    keys = RedisKeySchema()
    assert keys.link_clicks_key('abc12') == 'links:abc12:clicks'


# -------------------------------
# 3. Rate window key generation
# -------------------------------


@pytest.mark.parametrize(
    'client_id, expected',
    [
        ('203.0.113.7', 'ratelimit:203.0.113.7'),
        ('2001:db8::1', 'ratelimit:2001:db8::1'),
    ],
)
def test_rate_window_key(client_id, expected):
    keys = RedisKeySchema()
    assert keys.rate_window_key(client_id) == expected


# -------------------------------
# 4. Prefix behavior
# -------------------------------


def test_keys_are_prefixed():
    """Ensure every key carries the <app>:<env> prefix."""
    keys = RedisKeySchema(prefix='shortlink:dev')

    assert keys.link_record_key('abc12') == 'shortlink:dev:links:abc12'
    assert keys.link_clicks_key('abc12') == 'shortlink:dev:links:abc12:clicks'
    assert keys.rate_window_key('203.0.113.7') == 'shortlink:dev:ratelimit:203.0.113.7'


@pytest.mark.parametrize('prefix', [123, 4.5, ['shortlink'], {'app': 'shortlink'}])
def test_invalid_prefix_type(prefix):
    """Ensure non-string prefixes raise TypeError."""
    with pytest.raises(TypeError, match='Prefix must be of type string'):
        RedisKeySchema(prefix=prefix)
