"""Unit tests for the UrlRecord and ClickEvent dataclasses in models.py.

Test coverage includes:

1. UrlRecord defaults
   - Ensures optional fields default to an active, generated, non-expiring record.

2. Expiry semantics
   - Records without expires_at never expire.
   - Records expire strictly after expires_at.

3. Serialization
   - as_dict() renders ISO-8601 timestamps and origin strings.
   - from_dict() restores an equal record and treats naive timestamps as UTC.

4. Immutability
   - Verifies fields cannot be reassigned after object creation.
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, UTC

import pytest

from shortlink.models import AliasOrigin, ClickEvent, UrlRecord


NOW = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)


# -------------------------------------------------
# 1. UrlRecord defaults
# -------------------------------------------------


def test_url_record_defaults():
    record = UrlRecord(alias='abc12', long_url='https://example.com', created_at=NOW)

    assert record.created_by_ip is None
    assert record.expires_at is None
    assert record.active is True
    assert record.origin is AliasOrigin.GENERATED
    assert record.custom is False


def test_custom_record():
    record = UrlRecord(alias='promo', long_url='https://example.com', created_at=NOW, origin=AliasOrigin.CUSTOM)
    assert record.custom is True


# -------------------------------------------------
# 2. Expiry semantics
# -------------------------------------------------


def test_record_without_expiry_never_expires():
    record = UrlRecord(alias='abc12', long_url='https://example.com', created_at=NOW)
    assert not record.is_expired(NOW + timedelta(days=10_000))


@pytest.mark.parametrize(
    'now, expected',
    [
        (NOW - timedelta(seconds=1), False),
        (NOW, False),
        (NOW + timedelta(seconds=1), True),
    ],
)
def test_record_expiry_boundary(now, expected):
    record = UrlRecord(alias='abc12', long_url='https://example.com', created_at=NOW - timedelta(days=1), expires_at=NOW)
    assert record.is_expired(now) is expected


# -------------------------------------------------
# 3. Serialization
# -------------------------------------------------


def test_url_record_as_dict():
    record = UrlRecord(
        alias='promo',
        long_url='https://example.com/sale',
        created_at=NOW,
        created_by_ip='203.0.113.7',
        expires_at=NOW + timedelta(days=30),
        origin=AliasOrigin.CUSTOM,
    )

    assert record.as_dict() == {
        'alias': 'promo',
        'long_url': 'https://example.com/sale',
        'created_at': '2025-10-15T12:00:00+00:00',
        'created_by_ip': '203.0.113.7',
        'expires_at': '2025-11-14T12:00:00+00:00',
        'active': True,
        'origin': 'custom',
    }


def test_url_record_from_dict_restores_record():
    record = UrlRecord(alias='abc12', long_url='https://example.com', created_at=NOW, active=False)
    assert UrlRecord.from_dict(record.as_dict()) == record


def test_url_record_from_dict_with_naive_timestamps():
    record = UrlRecord.from_dict(
        {
            'alias': 'abc12',
            'long_url': 'https://example.com',
            'created_at': '2025-10-15T12:00:00',
        }
    )

    assert record.created_at == NOW
    assert record.expires_at is None
    assert record.active is True
    assert record.origin is AliasOrigin.GENERATED


def test_click_event_as_dict():
    click = ClickEvent(alias='abc12', clicked_at=NOW, ip='198.51.100.4')
    assert click.as_dict() == {
        'alias': 'abc12',
        'clicked_at': '2025-10-15T12:00:00+00:00',
        'ip': '198.51.100.4',
        'user_agent': None,
    }


# -------------------------------------------------
# 4. Immutability
# -------------------------------------------------


@pytest.mark.parametrize('field, value', [('alias', 'other'), ('long_url', 'https://evil.example'), ('active', False)])
def test_url_record_is_frozen(field, value):
    record = UrlRecord(alias='abc12', long_url='https://example.com', created_at=NOW)
    with pytest.raises(FrozenInstanceError):
        setattr(record, field, value)
