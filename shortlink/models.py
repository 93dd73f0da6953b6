from dataclasses import dataclass
from datetime import datetime, UTC
from enum import StrEnum
from typing import Any


class AliasOrigin(StrEnum):
    CUSTOM = 'custom'
    GENERATED = 'generated'


def _isoformat(value: datetime | None) -> str | None:
    return None if value is None else value.isoformat()


def _parse_datetime(value: str | None) -> datetime | None:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    # Naive timestamps are stored as UTC
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


# fmt: off
@dataclass(frozen=True)
class UrlRecord:
    alias: str                              # Unique short identifier, immutable once created
    long_url: str                           # Target URL the alias redirects to
    created_at: datetime                    # Server time at save
    created_by_ip: str | None = None        # Creator identity (network address)
    expires_at: datetime | None = None      # After this moment the alias is gone
    active: bool = True                     # Deactivated aliases are gone regardless of expiry
    origin: AliasOrigin = AliasOrigin.GENERATED
# fmt: on

    @property
    def custom(self) -> bool:
        return self.origin is AliasOrigin.CUSTOM

    def is_expired(self, now: datetime | None = None) -> bool:
        """True if the record has an expiration strictly before `now` (defaults to current UTC time)."""
        if self.expires_at is None:
            return False
        return self.expires_at < (now or datetime.now(UTC))

    def as_dict(self) -> dict[str, Any]:
        return {
            'alias': self.alias,
            'long_url': self.long_url,
            'created_at': _isoformat(self.created_at),
            'created_by_ip': self.created_by_ip,
            'expires_at': _isoformat(self.expires_at),
            'active': self.active,
            'origin': str(self.origin),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'UrlRecord':
        return cls(
            alias=data['alias'],
            long_url=data['long_url'],
            created_at=_parse_datetime(data['created_at']),
            created_by_ip=data.get('created_by_ip'),
            expires_at=_parse_datetime(data.get('expires_at')),
            active=bool(data.get('active', True)),
            origin=AliasOrigin(data.get('origin', AliasOrigin.GENERATED)),
        )


# fmt: off
@dataclass(frozen=True)
class ClickEvent:
    alias: str                      # Alias that was resolved (reference, not ownership)
    clicked_at: datetime            # Redirect time
    ip: str | None = None           # Visitor identity
    user_agent: str | None = None   # Visitor User-Agent header
# fmt: on

    def as_dict(self) -> dict[str, Any]:
        return {
            'alias': self.alias,
            'clicked_at': _isoformat(self.clicked_at),
            'ip': self.ip,
            'user_agent': self.user_agent,
        }
