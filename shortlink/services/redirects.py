from datetime import datetime, UTC

from shortlink.models import UrlRecord
from shortlink.exceptions import LinkNotFoundError, LinkGoneError


def ensure_redirectable(record: UrlRecord | None, alias: str, now: datetime | None = None) -> UrlRecord:
    """Return `record` if a visitor may be redirected to it.

    Raises:
        LinkNotFoundError:
            If no record resolves for the alias.
        LinkGoneError:
            If the record is inactive (regardless of expiry), or its expiration
            is strictly before `now`.
    """
    if record is None:
        raise LinkNotFoundError(f"Alias '{alias}' not found.")
    if not record.active:
        raise LinkGoneError(f"Alias '{alias}' is inactive.")
    if record.is_expired(now or datetime.now(UTC)):
        raise LinkGoneError(f"Alias '{alias}' expired at {record.expires_at.isoformat()}.")
    return record
