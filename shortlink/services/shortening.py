"""Short link creation, resolution and click recording

ShorteningService orchestrates the alias store, the resolution cache and the
alias generator. It owns three ordering rules:

    - a custom alias is checked with `exists` before saving, but the store's own
      uniqueness constraint is the authority; both paths raise AliasConflictError;
    - the cache entry of an alias is invalidated only AFTER the record is saved,
      so the next read can't cache a stale "not found";
    - a valid redirect records exactly one click before responding.

Example:
    >>> service = ShorteningService(store=alias_dao, cache=cache_dao)
    >>> record = service.create_short_url('https://example.com/page', custom_alias='promo', creator_ip='203.0.113.7')
    >>> service.find_by_alias('promo').long_url
    'https://example.com/page'
    >>> service.resolve_redirect('promo', ip='198.51.100.2', user_agent='curl/8.4', referrer=None)
    UrlRecord(alias='promo', ...)
    >>> service.get_click_count('promo')
    1
"""

import logging
import re
from collections.abc import Callable
from datetime import datetime, timedelta, UTC

from shortlink.constants import CUSTOM_ALIAS_PATTERN, Limits
from shortlink.models import UrlRecord, ClickEvent, AliasOrigin
from shortlink.exceptions import AliasConflictError, InvalidLinkError
from shortlink.dao.base import AliasBaseDAO, ResolutionCacheBaseDAO
from shortlink.dao.exceptions import AliasAlreadyExistsError, DAOError
from shortlink.services.redirects import ensure_redirectable
from shortlink.utils.config import ServiceSettings
from shortlink.utils.shortener import generate_alias


logger = logging.getLogger(__name__)

_CUSTOM_ALIAS_RE = re.compile(CUSTOM_ALIAS_PATTERN)


class ShorteningService:
    """Create and resolve short links

    Attributes:
        store (AliasBaseDAO):
            Durable alias store (source of truth).
        cache (ResolutionCacheBaseDAO):
            Cache-aside resolver in front of the store.
        settings (ServiceSettings):
            Default expiration and generated alias length.
        alias_generator (Callable[[int], str]):
            Produces alias candidates of a given length.
    """

    def __init__(
        self,
        store: AliasBaseDAO,
        cache: ResolutionCacheBaseDAO,
        settings: ServiceSettings | None = None,
        alias_generator: Callable[[int], str] = generate_alias,
    ):
        self.store = store
        self.cache = cache
        self.settings = settings or ServiceSettings()
        self.alias_generator = alias_generator

    def create_short_url(
        self,
        long_url: str,
        custom_alias: str | None = None,
        creator_ip: str | None = None,
        expires_at: datetime | None = None,
    ) -> UrlRecord:
        """Allocate an alias for `long_url` and persist the mapping

        Args:
            long_url (str):
                Target URL (non-blank, at most 2048 characters).
            custom_alias (str | None):
                Requested alias. None or blank means "generate one".
            creator_ip (str | None):
                Identity of the creator.
            expires_at (datetime | None):
                Expiration. Defaults to now + default_expiration_days.

        Returns:
            UrlRecord: the saved record

        Raises:
            InvalidLinkError:
                If the long URL or custom alias is malformed.
            AliasConflictError:
                If the custom alias (or, rarely, a generated one) is already taken.
            DataStoreError:
                If the store or cache is unreachable.
        """
        self._validate_long_url(long_url)
        now = datetime.now(UTC)

        if custom_alias is not None and custom_alias.strip():
            self._validate_custom_alias(custom_alias)
            if self.store.exists(custom_alias):
                raise AliasConflictError(f"Custom alias '{custom_alias}' is already used.")
            alias, origin = custom_alias, AliasOrigin.CUSTOM
        else:
            # Generated aliases are saved without an existence check; a collision
            # is still rejected by the store and surfaces as AliasConflictError.
            alias, origin = self.alias_generator(self.settings.alias_length), AliasOrigin.GENERATED

        if expires_at is None:
            expires_at = now + timedelta(days=self.settings.default_expiration_days)

        record = UrlRecord(
            alias=alias,
            long_url=long_url,
            created_at=now,
            created_by_ip=creator_ip,
            expires_at=expires_at,
            active=True,
            origin=origin,
        )

        try:
            self.store.save(record)
        except AliasAlreadyExistsError as e:
            logger.info(
                'Alias taken by a concurrent creator.',
                extra={'alias': alias, 'origin': str(origin)},
            )
            raise AliasConflictError(f"Alias '{alias}' is already used.") from e

        self.cache.invalidate(alias)

        logger.info('Short URL created.', extra={'alias': alias, 'origin': str(origin)})
        return record

    def find_by_alias(self, alias: str) -> UrlRecord | None:
        return self.cache.get(alias)

    def record_click(self, alias: str, ip: str | None, user_agent: str | None, referrer: str | None = None) -> None:
        """Append a click to the alias' log. Never raises on store failures.

        NOTE: `referrer` is accepted for API symmetry with the redirect request
              but is not persisted.
        """
        click = ClickEvent(alias=alias, clicked_at=datetime.now(UTC), ip=ip, user_agent=user_agent)
        try:
            self.store.append(click)
        except DAOError:
            logger.exception('Failed to record click. Continuing with redirect.', extra={'alias': alias})

    def get_click_count(self, alias: str) -> int:
        return self.store.count_clicks(alias)

    def resolve_redirect(
        self,
        alias: str,
        ip: str | None,
        user_agent: str | None,
        referrer: str | None = None,
        now: datetime | None = None,
    ) -> UrlRecord:
        """Resolve an alias for redirection and record the click

        Raises:
            LinkNotFoundError:
                If the alias doesn't resolve.
            LinkGoneError:
                If the link is inactive or expired (no click is recorded).
            DataStoreError:
                If the cache or store is unreachable.
        """
        record = ensure_redirectable(self.find_by_alias(alias), alias, now=now)
        self.record_click(alias, ip=ip, user_agent=user_agent, referrer=referrer)
        return record

    @staticmethod
    def _validate_long_url(long_url: str) -> None:
        if not isinstance(long_url, str) or not long_url.strip():
            raise InvalidLinkError('Long URL must be a non-empty string.')
        if len(long_url) > Limits.LONG_URL_MAX_LENGTH:
            raise InvalidLinkError(f'Long URL must be at most {Limits.LONG_URL_MAX_LENGTH} characters long.')

    @staticmethod
    def _validate_custom_alias(custom_alias: str) -> None:
        if not _CUSTOM_ALIAS_RE.fullmatch(custom_alias):
            raise InvalidLinkError(
                f'Custom alias must be 1-{Limits.CUSTOM_ALIAS_MAX_LENGTH} characters of letters, digits, "-" or "_".'
            )
