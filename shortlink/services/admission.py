"""Fixed-window admission control for the link creation endpoint

Each client identity gets `max_requests` admitted requests per window of
`window_seconds`. Counters live in a shared store (RateWindowBaseDAO), so every
Lambda instance enforces the same quota.

The controller fails OPEN: when the counter store is unreachable, requests are
admitted without advertising any rate-limit headers. The quota is a best-effort
abuse guard, not a security boundary.

Example:
    >>> controller = AdmissionController(RateWindowRedisDAO(prefix='app:dev', healthcheck=False), max_requests=3, window_seconds=60)
    >>> [controller.admit('203.0.113.7').remaining for _ in range(3)]
    [2, 1, 0]
    >>> controller.admit('203.0.113.7').allowed
    False
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from shortlink.constants import Defaults
from shortlink.dao.base import RateWindowBaseDAO
from shortlink.dao.exceptions import DataStoreError


logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = 'unknown'


# fmt: off
@dataclass(frozen=True)
class AdmissionDecision:
    allowed: bool                       # Whether the request may proceed
    limit: int | None = None            # Configured max requests per window (None if unchecked)
    remaining: int | None = None        # Requests left in this window (None if unchecked)
    window_seconds: int | None = None   # Window length (None if unchecked)
# fmt: on

    @property
    def checked(self) -> bool:
        return self.limit is not None

    @classmethod
    def unchecked(cls) -> 'AdmissionDecision':
        return cls(allowed=True)

    def headers(self) -> dict[str, str]:
        if not self.checked:
            return {}
        return {
            'X-RateLimit-Limit': str(self.limit),
            'X-RateLimit-Remaining': str(self.remaining),
            'X-RateLimit-Window': str(self.window_seconds),
        }


def client_identity(headers: Mapping[str, str] | None, peer: str | None) -> str:
    """Derive the identity that owns a rate-limit quota

    Precedence:
        1. first entry of X-Forwarded-For (comma-separated, trimmed)
        2. X-Real-IP
        3. transport-level peer address

    Header names are matched case-insensitively; empty values are skipped.
    """
    normalized = {key.lower(): value for key, value in (headers or {}).items() if value}

    forwarded_for = normalized.get('x-forwarded-for', '').split(',')[0].strip()
    if forwarded_for:
        return forwarded_for

    real_ip = normalized.get('x-real-ip', '').strip()
    if real_ip:
        return real_ip

    return peer or UNKNOWN_CLIENT


class AdmissionController:
    """Fixed window counter over a shared RateWindowBaseDAO

    Attributes:
        counter (RateWindowBaseDAO):
            Shared store holding one counter per client identity.
        max_requests (int):
            Admitted requests per client and window.
        window_seconds (int):
            Window length, starting at a client's first request.
    """

    def __init__(
        self,
        counter: RateWindowBaseDAO,
        max_requests: int = Defaults.RATE_LIMIT_MAX_REQUESTS,
        window_seconds: int = Defaults.RATE_LIMIT_WINDOW_SECONDS,
    ):
        self.counter = counter
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    def admit(self, client_id: str) -> AdmissionDecision:
        """Count one request against the client's window

        The check and the increment are a single counter store operation, so
        concurrent requests of one client never act on the same stale count.

        Steps (atomic in the store):
            - Read the current count (absent/expired window counts as 0).
            - If count >= max_requests: deny, leaving the window untouched.
            - Else: INCR the counter and make sure the window expires after window_seconds.

        Returns:
            AdmissionDecision:
                allowed=True with remaining = max_requests - count - 1,
                allowed=False with remaining = 0,
                or an unchecked allowed=True decision if the store is unreachable.
        """
        try:
            admitted, count = self.counter.consume(client_id, limit=self.max_requests, window_seconds=self.window_seconds)
        except DataStoreError as e:
            logger.warning(
                'Rate limit counter store unreachable. Admitting request unchecked.',
                extra={'clientId': client_id, 'reason': str(e)},
            )
            return AdmissionDecision.unchecked()

        if not admitted:
            logger.info(
                'Rate limit exceeded for client.',
                extra={'clientId': client_id, 'count': count, 'limit': self.max_requests},
            )
            return AdmissionDecision(
                allowed=False,
                limit=self.max_requests,
                remaining=0,
                window_seconds=self.window_seconds,
            )

        return AdmissionDecision(
            allowed=True,
            limit=self.max_requests,
            remaining=self.max_requests - count - 1,
            window_seconds=self.window_seconds,
        )
