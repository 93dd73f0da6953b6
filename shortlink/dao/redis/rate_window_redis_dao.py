"""Redis DAO for fixed-window request counters

Redis layout:
    <prefix>:ratelimit:<client id>  -> request count in the live window (integer, TTL = window length)

Example:
    >>> dao = RateWindowRedisDAO(prefix="app:dev")
    >>> dao.consume("203.0.113.7", limit=2, window_seconds=60)
    (True, 0)
    >>> dao.consume("203.0.113.7", limit=2, window_seconds=60)
    (True, 1)
    >>> dao.consume("203.0.113.7", limit=2, window_seconds=60)
    (False, 2)
"""

from beartype import beartype

from shortlink.dao.base import RateWindowBaseDAO
from shortlink.dao.redis.mixins import RedisClientMixin
from shortlink.dao.redis.helpers import handle_redis_connection_error


# KEYS[1] = window key, ARGV[1] = limit, ARGV[2] = window length (seconds)
# Returns {admitted (0/1), pre-increment count}
CONSUME_WINDOW_SCRIPT = """
local current = tonumber(redis.call('GET', KEYS[1]) or '0')
if current >= tonumber(ARGV[1]) then
    return {0, current}
end
redis.call('INCR', KEYS[1])
if redis.call('TTL', KEYS[1]) < 0 then
    redis.call('EXPIRE', KEYS[1], ARGV[2])
end
return {1, current}
"""


class RateWindowRedisDAO(RedisClientMixin, RateWindowBaseDAO):
    """Redis-based per-client request counters with self-expiring windows

    Methods:
        consume(client_id: str, limit: int, window_seconds: int, **kwargs) -> tuple[bool, int]:
            Check and count one request in a single Lua script call.
            Raises DataStoreError on connectivity issues with Redis.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._consume_script = self.redis.register_script(CONSUME_WINDOW_SCRIPT)

    @handle_redis_connection_error
    @beartype
    def consume(self, client_id: str, limit: int, window_seconds: int, **kwargs) -> tuple[bool, int]:
        """Admit one request into a client's window if it has room left

        NOTE: GET, INCR and EXPIRE run inside one script, which Redis executes
              atomically. With separate round trips, concurrent lambdas of one
              client could all read the same stale count:

              (lambda 1): GET <app>:ratelimit:<client>  => 2  (limit 3)
              (lambda 2): GET <app>:ratelimit:<client>  => 2
              (lambda 1): INCR                          => 3
              (lambda 2): INCR                          => 4  (admitted past the limit)

              The TTL is set whenever the key has none after INCR, rather than
              from an earlier read. A window that expired between two commands
              would otherwise be recreated without a TTL and never reset.

        Args:
            client_id (str):
                Client identity owning the window.
            limit (int):
                Max admitted requests per window.
            window_seconds (int):
                Window length, applied when the request opens a fresh window.

        Returns:
            tuple[bool, int]: (admitted, count before this request)
        """
        key = self.keys.rate_window_key(client_id)
        admitted, count = self._consume_script(keys=[key], args=[limit, window_seconds])
        return bool(admitted), int(count)
