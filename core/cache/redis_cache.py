"""Redis-backed response cache. Expiry is delegated to Redis (SETEX)."""
import json
import logging
from typing import Any, Optional
from urllib.parse import urlparse

from redis import Redis

from core.cache.response_cache import ResponseCache

logger = logging.getLogger(__name__)


def _sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    try:
        parsed = urlparse(url)
        if parsed.password:
            sanitized = parsed._replace(
                netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
            )
            return sanitized.geturl()
        return url
    except ValueError:
        return url


class RedisResponseCache(ResponseCache):
    """
    Response cache on Redis.

    A Redis that cannot be reached at startup leaves the cache disabled: every
    get() misses and every put() is a no-op.
    """

    KEY_PREFIX = "api:"

    def __init__(self, redis_url: str = "redis://localhost:6379/0", password: Optional[str] = None):
        self.redis_url = redis_url
        self._redis: Optional[Redis] = None

        try:
            self._redis = Redis.from_url(
                redis_url,
                password=password,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5
            )
            self._redis.ping()
            logger.info(f"Response cache connected to Redis at {_sanitize_url(redis_url)}")
        except Exception as e:
            logger.warning(f"Response cache Redis unavailable: {e}")
            self._redis = None

    @property
    def is_available(self) -> bool:
        return self._redis is not None

    def _make_key(self, fingerprint: str) -> str:
        return f"{self.KEY_PREFIX}{fingerprint}"

    def get(self, fingerprint: str) -> Optional[Any]:
        if not self.is_available:
            return None

        try:
            data = self._redis.get(self._make_key(fingerprint))
            if data is None:
                logger.debug(f"Cache miss for {fingerprint[:16]}...")
                return None
            logger.debug(f"Cache hit for {fingerprint[:16]}...")
            return json.loads(data)

        except Exception as e:
            logger.warning(f"Error reading from Redis response cache: {e}")
            return None

    def put(self, fingerprint: str, payload: Any, ttl_seconds: int) -> bool:
        if not self.is_available:
            return False

        try:
            # SETEX overwrites atomically, so one key per fingerprint
            self._redis.setex(self._make_key(fingerprint), max(1, int(ttl_seconds)), json.dumps(payload))
            logger.debug(f"Cached {fingerprint[:16]}... (TTL: {ttl_seconds}s)")
            return True

        except Exception as e:
            logger.warning(f"Error writing to Redis response cache: {e}")
            return False

    def delete(self, fingerprint: str) -> bool:
        if not self.is_available:
            return False
        try:
            return bool(self._redis.delete(self._make_key(fingerprint)))
        except Exception as e:
            logger.warning(f"Error deleting from Redis response cache: {e}")
            return False

    def purge_expired(self) -> int:
        return 0
