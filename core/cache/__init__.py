"""Cache Module - fingerprint-keyed response caching for provider calls."""
from typing import Optional

from sqlalchemy.orm import sessionmaker

from core.cache.response_cache import (
    CacheTTL,
    ResponseCache,
    DatabaseResponseCache,
)
from core.cache.redis_cache import RedisResponseCache


def build_response_cache(
    backend: str,
    session_factory: Optional[sessionmaker] = None,
    redis_url: Optional[str] = None,
    redis_password: Optional[str] = None
) -> ResponseCache:
    """Create the configured cache backend ('database' or 'redis')."""
    if backend == "redis":
        return RedisResponseCache(redis_url or "redis://localhost:6379/0", password=redis_password)
    if backend == "database":
        if session_factory is None:
            raise ValueError("database cache backend requires a session factory")
        return DatabaseResponseCache(session_factory)
    raise ValueError(f"Unknown cache backend: {backend}")


__all__ = [
    'CacheTTL',
    'ResponseCache',
    'DatabaseResponseCache',
    'RedisResponseCache',
    'build_response_cache',
]
