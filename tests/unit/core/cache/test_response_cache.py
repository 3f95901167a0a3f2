"""
Tests for the response caches.

DatabaseResponseCache runs against in-memory SQLite with an injected clock;
RedisResponseCache runs against a mocked Redis client.
"""
import json
from datetime import datetime, timedelta
from unittest.mock import Mock, patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from core.cache import CacheTTL, DatabaseResponseCache, RedisResponseCache, build_response_cache
from database.models import ApiCacheEntry


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now += timedelta(seconds=seconds)


@pytest.mark.db
class TestDatabaseResponseCache:

    @pytest.fixture
    def clock(self):
        return FakeClock(datetime(2024, 5, 1, 12, 0, 0))

    @pytest.fixture
    def cache(self, session_factory, clock):
        return DatabaseResponseCache(session_factory, clock=clock)

    def _row_count(self, session_factory, fingerprint):
        with session_factory() as session:
            return session.execute(
                select(func.count()).select_from(ApiCacheEntry).where(ApiCacheEntry.fingerprint == fingerprint)
            ).scalar_one()

    def test_01_miss_on_empty_store(self, cache):
        assert cache.get("abc") is None

    def test_02_put_then_get(self, cache):
        assert cache.put("abc", {"data": [1, 2, 3]}, CacheTTL.SHORT) is True
        assert cache.get("abc") == {"data": [1, 2, 3]}

    def test_03_put_is_idempotent_and_last_write_wins(self, cache, session_factory):
        cache.put("abc", {"v": 1}, CacheTTL.SHORT)
        cache.put("abc", {"v": 2}, CacheTTL.SHORT)

        assert cache.get("abc") == {"v": 2}
        assert self._row_count(session_factory, "abc") == 1

    def test_04_expired_entry_is_invisible(self, cache, clock):
        cache.put("abc", {"v": 1}, ttl_seconds=1)
        assert cache.get("abc") == {"v": 1}

        clock.advance(1)
        assert cache.get("abc") is None

    def test_05_rewrite_after_expiry_replaces_stale_row(self, cache, clock, session_factory):
        cache.put("abc", {"v": 1}, ttl_seconds=1)
        clock.advance(5)
        cache.put("abc", {"v": 2}, ttl_seconds=60)

        assert cache.get("abc") == {"v": 2}
        assert self._row_count(session_factory, "abc") == 1

    def test_06_later_ttl_wins(self, cache, clock):
        cache.put("abc", {"v": 1}, ttl_seconds=CacheTTL.VERY_LONG)
        cache.put("abc", {"v": 2}, ttl_seconds=10)

        clock.advance(11)
        assert cache.get("abc") is None

    def test_07_read_failure_is_a_miss(self):
        broken_factory = Mock(side_effect=RuntimeError("database is down"))
        cache = DatabaseResponseCache(broken_factory)
        assert cache.get("abc") is None

    def test_08_write_failure_is_swallowed(self):
        broken_factory = Mock(side_effect=RuntimeError("database is down"))
        cache = DatabaseResponseCache(broken_factory)
        assert cache.put("abc", {"v": 1}, CacheTTL.SHORT) is False

    def test_09_delete(self, cache):
        cache.put("abc", {"v": 1}, CacheTTL.SHORT)
        assert cache.delete("abc") is True
        assert cache.get("abc") is None
        assert cache.delete("abc") is False

    def test_10_purge_expired(self, cache, clock, session_factory):
        cache.put("short", {"v": 1}, ttl_seconds=10)
        cache.put("long", {"v": 2}, ttl_seconds=CacheTTL.LONG)
        clock.advance(60)

        assert cache.purge_expired() == 1
        assert self._row_count(session_factory, "short") == 0
        assert cache.get("long") == {"v": 2}

    def test_11_list_payloads_round_trip(self, cache):
        cache.put("abc", [{"id": 1}, {"id": 2}], CacheTTL.SHORT)
        assert cache.get("abc") == [{"id": 1}, {"id": 2}]

    def test_12_insert_collision_becomes_update(self, cache, session_factory):
        cache.put("abc", {"v": 1}, CacheTTL.SHORT)
        collision = IntegrityError("INSERT INTO api_cache", {}, Exception("UNIQUE constraint failed"))

        with patch.object(cache, "_replace", side_effect=collision) as replace:
            assert cache.put("abc", {"v": 2}, CacheTTL.SHORT) is True

        replace.assert_called_once()
        assert cache.get("abc") == {"v": 2}
        assert self._row_count(session_factory, "abc") == 1


def test_ttl_classes():
    assert CacheTTL.SHORT == 1800
    assert CacheTTL.MEDIUM == 21600
    assert CacheTTL.LONG == 86400
    assert CacheTTL.VERY_LONG == 604800


class TestRedisResponseCache:

    @pytest.fixture
    def mock_redis(self):
        mock = Mock()
        mock.ping.return_value = True
        mock.get.return_value = None
        mock.setex.return_value = True
        mock.delete.return_value = 1
        return mock

    @pytest.fixture
    def cache(self, mock_redis):
        with patch('core.cache.redis_cache.Redis') as mock_redis_class:
            mock_redis_class.from_url.return_value = mock_redis
            return RedisResponseCache("redis://localhost:6379/0", password="testpass")

    def test_01_initialization_failure_disables_cache(self):
        with patch('core.cache.redis_cache.Redis') as mock_redis_class:
            mock_redis_class.from_url.side_effect = Exception("Connection refused")
            cache = RedisResponseCache("redis://localhost:6379/0")

        assert cache.is_available is False
        assert cache.get("abc") is None
        assert cache.put("abc", {"v": 1}, 60) is False

    def test_02_put_uses_setex_with_prefixed_key(self, cache, mock_redis):
        assert cache.put("abc", {"v": 1}, CacheTTL.LONG) is True
        mock_redis.setex.assert_called_once_with("api:abc", CacheTTL.LONG, json.dumps({"v": 1}))

    def test_03_get_hit(self, cache, mock_redis):
        mock_redis.get.return_value = json.dumps({"v": 1})
        assert cache.get("abc") == {"v": 1}
        mock_redis.get.assert_called_with("api:abc")

    def test_04_get_error_is_a_miss(self, cache, mock_redis):
        mock_redis.get.side_effect = Exception("Redis error")
        assert cache.get("abc") is None

    def test_05_put_error_is_swallowed(self, cache, mock_redis):
        mock_redis.setex.side_effect = Exception("Redis error")
        assert cache.put("abc", {"v": 1}, 60) is False

    def test_06_delete(self, cache, mock_redis):
        assert cache.delete("abc") is True
        mock_redis.delete.assert_called_once_with("api:abc")


def test_build_response_cache_database(session_factory):
    assert isinstance(build_response_cache("database", session_factory=session_factory), DatabaseResponseCache)


def test_build_response_cache_rejects_unknown_backend():
    with pytest.raises(ValueError):
        build_response_cache("memcached")
