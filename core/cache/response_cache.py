"""Fingerprint-keyed response cache shared by all provider clients."""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from sqlalchemy import select, delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from core.utils import utcnow
from database.database import db_session_scope
from database.models import ApiCacheEntry

logger = logging.getLogger(__name__)


class CacheTTL:
    """TTL classes by volatility of the underlying signal."""
    SHORT = 30 * 60              # job searches
    MEDIUM = 6 * 60 * 60         # job details
    LONG = 24 * 60 * 60          # forum discussions
    VERY_LONG = 7 * 24 * 60 * 60  # trend articles


class ResponseCache(ABC):
    """
    Contract for response stores.

    get() returns None for both missing and expired entries. Neither get() nor
    put() raises: a broken store reads as a miss and writes as a no-op.
    """

    @abstractmethod
    def get(self, fingerprint: str) -> Optional[Any]:
        ...

    @abstractmethod
    def put(self, fingerprint: str, payload: Any, ttl_seconds: int) -> bool:
        ...

    @abstractmethod
    def delete(self, fingerprint: str) -> bool:
        ...

    @abstractmethod
    def purge_expired(self) -> int:
        ...


class DatabaseResponseCache(ResponseCache):
    """Response cache backed by the api_cache table."""

    def __init__(
        self,
        session_factory: sessionmaker,
        clock: Callable[[], datetime] = utcnow
    ):
        self._session_factory = session_factory
        self._clock = clock

    def get(self, fingerprint: str) -> Optional[Any]:
        try:
            with db_session_scope(self._session_factory) as session:
                entry = session.execute(
                    select(ApiCacheEntry).where(ApiCacheEntry.fingerprint == fingerprint)
                ).scalar_one_or_none()

                if entry is None:
                    logger.debug(f"Cache miss for {fingerprint[:16]}...")
                    return None

                if entry.expires_at <= self._clock():
                    logger.debug(f"Cache entry {fingerprint[:16]}... expired at {entry.expires_at}")
                    return None

                logger.debug(f"Cache hit for {fingerprint[:16]}...")
                return entry.payload

        except Exception as e:
            logger.warning(f"Error reading from response cache: {e}")
            return None

    def put(self, fingerprint: str, payload: Any, ttl_seconds: int) -> bool:
        now = self._clock()
        expires_at = now + timedelta(seconds=ttl_seconds)
        try:
            try:
                self._replace(fingerprint, payload, now, expires_at)
            except IntegrityError:
                # Another writer inserted the same fingerprint between our delete and insert
                logger.debug(f"Concurrent write for {fingerprint[:16]}..., updating in place")
                self._overwrite(fingerprint, payload, now, expires_at)

            logger.debug(f"Cached {fingerprint[:16]}... (TTL: {ttl_seconds}s)")
            return True

        except Exception as e:
            logger.warning(f"Error writing to response cache: {e}")
            return False

    def delete(self, fingerprint: str) -> bool:
        try:
            with db_session_scope(self._session_factory) as session:
                result = session.execute(
                    delete(ApiCacheEntry).where(ApiCacheEntry.fingerprint == fingerprint)
                )
                return result.rowcount > 0
        except Exception as e:
            logger.warning(f"Error deleting from response cache: {e}")
            return False

    def purge_expired(self) -> int:
        """Drop every expired row. Returns the number of rows removed."""
        with db_session_scope(self._session_factory) as session:
            result = session.execute(
                delete(ApiCacheEntry).where(ApiCacheEntry.expires_at <= self._clock())
            )
            removed = result.rowcount or 0

        if removed:
            logger.info(f"Purged {removed} expired cache entries")
        return removed

    def _replace(self, fingerprint: str, payload: Any, now: datetime, expires_at: datetime) -> None:
        with db_session_scope(self._session_factory) as session:
            session.execute(delete(ApiCacheEntry).where(ApiCacheEntry.fingerprint == fingerprint))
            session.add(ApiCacheEntry(
                fingerprint=fingerprint,
                payload=payload,
                created_at=now,
                expires_at=expires_at,
            ))

    def _overwrite(self, fingerprint: str, payload: Any, now: datetime, expires_at: datetime) -> None:
        with db_session_scope(self._session_factory) as session:
            session.execute(
                update(ApiCacheEntry)
                .where(ApiCacheEntry.fingerprint == fingerprint)
                .values(payload=payload, created_at=now, expires_at=expires_at)
            )
