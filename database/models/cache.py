from sqlalchemy import Column, Integer, Text, DateTime, JSON, Index

from core.utils import utcnow
from .base import Base


class ApiCacheEntry(Base):
    """
    Cached third-party response keyed by request fingerprint.

    Rows past expires_at are invisible to readers and reclaimed lazily.
    """
    __tablename__ = 'api_cache'

    id = Column(Integer, primary_key=True, autoincrement=True)
    fingerprint = Column(Text, nullable=False, unique=True)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    expires_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index('idx_api_cache_expires', 'expires_at'),
    )
