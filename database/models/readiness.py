from sqlalchemy import Column, Integer, DateTime, ForeignKey, JSON, UniqueConstraint, Index

from core.utils import utcnow
from .base import Base


class ReadinessScoreRecord(Base):
    """
    Current readiness score for a transition.

    One row per transition: regeneration updates the existing row.
    overall_score is always derived from the five sub-scores, never set directly.
    """
    __tablename__ = 'readiness_score'

    id = Column(Integer, primary_key=True, autoincrement=True)
    transition_id = Column(Integer, ForeignKey('transition.id', ondelete='CASCADE'), nullable=False)

    overall_score = Column(Integer, nullable=False)
    market_demand_score = Column(Integer, nullable=False)
    skill_gap_score = Column(Integer, nullable=False)
    education_path_score = Column(Integer, nullable=False)
    industry_trend_score = Column(Integer, nullable=False)
    geographical_factor_score = Column(Integer, nullable=False)

    skill_gaps = Column(JSON, default=list)
    observations = Column(JSON, default=dict)
    recommendations = Column(JSON, default=dict)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint('transition_id', name='uq_readiness_score_transition'),
        Index('idx_readiness_score_updated', 'updated_at'),
    )
