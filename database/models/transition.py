from sqlalchemy import Column, Integer, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from core.utils import utcnow
from .base import Base


class Transition(Base):
    """
    A user's declared career change (current role -> target role).

    Readiness scores and insights hang off this row.
    """
    __tablename__ = 'transition'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=True)

    current_role = Column(Text, nullable=False)
    target_role = Column(Text, nullable=False)

    is_complete = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    insights = relationship("Insight", back_populates="transition", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_transition_user', 'user_id'),
    )


class Insight(Base):
    """
    Free-text observation gathered for a transition (forum story, trend article,
    challenge summary, ...). Classified by keyword heuristics at scoring time.
    """
    __tablename__ = 'insight'

    id = Column(Integer, primary_key=True, autoincrement=True)
    transition_id = Column(Integer, ForeignKey('transition.id', ondelete='CASCADE'), nullable=False)

    type = Column(Text, nullable=False)  # observation|challenge|story|trend|education|location
    content = Column(Text, nullable=False)
    source = Column(Text)
    date = Column(Text)
    experience_years = Column(Integer)
    url = Column(Text)

    transition = relationship("Transition", back_populates="insights")

    __table_args__ = (
        Index('idx_insight_transition', 'transition_id'),
    )
