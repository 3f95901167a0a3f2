from sqlalchemy import Column, Integer, Text, DateTime, Boolean, Index

from core.utils import utcnow
from .base import Base


class RoleSkill(Base):
    """Canonical skill list for a role name."""
    __tablename__ = 'role_skill'

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_name = Column(Text, nullable=False)
    skill_name = Column(Text, nullable=False)

    __table_args__ = (
        Index('idx_role_skill_role', 'role_name'),
    )


class UserSkill(Base):
    __tablename__ = 'user_skill'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False)
    skill_name = Column(Text, nullable=False)
    proficiency_level = Column(Text)  # Beginner|Intermediate|Advanced|Expert
    years_of_experience = Column(Integer)
    verified = Column(Boolean, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index('idx_user_skill_user', 'user_id'),
    )
