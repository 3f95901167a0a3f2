from .base import Base
from .cache import ApiCacheEntry
from .transition import Transition, Insight
from .skill import RoleSkill, UserSkill
from .readiness import ReadinessScoreRecord

__all__ = [
    'Base',
    'ApiCacheEntry',
    'Transition',
    'Insight',
    'RoleSkill',
    'UserSkill',
    'ReadinessScoreRecord',
]
