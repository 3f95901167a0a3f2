from database.repositories.base import BaseRepository
from database.repositories.transition import TransitionRepository
from database.repositories.skill import SkillRepository
from database.repositories.readiness import ReadinessScoreRepository

__all__ = [
    'BaseRepository',
    'TransitionRepository',
    'SkillRepository',
    'ReadinessScoreRepository',
]
