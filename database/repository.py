import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from database.models import Transition, Insight, ReadinessScoreRecord
from database.repositories import (
    BaseRepository,
    TransitionRepository,
    SkillRepository,
    ReadinessScoreRepository,
)

logger = logging.getLogger(__name__)


class ReadinessRepository(BaseRepository):
    """
    Facade over the per-table repositories.

    All methods share one Session, so reads made through a single instance see
    one consistent snapshot of the transition, its insights and the skill lists.
    """

    def __init__(self, db: Session):
        super().__init__(db)
        self.transitions = TransitionRepository(db)
        self.skills = SkillRepository(db)
        self.scores = ReadinessScoreRepository(db)

    def get_transition(self, transition_id: int) -> Optional[Transition]:
        return self.transitions.get_transition(transition_id)

    def get_insights_by_transition_id(self, transition_id: int) -> List[Insight]:
        return self.transitions.get_insights_by_transition_id(transition_id)

    def add_insights(self, transition_id: int, insights: Iterable[Dict[str, Any]]) -> int:
        return self.transitions.add_insights(transition_id, insights)

    def get_role_skills(self, role_name: str) -> List[str]:
        return self.skills.get_role_skills(role_name)

    def get_user_skills(self, user_id: int) -> List[str]:
        return self.skills.get_user_skills(user_id)

    def upsert_score(self, transition_id: int, values: Dict[str, Any]) -> ReadinessScoreRecord:
        return self.scores.upsert_score(transition_id, values)

    def get_latest_score(self, transition_id: int) -> Optional[ReadinessScoreRecord]:
        return self.scores.get_latest_score(transition_id)
