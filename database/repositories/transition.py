import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from sqlalchemy import select

from database.models import Transition, Insight
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class TransitionRepository(BaseRepository):
    def get_transition(self, transition_id: int) -> Optional[Transition]:
        stmt = select(Transition).where(Transition.id == transition_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_insights_by_transition_id(self, transition_id: int) -> List[Insight]:
        stmt = (
            select(Insight)
            .where(Insight.transition_id == transition_id)
            .order_by(Insight.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def add_insights(self, transition_id: int, insights: Iterable[Dict[str, Any]]) -> int:
        """Insert new insights, skipping any whose url (or content, when url is empty) is already stored."""
        existing = self.get_insights_by_transition_id(transition_id)
        seen: Set[str] = {self._dedupe_key(i.url, i.content) for i in existing}

        added = 0
        for data in insights:
            key = self._dedupe_key(data.get('url'), data.get('content', ''))
            if key in seen:
                continue
            seen.add(key)
            self.db.add(Insight(
                transition_id=transition_id,
                type=data['type'],
                content=data['content'],
                source=data.get('source'),
                date=data.get('date'),
                experience_years=data.get('experience_years'),
                url=data.get('url'),
            ))
            added += 1

        if added:
            self.flush()
            logger.info(f"Stored {added} new insights for transition {transition_id}")
        return added

    @staticmethod
    def _dedupe_key(url: Optional[str], content: str) -> str:
        return f"url:{url}" if url else f"content:{(content or '').strip().lower()}"
