import logging
from typing import Any, Dict, Optional

from sqlalchemy import select

from core.utils import utcnow
from database.models import ReadinessScoreRecord
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

SCORE_FIELDS = (
    'overall_score',
    'market_demand_score',
    'skill_gap_score',
    'education_path_score',
    'industry_trend_score',
    'geographical_factor_score',
    'skill_gaps',
    'observations',
    'recommendations',
)


class ReadinessScoreRepository(BaseRepository):
    def get_latest_score(self, transition_id: int) -> Optional[ReadinessScoreRecord]:
        stmt = (
            select(ReadinessScoreRecord)
            .where(ReadinessScoreRecord.transition_id == transition_id)
            .order_by(ReadinessScoreRecord.updated_at.desc(), ReadinessScoreRecord.id.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalars().first()

    def upsert_score(self, transition_id: int, values: Dict[str, Any]) -> ReadinessScoreRecord:
        """Update the transition's score row if present, else insert one."""
        existing = self.get_latest_score(transition_id)
        now = utcnow()

        if existing:
            record = existing
            for name in SCORE_FIELDS:
                setattr(record, name, values[name])
            record.updated_at = now
        else:
            record = ReadinessScoreRecord(
                transition_id=transition_id,
                created_at=now,
                updated_at=now,
                **{name: values[name] for name in SCORE_FIELDS}
            )
            self.db.add(record)

        self.flush()
        logger.info(
            f"{'Updated' if existing else 'Inserted'} readiness score for transition "
            f"{transition_id}: overall={record.overall_score}"
        )
        return record
