#!/usr/bin/env python3
"""
Insight Collector - gather forum stories, challenge counts and trend articles
for a transition and store them as insight rows for later scoring.
"""

import asyncio
import logging
from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import sessionmaker

from core.providers.forums import ForumsClient
from core.providers.models import ChallengeFrequency, ForumPost, TrendArticle, TrendStrength
from core.providers.trends import ANALYSIS_ARTICLE_LIMIT, TrendsClient
from core.readiness.errors import TransitionNotFoundError
from core.utils import utcnow
from database.uow import readiness_uow

logger = logging.getLogger(__name__)


def _story_insight(story: ForumPost) -> Dict[str, Any]:
    return {
        "type": "story",
        "content": f"{story.title}\n{story.content}".strip(),
        "source": story.platform,
        "date": story.date,
        "url": story.url,
    }


def _challenge_insight(challenge: ChallengeFrequency, total_stories: int) -> Dict[str, Any]:
    return {
        "type": "challenge",
        "content": f"{challenge.challenge}: mentioned in {challenge.frequency} of {total_stories} transition stories",
        "source": "forums",
    }


def _trend_insight(article: TrendArticle) -> Dict[str, Any]:
    return {
        "type": "trend",
        "content": f"{article.title}. {article.snippet}".strip(),
        "source": article.source,
        "date": article.published_at.date().isoformat() if article.published_at else None,
        "url": article.url,
    }


def _trend_summary_insight(target_role: str, strength: TrendStrength) -> Dict[str, Any]:
    content = (
        f"Industry trend for {target_role} is {strength.growth} "
        f"(trend score {strength.trend_score}/100 across {strength.article_count} recent articles)"
    )
    if strength.related_keywords:
        content += f"; related topics: {', '.join(strength.related_keywords[:5])}"
    return {"type": "trend", "content": content, "source": "trends"}


class InsightCollector:
    def __init__(
        self,
        session_factory: sessionmaker,
        forums_client: ForumsClient,
        trends_client: TrendsClient,
        story_limit: int = 10,
        article_limit: int = 10
    ):
        self.session_factory = session_factory
        self.forums_client = forums_client
        self.trends_client = trends_client
        self.story_limit = story_limit
        self.article_limit = article_limit

    async def collect(self, transition_id: int) -> int:
        """Fetch and store new insights. Returns the number of rows added."""
        current_role, target_role = await asyncio.to_thread(self._load_roles, transition_id)

        stories, articles = await asyncio.gather(
            self.forums_client.search_transition_stories(current_role, target_role, self.story_limit),
            self.trends_client.search_trend_articles(target_role, ANALYSIS_ARTICLE_LIMIT),
        )

        insights: List[Dict[str, Any]] = [_story_insight(s) for s in stories]
        insights.extend(
            _challenge_insight(c, len(stories)) for c in ForumsClient.count_challenges(stories)
        )
        if articles:
            strength = TrendsClient.score_articles(target_role, articles, now=utcnow())
            insights.append(_trend_summary_insight(target_role, strength))
        insights.extend(_trend_insight(a) for a in articles[:self.article_limit])

        added = await asyncio.to_thread(self._store, transition_id, insights)
        logger.info(
            f"Collected insights for transition {transition_id}: {len(stories)} stories, "
            f"{len(articles)} articles, {added} new rows"
        )
        return added

    def _load_roles(self, transition_id: int) -> Tuple[str, str]:
        with readiness_uow(self.session_factory) as repo:
            transition = repo.get_transition(transition_id)
            if transition is None:
                raise TransitionNotFoundError(transition_id)
            return transition.current_role, transition.target_role

    def _store(self, transition_id: int, insights: List[Dict[str, Any]]) -> int:
        if not insights:
            return 0
        with readiness_uow(self.session_factory) as repo:
            return repo.add_insights(transition_id, insights)
