"""Trend article client (news search on RapidAPI)."""
import logging
import re
from collections import Counter
from datetime import datetime
from typing import Any, List, Optional

from pydantic import ValidationError

from core.cache import CacheTTL
from core.config_loader import TrendsProviderConfig
from core.providers.base import BaseProviderClient, parse_timestamp
from core.providers.errors import ProviderError
from core.providers.gateway import CachedRequestGateway
from core.providers.models import TrendArticle, TrendStrength
from core.utils import round_half_up, utcnow

logger = logging.getLogger(__name__)

ANALYSIS_ARTICLE_LIMIT = 20
STOP_WORDS = {"a", "the", "and", "of", "in", "to", "for", "with", "on", "at", "from", "by"}


def freshness_score(avg_age_days: float) -> float:
    """0-40 points; <1 day scores 40, 7 days 20, 30 days 5, 60+ days 0."""
    if avg_age_days < 1:
        return 40.0
    if avg_age_days < 7:
        return 40 - ((avg_age_days - 1) / 6 * 20)
    if avg_age_days < 30:
        return 20 - ((avg_age_days - 7) / 23 * 15)
    if avg_age_days < 60:
        return 5 - ((avg_age_days - 30) / 30 * 5)
    return 0.0


def growth_label(trend_score: int) -> str:
    if trend_score < 30:
        return "declining"
    if trend_score < 50:
        return "stable"
    if trend_score < 75:
        return "growing"
    return "emerging"


class TrendsClient(BaseProviderClient):
    def __init__(
        self,
        gateway: CachedRequestGateway,
        api_key: Optional[str],
        config: Optional[TrendsProviderConfig] = None,
        clock=utcnow
    ):
        super().__init__(gateway, api_key)
        self.config = config or TrendsProviderConfig()
        self._clock = clock

    async def search_trend_articles(self, keyword: str, limit: int = 10) -> List[TrendArticle]:
        params = {"query": keyword, "language": "en", "limit": limit}
        try:
            payload = await self._get(self.config.search_url, self.config.host, params, CacheTTL.VERY_LONG)
        except ProviderError as e:
            logger.warning(f"Trend article search failed for '{keyword}': {e}")
            return []

        articles = self._map_articles(payload)
        logger.info(f"[{self.service_name}] Found {len(articles)} articles for keyword: {keyword}")
        return articles[:limit]

    async def analyze_trend_strength(self, keyword: str) -> TrendStrength:
        articles = await self.search_trend_articles(keyword, ANALYSIS_ARTICLE_LIMIT)
        return self.score_articles(keyword, articles, now=self._clock())

    @staticmethod
    def score_articles(keyword: str, articles: List[TrendArticle], now: datetime) -> TrendStrength:
        """
        Trend score = volume (0-40) + freshness (0-40) + source diversity (0-20).

        Articles without a publish date are left out of the freshness average;
        when none are dated, freshness contributes nothing.
        """
        if not articles:
            return TrendStrength(trend_score=0, growth="declining", article_count=0)

        volume = min(len(articles) / ANALYSIS_ARTICLE_LIMIT * 40, 40)

        ages = [
            (now - a.published_at).total_seconds() / 86400
            for a in articles if a.published_at is not None
        ]
        freshness = freshness_score(sum(ages) / len(ages)) if ages else 0.0

        unique_sources = len({a.source for a in articles})
        diversity = min(unique_sources / 10 * 20, 20)

        trend_score = max(0, min(100, round_half_up(volume + freshness + diversity)))

        return TrendStrength(
            trend_score=trend_score,
            growth=growth_label(trend_score),
            article_count=len(articles),
            top_articles=articles[:5],
            related_keywords=TrendsClient.related_keywords(keyword, articles),
        )

    @staticmethod
    def related_keywords(keyword: str, articles: List[TrendArticle]) -> List[str]:
        """Title words longer than 3 chars seen at least twice, top 10 by count."""
        counts: Counter = Counter()
        skip = keyword.lower()
        for article in articles:
            words = re.sub(r"[^\w\s]", "", article.title.lower()).split()
            counts.update(w for w in words if len(w) > 3 and w not in STOP_WORDS and w != skip)

        ranked = sorted((item for item in counts.items() if item[1] >= 2), key=lambda kv: (-kv[1], kv[0]))
        return [word for word, _ in ranked[:10]]

    def _map_articles(self, payload: Any) -> List[TrendArticle]:
        if not isinstance(payload, dict) or not isinstance(payload.get("articles"), list):
            logger.warning(f"[{self.service_name}] Invalid results format, expected an 'articles' list")
            return []

        articles = []
        for raw in payload["articles"]:
            if not isinstance(raw, dict) or not raw.get("title"):
                continue
            source = raw.get("source") if isinstance(raw.get("source"), dict) else {}
            try:
                articles.append(TrendArticle(
                    title=raw["title"],
                    url=raw.get("url"),
                    source=source.get("name") or "unknown",
                    source_url=source.get("url"),
                    published_at=parse_timestamp(raw.get("publish_date")),
                    snippet=raw.get("snippet") or "",
                    category=raw.get("category"),
                ))
            except ValidationError as e:
                logger.debug(f"Dropping malformed trend article {raw.get('url')}: {e}")
        return articles
