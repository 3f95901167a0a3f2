from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from core.cache import ResponseCache, build_response_cache
from core.config_loader import AppConfig
from core.providers import CachedRequestGateway, ForumsClient, JobsClient, TrendsClient
from core.readiness import GenerationTracker, InsightCollector, ReadinessScoringService
from database.database import create_db_engine, make_session_factory


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    The response cache and progress tracker are created once here and passed
    by reference to everything that uses them. DB access inside services goes
    through readiness_uow() with the session factory held here.
    """
    config: AppConfig
    engine: Engine
    session_factory: sessionmaker
    cache: ResponseCache
    jobs_client: JobsClient
    forums_client: ForumsClient
    trends_client: TrendsClient
    tracker: GenerationTracker
    scoring_service: ReadinessScoringService
    insight_collector: InsightCollector

    @classmethod
    def build(cls, config: AppConfig, engine: Optional[Engine] = None) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            engine: Optional pre-built engine (tests pass an in-memory one)

        Returns:
            Fully wired AppContext instance
        """
        engine = engine or create_db_engine(config.database.url)
        session_factory = make_session_factory(engine)

        cache = build_response_cache(
            config.cache.backend,
            session_factory=session_factory,
            redis_url=config.cache.redis_url,
            redis_password=config.cache.redis_password
        )

        providers = config.providers
        jobs_client = JobsClient(
            CachedRequestGateway("JobsAPI", cache), providers.rapidapi_key, providers.jobs
        )
        forums_client = ForumsClient(
            CachedRequestGateway("ForumsAPI", cache), providers.rapidapi_key, providers.forums
        )
        trends_client = TrendsClient(
            CachedRequestGateway("TrendsAPI", cache), providers.rapidapi_key, providers.trends
        )

        tracker = GenerationTracker()
        readiness = config.readiness

        return cls(
            config=config,
            engine=engine,
            session_factory=session_factory,
            cache=cache,
            jobs_client=jobs_client,
            forums_client=forums_client,
            trends_client=trends_client,
            tracker=tracker,
            scoring_service=ReadinessScoringService(
                session_factory,
                jobs_client,
                tracker=tracker,
                job_search_limit=readiness.job_search_limit
            ),
            insight_collector=InsightCollector(
                session_factory,
                forums_client,
                trends_client,
                story_limit=readiness.story_limit,
                article_limit=readiness.trend_article_limit
            ),
        )

    def close(self) -> None:
        """Close provider HTTP sessions and dispose of the engine."""
        for client in (self.jobs_client, self.forums_client, self.trends_client):
            client.gateway.close()
        self.engine.dispose()
