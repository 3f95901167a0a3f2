import yaml
import os
from typing import Optional, Literal
from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///readiness.db"


class CacheConfig(BaseModel):
    """Response cache backend for provider calls."""
    backend: Literal["database", "redis"] = "database"
    redis_url: Optional[str] = None
    redis_password: Optional[str] = None


class JobsProviderConfig(BaseModel):
    host: str = "jsearch.p.rapidapi.com"
    search_url: str = "https://jsearch.p.rapidapi.com/search"
    details_url: str = "https://jsearch.p.rapidapi.com/job-details"


class ForumsProviderConfig(BaseModel):
    reddit_host: str = "reddit-scraper2.p.rapidapi.com"
    reddit_search_url: str = "https://reddit-scraper2.p.rapidapi.com/search_posts_v3"
    quora_host: str = "quora-scraper.p.rapidapi.com"
    quora_search_url: str = "https://quora-scraper.p.rapidapi.com/search_questions"
    quora_answers_url: str = "https://quora-scraper.p.rapidapi.com/question_answers"


class TrendsProviderConfig(BaseModel):
    host: str = "newsnow.p.rapidapi.com"
    search_url: str = "https://newsnow.p.rapidapi.com/newsv2"


class ProvidersConfig(BaseModel):
    # All providers sit behind RapidAPI and share one key
    rapidapi_key: Optional[str] = None
    jobs: JobsProviderConfig = Field(default_factory=JobsProviderConfig)
    forums: ForumsProviderConfig = Field(default_factory=ForumsProviderConfig)
    trends: TrendsProviderConfig = Field(default_factory=TrendsProviderConfig)


class ReadinessConfig(BaseModel):
    """Limits used while generating a readiness score."""
    job_search_limit: int = 50
    story_limit: int = 10
    trend_article_limit: int = 10


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseModel):
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    readiness: ReadinessConfig = Field(default_factory=ReadinessConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from elsewhere), fall back to the project root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    # Allow env var override for DB URL
    env_db_url = os.environ.get("DATABASE_URL")
    if env_db_url:
        data.setdefault('database', {})
        data['database']['url'] = env_db_url

    # API key is normally only supplied through the environment
    env_api_key = os.environ.get("RAPIDAPI_KEY")
    if env_api_key:
        if not data.get('providers'):
            data['providers'] = {}
        data['providers']['rapidapi_key'] = env_api_key

    # Allow env var override for Redis URL
    env_redis_url = os.environ.get("REDIS_URL")
    if env_redis_url:
        if not data.get('cache'):
            data['cache'] = {}
        data['cache']['redis_url'] = env_redis_url

    env_log_level = os.environ.get("LOG_LEVEL")
    if env_log_level:
        if not data.get('logging'):
            data['logging'] = {}
        data['logging']['level'] = env_log_level.upper()

    return AppConfig(**data)
