"""
Normalized provider result types.

Raw third-party JSON is mapped into these models at the client boundary;
items that fail validation are dropped there, so nothing untyped leaks
downstream. Every result exposes a title, a text body, a source identifier
and a timestamp for keyword scanning.
"""
from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class SearchFilters(BaseModel):
    location: Optional[str] = None
    remote: Optional[bool] = None
    date_range: Optional[Literal["all", "today", "3days", "week", "month"]] = None


class SalaryRange(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None
    currency: Optional[str] = None

    @property
    def midpoint(self) -> Optional[float]:
        values = [v for v in (self.min, self.max) if v is not None]
        if not values:
            return None
        return sum(values) / len(values)


class JobListing(BaseModel):
    id: str
    title: str
    company: Optional[str] = None
    location: Optional[str] = None
    remote: bool = False
    url: Optional[str] = None
    description: str = ""
    highlights: Dict[str, List[str]] = Field(default_factory=dict)
    posted_at: Optional[datetime] = None
    required_skills: List[str] = Field(default_factory=list)
    salary: Optional[SalaryRange] = None
    source: str = "jsearch"

    @property
    def content(self) -> str:
        return f"{self.title}\n{self.description}"


class MarketSummary(BaseModel):
    total_listings: int = 0
    top_companies: List[str] = Field(default_factory=list)
    remote_share: float = 0.0  # 0-1
    average_salary: Optional[float] = None
    salary_currency: Optional[str] = None


class ForumPost(BaseModel):
    platform: Literal["reddit", "quora"]
    title: str
    content: str
    url: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None  # YYYY-MM-DD where known
    upvotes: int = 0

    @property
    def source(self) -> str:
        return self.platform


class QuoraQuestion(BaseModel):
    id: str
    title: str
    url: str
    num_answers: int = 0
    created: Optional[str] = None


class QuoraAnswer(BaseModel):
    id: str
    content: str
    url: Optional[str] = None
    author: Optional[str] = None
    upvotes: int = 0
    created: Optional[str] = None


class TrendArticle(BaseModel):
    title: str
    url: Optional[str] = None
    source: str = "unknown"
    source_url: Optional[str] = None
    published_at: Optional[datetime] = None
    snippet: str = ""
    category: Optional[str] = None

    @property
    def content(self) -> str:
        return f"{self.title}\n{self.snippet}"


class ChallengeFrequency(BaseModel):
    challenge: str
    frequency: int


class TrendStrength(BaseModel):
    trend_score: int = Field(ge=0, le=100)
    growth: Literal["declining", "stable", "growing", "emerging"]
    article_count: int = 0
    top_articles: List[TrendArticle] = Field(default_factory=list)
    related_keywords: List[str] = Field(default_factory=list)
