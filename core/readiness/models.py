#!/usr/bin/env python3
"""
Readiness Models - Data structures for signals, scores and recommendations.

Dataclasses carry in-process snapshots between the persistence layer and the
pure signal functions. Pydantic models define everything that is persisted or
returned to callers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

NEUTRAL_SCORE = 50


@dataclass
class SignalResult:
    """One sub-score plus the observations that explain it."""
    score: int
    observations: List[str] = field(default_factory=list)
    defaulted: bool = False

    @classmethod
    def neutral(cls, reason: str) -> "SignalResult":
        return cls(score=NEUTRAL_SCORE, observations=[reason], defaulted=True)


@dataclass
class InsightData:
    """Detached copy of a stored insight row."""
    type: str
    content: str
    source: Optional[str] = None
    date: Optional[str] = None
    experience_years: Optional[int] = None
    url: Optional[str] = None

    @classmethod
    def from_record(cls, record) -> "InsightData":
        return cls(
            type=(record.type or "").lower(),
            content=record.content or "",
            source=record.source,
            date=record.date,
            experience_years=record.experience_years,
            url=record.url,
        )


@dataclass
class TransitionSnapshot:
    """Everything loaded from the store for one score generation, read in one session."""
    transition_id: int
    user_id: Optional[int]
    current_role: str
    target_role: str
    insights: List[InsightData] = field(default_factory=list)
    user_skills: List[str] = field(default_factory=list)
    current_role_skills: List[str] = field(default_factory=list)
    target_role_skills: List[str] = field(default_factory=list)


class SkillGapEntry(BaseModel):
    skill: str
    gap_level: Literal["Low", "Medium", "High"]
    confidence: int = Field(ge=0, le=100)
    mention_count: int = Field(default=0, ge=0)


class ResourceLink(BaseModel):
    title: str
    url: str
    type: Literal["course", "video", "article", "tool", "community"]


class RecommendationItem(BaseModel):
    title: str
    description: str
    priority: Literal["high", "medium", "low"]
    timeframe: Literal["immediate", "short-term", "long-term", "ongoing"]
    resources: List[ResourceLink] = Field(default_factory=list)


class RecommendationBundle(BaseModel):
    skill_development: List[RecommendationItem] = Field(default_factory=list)
    market_positioning: List[RecommendationItem] = Field(default_factory=list)
    education_paths: List[RecommendationItem] = Field(default_factory=list)
    experience_building: List[RecommendationItem] = Field(default_factory=list)
    networking: List[RecommendationItem] = Field(default_factory=list)
    next_steps: List[RecommendationItem] = Field(default_factory=list)


class ReadinessScore(BaseModel):
    """
    Composite readiness score for one transition.

    overall_score is derived from the five sub-scores by the scoring module;
    nothing else should set it.
    """
    transition_id: int
    overall_score: int = Field(ge=0, le=100)
    market_demand_score: int = Field(ge=0, le=100)
    skill_gap_score: int = Field(ge=0, le=100)
    education_path_score: int = Field(ge=0, le=100)
    industry_trend_score: int = Field(ge=0, le=100)
    geographical_factor_score: int = Field(ge=0, le=100)
    skill_gaps: List[SkillGapEntry] = Field(default_factory=list)
    observations: Dict[str, List[str]] = Field(default_factory=dict)
    recommendations: RecommendationBundle = Field(default_factory=RecommendationBundle)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def sub_scores(self) -> Dict[str, int]:
        return {
            "market_demand": self.market_demand_score,
            "skill_gap": self.skill_gap_score,
            "education_path": self.education_path_score,
            "industry_trend": self.industry_trend_score,
            "geographical_factor": self.geographical_factor_score,
        }

    @classmethod
    def from_record(cls, record) -> "ReadinessScore":
        return cls(
            transition_id=record.transition_id,
            overall_score=record.overall_score,
            market_demand_score=record.market_demand_score,
            skill_gap_score=record.skill_gap_score,
            education_path_score=record.education_path_score,
            industry_trend_score=record.industry_trend_score,
            geographical_factor_score=record.geographical_factor_score,
            skill_gaps=record.skill_gaps or [],
            observations=record.observations or {},
            recommendations=record.recommendations or {},
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def to_record_values(self) -> Dict[str, Any]:
        """Column values for ReadinessScoreRepository.upsert_score."""
        return {
            "overall_score": self.overall_score,
            "market_demand_score": self.market_demand_score,
            "skill_gap_score": self.skill_gap_score,
            "education_path_score": self.education_path_score,
            "industry_trend_score": self.industry_trend_score,
            "geographical_factor_score": self.geographical_factor_score,
            "skill_gaps": [gap.model_dump() for gap in self.skill_gaps],
            "observations": self.observations,
            "recommendations": self.recommendations.model_dump(mode="json"),
        }
