#!/usr/bin/env python3
"""
Readiness Module - career transition readiness scoring.

Public API:
- ReadinessScoringService: generate and read readiness scores
- InsightCollector: gather and store insights for a transition
- ReadinessScore / RecommendationBundle: result models

Modules:
- models.py: Data structures (SignalResult, ReadinessScore, recommendations)
- insights.py: Keyword classification of insight text
- signals.py: The five sub-score extractors and skill gap ranking
- scoring.py: Fixed weights and the composite score
- recommendations.py: RecommendationSynthesizer
- progress.py: GenerationTracker state machine
- collector.py: InsightCollector
- service.py: ReadinessScoringService orchestrator
"""

from core.readiness.errors import TransitionNotFoundError
from core.readiness.models import (
    ReadinessScore,
    RecommendationBundle,
    RecommendationItem,
    SkillGapEntry,
    SignalResult,
)
from core.readiness.progress import GenerationTracker, GenerationState, GenerationEvent
from core.readiness.recommendations import RecommendationSynthesizer
from core.readiness.scoring import SCORING_WEIGHTS, calculate_overall_score
from core.readiness.service import ReadinessScoringService
from core.readiness.collector import InsightCollector

__all__ = [
    'TransitionNotFoundError',
    'ReadinessScore',
    'RecommendationBundle',
    'RecommendationItem',
    'SkillGapEntry',
    'SignalResult',
    'GenerationTracker',
    'GenerationState',
    'GenerationEvent',
    'RecommendationSynthesizer',
    'SCORING_WEIGHTS',
    'calculate_overall_score',
    'ReadinessScoringService',
    'InsightCollector',
]
