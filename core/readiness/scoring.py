#!/usr/bin/env python3
"""
Composite Score - fixed-weight combination of the five sub-scores.

overall = round_half_up(0.25 * market + 0.30 * skill_gap + 0.15 * education
                        + 0.20 * trend + 0.10 * geography)

Sub-scores are integers before weighting; the weighted sum is rounded once.
"""

import math
from typing import Dict

from core.utils import clamp_score

SCORING_WEIGHTS: Dict[str, float] = {
    "market_demand": 0.25,
    "skill_gap": 0.30,
    "education_path": 0.15,
    "industry_trend": 0.20,
    "geographical_factor": 0.10,
}


def validate_weights(weights: Dict[str, float]) -> None:
    total = sum(weights.values())
    if not math.isclose(total, 1.0, abs_tol=1e-9):
        raise ValueError(f"Scoring weights must sum to 1.0, got {total}")


validate_weights(SCORING_WEIGHTS)


def calculate_overall_score(sub_scores: Dict[str, int]) -> int:
    """Weighted sum of the sub-scores, rounded half up and clamped to [0, 100]."""
    missing = set(SCORING_WEIGHTS) - set(sub_scores)
    if missing:
        raise ValueError(f"Missing sub-scores: {sorted(missing)}")

    weighted = sum(weight * sub_scores[name] for name, weight in SCORING_WEIGHTS.items())
    return clamp_score(weighted)
