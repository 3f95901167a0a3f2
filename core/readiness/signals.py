#!/usr/bin/env python3
"""
Signal Extractors - turn provider results and stored insights into sub-scores.

Every extractor is a pure function returning a SignalResult with a score in
[0, 100]. When the extractor's input category is entirely absent it returns
the neutral score (50) rather than zero, so missing data does not read as
poor readiness.

Formulas:
- market demand:  min(jobs, 40) + 20 if any salary evidence + min(growth * 10, 40)
- skill gap:      matching target skills / total target skills * 100
- education path: min(education * 10, 80) + min(structured paths * 5, 20)
- industry trend: min(trend * 10, 60) + min(positive sentiment * 8, 40)
- geography:      min(location * 10, 40) + min(positive location * 10, 30) + min(remote * 10, 30)
"""

import re
from collections import Counter
from typing import Dict, List, Optional

from core.providers.models import JobListing, MarketSummary
from core.readiness.insights import (
    GROWTH_PATTERN,
    POSITIVE_LOCATION_PATTERN,
    POSITIVE_SENTIMENT_PATTERN,
    REMOTE_PATTERN,
    STRUCTURED_PATH_PATTERN,
    count_matching,
    extract_certification_names,
    in_category,
)
from core.readiness.models import InsightData, SignalResult, SkillGapEntry
from core.utils import clamp_score

SALARY_BONUS = 20
MAX_SKILL_GAPS = 10
_GAP_ORDER = {"High": 0, "Medium": 1, "Low": 2}


def _normalize_skills(skills: List[str]) -> Dict[str, str]:
    """lowercased -> first-seen spelling, order preserved."""
    normalized: Dict[str, str] = {}
    for skill in skills or []:
        key = (skill or "").strip().lower()
        if key and key not in normalized:
            normalized[key] = skill.strip()
    return normalized


def missing_skills(
    target_skills: List[str],
    user_skills: List[str],
    current_role_skills: List[str]
) -> List[str]:
    """Target skills covered by neither the user's skills nor their current role's."""
    held = set(_normalize_skills(user_skills)) | set(_normalize_skills(current_role_skills))
    return [name for key, name in _normalize_skills(target_skills).items() if key not in held]


def market_demand_signal(
    listings: List[JobListing],
    insights: List[InsightData],
    target_role: str = "the target role",
    market: Optional[MarketSummary] = None
) -> SignalResult:
    salary_insights = in_category(insights, "salary")
    growth_mentions = count_matching(insights, GROWTH_PATTERN)
    salary_in_listings = any(job.salary is not None for job in listings)

    if not listings and not salary_insights and growth_mentions == 0:
        return SignalResult.neutral(f"Not enough market data for {target_role}; using a neutral estimate")

    job_points = min(len(listings), 40)
    salary_bonus = SALARY_BONUS if (salary_insights or salary_in_listings) else 0
    growth_points = min(growth_mentions * 10, 40)

    observations = [f"Found {len(listings)} active job listings for {target_role}"]
    if salary_bonus:
        observations.append("Salary information is available for this role")
    if growth_mentions:
        observations.append(f"{growth_mentions} insight(s) point to growing demand")
    if market and market.total_listings:
        if market.top_companies:
            observations.append(f"Top hiring companies: {', '.join(market.top_companies[:3])}")
        observations.append(f"{round(market.remote_share * 100)}% of listings offer remote work")
        if market.average_salary is not None:
            currency = f" {market.salary_currency}" if market.salary_currency else ""
            observations.append(f"Average advertised salary: {market.average_salary:,.0f}{currency}")

    return SignalResult(score=clamp_score(job_points + salary_bonus + growth_points), observations=observations)


def skill_gap_signal(
    target_skills: List[str],
    user_skills: List[str],
    current_role_skills: List[str]
) -> SignalResult:
    target = _normalize_skills(target_skills)
    if not target:
        return SignalResult.neutral("No skill list is defined for the target role; using a neutral estimate")

    missing = missing_skills(target_skills, user_skills, current_role_skills)
    matching = len(target) - len(missing)

    observations = [f"You already have {matching} of {len(target)} skills the target role needs"]
    if missing:
        observations.append(f"Missing skills: {', '.join(missing[:5])}")

    return SignalResult(score=clamp_score(matching / len(target) * 100), observations=observations)


def education_path_signal(insights: List[InsightData]) -> SignalResult:
    education = in_category(insights, "education")
    if not education:
        return SignalResult.neutral("No education insights yet; using a neutral estimate")

    structured = count_matching(education, STRUCTURED_PATH_PATTERN)
    score = min(len(education) * 10, 80) + min(structured * 5, 20)

    observations = [f"{len(education)} insight(s) describe learning resources"]
    if structured:
        observations.append(f"{structured} mention structured programs or roadmaps")
    certifications = extract_certification_names(education)
    if certifications:
        observations.append(f"Certifications mentioned: {', '.join(certifications[:3])}")

    return SignalResult(score=clamp_score(score), observations=observations)


def industry_trend_signal(insights: List[InsightData]) -> SignalResult:
    trend = in_category(insights, "trend")
    if not trend:
        return SignalResult.neutral("No industry trend insights yet; using a neutral estimate")

    positive = count_matching(trend, POSITIVE_SENTIMENT_PATTERN)
    score = min(len(trend) * 10, 60) + min(positive * 8, 40)

    observations = [f"{len(trend)} insight(s) discuss industry trends"]
    if positive:
        observations.append(f"{positive} of them are positive about the field's outlook")

    return SignalResult(score=clamp_score(score), observations=observations)


def geography_signal(insights: List[InsightData]) -> SignalResult:
    location = in_category(insights, "location")
    if not location:
        return SignalResult.neutral("No location insights yet; using a neutral estimate")

    positive = count_matching(location, POSITIVE_LOCATION_PATTERN)
    remote = count_matching(location, REMOTE_PATTERN)
    score = min(len(location) * 10, 40) + min(positive * 10, 30) + min(remote * 10, 30)

    observations = [f"{len(location)} insight(s) mention location factors"]
    if positive:
        observations.append(f"{positive} describe strong local opportunities")
    if remote:
        observations.append(f"{remote} mention remote work options")

    return SignalResult(score=clamp_score(score), observations=observations)


def _mention_pattern(skill: str) -> re.Pattern:
    return re.compile(rf"(?<!\w){re.escape(skill.lower())}(?!\w)")


def _gap_level(share: Optional[float]) -> str:
    # No listings to compare against: a missing canonical skill is assumed critical
    if share is None or share >= 0.3:
        return "High"
    if share >= 0.1:
        return "Medium"
    return "Low"


def build_skill_gaps(
    target_skills: List[str],
    user_skills: List[str],
    current_role_skills: List[str],
    listings: List[JobListing]
) -> List[SkillGapEntry]:
    """
    Missing skills ranked by how often target-role listings ask for them.

    Includes the target role's missing canonical skills plus skills requested
    by at least 20% of listings (and two or more) that the user does not hold.
    Confidence grows with the number of listings the ranking is based on.
    """
    total = len(listings)
    texts = [f"{job.content}\n{' '.join(job.required_skills)}".lower() for job in listings]
    confidence = clamp_score(40 + min(total, 30) * 2)

    candidates = missing_skills(target_skills, user_skills, current_role_skills)

    held = (
        set(_normalize_skills(user_skills))
        | set(_normalize_skills(current_role_skills))
        | set(_normalize_skills(target_skills))
    )
    requested = Counter()
    spelling: Dict[str, str] = {}
    for job in listings:
        for key, name in _normalize_skills(job.required_skills).items():
            requested[key] += 1
            spelling.setdefault(key, name)
    for key, count in requested.most_common():
        if key not in held and count >= 2 and count / total >= 0.2:
            candidates.append(spelling[key])

    entries = []
    for skill in candidates:
        pattern = _mention_pattern(skill)
        mentions = sum(1 for text in texts if pattern.search(text))
        share = mentions / total if total else None
        entries.append(SkillGapEntry(
            skill=skill,
            gap_level=_gap_level(share),
            confidence=confidence,
            mention_count=mentions,
        ))

    entries.sort(key=lambda e: (_GAP_ORDER[e.gap_level], -e.mention_count))
    return entries[:MAX_SKILL_GAPS]
