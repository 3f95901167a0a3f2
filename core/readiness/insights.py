#!/usr/bin/env python3
"""
Insight Classification - keyword heuristics over stored insight text.

An insight belongs to a category when its type names the category or its
content matches the category's pattern. Sub-category mentions (structured
paths, positive sentiment, remote work, ...) are counted within the parent
category's insights.
"""

import re
from typing import Iterable, List

from core.readiness.models import InsightData

SALARY_PATTERN = re.compile(
    r"\b(salary|salaries|compensation|pay(ing|s)?|wages?|earn(s|ing)?)\b|[$£€]\s?\d", re.IGNORECASE
)
GROWTH_PATTERN = re.compile(
    r"\b(growing|growth|in[- ]demand|high demand|hiring|shortage|booming|expanding|more jobs)\b",
    re.IGNORECASE
)
EDUCATION_PATTERN = re.compile(
    r"\b(courses?|bootcamps?|degrees?|certificat\w*|certified|tutorials?|training|classes|"
    r"curriculum|moocs?|udemy|coursera|edx|self[- ]taught|studied|study)\b",
    re.IGNORECASE
)
STRUCTURED_PATH_PATTERN = re.compile(
    r"\b(bootcamps?|curriculum|roadmap|learning path|structured|step[- ]by[- ]step|"
    r"programs?|programmes?|syllabus|cohort)\b",
    re.IGNORECASE
)
TREND_PATTERN = re.compile(
    r"\b(trends?|trending|future|emerging|industry|adoption|outlook|forecast)\b", re.IGNORECASE
)
POSITIVE_SENTIMENT_PATTERN = re.compile(
    r"\b(growing|growth|increas\w*|rising|booming|strong|opportunit\w*|demand|promising|"
    r"thriving|expanding|positive|emerging)\b",
    re.IGNORECASE
)
LOCATION_PATTERN = re.compile(
    r"\b(locations?|city|cities|relocat\w*|regions?|remote|hybrid|on-?site|countr(y|ies)|"
    r"metro|abroad|commute)\b",
    re.IGNORECASE
)
POSITIVE_LOCATION_PATTERN = re.compile(
    r"\b(many|plenty|abundant|strong|hubs?|hot ?spots?|thriving|lots of|opportunit\w*|"
    r"in[- ]demand|growing)\b",
    re.IGNORECASE
)
REMOTE_PATTERN = re.compile(
    r"\b(remote|work from home|wfh|distributed|work from anywhere)\b", re.IGNORECASE
)

# Capitalised phrase right before "certification"/"certificate", e.g. "Google Data Analytics Certificate"
_NAMED_CERTIFICATION = re.compile(
    r"\b([A-Z][\w+\-]*(?:\s+[A-Z][\w+\-]*)*)\s+(?i:certification|certificate)\b"
)
_CERTIFICATION_ACRONYMS = re.compile(r"\b(PMP|CISSP|CCNA|CKAD|CKA|CSM|CFA|CPA|CompTIA\s+[A-Z]\w*\+?)(?!\w)")
_LEADING_FILLER = {"The", "A", "An", "This", "That", "Get", "Got", "Earn", "Earned", "My", "Our", "Any"}

CATEGORY_PATTERNS = {
    "salary": SALARY_PATTERN,
    "education": EDUCATION_PATTERN,
    "trend": TREND_PATTERN,
    "location": LOCATION_PATTERN,
}


def is_category(insight: InsightData, category: str) -> bool:
    if insight.type == category:
        return True
    return bool(CATEGORY_PATTERNS[category].search(insight.content))


def in_category(insights: Iterable[InsightData], category: str) -> List[InsightData]:
    return [i for i in insights if is_category(i, category)]


def count_matching(insights: Iterable[InsightData], pattern: re.Pattern) -> int:
    """Number of insights whose content matches pattern (one per insight)."""
    return sum(1 for i in insights if pattern.search(i.content))


def extract_certification_names(insights: Iterable[InsightData]) -> List[str]:
    names: List[str] = []
    seen = set()

    for insight in insights:
        found = []
        for match in _NAMED_CERTIFICATION.finditer(insight.content):
            words = match.group(1).split()
            while words and words[0] in _LEADING_FILLER:
                words.pop(0)
            if words:
                found.append(" ".join(words) + " Certification")
        for m in _CERTIFICATION_ACRONYMS.finditer(insight.content):
            if not any(m.group(1).lower() in name.lower() for name in found):
                found.append(m.group(1))

        for name in found:
            key = name.lower()
            if key not in seen:
                seen.add(key)
                names.append(name)

    return names
