"""Jobs provider client (JSearch on RapidAPI)."""
import logging
import math
import re
from collections import Counter
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from core.cache import CacheTTL
from core.config_loader import JobsProviderConfig
from core.providers.base import BaseProviderClient, parse_timestamp
from core.providers.errors import ProviderError, ProviderResponseError
from core.providers.gateway import CachedRequestGateway
from core.providers.models import JobListing, MarketSummary, SalaryRange, SearchFilters

logger = logging.getLogger(__name__)

RESULTS_PER_PAGE = 10

KNOWN_TECHNOLOGIES = [
    "JavaScript", "Python", "AWS", "React", "Node.js", "SQL", "TypeScript", "Azure",
    "Docker", "Kubernetes", "Machine Learning", "AI", "Data Science", "Cloud", "DevOps",
]
_TECH_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(t) for t in KNOWN_TECHNOLOGIES) + r")\b",
    re.IGNORECASE
)
_CANONICAL_TECH = {t.lower(): t for t in KNOWN_TECHNOLOGIES}

_QUALIFICATION_PATTERN = re.compile(
    r"\b(?:experience|knowledge|proficiency|expertise)\s+(?:in|with)\s+([^.]+)",
    re.IGNORECASE
)
_REQUIREMENT_PATTERNS = [
    re.compile(p, re.IGNORECASE) for p in (
        r"required skills[:\s]+([^.]+)",
        r"skills required[:\s]+([^.]+)",
        r"you must have[:\s]+([^.]+)",
        r"requirements[:\s]+([^.]+)",
        r"qualifications[:\s]+([^.]+)",
        r"we are looking for[:\s]+([^.]+)",
    )
]
_SPLIT_PATTERN = re.compile(r"[,•\n;]+")


def _find_technologies(text: str) -> List[str]:
    return [_CANONICAL_TECH.get(m.lower(), m) for m in _TECH_PATTERN.findall(text or "")]


def _dedupe(items: List[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        key = item.strip().lower()
        if key and key not in seen:
            seen.add(key)
            result.append(item.strip())
    return result


class JobsClient(BaseProviderClient):
    """Search and look up job postings."""

    def __init__(
        self,
        gateway: CachedRequestGateway,
        api_key: Optional[str],
        config: Optional[JobsProviderConfig] = None
    ):
        super().__init__(gateway, api_key)
        self.config = config or JobsProviderConfig()

    async def search_jobs(
        self,
        query: str,
        filters: Optional[SearchFilters] = None,
        limit: int = 10
    ) -> List[JobListing]:
        """Search listings. Provider failures degrade to []."""
        params = self._build_search_params(query, filters, limit)
        try:
            payload = await self._get(self.config.search_url, self.config.host, params, CacheTTL.SHORT)
        except ProviderError as e:
            logger.warning(f"Job search failed for '{query}', returning no listings: {e}")
            return []

        return self._map_listings(payload)[:limit]

    async def search_transition_jobs(
        self,
        current_role: str,
        target_role: str,
        limit: int = 50
    ) -> List[JobListing]:
        """Target-role listings whose title or description mentions the target role."""
        query = f"{target_role} skills experience {current_role}"
        listings = await self.search_jobs(query, limit=limit)

        target = target_role.strip().lower()
        relevant = [
            job for job in listings
            if target in job.title.lower() or target in job.description.lower()
        ]
        logger.info(
            f"[{self.service_name}] {len(relevant)}/{len(listings)} listings relevant "
            f"to {current_role} -> {target_role}"
        )
        return relevant[:limit]

    async def get_job_details(self, job_id: str) -> JobListing:
        """Look up one listing by id. Errors propagate; a missing job raises ProviderResponseError(404)."""
        payload = await self._get(
            self.config.details_url,
            self.config.host,
            {"job_id": job_id},
            CacheTTL.MEDIUM
        )
        listings = self._map_listings(payload)
        if not listings:
            raise ProviderResponseError(
                self.service_name, self.config.details_url, f"Job {job_id} not found", status_code=404
            )
        return listings[0]

    @staticmethod
    def summarize_market(listings: List[JobListing]) -> MarketSummary:
        if not listings:
            return MarketSummary()

        companies = Counter(job.company for job in listings if job.company)
        remote_count = sum(1 for job in listings if job.remote)

        midpoints = []
        currencies = Counter()
        for job in listings:
            if job.salary and job.salary.midpoint is not None:
                midpoints.append(job.salary.midpoint)
                if job.salary.currency:
                    currencies[job.salary.currency] += 1

        return MarketSummary(
            total_listings=len(listings),
            top_companies=[name for name, _ in companies.most_common(5)],
            remote_share=remote_count / len(listings),
            average_salary=(sum(midpoints) / len(midpoints)) if midpoints else None,
            salary_currency=currencies.most_common(1)[0][0] if currencies else None,
        )

    @staticmethod
    def extract_skills(raw_job: Dict[str, Any]) -> List[str]:
        """Pull skill phrases out of qualifications and description text."""
        skills: List[str] = []

        highlights = raw_job.get("job_highlights") or {}
        qualifications = highlights.get("Qualifications") if isinstance(highlights, dict) else None
        if isinstance(qualifications, list):
            for qual in qualifications:
                if not isinstance(qual, str):
                    continue
                match = _QUALIFICATION_PATTERN.search(qual)
                if match:
                    skills.append(match.group(1).strip())
                skills.extend(_find_technologies(qual))

        description = raw_job.get("job_description")
        if isinstance(description, str) and description:
            skills.extend(JobsClient._extract_skills_from_text(description))

        return _dedupe(skills)

    @staticmethod
    def _extract_skills_from_text(text: str) -> List[str]:
        skills: List[str] = []
        for pattern in _REQUIREMENT_PATTERNS:
            match = pattern.search(text)
            if match:
                skills.extend(s.strip() for s in _SPLIT_PATTERN.split(match.group(1)) if s.strip())
        skills.extend(_find_technologies(text))
        return skills

    @staticmethod
    def _build_search_params(query: str, filters: Optional[SearchFilters], limit: int) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "query": query,
            "page": 1,
            "num_pages": max(1, math.ceil(limit / RESULTS_PER_PAGE)),
        }
        if filters:
            if filters.location:
                params["location"] = filters.location
            if filters.remote:
                params["remote_jobs_only"] = True
            if filters.date_range:
                params["date_posted"] = filters.date_range
        return params

    def _map_listings(self, payload: Any) -> List[JobListing]:
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            logger.warning(f"[{self.service_name}] Invalid results format, expected a 'data' list")
            return []

        listings = []
        for raw in payload["data"]:
            listing = self._map_listing(raw)
            if listing is not None:
                listings.append(listing)
        return listings

    def _map_listing(self, raw: Any) -> Optional[JobListing]:
        if not isinstance(raw, dict) or not raw.get("job_id") or not raw.get("job_title"):
            return None

        city, country = raw.get("job_city"), raw.get("job_country")
        location = f"{city}, {country}" if city else country

        salary = None
        if raw.get("job_min_salary") or raw.get("job_max_salary"):
            salary = {
                "min": raw.get("job_min_salary"),
                "max": raw.get("job_max_salary"),
                "currency": raw.get("job_salary_currency"),
            }

        try:
            return JobListing(
                id=str(raw["job_id"]),
                title=raw["job_title"],
                company=raw.get("employer_name"),
                location=location,
                remote=bool(raw.get("job_is_remote")),
                url=raw.get("job_apply_link"),
                description=raw.get("job_description") or "",
                highlights=raw.get("job_highlights") or {},
                posted_at=parse_timestamp(raw.get("job_posted_at_datetime_utc")),
                required_skills=self.extract_skills(raw),
                salary=SalaryRange(**salary) if salary else None,
            )
        except ValidationError as e:
            logger.debug(f"[{self.service_name}] Dropping malformed listing {raw.get('job_id')}: {e}")
            return None
