#!/usr/bin/env python3
"""
Readiness Scoring Service - generate and read readiness scores.

One generation:
1. Load the transition, its insights, the user's skills and both roles'
   skill lists in a single session (one snapshot)
2. Fetch up to job_search_limit target-role listings
3. Run the five signal extractors over that snapshot
4. Combine sub-scores with the fixed weights
5. Synthesize recommendations
6. Upsert the score row for the transition

A failing provider or extractor degrades that signal to the neutral score;
only an unknown transition id fails the call.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from core.providers.jobs import JobsClient
from core.providers.models import JobListing
from core.readiness import signals
from core.readiness.errors import TransitionNotFoundError
from core.readiness.models import (
    InsightData,
    ReadinessScore,
    SignalResult,
    TransitionSnapshot,
)
from core.readiness.progress import GenerationTracker
from core.readiness.recommendations import RecommendationContext, RecommendationSynthesizer
from core.readiness.scoring import calculate_overall_score
from database.uow import readiness_uow

logger = logging.getLogger(__name__)


class ReadinessScoringService:
    def __init__(
        self,
        session_factory: sessionmaker,
        jobs_client: JobsClient,
        synthesizer: Optional[RecommendationSynthesizer] = None,
        tracker: Optional[GenerationTracker] = None,
        job_search_limit: int = 50
    ):
        self.session_factory = session_factory
        self.jobs_client = jobs_client
        self.synthesizer = synthesizer or RecommendationSynthesizer()
        self.tracker = tracker
        self.job_search_limit = job_search_limit

    async def generate_readiness_score(self, transition_id: int) -> ReadinessScore:
        self._report("start", transition_id)

        try:
            score = await self._generate(transition_id)
        except Exception as e:
            self._report("fail", transition_id, str(e))
            raise

        self._report("complete", transition_id)
        return score

    def _report(self, action: str, transition_id: int, *args) -> None:
        """Forward progress to the tracker; tracker errors never replace the result or the original error."""
        if not self.tracker:
            return
        try:
            getattr(self.tracker, action)(transition_id, *args)
        except Exception as e:
            logger.error(f"Progress tracking '{action}' failed for transition {transition_id}: {e}")

    async def get_readiness_score(self, transition_id: int) -> Optional[ReadinessScore]:
        """Most recent score for the transition, or None."""
        return await asyncio.to_thread(self._load_latest, transition_id)

    async def _generate(self, transition_id: int) -> ReadinessScore:
        snapshot = await asyncio.to_thread(self._load_snapshot, transition_id)
        logger.info(
            f"Generating readiness score for transition {transition_id}: "
            f"{snapshot.current_role} -> {snapshot.target_role} ({len(snapshot.insights)} insights)"
        )

        listings = await self._fetch_listings(snapshot)
        market = JobsClient.summarize_market(listings)

        market_signal = self._extract(
            "market_demand", signals.market_demand_signal,
            listings, snapshot.insights, snapshot.target_role, market
        )
        skill_signal = self._extract(
            "skill_gap", signals.skill_gap_signal,
            snapshot.target_role_skills, snapshot.user_skills, snapshot.current_role_skills
        )
        education_signal = self._extract("education_path", signals.education_path_signal, snapshot.insights)
        trend_signal = self._extract("industry_trend", signals.industry_trend_signal, snapshot.insights)
        geography_signal = self._extract("geographical_factor", signals.geography_signal, snapshot.insights)

        sub_scores = {
            "market_demand": market_signal.score,
            "skill_gap": skill_signal.score,
            "education_path": education_signal.score,
            "industry_trend": trend_signal.score,
            "geographical_factor": geography_signal.score,
        }
        overall = calculate_overall_score(sub_scores)

        missing = signals.missing_skills(
            snapshot.target_role_skills, snapshot.user_skills, snapshot.current_role_skills
        )
        try:
            skill_gaps = signals.build_skill_gaps(
                snapshot.target_role_skills, snapshot.user_skills, snapshot.current_role_skills, listings
            )
        except Exception as e:
            logger.warning(f"Skill gap ranking failed for transition {transition_id}: {e}")
            skill_gaps = []

        recommendations = self.synthesizer.synthesize(RecommendationContext(
            current_role=snapshot.current_role,
            target_role=snapshot.target_role,
            scores=sub_scores,
            skill_gaps=skill_gaps,
            missing_skills=missing,
            insights=snapshot.insights,
            market=market,
        ))

        score = ReadinessScore(
            transition_id=transition_id,
            overall_score=overall,
            market_demand_score=market_signal.score,
            skill_gap_score=skill_signal.score,
            education_path_score=education_signal.score,
            industry_trend_score=trend_signal.score,
            geographical_factor_score=geography_signal.score,
            skill_gaps=skill_gaps,
            observations={
                "market_demand": market_signal.observations,
                "skill_gap": skill_signal.observations,
                "education_path": education_signal.observations,
                "industry_trend": trend_signal.observations,
                "geographical_factor": geography_signal.observations,
            },
            recommendations=recommendations,
        )

        saved = await asyncio.to_thread(self._save, score)
        logger.info(f"Readiness score for transition {transition_id}: {saved.overall_score}/100")
        return saved

    async def _fetch_listings(self, snapshot: TransitionSnapshot) -> List[JobListing]:
        try:
            return await self.jobs_client.search_transition_jobs(
                snapshot.current_role, snapshot.target_role, limit=self.job_search_limit
            )
        except Exception as e:
            logger.warning(f"Job listings unavailable for transition {snapshot.transition_id}: {e}")
            return []

    @staticmethod
    def _extract(name: str, extractor: Callable[..., SignalResult], *args) -> SignalResult:
        try:
            return extractor(*args)
        except Exception as e:
            logger.warning(f"Signal '{name}' failed, using neutral score: {e}")
            return SignalResult.neutral(f"{name.replace('_', ' ').capitalize()} could not be assessed")

    def _load_snapshot(self, transition_id: int) -> TransitionSnapshot:
        with readiness_uow(self.session_factory) as repo:
            transition = repo.get_transition(transition_id)
            if transition is None:
                raise TransitionNotFoundError(transition_id)

            insights = [InsightData.from_record(i) for i in repo.get_insights_by_transition_id(transition_id)]
            user_skills = repo.get_user_skills(transition.user_id) if transition.user_id is not None else []

            return TransitionSnapshot(
                transition_id=transition.id,
                user_id=transition.user_id,
                current_role=transition.current_role,
                target_role=transition.target_role,
                insights=insights,
                user_skills=user_skills,
                current_role_skills=repo.get_role_skills(transition.current_role),
                target_role_skills=repo.get_role_skills(transition.target_role),
            )

    def _save(self, score: ReadinessScore) -> ReadinessScore:
        values = score.to_record_values()
        try:
            with readiness_uow(self.session_factory) as repo:
                return ReadinessScore.from_record(repo.upsert_score(score.transition_id, values))
        except IntegrityError:
            # A concurrent generation inserted the row first; last writer wins
            logger.warning(f"Concurrent score insert for transition {score.transition_id}, retrying as update")
            with readiness_uow(self.session_factory) as repo:
                return ReadinessScore.from_record(repo.upsert_score(score.transition_id, values))

    def _load_latest(self, transition_id: int) -> Optional[ReadinessScore]:
        with readiness_uow(self.session_factory) as repo:
            record = repo.get_latest_score(transition_id)
            return ReadinessScore.from_record(record) if record else None
