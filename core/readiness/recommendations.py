#!/usr/bin/env python3
"""
Recommendation Synthesizer - rule-based action items per category.

Five categories are generated from the skill, job and insight inputs. The
sixth, next_steps, is derived: the first three high-priority immediate items
pooled across the other five, followed by two planning items. Every category
has a fixed fallback list used when its generator raises or returns nothing,
so no category is ever empty.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
from urllib.parse import quote_plus

from core.providers.models import MarketSummary
from core.readiness.insights import REMOTE_PATTERN, extract_certification_names, in_category
from core.readiness.models import (
    InsightData,
    RecommendationBundle,
    RecommendationItem,
    ResourceLink,
    SkillGapEntry,
)

logger = logging.getLogger(__name__)

MARKET_DEMAND_THRESHOLD = 60
EDUCATION_PATH_THRESHOLD = 70
NEXT_STEPS_POOLED = 3
STORY_TYPES = {"story", "challenge", "observation"}

GENERATED_CATEGORIES = (
    "skill_development",
    "market_positioning",
    "education_paths",
    "experience_building",
    "networking",
)


def _link(title: str, url: str, kind: str) -> ResourceLink:
    return ResourceLink(title=title, url=url, type=kind)


def _item(title: str, description: str, priority: str, timeframe: str, *resources: ResourceLink) -> RecommendationItem:
    return RecommendationItem(
        title=title,
        description=description,
        priority=priority,
        timeframe=timeframe,
        resources=list(resources),
    )


def _fallbacks() -> Dict[str, List[RecommendationItem]]:
    """Role-independent defaults; rebuilt per call so callers can't mutate shared state."""
    return {
        "skill_development": [
            _item("Identify Core Skills", "List the core skills required for your target role and rate yourself against each.",
                  "high", "immediate",
                  _link("LinkedIn Learning", "https://www.linkedin.com/learning/", "course")),
            _item("Build a Portfolio of Projects", "Create small practical projects that show your new skills in action.",
                  "high", "long-term"),
        ],
        "market_positioning": [
            _item("Optimize Your Resume", "Highlight transferable skills and achievements that apply to your target role.",
                  "high", "immediate",
                  _link("Resume ATS Checker", "https://www.jobscan.co/", "tool")),
        ],
        "education_paths": [
            _item("Choose a Learning Path", "Pick a structured course or certificate program that covers your target role's fundamentals.",
                  "medium", "short-term",
                  _link("Coursera", "https://www.coursera.org/", "course")),
        ],
        "experience_building": [
            _item("Seek Mentorship", "Find someone already working in your target role who can guide your transition.",
                  "high", "immediate",
                  _link("ADPList Mentorship", "https://adplist.org/", "community")),
        ],
        "networking": [
            _item("Join Professional Communities", "Take part in online and local communities for your target field.",
                  "medium", "short-term",
                  _link("Meetup", "https://www.meetup.com/", "community")),
        ],
        "next_steps": [
            _item("Create a Transition Plan", "Write a week-by-week plan covering skill development, networking and job search.",
                  "high", "immediate"),
            _item("Establish Progress Tracking", "Set monthly check-ins to review progress and adjust your strategy.",
                  "medium", "ongoing"),
        ],
    }


@dataclass
class RecommendationContext:
    current_role: str
    target_role: str
    scores: Dict[str, int]
    skill_gaps: List[SkillGapEntry] = field(default_factory=list)
    missing_skills: List[str] = field(default_factory=list)
    insights: List[InsightData] = field(default_factory=list)
    market: Optional[MarketSummary] = None


class RecommendationSynthesizer:
    """Builds a RecommendationBundle from one scoring snapshot."""

    def synthesize(self, ctx: RecommendationContext) -> RecommendationBundle:
        generators: Dict[str, Callable[[RecommendationContext], List[RecommendationItem]]] = {
            "skill_development": self.skill_development,
            "market_positioning": self.market_positioning,
            "education_paths": self.education_paths,
            "experience_building": self.experience_building,
            "networking": self.networking,
        }

        categories = {name: self._run(name, generator, ctx) for name, generator in generators.items()}
        categories["next_steps"] = self._run("next_steps", lambda _: self.next_steps(categories), ctx)
        return RecommendationBundle(**categories)

    @staticmethod
    def _run(
        name: str,
        generator: Callable[[RecommendationContext], List[RecommendationItem]],
        ctx: RecommendationContext
    ) -> List[RecommendationItem]:
        try:
            items = generator(ctx)
        except Exception as e:
            logger.warning(f"Recommendation generator '{name}' failed, using fallback: {e}")
            return _fallbacks()[name]

        if not items:
            logger.debug(f"Recommendation generator '{name}' produced nothing, using fallback")
            return _fallbacks()[name]
        return items

    @staticmethod
    def next_steps(categories: Dict[str, List[RecommendationItem]]) -> List[RecommendationItem]:
        pooled: List[RecommendationItem] = []
        seen = set()
        for name in GENERATED_CATEGORIES:
            for item in categories.get(name, []):
                if item.priority == "high" and item.timeframe == "immediate" and item.title not in seen:
                    seen.add(item.title)
                    pooled.append(item)

        return pooled[:NEXT_STEPS_POOLED] + _fallbacks()["next_steps"]

    def skill_development(self, ctx: RecommendationContext) -> List[RecommendationItem]:
        items = []
        role = ctx.target_role

        gap_levels = {gap.skill.lower(): gap.gap_level for gap in ctx.skill_gaps}
        critical = [s for s in ctx.missing_skills if gap_levels.get(s.lower(), "High") == "High"]
        secondary = [gap.skill for gap in ctx.skill_gaps if gap.gap_level == "Medium"]

        if critical:
            top = ", ".join(critical[:3])
            items.append(_item(
                "Close Critical Skill Gaps",
                f"Focus on developing these high-priority skills: {top}. "
                f"These are the most significant barriers to your transition.",
                "high", "immediate",
                _link("Udemy Courses", f"https://www.udemy.com/courses/search/?q={quote_plus(top)}", "course"),
                _link("LinkedIn Learning", f"https://www.linkedin.com/learning/search?keywords={quote_plus(top)}", "course"),
            ))

        if secondary:
            skills = ", ".join(secondary[:4])
            items.append(_item(
                "Strengthen Secondary Skills",
                f"Develop these medium-priority skills to boost your marketability: {skills}.",
                "medium", "short-term",
                _link("Coursera Specializations", f"https://www.coursera.org/search?query={quote_plus(skills)}", "course"),
                _link("YouTube Tutorials", f"https://www.youtube.com/results?search_query={quote_plus(skills + ' tutorial')}", "video"),
            ))

        items.append(_item(
            "Build a Portfolio of Projects",
            f"Create practical {role} projects that showcase your new skills in action.",
            "high", "long-term",
            _link("GitHub Project Ideas", f"https://github.com/search?q={quote_plus(role + ' projects')}", "tool"),
        ))
        return items

    def market_positioning(self, ctx: RecommendationContext) -> List[RecommendationItem]:
        current, target = ctx.current_role, ctx.target_role
        items = [
            _item(
                "Optimize Your Resume for ATS",
                f"Tailor your resume to highlight transferable skills from {current} that apply to {target} positions.",
                "high", "immediate",
                _link("Resume ATS Checker", "https://www.jobscan.co/", "tool"),
            ),
            _item(
                "Optimize Your LinkedIn Profile",
                f"Update your LinkedIn profile to reflect your transition goals and the skills {target} roles ask for.",
                "high", "immediate",
            ),
        ]

        if ctx.scores.get("market_demand", 50) < MARKET_DEMAND_THRESHOLD:
            items.append(_item(
                "Target Adjacent Roles",
                f"The market for {target} positions is competitive. Consider adjacent roles or emerging "
                f"niches that use your {current} background as a stepping stone.",
                "medium", "long-term",
                _link("Job Market Trends", "https://www.indeed.com/career-advice/finding-a-job/job-market-trends", "article"),
            ))
        else:
            items.append(_item(
                "Leverage High Market Demand",
                f"Demand for {target} positions is strong. Focus on companies that are growing in this area.",
                "medium", "short-term",
            ))

        remote_mentions = any(REMOTE_PATTERN.search(i.content) for i in ctx.insights)
        remote_share = ctx.market.remote_share if ctx.market else 0.0
        if remote_mentions or remote_share >= 0.3:
            items.append(_item(
                "Position for Remote-First Teams",
                f"Remote {target} roles are common. Show evidence of async communication and self-directed delivery.",
                "medium", "short-term",
                _link("Remote Job Boards", f"https://weworkremotely.com/remote-jobs/search?term={quote_plus(target)}", "tool"),
            ))
        return items

    def education_paths(self, ctx: RecommendationContext) -> List[RecommendationItem]:
        target = ctx.target_role
        items = []

        education = in_category(ctx.insights, "education")
        for name in extract_certification_names(education)[:2]:
            items.append(_item(
                f"Earn the {name}",
                f"People who made this transition mention the {name}. Check whether {target} job listings ask for it.",
                "high", "short-term",
                _link(name, f"https://www.google.com/search?q={quote_plus(name)}", "course"),
            ))

        if ctx.scores.get("education_path", 50) < EDUCATION_PATH_THRESHOLD:
            items.append(_item(
                "Enroll in a Structured Program",
                f"Consider a bootcamp or professional certificate program focused on {target} skills.",
                "high", "immediate",
                _link("Bootcamp Rankings", "https://www.coursereport.com/best-coding-bootcamps", "article"),
                _link("Professional Certificates", f"https://www.edx.org/search?q={quote_plus(target)}", "course"),
            ))
        else:
            items.append(_item(
                "Create a Self-Directed Learning Path",
                "Plenty of learning resources exist for this path. Pick targeted courses for your specific gaps.",
                "medium", "short-term",
            ))

        focus = [gap.skill for gap in ctx.skill_gaps if gap.gap_level in ("High", "Medium")][:3]
        if focus:
            items.append(_item(
                "Take Specialized Courses",
                f"Enroll in courses focused on {', '.join(focus)} to close your most critical skill gaps.",
                "high", "immediate",
                _link("Coursera Skills Courses", f"https://www.coursera.org/search?query={quote_plus(' '.join(focus))}", "course"),
            ))
        return items

    def experience_building(self, ctx: RecommendationContext) -> List[RecommendationItem]:
        current, target = ctx.current_role, ctx.target_role
        return [
            _item(
                "Seek Mentorship",
                f"Find a mentor currently working as a {target} who can guide your transition.",
                "high", "immediate",
                _link("ADPList Mentorship", "https://adplist.org/", "community"),
            ),
            _item(
                "Target Hybrid or Transition Roles",
                f"Look for roles that combine elements of {current} and {target} as stepping stones.",
                "high", "immediate",
                _link("LinkedIn Jobs", f"https://www.linkedin.com/jobs/search/?keywords={quote_plus(current + ' ' + target)}", "tool"),
            ),
            _item(
                "Contribute to Open Source Projects",
                f"Contribute to open source projects that use technologies relevant to {target} positions.",
                "medium", "short-term",
                _link("Good First Issues", "https://goodfirstissue.dev/", "community"),
            ),
        ]

    def networking(self, ctx: RecommendationContext) -> List[RecommendationItem]:
        target = ctx.target_role
        items = []

        stories = [i for i in ctx.insights if i.type in STORY_TYPES]
        if stories:
            items.append(_item(
                "Engage with Transition Communities",
                f"{len(stories)} people have shared their move into {target}. Reach out to the ones whose "
                f"path resembles yours and ask what they would do differently.",
                "high", "immediate",
                _link("Career Guidance", "https://www.reddit.com/r/careerguidance/", "community"),
            ))

        items.extend([
            _item(
                "Connect with Professionals",
                f"Reach out to people who have successfully moved into {target} positions.",
                "high", "immediate",
                _link("LinkedIn Networking", f"https://www.linkedin.com/search/results/people/?keywords={quote_plus(target)}", "tool"),
            ),
            _item(
                "Attend Industry Events",
                f"Join {target}-focused meetups and conferences to build connections and visibility.",
                "medium", "short-term",
                _link("Meetup Groups", f"https://www.meetup.com/find/?keywords={quote_plus(target)}", "community"),
            ),
            _item(
                "Conduct Informational Interviews",
                f"Ask {target} professionals for short conversations about their career paths.",
                "medium", "short-term",
            ),
        ])
        return items
