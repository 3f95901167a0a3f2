#!/usr/bin/env python3
"""
Test suite for the recommendation synthesizer.
"""

import unittest

from core.providers.models import MarketSummary
from core.readiness.models import InsightData, RecommendationItem, SkillGapEntry
from core.readiness.recommendations import RecommendationContext, RecommendationSynthesizer
from core.readiness.scoring import SCORING_WEIGHTS

CATEGORIES = (
    "skill_development",
    "market_positioning",
    "education_paths",
    "experience_building",
    "networking",
    "next_steps",
)


def make_context(**overrides):
    values = dict(
        current_role="Teacher",
        target_role="Data Analyst",
        scores={name: 50 for name in SCORING_WEIGHTS},
    )
    values.update(overrides)
    return RecommendationContext(**values)


def titles(items):
    return [item.title for item in items]


class TestFallbackGuarantee(unittest.TestCase):

    def setUp(self):
        self.synthesizer = RecommendationSynthesizer()

    def test_01_every_category_non_empty_without_inputs(self):
        bundle = self.synthesizer.synthesize(make_context())

        for category in CATEGORIES:
            with self.subTest(category=category):
                self.assertTrue(getattr(bundle, category))

    def test_02_generator_exception_uses_fallback(self):
        class BrokenSynthesizer(RecommendationSynthesizer):
            def skill_development(self, ctx):
                raise RuntimeError("boom")

        bundle = BrokenSynthesizer().synthesize(make_context())

        self.assertEqual(titles(bundle.skill_development), ["Identify Core Skills", "Build a Portfolio of Projects"])
        self.assertTrue(bundle.market_positioning)

    def test_03_empty_generator_uses_fallback(self):
        class SilentSynthesizer(RecommendationSynthesizer):
            def networking(self, ctx):
                return []

        bundle = SilentSynthesizer().synthesize(make_context())

        self.assertEqual(titles(bundle.networking), ["Join Professional Communities"])

    def test_04_fallbacks_are_not_shared(self):
        class SilentSynthesizer(RecommendationSynthesizer):
            def networking(self, ctx):
                return []

        first = SilentSynthesizer().synthesize(make_context())
        first.networking[0].title = "changed"
        second = SilentSynthesizer().synthesize(make_context())

        self.assertEqual(second.networking[0].title, "Join Professional Communities")


class TestNextSteps(unittest.TestCase):

    def test_01_pools_high_immediate_items_then_planning(self):
        bundle = RecommendationSynthesizer().synthesize(make_context())

        self.assertEqual(titles(bundle.next_steps), [
            "Optimize Your Resume for ATS",
            "Optimize Your LinkedIn Profile",
            "Enroll in a Structured Program",
            "Create a Transition Plan",
            "Establish Progress Tracking",
        ])

    def test_02_duplicate_titles_pooled_once(self):
        item = RecommendationItem(title="Same", description="d", priority="high", timeframe="immediate")
        other = RecommendationItem(title="Other", description="d", priority="high", timeframe="immediate")
        later = RecommendationItem(title="Later", description="d", priority="low", timeframe="immediate")

        steps = RecommendationSynthesizer.next_steps({
            "skill_development": [item, later],
            "networking": [item, other],
        })

        self.assertEqual(titles(steps), ["Same", "Other", "Create a Transition Plan", "Establish Progress Tracking"])

    def test_03_nothing_to_pool_leaves_planning_items(self):
        steps = RecommendationSynthesizer.next_steps({})
        self.assertEqual(titles(steps), ["Create a Transition Plan", "Establish Progress Tracking"])


class TestCategoryRules(unittest.TestCase):

    def setUp(self):
        self.synthesizer = RecommendationSynthesizer()

    def test_01_missing_skills_drive_skill_items(self):
        ctx = make_context(
            missing_skills=["Python", "Tableau"],
            skill_gaps=[
                SkillGapEntry(skill="Python", gap_level="High", confidence=60, mention_count=8),
                SkillGapEntry(skill="Tableau", gap_level="Medium", confidence=60, mention_count=2),
            ],
        )

        items = self.synthesizer.skill_development(ctx)

        self.assertEqual(titles(items), [
            "Close Critical Skill Gaps",
            "Strengthen Secondary Skills",
            "Build a Portfolio of Projects",
        ])
        self.assertEqual((items[0].priority, items[0].timeframe), ("high", "immediate"))
        self.assertIn("Python", items[0].description)
        self.assertNotIn("Tableau", items[0].description)
        self.assertEqual({r.type for r in items[0].resources}, {"course"})

    def test_02_certification_from_education_insights(self):
        ctx = make_context(insights=[
            InsightData(type="story", content="I got the Google Data Analytics Certificate in six months"),
        ])

        items = self.synthesizer.education_paths(ctx)

        self.assertEqual(items[0].title, "Earn the Google Data Analytics Certification")

    def test_03_education_threshold(self):
        low = self.synthesizer.education_paths(make_context(scores={"education_path": 40}))
        high = self.synthesizer.education_paths(make_context(scores={"education_path": 85}))

        self.assertIn("Enroll in a Structured Program", titles(low))
        self.assertIn("Create a Self-Directed Learning Path", titles(high))

    def test_04_low_market_demand_suggests_adjacent_roles(self):
        low = self.synthesizer.market_positioning(make_context(scores={"market_demand": 35}))
        high = self.synthesizer.market_positioning(make_context(scores={"market_demand": 80}))

        self.assertIn("Target Adjacent Roles", titles(low))
        self.assertNotIn("Leverage High Market Demand", titles(low))
        self.assertIn("Leverage High Market Demand", titles(high))

    def test_05_remote_positioning(self):
        none = self.synthesizer.market_positioning(make_context())
        by_insight = self.synthesizer.market_positioning(make_context(insights=[
            InsightData(type="location", content="Most analyst teams are fully remote"),
        ]))
        by_market = self.synthesizer.market_positioning(make_context(
            market=MarketSummary(total_listings=10, remote_share=0.4)
        ))

        self.assertNotIn("Position for Remote-First Teams", titles(none))
        self.assertIn("Position for Remote-First Teams", titles(by_insight))
        self.assertIn("Position for Remote-First Teams", titles(by_market))

    def test_06_stories_add_community_engagement(self):
        without = self.synthesizer.networking(make_context())
        with_stories = self.synthesizer.networking(make_context(insights=[
            InsightData(type="story", content="Switched from teaching in a year"),
            InsightData(type="trend", content="BI adoption is rising"),
        ]))

        self.assertNotIn("Engage with Transition Communities", titles(without))
        self.assertEqual(with_stories[0].title, "Engage with Transition Communities")
        self.assertTrue(with_stories[0].description.startswith("1 people"))

    def test_07_resource_links_are_typed(self):
        bundle = self.synthesizer.synthesize(make_context(missing_skills=["SQL"]))

        allowed = {"course", "video", "article", "tool", "community"}
        for category in CATEGORIES:
            for item in getattr(bundle, category):
                for resource in item.resources:
                    self.assertIn(resource.type, allowed)
                    self.assertTrue(resource.url.startswith("https://"))


if __name__ == '__main__':
    unittest.main()
