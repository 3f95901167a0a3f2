"""Tests for the fixed-weight composite score."""
import math
import unittest

from core.readiness.scoring import SCORING_WEIGHTS, calculate_overall_score, validate_weights


def scores(**overrides):
    values = {name: 0 for name in SCORING_WEIGHTS}
    values.update(overrides)
    return values


class TestScoringWeights(unittest.TestCase):

    def test_weights_sum_to_one(self):
        self.assertTrue(math.isclose(sum(SCORING_WEIGHTS.values()), 1.0))

    def test_expected_weights(self):
        self.assertEqual(SCORING_WEIGHTS, {
            "market_demand": 0.25,
            "skill_gap": 0.30,
            "education_path": 0.15,
            "industry_trend": 0.20,
            "geographical_factor": 0.10,
        })

    def test_validate_rejects_bad_weights(self):
        with self.assertRaises(ValueError):
            validate_weights({"market_demand": 0.5, "skill_gap": 0.4})


class TestOverallScore(unittest.TestCase):

    def test_all_neutral_is_neutral(self):
        self.assertEqual(calculate_overall_score({name: 50 for name in SCORING_WEIGHTS}), 50)

    def test_weighted_sum(self):
        result = calculate_overall_score(scores(
            market_demand=80, skill_gap=67, education_path=35, industry_trend=28, geographical_factor=40
        ))
        # 20 + 20.1 + 5.25 + 5.6 + 4 = 54.95
        self.assertEqual(result, 55)

    def test_halves_round_up(self):
        self.assertEqual(calculate_overall_score(scores(market_demand=2)), 1)
        self.assertEqual(calculate_overall_score(scores(market_demand=10)), 3)

    def test_bounds(self):
        self.assertEqual(calculate_overall_score(scores()), 0)
        self.assertEqual(calculate_overall_score({name: 100 for name in SCORING_WEIGHTS}), 100)

    def test_missing_sub_score_raises(self):
        with self.assertRaises(ValueError):
            calculate_overall_score({"market_demand": 50})


if __name__ == '__main__':
    unittest.main()
