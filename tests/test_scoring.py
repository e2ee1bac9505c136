"""Tests for the scoring engine."""

import math

import pytest

from biome_sports_analysis.biomechanics_standards import ACTION_STANDARDS, Benchmark
from biome_sports_analysis.models import Action, Preference, Sport
from biome_sports_analysis.scoring import (
    apply_grade_curve,
    calculate_weighted_score,
    letter_grade,
    performance_level,
    redistribute_weights,
    score_metrics,
    score_with_ideal_window,
    score_with_preference,
    scoring_confidence,
)

JUMP_SHOT = ACTION_STANDARDS[(Sport.BASKETBALL, Action.JUMP_SHOT)]

IDEAL_JUMP_SHOT = {
    "release_angle": 55.0,
    "elbow_angle_at_release": 165.0,
    "knee_angle_at_peak": 170.0,
    "jump_height_normalized": 0.1,
    "stability_index": 100.0,
    "follow_through_score": 90.0,
    "release_timing_ms": 33.0,
}


class TestSubScores:
    window = Benchmark(40, 60, 20, 80)

    @pytest.mark.parametrize("value,expected", [
        (40, 100.0), (50, 100.0), (60, 100.0),
        (30, 50.0), (70, 50.0),
        (20, 0.0), (80, 0.0), (10, 0.0), (95, 0.0),
    ])
    def test_ideal_window(self, value, expected):
        assert score_with_ideal_window(value, self.window) == pytest.approx(expected)

    def test_non_finite_scores_zero(self):
        assert score_with_ideal_window(math.nan, self.window) == 0.0
        assert score_with_preference(math.inf, self.window) == 0.0

    def test_zero_width_tolerance(self):
        assert score_with_ideal_window(39, Benchmark(40, 60, 40, 60)) == 0.0

    def test_higher_preference_softens_overshoot(self):
        b = Benchmark(40, 60, 20, 80, Preference.HIGHER)
        assert score_with_preference(70, b) == pytest.approx(90.0)
        assert score_with_preference(80, b) == pytest.approx(80.0)
        # the other side keeps the full interpolation
        assert score_with_preference(30, b) == pytest.approx(50.0)

    def test_lower_preference_softens_undershoot(self):
        b = Benchmark(40, 60, 20, 80, Preference.LOWER)
        assert score_with_preference(30, b) == pytest.approx(90.0)
        assert score_with_preference(70, b) == pytest.approx(50.0)

    def test_center_preference_matches_window(self):
        b = Benchmark(40, 60, 20, 80, Preference.CENTER)
        assert score_with_preference(70, b) == score_with_ideal_window(70, b)


class TestAggregation:
    def test_redistributed_weights_sum_to_one(self):
        weights = {"a": 0.25, "b": 0.25, "c": 0.5, "d": 0.0}
        shares = redistribute_weights(["a", "b", "d"], weights)
        assert set(shares) == {"a", "b"}
        assert sum(shares.values()) == pytest.approx(1.0)
        assert shares["a"] == pytest.approx(0.5)

    def test_redistribute_nothing_present(self):
        assert redistribute_weights([], {"a": 1.0}) == {}

    def test_weighted_score_rounds(self):
        assert calculate_weighted_score({"a": 80, "b": 90}, {"a": 0.5, "b": 0.5}) == 85
        assert calculate_weighted_score({"a": 80, "b": 91}, {"a": 0.75, "b": 0.25}) == 83

    def test_weighted_score_skips_zero_weights(self):
        assert calculate_weighted_score({"a": 100, "b": 0}, {"a": 1.0, "b": 0.0}) == 100
        assert calculate_weighted_score({"a": 100}, {}) == 0

    @pytest.mark.parametrize("included,total,minimum,expected", [
        (7, 7, 3, 1.0),
        (3, 7, 3, 0.5),
        (5, 7, 3, 0.75),
        (2, 7, 3, 0.0),
        (2, 2, 2, 1.0),
        (0, 0, 0, 0.0),
    ])
    def test_confidence(self, included, total, minimum, expected):
        assert scoring_confidence(included, total, minimum) == pytest.approx(expected)


class TestGradeCurve:
    def test_fixed_points(self):
        assert apply_grade_curve(0, 0.15) == 0
        assert apply_grade_curve(100, 0.15) == 100

    def test_lifts_middle_scores(self):
        # 100 * 0.5 ** 0.85
        assert apply_grade_curve(50, 0.15) == 55

    def test_order_is_preserved(self):
        curved = [apply_grade_curve(s, 0.15) for s in range(0, 101)]
        assert curved == sorted(curved)

    def test_disabled(self):
        assert apply_grade_curve(50, 0.0) == 50

    def test_labels(self):
        assert letter_grade(100) == "A+"
        assert letter_grade(95) == "A"
        assert letter_grade(81) == "B-"
        assert letter_grade(50) == "F"
        assert performance_level(92) == "Excellent"
        assert performance_level(85) == "Good"
        assert performance_level(40) == "Developing"


class TestScoreMetrics:
    def test_ideal_jump_shot(self):
        result = score_metrics(IDEAL_JUMP_SHOT, JUMP_SHOT, 0.15)
        assert result.overall == 100
        assert result.raw_overall == 100
        assert result.confidence == 1.0
        assert result.metrics_included == 7
        assert result.metrics_total == 7

    def test_zero_weight_metric_is_scored_but_not_weighted(self):
        metrics = dict(IDEAL_JUMP_SHOT, release_timing_ms=300.0)
        result = score_metrics(metrics, JUMP_SHOT, 0.15)
        assert result.breakdown["release_timing_ms"] == 0
        assert result.overall == 100

    def test_missing_metrics_are_excluded(self):
        metrics = dict(IDEAL_JUMP_SHOT, knee_angle_at_peak=None, stability_index=math.nan)
        result = score_metrics(metrics, JUMP_SHOT, 0.15)
        assert result.metrics_included == 5
        assert result.overall == 100
        assert result.details["knee_angle_at_peak"].included is False
        assert result.details["stability_index"].exclude_reason == "Metric not available or invalid"
        assert result.confidence == pytest.approx(0.75)

    def test_insufficient_metrics(self):
        metrics = {"release_angle": 55.0, "release_timing_ms": 33.0}
        result = score_metrics(metrics, JUMP_SHOT, 0.15)
        assert result.overall == 0
        assert result.raw_overall == 0
        assert result.confidence == 0.0
        assert result.metrics_included == 2
        assert result.breakdown == {"release_angle": 100, "release_timing_ms": 100}

    def test_weighted_partial_credit(self):
        """A 0 release angle costs its full 0.25 share."""
        metrics = dict(IDEAL_JUMP_SHOT, release_angle=0.0)
        result = score_metrics(metrics, JUMP_SHOT, 0.0)
        assert result.breakdown["release_angle"] == 0
        assert result.raw_overall == 75
        assert result.overall == 75

    def test_to_dict(self):
        result = score_metrics(IDEAL_JUMP_SHOT, JUMP_SHOT, 0.15).to_dict()
        for key in (
            "overall", "raw_overall", "confidence", "metrics_included", "metrics_total",
            "letter_grade", "performance_level", "breakdown", "details",
            "weakest_metrics", "strongest_metrics",
        ):
            assert key in result
        assert result["letter_grade"] == "A+"
        assert result["details"]["release_angle"] == {
            "raw_value": 55.0, "normalized_score": 100.0, "included": True,
        }
