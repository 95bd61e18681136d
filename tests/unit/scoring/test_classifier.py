"""Tests for the severity classifier and risk matrix."""

import pytest

from riskwatch.core.types import DisplayBucket, RiskLevel, Severity, display_label
from riskwatch.scoring import (
    classify,
    classify_level,
    level_bounds,
    level_filter_options,
    matrix_score,
    round_half_up,
    status_bucket,
)


class TestClassifyLevel:
    """Band boundaries are inclusive upper bounds."""

    @pytest.mark.parametrize("score,expected", [
        (0, RiskLevel.LOW),
        (1, RiskLevel.LOW),
        (5, RiskLevel.LOW),
        (6, RiskLevel.MEDIUM),
        (12, RiskLevel.MEDIUM),
        (13, RiskLevel.HIGH),
        (20, RiskLevel.HIGH),
        (21, RiskLevel.CRITICAL),
        (25, RiskLevel.CRITICAL),
    ])
    def test_band_boundaries(self, score, expected):
        assert classify_level(score) == expected

    def test_scores_above_matrix_are_critical(self):
        """Asset scores are not bounded by the matrix."""
        assert classify_level(87) == RiskLevel.CRITICAL

    def test_classification_carries_display_bucket(self):
        result = classify(12)
        assert result.level == RiskLevel.MEDIUM
        assert result.display_bucket == DisplayBucket.YELLOW
        assert result.label == "Medium"
        assert classify(3).display_bucket == DisplayBucket.GREEN
        assert classify(15).display_bucket == DisplayBucket.ORANGE
        assert classify(22).display_bucket == DisplayBucket.RED

    def test_every_score_maps_to_exactly_one_band(self):
        for score in range(0, 40):
            level = classify_level(score)
            lower, upper = level_bounds(level)
            assert score >= lower or level == RiskLevel.LOW
            assert upper is None or score <= upper


class TestLevelFilterOptions:

    def test_labels_include_score_ranges(self):
        labels = [option["label"] for option in level_filter_options()]
        assert labels == ["Low (1-5)", "Medium (6-12)", "High (13-20)", "Critical (21-25)"]

    def test_values_are_level_values(self):
        values = [option["value"] for option in level_filter_options()]
        assert values == ["low", "medium", "high", "critical"]


class TestStatusBucket:

    def test_known_statuses(self):
        assert status_bucket("identified") == DisplayBucket.BLUE
        assert status_bucket("monitoring") == DisplayBucket.PURPLE
        assert status_bucket("closed") == DisplayBucket.GRAY

    def test_unknown_status_is_gray(self):
        assert status_bucket("escalated") == DisplayBucket.GRAY


class TestMatrixScore:

    def test_high_impact_medium_likelihood(self):
        assert matrix_score(Severity.HIGH, Severity.MEDIUM) == 12

    def test_extremes(self):
        assert matrix_score(Severity.VERY_LOW, Severity.VERY_LOW) == 1
        assert matrix_score(Severity.VERY_HIGH, Severity.VERY_HIGH) == 25

    def test_accepts_raw_values(self):
        assert matrix_score("very_high", "low") == 10


class TestHelpers:

    def test_display_label(self):
        assert display_label("very_high") == "Very high"
        assert display_label("data-center") == "Data center"

    @pytest.mark.parametrize("value,expected", [(2.5, 3), (2.4, 2), (14.5, 15), (0.0, 0)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected
