"""Tests for the mitigation aggregator."""

import pytest

from riskwatch.scoring import duplicate_mitigation_ids, effective_score, total_reduction

from fixtures.records import mitigation


class TestEffectiveScore:

    def test_reductions_are_summed(self):
        """40 with reductions 15 and 10 leaves 15."""
        result = effective_score(40, [mitigation("m1", 15), mitigation("m2", 10)])
        assert result.effective == 15
        assert result.total_reduction == 25
        assert result.mitigated is True
        assert result.base == 40

    def test_floor_at_zero(self):
        """10 with a 30 point reduction floors at 0."""
        result = effective_score(10, [mitigation("m1", 30)])
        assert result.effective == 0
        assert result.total_reduction == 30
        assert result.mitigated is True

    @pytest.mark.parametrize("mitigations", [None, []])
    def test_no_mitigations_is_identity(self, mitigations):
        result = effective_score(37, mitigations)
        assert result.effective == 37
        assert result.total_reduction == 0
        assert result.mitigated is False

    def test_zero_point_mitigation_does_not_count_as_mitigated(self):
        result = effective_score(20, [mitigation("m1", 0)])
        assert result.effective == 20
        assert result.mitigated is False

    def test_no_upper_clamp(self):
        assert effective_score(140, [mitigation("m1", 5)]).effective == 135

    def test_idempotent(self):
        mitigations = [mitigation("m1", 7), mitigation("m2", 4)]
        assert effective_score(30, mitigations) == effective_score(30, mitigations)

    def test_order_independent(self):
        a, b, c = mitigation("a", 3), mitigation("b", 11), mitigation("c", 6)
        assert effective_score(50, [a, b, c]) == effective_score(50, [c, a, b])

    @pytest.mark.parametrize("base", [0, 1, 12, 25, 99])
    def test_never_negative_and_never_above_base(self, base):
        for reduction in (0, 1, base, base + 50):
            result = effective_score(base, [mitigation("m", reduction)])
            assert 0 <= result.effective <= base


class TestDuplicates:

    def test_duplicates_are_counted_each_time(self):
        assert total_reduction([mitigation("m1", 5), mitigation("m1", 5)]) == 10

    def test_duplicate_ids_reported_once(self):
        mitigations = [mitigation("a", 1), mitigation("b", 1), mitigation("a", 1), mitigation("a", 1)]
        assert duplicate_mitigation_ids(mitigations) == ["a"]

    def test_no_duplicates(self):
        assert duplicate_mitigation_ids([mitigation("a", 1), mitigation("b", 2)]) == []
