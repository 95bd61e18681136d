"""Tests for single-key sorting."""

from datetime import date

from riskwatch.core.types import SortDirection, Severity
from riskwatch.query import RISK_ACCESSOR, RiskField, SortState, sort_records

from fixtures.records import make_risk


def _ids(records):
    return [r.id for r in records]


class TestSortState:

    def test_toggle_same_field_flips_direction(self):
        state = SortState(field=RiskField.RISK_SCORE, direction=SortDirection.DESC)
        assert state.toggle(RiskField.RISK_SCORE).direction == SortDirection.ASC
        assert state.toggle(RiskField.RISK_SCORE).toggle(RiskField.RISK_SCORE) == state

    def test_new_field_resets_to_descending(self):
        state = SortState(field=RiskField.RISK_SCORE, direction=SortDirection.ASC)
        toggled = state.toggle(RiskField.TITLE)
        assert toggled.field == RiskField.TITLE
        assert toggled.direction == SortDirection.DESC


class TestSortRecords:

    def test_numeric_ascending_and_descending_reverse(self):
        risks = [
            make_risk("r1", impact=Severity.HIGH, likelihood=Severity.MEDIUM),
            make_risk("r2", impact=Severity.LOW, likelihood=Severity.LOW),
            make_risk("r3", impact=Severity.VERY_HIGH, likelihood=Severity.HIGH),
        ]
        asc = sort_records(risks, SortState(RiskField.RISK_SCORE, SortDirection.ASC), RISK_ACCESSOR)
        desc = sort_records(risks, SortState(RiskField.RISK_SCORE, SortDirection.DESC), RISK_ACCESSOR)
        assert _ids(asc) == ["r2", "r1", "r3"]
        assert _ids(desc) == list(reversed(_ids(asc)))

    def test_text_sorts_lexicographically(self):
        risks = [make_risk("r1", "beta"), make_risk("r2", "Alpha"), make_risk("r3", "alpha")]
        result = sort_records(risks, SortState(RiskField.TITLE, SortDirection.ASC), RISK_ACCESSOR)
        assert _ids(result) == ["r2", "r3", "r1"]

    def test_severity_sorts_by_rank_not_name(self):
        risks = [
            make_risk("r1", impact=Severity.VERY_LOW),
            make_risk("r2", impact=Severity.VERY_HIGH),
            make_risk("r3", impact=Severity.MEDIUM),
        ]
        result = sort_records(risks, SortState(RiskField.IMPACT, SortDirection.DESC), RISK_ACCESSOR)
        assert _ids(result) == ["r2", "r3", "r1"]

    def test_dates_sort_chronologically_with_missing_last(self):
        risks = [
            make_risk("r1", due_date=date(2026, 6, 1)),
            make_risk("r2"),
            make_risk("r3", due_date=date(2026, 1, 15)),
        ]
        asc = sort_records(risks, SortState(RiskField.DUE_DATE, SortDirection.ASC), RISK_ACCESSOR)
        desc = sort_records(risks, SortState(RiskField.DUE_DATE, SortDirection.DESC), RISK_ACCESSOR)
        assert _ids(asc) == ["r3", "r1", "r2"]
        assert _ids(desc) == ["r1", "r3", "r2"]

    def test_equal_keys_keep_input_order(self):
        """The sort is stable in both directions."""
        risks = [make_risk(f"r{i}") for i in range(5)]
        for direction in SortDirection:
            result = sort_records(risks, SortState(RiskField.RISK_SCORE, direction), RISK_ACCESSOR)
            assert _ids(result) == ["r0", "r1", "r2", "r3", "r4"]

    def test_does_not_mutate_input(self):
        risks = [make_risk("r1", "b"), make_risk("r2", "a")]
        sort_records(risks, SortState(RiskField.TITLE, SortDirection.ASC), RISK_ACCESSOR)
        assert _ids(risks) == ["r1", "r2"]
