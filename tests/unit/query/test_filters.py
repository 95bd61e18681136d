"""Tests for list view filters."""

import pytest

from riskwatch.core.types import RiskCategory, RiskLevel, RiskStatus, Severity
from riskwatch.query import ASSET_ACCESSOR, RISK_ACCESSOR, QueryFilters, apply_filters, matches
from riskwatch.scoring import classify_level

from fixtures.records import make_asset, make_risk


@pytest.fixture
def risks():
    return [
        make_risk("r1", "Vendor outage", Severity.HIGH, Severity.MEDIUM,
                  description="Payment processor unavailable"),
        make_risk("r2", "Data breach", Severity.VERY_HIGH, Severity.HIGH,
                  category=RiskCategory.SECURITY, status=RiskStatus.ASSESSED),
        make_risk("r3", "Office flood", Severity.LOW, Severity.LOW,
                  category=RiskCategory.ENVIRONMENTAL, status=RiskStatus.CLOSED),
        make_risk("r4", "Key staff leave", Severity.MEDIUM, Severity.HIGH,
                  category=RiskCategory.OPERATIONAL, status=RiskStatus.MONITORING,
                  description="Loss of the payment team lead"),
    ]


class TestRiskFilters:

    def test_default_filters_match_everything(self, risks):
        assert apply_filters(risks, QueryFilters(), RISK_ACCESSOR) == risks

    def test_search_is_case_insensitive_on_title(self, risks):
        result = apply_filters(risks, QueryFilters(search="VENDOR"), RISK_ACCESSOR)
        assert [r.id for r in result] == ["r1"]

    def test_search_matches_description(self, risks):
        result = apply_filters(risks, QueryFilters(search="payment"), RISK_ACCESSOR)
        assert [r.id for r in result] == ["r1", "r4"]

    def test_category_filter(self, risks):
        result = apply_filters(risks, QueryFilters(category="security"), RISK_ACCESSOR)
        assert [r.id for r in result] == ["r2"]

    def test_status_filter(self, risks):
        result = apply_filters(risks, QueryFilters(status="closed"), RISK_ACCESSOR)
        assert [r.id for r in result] == ["r3"]

    def test_level_filter_uses_classifier(self, risks):
        result = apply_filters(risks, QueryFilters(level="medium"), RISK_ACCESSOR)
        assert [r.id for r in result] == ["r1", "r4"]
        assert all(classify_level(r.risk_score) == RiskLevel.MEDIUM for r in result)

    def test_predicates_combine_with_and(self, risks):
        filters = QueryFilters(search="payment", category="operational", level="medium")
        assert [r.id for r in apply_filters(risks, filters, RISK_ACCESSOR)] == ["r1", "r4"]
        filters = QueryFilters(search="payment", status="monitoring")
        assert [r.id for r in apply_filters(risks, filters, RISK_ACCESSOR)] == ["r4"]

    def test_result_is_sound_and_complete(self, risks):
        filters = QueryFilters(category="operational", level="medium")
        result = apply_filters(risks, filters, RISK_ACCESSOR)
        assert all(matches(r, filters, RISK_ACCESSOR) for r in result)
        missing = [r for r in risks if matches(r, filters, RISK_ACCESSOR) and r not in result]
        assert missing == []
        assert set(r.id for r in result) <= set(r.id for r in risks)

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError):
            QueryFilters(level="severe")

    def test_empty_collection(self):
        assert apply_filters([], QueryFilters(search="anything"), RISK_ACCESSOR) == []


class TestAssetFilters:

    def test_search_matches_location(self):
        assets = [
            make_asset("a1", "HQ Building", city="Berlin"),
            make_asset("a2", "Warehouse", city="Lisbon", country="Portugal"),
        ]
        result = apply_filters(assets, QueryFilters(search="portugal"), ASSET_ACCESSOR)
        assert [a.id for a in result] == ["a2"]

    def test_category_filters_on_type(self):
        from riskwatch.core.types import AssetType

        assets = [
            make_asset("a1", asset_type=AssetType.VEHICLE),
            make_asset("a2", asset_type=AssetType.DATA_CENTER),
        ]
        result = apply_filters(assets, QueryFilters(category="data-center"), ASSET_ACCESSOR)
        assert [a.id for a in result] == ["a2"]

    def test_level_uses_effective_score(self):
        from fixtures.records import mitigation

        assets = [
            make_asset("a1", base=25),
            make_asset("a2", base=25, mitigations=[mitigation("m1", 15)]),
        ]
        result = apply_filters(assets, QueryFilters(level="medium"), ASSET_ACCESSOR)
        assert [a.id for a in result] == ["a2"]
