"""Query engine - filtering, sorting, statistics and export for list views."""

from riskwatch.query.accessors import (
    ASSET_ACCESSOR,
    RISK_ACCESSOR,
    AssetField,
    EntityAccessor,
    RiskField,
)
from riskwatch.query.engine import QueryEngine, QueryResult, asset_query_engine, risk_query_engine
from riskwatch.query.export import assets_to_csv, risks_to_csv
from riskwatch.query.filters import QueryFilters, apply_filters, matches
from riskwatch.query.sorting import SortState, sort_records
from riskwatch.query.statistics import CollectionStats, compute_statistics

__all__ = [
    "ASSET_ACCESSOR",
    "RISK_ACCESSOR",
    "AssetField",
    "EntityAccessor",
    "RiskField",
    "QueryEngine",
    "QueryResult",
    "asset_query_engine",
    "risk_query_engine",
    "assets_to_csv",
    "risks_to_csv",
    "QueryFilters",
    "apply_filters",
    "matches",
    "SortState",
    "sort_records",
    "CollectionStats",
    "compute_statistics",
]
