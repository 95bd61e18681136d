"""Query engine - filtered, sorted and summarized views over a collection.

The engine takes a snapshot (tuple copy) of the collection before doing
anything, so a mutation of the caller's list during a pass cannot affect
the result. Filtering and statistics are single linear passes; only the
sort is O(n log n).
"""

from typing import Generic, Iterable, List, Optional, Tuple, TypeVar
from pydantic import BaseModel, ConfigDict, Field

from riskwatch.common.constants import QueryConstants
from riskwatch.core.types import SortDirection
from riskwatch.data.schemas.asset import Asset
from riskwatch.data.schemas.risk import Risk
from riskwatch.query.accessors import ASSET_ACCESSOR, RISK_ACCESSOR, AssetField, EntityAccessor, RiskField
from riskwatch.query.filters import QueryFilters, apply_filters
from riskwatch.query.sorting import SortState, sort_records
from riskwatch.query.statistics import CollectionStats, compute_statistics

T = TypeVar("T")


class QueryResult(BaseModel, Generic[T]):
    """View model handed to presentation code."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: List[T] = Field(default_factory=list, description="Filtered and sorted records")
    stats: CollectionStats = Field(default_factory=CollectionStats, description="Over the unfiltered collection")
    sort_field: str
    sort_direction: SortDirection
    matched: int = Field(default=0, description="Number of records passing the filters")


class QueryEngine(Generic[T]):
    """Runs filter, sort and statistics passes for one entity kind."""

    def __init__(self, accessor: EntityAccessor[T], default_sort: SortState):
        self.accessor = accessor
        self.default_sort = default_sort

    def sort_state(self, field: Optional[str] = None, direction: Optional[str] = None) -> SortState:
        """Build a sort state from request values, defaulting missing parts.

        Raises:
            ValueError: If ``field`` or ``direction`` is not recognised
        """
        if field is None:
            state = self.default_sort
        else:
            state = SortState(field=self.accessor.field(field))
        if direction is not None:
            state = SortState(field=state.field, direction=SortDirection(direction))
        return state

    def filter(self, records: Iterable[T], filters: QueryFilters) -> List[T]:
        return apply_filters(tuple(records), filters, self.accessor)

    def sort(self, records: Iterable[T], state: Optional[SortState] = None) -> List[T]:
        return sort_records(tuple(records), state or self.default_sort, self.accessor)

    def statistics(self, records: Iterable[T]) -> CollectionStats:
        return compute_statistics(tuple(records), self.accessor)

    def run(
        self,
        records: Iterable[T],
        filters: Optional[QueryFilters] = None,
        sort: Optional[SortState] = None,
    ) -> QueryResult[T]:
        """Produce the filtered+sorted view and full-collection statistics."""
        snapshot: Tuple[T, ...] = tuple(records)
        state = sort or self.default_sort
        visible = apply_filters(snapshot, filters or QueryFilters(), self.accessor)
        ordered = sort_records(visible, state, self.accessor)
        return QueryResult(
            items=ordered,
            stats=compute_statistics(snapshot, self.accessor),
            sort_field=state.field.value,
            sort_direction=state.direction,
            matched=len(ordered),
        )


def risk_query_engine() -> QueryEngine[Risk]:
    return QueryEngine(
        RISK_ACCESSOR,
        SortState(field=RiskField(QueryConstants.DEFAULT_RISK_SORT), direction=SortDirection.DESC),
    )


def asset_query_engine() -> QueryEngine[Asset]:
    return QueryEngine(
        ASSET_ACCESSOR,
        SortState(field=AssetField(QueryConstants.DEFAULT_ASSET_SORT), direction=SortDirection.DESC),
    )
