"""Register views - list state for the risk register and asset dashboard.

A view holds the last collection that loaded successfully, the active
filters and sort, the selected record and an optional error banner. A
failed load keeps the previous collection and sets the banner.
"""

import logging
from typing import Awaitable, Callable, Generic, List, Optional, Tuple, TypeVar

from riskwatch.common.constants import QueryConstants
from riskwatch.common.exceptions import StoreError
from riskwatch.query.engine import QueryEngine, QueryResult, asset_query_engine, risk_query_engine
from riskwatch.query.export import ASSET_COLUMNS, RISK_COLUMNS, Column, to_csv
from riskwatch.query.filters import QueryFilters
from riskwatch.query.sorting import SortState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RegisterView(Generic[T]):
    """Client-side state of one list screen."""

    def __init__(
        self,
        loader: Callable[[], Awaitable[List[T]]],
        engine: QueryEngine[T],
        columns: List[Column],
        load_error_message: str,
    ):
        self.loader = loader
        self.engine = engine
        self.columns = columns
        self.load_error_message = load_error_message

        self.records: Tuple[T, ...] = ()
        self.filters = QueryFilters()
        self.sort = engine.default_sort
        self.selected_id: Optional[str] = None
        self.error: Optional[str] = None
        self.loading = False

    async def load(self) -> bool:
        """Reload the collection from the store.

        Returns:
            True on success. On failure the previous collection is kept
            and ``error`` holds the banner text.
        """
        self.loading = True
        try:
            records = await self.loader()
        except StoreError as e:
            logger.error(f"{self.load_error_message}: {e.message}")
            self.error = self.load_error_message
            return False
        finally:
            self.loading = False

        self.records = tuple(records)
        self.error = None
        return True

    def set_filters(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
        level: Optional[str] = None,
    ) -> QueryFilters:
        """Change some filters, leaving the others as they are."""
        self.filters = QueryFilters(
            search=self.filters.search if search is None else search,
            category=category or self.filters.category,
            status=status or self.filters.status,
            level=level or self.filters.level,
        )
        return self.filters

    def clear_filters(self) -> None:
        self.filters = QueryFilters()

    def toggle_sort(self, field: str) -> SortState:
        """Click on a column header."""
        self.sort = self.sort.toggle(self.engine.accessor.field(field))
        return self.sort

    def select(self, record_id: Optional[str]) -> None:
        self.selected_id = record_id

    def record_deleted(self, record_id: str) -> None:
        """Drop a deleted record from the collection and the selection."""
        self.records = tuple(r for r in self.records if r.id != record_id)
        if self.selected_id == record_id:
            self.selected_id = None

    def record_saved(self, record: T) -> None:
        """Put a created or updated record into the collection."""
        others = tuple(r for r in self.records if r.id != record.id)
        if len(others) == len(self.records):
            self.records = (record,) + others
        else:
            self.records = tuple(record if r.id == record.id else r for r in self.records)

    @property
    def selected(self) -> Optional[T]:
        if self.selected_id is None:
            return None
        return next((r for r in self.records if r.id == self.selected_id), None)

    def render(self) -> QueryResult[T]:
        return self.engine.run(self.records, self.filters, self.sort)

    def export_csv(self) -> str:
        """The currently visible rows, in display order."""
        return to_csv(self.render().items, self.columns)


def risk_register_view(loader: Callable[[], Awaitable[list]]) -> RegisterView:
    return RegisterView(loader, risk_query_engine(), RISK_COLUMNS, QueryConstants.LOAD_ERROR_MESSAGE)


def asset_dashboard_view(loader: Callable[[], Awaitable[list]]) -> RegisterView:
    return RegisterView(loader, asset_query_engine(), ASSET_COLUMNS, QueryConstants.ASSET_LOAD_ERROR_MESSAGE)
