"""Filter predicates for list views.

Predicates are independent and combined with AND. Each one matches
everything when set to the ``"all"`` sentinel (or, for search, when the
term is empty).
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, TypeVar

from riskwatch.common.constants import QueryConstants
from riskwatch.core.types import RiskLevel
from riskwatch.query.accessors import EntityAccessor
from riskwatch.scoring.classifier import classify_level

T = TypeVar("T")

ALL = QueryConstants.FILTER_ALL


@dataclass(frozen=True)
class QueryFilters:
    """Active filter configuration."""
    search: str = ""
    category: str = ALL
    status: str = ALL
    level: str = ALL

    def __post_init__(self):
        if self.level != ALL:
            # Fail early on an unknown band rather than matching nothing
            RiskLevel(self.level)

    @property
    def level_band(self) -> Optional[RiskLevel]:
        return None if self.level == ALL else RiskLevel(self.level)

    @property
    def is_default(self) -> bool:
        return not self.search and self.category == ALL and self.status == ALL and self.level == ALL


def matches_search(record: T, term: str, accessor: EntityAccessor[T]) -> bool:
    """Case-insensitive substring match on any of the record's text fields."""
    if not term:
        return True
    needle = term.lower()
    return any(needle in (value or "").lower() for value in accessor.text_fields(record))


def matches_category(record: T, category: str, accessor: EntityAccessor[T]) -> bool:
    return category == ALL or accessor.category(record) == category


def matches_status(record: T, status: str, accessor: EntityAccessor[T]) -> bool:
    return status == ALL or accessor.status(record) == status


def matches_level(record: T, level: Optional[RiskLevel], accessor: EntityAccessor[T]) -> bool:
    return level is None or classify_level(accessor.score(record)) == level


def matches(record: T, filters: QueryFilters, accessor: EntityAccessor[T]) -> bool:
    """True when the record satisfies every active predicate."""
    return (
        matches_search(record, filters.search, accessor)
        and matches_category(record, filters.category, accessor)
        and matches_status(record, filters.status, accessor)
        and matches_level(record, filters.level_band, accessor)
    )


def apply_filters(records: Iterable[T], filters: QueryFilters, accessor: EntityAccessor[T]) -> List[T]:
    """Records satisfying all predicates, in input order."""
    if filters.is_default:
        return list(records)
    return [record for record in records if matches(record, filters, accessor)]
