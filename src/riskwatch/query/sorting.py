"""Single-key sorting for list views.

Ordering rules:
- Numbers compare numerically, text lexicographically (case-sensitive,
  as stored), dates and timestamps chronologically.
- There is no secondary key. Python's sort is stable, including with
  ``reverse=True``, so records with equal keys keep their input order
  (the store's ``created_at`` descending order when fed from a load).
- Records whose key is missing (e.g. no due date) always come last, in
  input order, regardless of direction.
"""

from dataclasses import dataclass, replace
from typing import Any, Iterable, List, TypeVar

from riskwatch.core.types import SortDirection
from riskwatch.query.accessors import EntityAccessor

T = TypeVar("T")


@dataclass(frozen=True)
class SortState:
    """The active sort key and direction."""
    field: Any
    direction: SortDirection = SortDirection.DESC

    def toggle(self, field: Any) -> "SortState":
        """Select ``field``: flips direction if already active, else resets to descending."""
        if field == self.field:
            return replace(self, direction=self.direction.flipped())
        return SortState(field=field, direction=SortDirection.DESC)

    @property
    def descending(self) -> bool:
        return self.direction == SortDirection.DESC


def sort_records(records: Iterable[T], state: SortState, accessor: EntityAccessor[T]) -> List[T]:
    """Return a new list ordered by ``state``."""
    keyed = [(accessor.sort_value(record, state.field), record) for record in records]
    present = [pair for pair in keyed if pair[0] is not None]
    missing = [record for value, record in keyed if value is None]
    present.sort(key=lambda pair: pair[0], reverse=state.descending)
    return [record for _, record in present] + missing
