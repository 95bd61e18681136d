"""Typed field access for query operations.

Sort keys are enumerated per entity kind and mapped to accessor
functions, so no field is ever looked up by an arbitrary string.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Generic, Tuple, TypeVar

from riskwatch.core.types import AssetStatus, RiskStatus
from riskwatch.data.schemas.asset import Asset
from riskwatch.data.schemas.risk import Risk
from riskwatch.scoring.risk_matrix import severity_rank

T = TypeVar("T")


class RiskField(str, Enum):
    """Sortable risk fields."""
    TITLE = "title"
    CATEGORY = "category"
    IMPACT = "impact"
    LIKELIHOOD = "likelihood"
    RISK_SCORE = "risk_score"
    STATUS = "status"
    DEPARTMENT = "department"
    DUE_DATE = "due_date"
    LAST_REVIEWED_AT = "last_reviewed_at"
    CREATED_AT = "created_at"


class AssetField(str, Enum):
    """Sortable asset fields."""
    NAME = "name"
    TYPE = "type"
    STATUS = "status"
    OVERALL_SCORE = "overall_score"
    ORIGINAL_SCORE = "original_score"
    CITY = "city"
    COUNTRY = "country"
    COMPLIANCE_SCORE = "compliance_score"
    INCIDENTS = "incidents"
    CREATED_AT = "created_at"


# Risk statuses that no longer count as open
CLOSED_RISK_STATUSES: FrozenSet[RiskStatus] = frozenset({RiskStatus.MITIGATED, RiskStatus.CLOSED})

# Asset statuses that need attention
OPEN_ASSET_STATUSES: FrozenSet[AssetStatus] = frozenset({AssetStatus.ALERT, AssetStatus.COMPROMISED})


@dataclass(frozen=True)
class EntityAccessor(Generic[T]):
    """How the query engine reads one entity kind.

    Attributes:
        field_type: Enum of sortable fields
        sort_keys: Accessor per sortable field
        text_fields: Values searched by the free-text predicate
        category: Value compared by the category predicate
        status: Value compared by the status predicate
        score: Score fed to the severity classifier
        is_open: Whether the record counts as open in statistics
    """
    field_type: type
    sort_keys: Dict[Any, Callable[[T], Any]]
    text_fields: Callable[[T], Tuple[str, ...]]
    category: Callable[[T], str]
    status: Callable[[T], str]
    score: Callable[[T], int]
    is_open: Callable[[T], bool]

    def field(self, name: str) -> Any:
        """Resolve a sort key name to the enumerated field.

        Raises:
            ValueError: If ``name`` is not a sortable field
        """
        return self.field_type(name)

    def sort_value(self, record: T, field: Any) -> Any:
        return self.sort_keys[field](record)


RISK_ACCESSOR: EntityAccessor[Risk] = EntityAccessor(
    field_type=RiskField,
    sort_keys={
        RiskField.TITLE: lambda r: r.title,
        RiskField.CATEGORY: lambda r: r.category.value,
        RiskField.IMPACT: lambda r: severity_rank(r.impact),
        RiskField.LIKELIHOOD: lambda r: severity_rank(r.likelihood),
        RiskField.RISK_SCORE: lambda r: r.risk_score,
        RiskField.STATUS: lambda r: r.status.value,
        RiskField.DEPARTMENT: lambda r: r.department,
        RiskField.DUE_DATE: lambda r: r.due_date,
        RiskField.LAST_REVIEWED_AT: lambda r: r.last_reviewed_at,
        RiskField.CREATED_AT: lambda r: r.created_at,
    },
    text_fields=lambda r: (r.title, r.description),
    category=lambda r: r.category.value,
    status=lambda r: r.status.value,
    score=lambda r: r.risk_score,
    is_open=lambda r: r.status not in CLOSED_RISK_STATUSES,
)


ASSET_ACCESSOR: EntityAccessor[Asset] = EntityAccessor(
    field_type=AssetField,
    sort_keys={
        AssetField.NAME: lambda a: a.name,
        AssetField.TYPE: lambda a: a.type.value,
        AssetField.STATUS: lambda a: a.status.value,
        AssetField.OVERALL_SCORE: lambda a: a.ai_risk_score.overall,
        AssetField.ORIGINAL_SCORE: lambda a: a.ai_risk_score.original_score,
        AssetField.CITY: lambda a: a.location.city,
        AssetField.COUNTRY: lambda a: a.location.country,
        AssetField.COMPLIANCE_SCORE: lambda a: a.compliance.score,
        AssetField.INCIDENTS: lambda a: a.incidents.total,
        AssetField.CREATED_AT: lambda a: a.created_at,
    },
    text_fields=lambda a: (a.name, a.location.address, a.location.city, a.location.country),
    category=lambda a: a.type.value,
    status=lambda a: a.status.value,
    score=lambda a: a.ai_risk_score.overall,
    is_open=lambda a: a.status in OPEN_ASSET_STATUSES,
)
