"""CSV export of list views."""

import csv
import io
from typing import Callable, Iterable, List, Sequence, Tuple

from riskwatch.data.schemas.asset import Asset
from riskwatch.data.schemas.risk import Risk

Column = Tuple[str, Callable]

RISK_COLUMNS: List[Column] = [
    ("id", lambda r: r.id),
    ("title", lambda r: r.title),
    ("category", lambda r: r.category.value),
    ("impact", lambda r: r.impact.value),
    ("likelihood", lambda r: r.likelihood.value),
    ("risk_score", lambda r: r.risk_score),
    ("level", lambda r: r.level.label),
    ("status", lambda r: r.status.value),
    ("owner_id", lambda r: r.owner_id or ""),
    ("department", lambda r: r.department or ""),
    ("due_date", lambda r: r.due_date.isoformat() if r.due_date else ""),
]

ASSET_COLUMNS: List[Column] = [
    ("id", lambda a: a.id),
    ("name", lambda a: a.name),
    ("type", lambda a: a.type.value),
    ("status", lambda a: a.status.value),
    ("city", lambda a: a.location.city),
    ("country", lambda a: a.location.country),
    ("overall_score", lambda a: a.ai_risk_score.overall),
    ("original_score", lambda a: a.ai_risk_score.original_score),
    ("total_risk_reduction", lambda a: a.ai_risk_score.total_risk_reduction),
    ("level", lambda a: a.level.label),
    ("responsible_officer", lambda a: a.responsible_officer.name),
]


def to_csv(records: Iterable, columns: Sequence[Column]) -> str:
    """Render records as CSV text with a header row, in the given order."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([name for name, _ in columns])
    for record in records:
        writer.writerow([getter(record) for _, getter in columns])
    return buffer.getvalue()


def risks_to_csv(risks: Iterable[Risk]) -> str:
    return to_csv(risks, RISK_COLUMNS)


def assets_to_csv(assets: Iterable[Asset]) -> str:
    return to_csv(assets, ASSET_COLUMNS)
