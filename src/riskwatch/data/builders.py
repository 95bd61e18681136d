"""Typed builder for asset drafts.

Each nested field of the asset form has its own setter, so form code
never addresses state through dotted path strings. Setters return the
builder so calls can be chained.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from riskwatch.core.types import (
    AssetStatus,
    AssetType,
    IncidentSeverity,
    SecuritySubsystem,
    SubsystemStatus,
)
from riskwatch.data.schemas.asset import AssetDraft
from riskwatch.data.schemas.mitigation import AppliedMitigation
from riskwatch.data.validators.record_validator import validate_asset_draft


@dataclass(frozen=True)
class PersonnelRecord:
    """Entry from the personnel directory."""
    id: str
    name: str
    employee_id: str
    department: str
    city: str = ""
    country: str = ""


def available_personnel(
    directory: Iterable[PersonnelRecord],
    term: str,
    authorized: Sequence[str] = (),
) -> List[PersonnelRecord]:
    """People matching ``term`` who are not already authorized.

    Matches case-insensitively on name, employee id or department.
    """
    needle = term.lower()
    excluded = set(authorized)
    return [
        person for person in directory
        if person.id not in excluded
        and (
            needle in person.name.lower()
            or needle in person.employee_id.lower()
            or needle in person.department.lower()
        )
    ]


class AssetBuilder:
    """Accumulates asset form input and produces a validated AssetDraft."""

    def __init__(self, draft: Optional[AssetDraft] = None):
        self._draft = draft.model_copy(deep=True) if draft else AssetDraft()

    @property
    def draft(self) -> AssetDraft:
        """A copy of the current, not yet validated, draft."""
        return self._draft.model_copy(deep=True)

    def _update(self, **changes) -> "AssetBuilder":
        self._draft = self._draft.model_copy(update=changes)
        return self

    # --- identity -----------------------------------------------------

    def set_name(self, name: str) -> "AssetBuilder":
        return self._update(name=name)

    def set_type(self, asset_type: AssetType) -> "AssetBuilder":
        return self._update(type=AssetType(asset_type))

    def set_status(self, status: AssetStatus) -> "AssetBuilder":
        return self._update(status=AssetStatus(status))

    # --- location -----------------------------------------------------

    def set_address(self, address: str) -> "AssetBuilder":
        return self._update(location=self._draft.location.model_copy(update={"address": address}))

    def set_city(self, city: str) -> "AssetBuilder":
        return self._update(location=self._draft.location.model_copy(update={"city": city}))

    def set_country(self, country: str) -> "AssetBuilder":
        return self._update(location=self._draft.location.model_copy(update={"country": country}))

    def set_coordinates(self, latitude: float, longitude: float) -> "AssetBuilder":
        coordinates: Tuple[float, float] = (float(latitude), float(longitude))
        return self._update(location=self._draft.location.model_copy(update={"coordinates": coordinates}))

    # --- personnel ----------------------------------------------------

    def set_occupancy(self, current: int, capacity: int) -> "AssetBuilder":
        if current < 0 or capacity < 0:
            raise ValueError("occupancy counts must be non-negative")
        personnel = self._draft.personnel.model_copy(update={"current": current, "capacity": capacity})
        return self._update(personnel=personnel)

    def authorize(self, personnel_id: str) -> "AssetBuilder":
        """Add a person to the authorized set; adding twice is a no-op."""
        authorized = list(self._draft.personnel.authorized)
        if personnel_id not in authorized:
            authorized.append(personnel_id)
        personnel = self._draft.personnel.model_copy(update={"authorized": authorized})
        return self._update(personnel=personnel)

    def revoke(self, personnel_id: str) -> "AssetBuilder":
        authorized = [pid for pid in self._draft.personnel.authorized if pid != personnel_id]
        personnel = self._draft.personnel.model_copy(update={"authorized": authorized})
        return self._update(personnel=personnel)

    # --- security systems ---------------------------------------------

    def set_security_system(
        self,
        subsystem: SecuritySubsystem,
        status: SubsystemStatus,
        value: Optional[int] = None,
    ) -> "AssetBuilder":
        """Set a subsystem's status and, optionally, its coverage/count metric."""
        current = self._draft.security_systems.state(subsystem)
        changes = {"status": SubsystemStatus(status)}
        if value is not None:
            if value < 0:
                raise ValueError("subsystem metric must be non-negative")
            changes["value"] = value
        systems = self._draft.security_systems.with_state(subsystem, current.model_copy(update=changes))
        return self._update(security_systems=systems)

    # --- compliance and incidents -------------------------------------

    def set_compliance(
        self,
        last_audit: Optional[date] = None,
        next_audit: Optional[date] = None,
        score: Optional[int] = None,
        issues: Optional[Iterable[str]] = None,
    ) -> "AssetBuilder":
        changes = {}
        if last_audit is not None:
            changes["last_audit"] = last_audit
        if next_audit is not None:
            changes["next_audit"] = next_audit
        if score is not None:
            if not 0 <= score <= 100:
                raise ValueError("compliance score must be between 0 and 100")
            changes["score"] = score
        if issues is not None:
            changes["issues"] = list(issues)
        return self._update(compliance=self._draft.compliance.model_copy(update=changes))

    def set_incidents(
        self,
        total: int,
        last_incident: str,
        severity: IncidentSeverity,
    ) -> "AssetBuilder":
        if total < 0:
            raise ValueError("incident total must be non-negative")
        incidents = self._draft.incidents.model_copy(update={
            "total": total,
            "last_incident": last_incident,
            "severity": IncidentSeverity(severity),
        })
        return self._update(incidents=incidents)

    # --- responsible officer ------------------------------------------

    def set_responsible_officer(
        self,
        name: str,
        email: str = "",
        phone: str = "",
        department: str = "",
    ) -> "AssetBuilder":
        officer = self._draft.responsible_officer.model_copy(update={
            "name": name,
            "email": email,
            "phone": phone,
            "department": department,
        })
        return self._update(responsible_officer=officer)

    # --- mitigations --------------------------------------------------

    def add_mitigation(self, mitigation: AppliedMitigation) -> "AssetBuilder":
        return self._update(mitigations=[*self._draft.mitigations, mitigation])

    def remove_mitigation(self, mitigation_id: str) -> "AssetBuilder":
        """Remove every applied entry with this id."""
        remaining = [m for m in self._draft.mitigations if m.mitigation_id != mitigation_id]
        return self._update(mitigations=remaining)

    def set_mitigations(self, mitigations: Iterable[AppliedMitigation]) -> "AssetBuilder":
        return self._update(mitigations=list(mitigations))

    def build(self) -> AssetDraft:
        """Validate and return the draft.

        Raises:
            ValidationError: If name, city, country or officer name is blank
        """
        return validate_asset_draft(self.draft)
