"""Field-level change detection for patient updates.

The diff is shallow and payload-driven: only keys present in the update
payload are compared, and a key whose new value equals the stored value
yields nothing.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from patient_records.models import AuditAction, Patient

# (payload key, audit field name)
TRACKED_FIELDS: tuple[tuple[str, str], ...] = (
    ("first_name", "firstName"),
    ("middle_name", "middleName"),
    ("last_name", "lastName"),
    ("date_of_birth", "dateOfBirth"),
    ("status", "status"),
    ("email", "email"),
    ("phone", "phone"),
)
TRACKED_ADDRESS_FIELDS: tuple[tuple[str, str], ...] = (
    ("street", "address.street"),
    ("city", "address.city"),
    ("state", "address.state"),
    ("zip_code", "address.zipCode"),
    ("country", "address.country"),
    ("latitude", "address.latitude"),
    ("longitude", "address.longitude"),
)


@dataclass(frozen=True)
class FieldChange:
    field_name: str
    old_value: Any
    new_value: Any

    @property
    def action(self) -> AuditAction:
        if self.field_name == "status":
            return AuditAction.STATUS_CHANGE
        return AuditAction.UPDATE


def stringify(value: Any) -> str:
    """Render a field value the way it is stored in ``audit_logs``."""

    if value is None:
        return ""
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def snapshot(patient: Patient) -> dict[str, Any]:
    """Capture the audited fields of a patient in payload shape."""

    return {
        "first_name": patient.first_name,
        "middle_name": patient.middle_name,
        "last_name": patient.last_name,
        "date_of_birth": patient.date_of_birth,
        "status": patient.status,
        "email": patient.email,
        "phone": patient.phone,
        "address": {
            "street": patient.address_street,
            "city": patient.address_city,
            "state": patient.address_state,
            "zip_code": patient.address_zip_code,
            "country": patient.address_country,
            "latitude": patient.address_latitude,
            "longitude": patient.address_longitude,
        },
    }


def _same(old: Any, new: Any) -> bool:
    if isinstance(old, enum.Enum) or isinstance(new, enum.Enum):
        return stringify(old) == stringify(new)
    return old == new


def diff_changes(
    before: Mapping[str, Any], patch: Mapping[str, Any]
) -> list[FieldChange]:
    """Return one change per supplied field whose value differs from ``before``."""

    changes: list[FieldChange] = []
    for key, field_name in TRACKED_FIELDS:
        if key not in patch:
            continue
        old, new = before.get(key), patch[key]
        if not _same(old, new):
            changes.append(FieldChange(field_name, old, new))

    address_patch = patch.get("address") or {}
    address_before = before.get("address") or {}
    for key, field_name in TRACKED_ADDRESS_FIELDS:
        if key not in address_patch:
            continue
        old, new = address_before.get(key), address_patch[key]
        if not _same(old, new):
            changes.append(FieldChange(field_name, old, new))
    return changes
