"""Data access for the ``patients`` table."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.orm import Session

from patient_records.models import Patient
from patient_records.models.base import utcnow
from patient_records.repositories.patient_query import (
    ListOptions,
    PatientFilters,
    PatientQuery,
)

logger = logging.getLogger(__name__)

# Payload keys mapped onto Patient columns.
PATIENT_FIELDS: dict[str, str] = {
    "first_name": "first_name",
    "middle_name": "middle_name",
    "last_name": "last_name",
    "date_of_birth": "date_of_birth",
    "status": "status",
    "email": "email",
    "phone": "phone",
}
ADDRESS_FIELDS: dict[str, str] = {
    "street": "address_street",
    "city": "address_city",
    "state": "address_state",
    "zip_code": "address_zip_code",
    "country": "address_country",
    "latitude": "address_latitude",
    "longitude": "address_longitude",
}


def apply_patch(patient: Patient, patch: Mapping[str, Any]) -> None:
    """Copy the supplied keys of ``patch`` onto ``patient``.

    Keys missing from the patch keep their current value; the nested
    ``address`` mapping is merged part by part.
    """

    for key, column in PATIENT_FIELDS.items():
        if key in patch:
            setattr(patient, column, patch[key])
    address = patch.get("address") or {}
    for key, column in ADDRESS_FIELDS.items():
        if key in address:
            setattr(patient, column, address[key])


class PatientRepository:
    """CRUD operations against the ``patients`` table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_many(
        self, filters: PatientFilters, options: ListOptions
    ) -> tuple[list[Patient], int]:
        query = PatientQuery.build(filters, options)
        total_count = int(self.db.execute(query.count_statement()).scalar_one())
        patients = list(self.db.execute(query.data_statement()).scalars().all())
        return patients, total_count

    def find_by_id(self, patient_id: UUID) -> Patient | None:
        return self.db.get(Patient, patient_id)

    def create(self, data: Mapping[str, Any]) -> Patient:
        now = utcnow()
        patient = Patient(created_at=now, updated_at=now)
        apply_patch(patient, data)
        if patient.address_country is None:
            patient.address_country = "USA"
        self.db.add(patient)
        self.db.flush()
        logger.debug("inserted patient %s", patient.id)
        return patient

    def update(self, patient_id: UUID, patch: Mapping[str, Any]) -> Patient | None:
        patient = self.find_by_id(patient_id)
        if patient is None:
            return None
        return self.save(patient, patch)

    def save(self, patient: Patient, patch: Mapping[str, Any]) -> Patient:
        """Apply ``patch`` to an already loaded patient and persist it."""

        apply_patch(patient, patch)
        patient.updated_at = utcnow()
        self.db.flush()
        return patient

    def delete(self, patient_id: UUID) -> bool:
        """Delete the row; dependent audit rows go with it via the FK cascade."""

        result = self.db.execute(delete(Patient).where(Patient.id == patient_id))
        return bool(result.rowcount)
