"""Patient use cases: persistence plus the best-effort audit trail.

Audit entries are written after the primary write, each batch inside its own
SAVEPOINT. A failed audit write is logged and rolled back on its own; the
patient change it accompanies still commits.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from patient_records.core.config import settings
from patient_records.core.errors import DatabaseError, NotFoundError
from patient_records.models import AuditAction, Patient
from patient_records.models.base import ensure_utc
from patient_records.repositories import ListOptions, PatientFilters, PatientRepository
from patient_records.services.audit_log_service import AuditLogService
from patient_records.services.auditing import FieldChange, diff_changes, snapshot, stringify

logger = logging.getLogger(__name__)


class PatientService:
    def __init__(
        self,
        db: Session,
        audit_log_service: AuditLogService | None = None,
        *,
        actor: str | None = None,
    ) -> None:
        self.db = db
        self.repository = PatientRepository(db)
        self.audit_logs = audit_log_service or AuditLogService(db)
        self.actor = actor or settings.default_actor

    def list_patients(
        self, filters: PatientFilters, options: ListOptions
    ) -> tuple[list[Patient], int]:
        """Return one page of matching patients and the unpaginated total."""

        try:
            return self.repository.find_many(filters, options)
        except SQLAlchemyError as exc:
            logger.exception("error listing patients")
            raise DatabaseError("Failed to fetch patients", exc) from exc

    def get_patient_by_id(self, patient_id: UUID) -> Patient:
        try:
            patient = self.repository.find_by_id(patient_id)
        except SQLAlchemyError as exc:
            logger.exception("error fetching patient", extra={"patient_id": str(patient_id)})
            raise DatabaseError("Failed to fetch patient", exc) from exc
        if patient is None:
            raise NotFoundError("Patient")
        return patient

    def create_patient(self, data: Mapping[str, Any]) -> Patient:
        try:
            patient = self.repository.create(data)
        except SQLAlchemyError as exc:
            logger.exception("error creating patient")
            raise DatabaseError("Failed to create patient", exc) from exc

        logger.info("patient created", extra={"patient_id": str(patient.id)})
        self._record_best_effort(
            patient.id,
            lambda: self.audit_logs.create_audit_log(
                patient_id=patient.id,
                action=AuditAction.CREATE,
                performed_by=self.actor,
                notes=f"Created patient {patient.full_name}",
            ),
        )
        return patient

    def update_patient(self, patient_id: UUID, patch: Mapping[str, Any]) -> Patient:
        """Apply a sparse patch and audit every supplied field that changed."""

        current = self.get_patient_by_id(patient_id)
        before = snapshot(current)
        try:
            updated = self.repository.save(current, patch)
        except SQLAlchemyError as exc:
            logger.exception("error updating patient", extra={"patient_id": str(patient_id)})
            raise DatabaseError("Failed to update patient", exc) from exc

        changes = diff_changes(before, patch)
        logger.info(
            "patient updated",
            extra={"patient_id": str(patient_id), "changed_fields": [c.field_name for c in changes]},
        )
        if changes:
            self._record_best_effort(
                patient_id, lambda: self._write_changes(patient_id, changes)
            )
        return updated

    def delete_patient(self, patient_id: UUID) -> None:
        patient = self.get_patient_by_id(patient_id)
        first_name, last_name = patient.first_name, patient.last_name
        notes = f"Deleted patient {patient.full_name}"

        self._record_best_effort(
            patient_id,
            lambda: self.audit_logs.create_audit_log(
                patient_id=patient_id,
                action=AuditAction.DELETE,
                performed_by=self.actor,
                notes=notes,
            ),
        )
        self._record_best_effort(
            patient_id,
            lambda: self.audit_logs.record_deletion(
                patient_id=patient_id,
                first_name=first_name,
                last_name=last_name,
                performed_by=self.actor,
                notes=notes,
            ),
        )

        try:
            deleted = self.repository.delete(patient_id)
        except SQLAlchemyError as exc:
            logger.exception("error deleting patient", extra={"patient_id": str(patient_id)})
            raise DatabaseError("Failed to delete patient", exc) from exc
        if not deleted:
            raise NotFoundError("Patient")
        logger.info("patient deleted", extra={"patient_id": str(patient_id)})

    def _write_changes(self, patient_id: UUID, changes: list[FieldChange]) -> None:
        for change in changes:
            self.audit_logs.create_audit_log(
                patient_id=patient_id,
                action=change.action,
                field_name=change.field_name,
                old_value=stringify(change.old_value),
                new_value=stringify(change.new_value),
                performed_by=self.actor,
                notes=f"Updated {change.field_name}",
            )

    def _record_best_effort(self, patient_id: UUID, write) -> None:  # noqa: ANN001
        try:
            with self.db.begin_nested():
                write()
        except (DatabaseError, SQLAlchemyError):
            logger.warning(
                "audit write failed; primary change kept",
                exc_info=True,
                extra={"patient_id": str(patient_id)},
            )


def serialize_patient(patient: Patient) -> dict[str, Any]:
    """Return a JSON-friendly representation of a patient.

    Optional values that are unset are omitted rather than sent as null.
    """

    address: dict[str, Any] = {
        "street": patient.address_street,
        "city": patient.address_city,
        "state": patient.address_state,
        "zipCode": patient.address_zip_code,
        "country": patient.address_country,
    }
    if patient.address_latitude is not None:
        address["latitude"] = float(patient.address_latitude)
    if patient.address_longitude is not None:
        address["longitude"] = float(patient.address_longitude)

    payload: dict[str, Any] = {
        "id": str(patient.id),
        "firstName": patient.first_name,
        "lastName": patient.last_name,
        "dateOfBirth": patient.date_of_birth.isoformat(),
        "status": patient.status.value,
        "address": address,
        "createdAt": ensure_utc(patient.created_at).isoformat(),
        "updatedAt": ensure_utc(patient.updated_at).isoformat(),
    }
    for key, value in (
        ("middleName", patient.middle_name),
        ("email", patient.email),
        ("phone", patient.phone),
    ):
        if value:
            payload[key] = value
    return payload
