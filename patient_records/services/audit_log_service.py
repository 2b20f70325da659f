"""Audit trail reads and writes."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from patient_records.core.errors import DatabaseError
from patient_records.models import AuditAction, AuditLog, PatientDeletion
from patient_records.models.base import ensure_utc
from patient_records.repositories import AuditLogRepository

logger = logging.getLogger(__name__)


class AuditLogService:
    def __init__(self, db: Session) -> None:
        self.repository = AuditLogRepository(db)

    def get_audit_logs(self, patient_id: UUID | None = None) -> list[AuditLog]:
        """Return audit entries, newest first, optionally for one patient."""

        try:
            return self.repository.find_many(patient_id)
        except SQLAlchemyError as exc:
            logger.exception(
                "error fetching audit logs",
                extra={"patient_id": str(patient_id) if patient_id else None},
            )
            raise DatabaseError("Failed to fetch audit logs", exc) from exc

    def create_audit_log(
        self,
        *,
        patient_id: UUID,
        action: AuditAction,
        field_name: str | None = None,
        old_value: str | None = None,
        new_value: str | None = None,
        performed_by: str | None = None,
        notes: str | None = None,
    ) -> AuditLog:
        try:
            return self.repository.create(
                patient_id=patient_id,
                action=action,
                field_name=field_name,
                old_value=old_value,
                new_value=new_value,
                performed_by=performed_by,
                notes=notes,
            )
        except SQLAlchemyError as exc:
            logger.exception(
                "error creating audit log",
                extra={"patient_id": str(patient_id), "action": action.value},
            )
            raise DatabaseError("Failed to create audit log", exc) from exc

    def record_deletion(
        self,
        *,
        patient_id: UUID,
        first_name: str,
        last_name: str,
        performed_by: str | None = None,
        notes: str | None = None,
    ) -> PatientDeletion:
        try:
            return self.repository.record_deletion(
                patient_id=patient_id,
                first_name=first_name,
                last_name=last_name,
                performed_by=performed_by,
                notes=notes,
            )
        except SQLAlchemyError as exc:
            logger.exception(
                "error recording patient deletion",
                extra={"patient_id": str(patient_id)},
            )
            raise DatabaseError("Failed to record patient deletion", exc) from exc

    def get_deletions(self) -> list[PatientDeletion]:
        try:
            return self.repository.find_deletions()
        except SQLAlchemyError as exc:
            logger.exception("error fetching patient deletions")
            raise DatabaseError("Failed to fetch patient deletions", exc) from exc


def serialize_audit_log(entry: AuditLog) -> dict[str, Any]:
    """Return a JSON-friendly representation of an audit entry."""

    payload: dict[str, Any] = {
        "id": str(entry.id),
        "patientId": str(entry.patient_id),
        "action": entry.action.value,
        "performedBy": entry.performed_by,
        "performedAt": ensure_utc(entry.performed_at).isoformat(),
    }
    optional = {
        "fieldName": entry.field_name,
        "oldValue": entry.old_value,
        "newValue": entry.new_value,
        "notes": entry.notes,
    }
    payload.update({key: value for key, value in optional.items() if value})
    return payload


def serialize_deletion(record: PatientDeletion) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": str(record.id),
        "patientId": str(record.patient_id),
        "firstName": record.first_name,
        "lastName": record.last_name,
        "performedBy": record.performed_by,
        "performedAt": ensure_utc(record.performed_at).isoformat(),
    }
    if record.notes:
        payload["notes"] = record.notes
    return payload
