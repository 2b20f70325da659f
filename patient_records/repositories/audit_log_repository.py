"""Data access for ``audit_logs`` and the ``patient_deletions`` ledger."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from patient_records.models import AuditAction, AuditLog, PatientDeletion
from patient_records.models.base import utcnow

DEFAULT_ACTOR = "System"


class AuditLogRepository:
    """Append-only access to the audit trail."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_many(self, patient_id: UUID | None = None) -> list[AuditLog]:
        stmt = select(AuditLog)
        if patient_id is not None:
            stmt = stmt.where(AuditLog.patient_id == patient_id)
        stmt = stmt.order_by(AuditLog.performed_at.desc(), AuditLog.id)
        return list(self.db.execute(stmt).scalars().all())

    def create(
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
        entry = AuditLog(
            patient_id=patient_id,
            action=action,
            field_name=field_name or None,
            old_value=old_value or None,
            new_value=new_value or None,
            performed_by=performed_by or DEFAULT_ACTOR,
            performed_at=utcnow(),
            notes=notes or None,
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def record_deletion(
        self,
        *,
        patient_id: UUID,
        first_name: str,
        last_name: str,
        performed_by: str | None = None,
        notes: str | None = None,
    ) -> PatientDeletion:
        record = PatientDeletion(
            patient_id=patient_id,
            first_name=first_name,
            last_name=last_name,
            performed_by=performed_by or DEFAULT_ACTOR,
            performed_at=utcnow(),
            notes=notes or None,
        )
        self.db.add(record)
        self.db.flush()
        return record

    def find_deletions(self) -> list[PatientDeletion]:
        stmt = select(PatientDeletion).order_by(PatientDeletion.performed_at.desc())
        return list(self.db.execute(stmt).scalars().all())
