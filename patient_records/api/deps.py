from fastapi import Depends
from sqlalchemy.orm import Session

from patient_records.db.session import get_db
from patient_records.services import AuditLogService, PatientService


def get_audit_log_service(db: Session = Depends(get_db)) -> AuditLogService:
    return AuditLogService(db)


def get_patient_service(
    db: Session = Depends(get_db),
    audit_log_service: AuditLogService = Depends(get_audit_log_service),
) -> PatientService:
    return PatientService(db, audit_log_service)
