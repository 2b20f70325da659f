"""Service layer for the patient records API."""

from patient_records.services.audit_log_service import (
    AuditLogService,
    serialize_audit_log,
    serialize_deletion,
)
from patient_records.services.patient_service import PatientService, serialize_patient

__all__ = [
    "AuditLogService",
    "PatientService",
    "serialize_audit_log",
    "serialize_deletion",
    "serialize_patient",
]
