"""SQLAlchemy models for the patient records API."""

from patient_records.models.audit_log import AuditAction, AuditLog
from patient_records.models.patient import Patient, PatientStatus
from patient_records.models.patient_deletion import PatientDeletion

__all__ = [
    "AuditAction",
    "AuditLog",
    "Patient",
    "PatientDeletion",
    "PatientStatus",
]
