"""Repository layer: the only place that issues SQL."""

from patient_records.repositories.audit_log_repository import AuditLogRepository
from patient_records.repositories.patient_query import (
    ListOptions,
    PatientFilters,
    PatientQuery,
)
from patient_records.repositories.patient_repository import PatientRepository

__all__ = [
    "AuditLogRepository",
    "ListOptions",
    "PatientFilters",
    "PatientQuery",
    "PatientRepository",
]
