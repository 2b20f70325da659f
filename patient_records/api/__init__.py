"""HTTP routers for the patient records API."""

from patient_records.api import audit_logs, patients, system

__all__ = ["audit_logs", "patients", "system"]
