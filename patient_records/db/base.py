"""Import SQLAlchemy models for Alembic's autogenerate feature."""

from patient_records.models.base import Base
from patient_records.models import (  # noqa: F401
    AuditLog,
    Patient,
    PatientDeletion,
)

__all__ = [
    "Base",
    "AuditLog",
    "Patient",
    "PatientDeletion",
]
