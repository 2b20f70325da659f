from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

from patient_records.models.base import Base, utcnow


class AuditAction(str, enum.Enum):
    """Kinds of events recorded in the patient audit trail."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    STATUS_CHANGE = "STATUS_CHANGE"


class AuditLog(Base):
    """Append-only audit trail entry for one patient.

    Rows are removed only when the parent patient is deleted.
    """

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("idx_audit_logs_patient_id", "patient_id"),
        Index("idx_audit_logs_performed_at", "performed_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    patient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False
    )
    action: Mapped[AuditAction] = mapped_column(
        Enum(
            AuditAction,
            name="audit_action",
            native_enum=False,
            length=50,
            create_constraint=True,
            validate_strings=True,
        ),
        nullable=False,
    )
    field_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    performed_by: Mapped[str] = mapped_column(
        String(255), nullable=False, default="System", server_default=text("'System'")
    )
    performed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
