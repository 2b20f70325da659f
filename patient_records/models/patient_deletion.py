from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

from patient_records.models.base import Base, utcnow


class PatientDeletion(Base):
    """Ledger row recording that a patient was deleted.

    ``patient_id`` carries no foreign key so the row outlives the patient and
    its cascaded audit entries.
    """

    __tablename__ = "patient_deletions"
    __table_args__ = (Index("idx_patient_deletions_performed_at", "performed_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    patient_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    performed_by: Mapped[str] = mapped_column(
        String(255), nullable=False, default="System", server_default=text("'System'")
    )
    performed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
