from __future__ import annotations

import enum
import uuid
from datetime import date

from sqlalchemy import Date, Enum, Index, Numeric, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from patient_records.models.base import Base, TimestampMixin


class PatientStatus(str, enum.Enum):
    """Care-pipeline status of a patient. Any value may follow any other."""

    INQUIRY = "Inquiry"
    ONBOARDING = "Onboarding"
    ACTIVE = "Active"
    CHURNED = "Churned"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Patient(Base, TimestampMixin):
    """Patient record with an embedded postal address."""

    __tablename__ = "patients"
    __table_args__ = (
        Index("idx_patients_status", "status"),
        Index("idx_patients_created_at", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    middle_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[PatientStatus] = mapped_column(
        Enum(
            PatientStatus,
            name="patient_status",
            values_callable=_enum_values,
            native_enum=False,
            length=50,
            create_constraint=True,
            validate_strings=True,
        ),
        nullable=False,
    )
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    address_street: Mapped[str] = mapped_column(String(255), nullable=False)
    address_city: Mapped[str] = mapped_column(String(255), nullable=False)
    address_state: Mapped[str] = mapped_column(String(100), nullable=False)
    address_zip_code: Mapped[str] = mapped_column(String(20), nullable=False)
    address_country: Mapped[str] = mapped_column(
        String(100), nullable=False, default="USA", server_default=text("'USA'")
    )
    address_latitude: Mapped[float | None] = mapped_column(
        Numeric(10, 8, asdecimal=False), nullable=True
    )
    address_longitude: Mapped[float | None] = mapped_column(
        Numeric(11, 8, asdecimal=False), nullable=True
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
