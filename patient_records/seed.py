from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from patient_records.core.config import settings
from patient_records.db.init import init_database
from patient_records.db.session import SessionLocal, engine
from patient_records.logging_utils import configure_logging
from patient_records.models import Patient
from patient_records.schemas import PatientCreate
from patient_records.services import PatientService

logger = logging.getLogger(__name__)

SEED_ACTOR = "Seed Script"

PATIENTS: list[dict[str, Any]] = [
    {
        "firstName": "Jane",
        "lastName": "Smith",
        "dateOfBirth": "1985-03-14",
        "status": "Active",
        "email": "jane.smith@example.com",
        "phone": "555-0101",
        "address": {
            "street": "12 Oak Street",
            "city": "Springfield",
            "state": "IL",
            "zipCode": "62701",
            "latitude": 39.78172,
            "longitude": -89.65015,
        },
    },
    {
        "firstName": "Robert",
        "middleName": "James",
        "lastName": "Johnson",
        "dateOfBirth": "1972-11-02",
        "status": "Onboarding",
        "email": "robert.johnson@example.com",
        "phone": "555-0102",
        "address": {
            "street": "400 Pine Avenue",
            "city": "Austin",
            "state": "TX",
            "zipCode": "73301-0001",
        },
    },
    {
        "firstName": "Maria",
        "lastName": "Garcia",
        "dateOfBirth": "1990-07-21",
        "status": "Inquiry",
        "email": "maria.garcia@example.com",
        "address": {
            "street": "77 Bay Road",
            "city": "San Diego",
            "state": "CA",
            "zipCode": "92101",
        },
    },
    {
        "firstName": "Smithson",
        "lastName": "Lee",
        "dateOfBirth": "1965-01-30",
        "status": "Churned",
        "phone": "555-0104",
        "address": {
            "street": "9 Harbor Lane",
            "city": "Portland",
            "state": "ME",
            "zipCode": "04101",
        },
    },
]


def ensure_patients(session: Session) -> int:
    service = PatientService(session, actor=SEED_ACTOR)
    created = 0
    for raw in PATIENTS:
        payload = PatientCreate.model_validate(raw)
        existing = session.execute(
            select(Patient.id).where(
                Patient.first_name == payload.first_name,
                Patient.last_name == payload.last_name,
                Patient.date_of_birth == payload.date_of_birth,
            )
        ).scalar_one_or_none()
        if existing:
            continue
        service.create_patient(payload.model_dump())
        created += 1

    logger.info(
        "ensured patients",
        extra={"created_count": created, "patient_count": len(PATIENTS)},
    )
    return created


def seed() -> None:
    configure_logging(settings.log_level, service=settings.app_name)
    logger.info("starting seed process")

    init_database(engine)
    session = SessionLocal()
    try:
        ensure_patients(session)
        session.commit()
        logger.info("seed complete")
    except Exception:
        session.rollback()
        logger.exception("seed failed")
        raise
    finally:
        session.close()


if __name__ == "__main__":  # pragma: no cover - script entrypoint
    seed()
