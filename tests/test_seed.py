"""Tests for the demo data seeder."""
import pytest
from sqlalchemy import func, select

import patient_records.seed as seed_module
from patient_records.models import AuditLog, Patient


@pytest.fixture()
def seeded_db(monkeypatch, engine, session_factory):
    monkeypatch.setattr(seed_module, "engine", engine)
    monkeypatch.setattr(seed_module, "SessionLocal", session_factory)

    db = session_factory()
    yield db
    db.close()


def test_seed_inserts_demo_patients(seeded_db):
    seed_module.seed()

    count = seeded_db.execute(select(func.count()).select_from(Patient)).scalar_one()
    assert count == len(seed_module.PATIENTS)


def test_seed_is_idempotent(seeded_db):
    seed_module.seed()
    seed_module.seed()

    count = seeded_db.execute(select(func.count()).select_from(Patient)).scalar_one()
    assert count == len(seed_module.PATIENTS)


def test_seed_records_audit_entries_for_seed_actor(seeded_db):
    seed_module.seed()

    actors = set(seeded_db.execute(select(AuditLog.performed_by)).scalars())
    assert actors == {seed_module.SEED_ACTOR}


def test_seed_returns_cleanly_and_writes_every_demo_patient(seeded_db):
    assert seed_module.seed() is None

    names = set(
        seeded_db.execute(select(Patient.first_name, Patient.last_name)).all()
    )
    assert len(names) == 4
    assert ("Jane", "Smith") in names


def test_ensure_patients_reports_only_new_rows(seeded_db):
    assert seed_module.ensure_patients(seeded_db) == len(seed_module.PATIENTS)
    seeded_db.commit()

    assert seed_module.ensure_patients(seeded_db) == 0
