import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["AUTO_MIGRATE"] = "false"

from collections.abc import Callable, Generator  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from patient_records.db.base import Base  # noqa: E402
from patient_records.db.session import configure_sqlite, get_db  # noqa: E402
from patient_records.main import app  # noqa: E402


@pytest.fixture()
def engine():
    """Isolated in-memory SQLite database shared by every session of one test."""

    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite(test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture()
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def patient_payload() -> Callable[..., dict[str, Any]]:
    def build(**overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
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
            },
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture()
def create_patient(client, patient_payload) -> Callable[..., dict[str, Any]]:
    def create(**overrides: Any) -> dict[str, Any]:
        response = client.post("/api/patients", json=patient_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()

    return create
