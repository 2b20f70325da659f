from collections.abc import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from patient_records.core.config import settings


def configure_sqlite(engine: Engine) -> None:
    """Enforce foreign keys and let SQLAlchemy own transaction boundaries on SQLite.

    pysqlite defers BEGIN on its own, which breaks SAVEPOINTs; emitting BEGIN
    explicitly keeps nested transactions and ``ON DELETE CASCADE`` working.
    """

    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # noqa: ANN001
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):  # noqa: ANN001
        conn.exec_driver_sql("BEGIN")


engine = create_engine(settings.database_url, echo=settings.sql_echo, future=True)
configure_sqlite(engine)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


def get_db() -> Generator[Session, None, None]:
    """Provide a transactional scope around a series of operations."""

    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
