"""Idempotent schema creation run at startup and from ``POST /api/init``."""

from __future__ import annotations

import logging

from sqlalchemy.engine import Connection, Engine

from patient_records.db.base import Base

logger = logging.getLogger(__name__)


def init_database(bind: Engine | Connection) -> list[str]:
    """Create any missing tables and indexes, returning the managed table names.

    Existing tables are left untouched, so repeated calls are safe.
    """

    Base.metadata.create_all(bind=bind, checkfirst=True)
    tables = sorted(Base.metadata.tables)
    logger.info("database schema ensured", extra={"tables": tables})
    return tables
