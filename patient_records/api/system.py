from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from patient_records.core.errors import DatabaseError
from patient_records.db.init import init_database
from patient_records.db.session import get_db

router = APIRouter(prefix="/api", tags=["system"])

logger = logging.getLogger(__name__)


@router.post("/init")
def initialize_schema(db: Session = Depends(get_db)) -> dict[str, Any]:
    """Re-run the idempotent schema step on demand."""

    try:
        tables = init_database(db.connection())
    except SQLAlchemyError as exc:
        logger.exception("error initializing database")
        raise DatabaseError("Failed to initialize database", exc) from exc
    return {
        "success": True,
        "message": "Database initialized successfully",
        "tables": tables,
    }
