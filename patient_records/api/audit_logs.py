from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from patient_records.api.deps import get_audit_log_service
from patient_records.services import (
    AuditLogService,
    serialize_audit_log,
    serialize_deletion,
)

router = APIRouter(prefix="/api/audit-logs", tags=["audit-logs"])


@router.get("")
def list_audit_logs(
    patient_id: UUID | None = Query(default=None, alias="patientId"),
    service: AuditLogService = Depends(get_audit_log_service),
) -> list[dict[str, Any]]:
    """Audit entries, newest first, optionally for a single patient."""

    return [serialize_audit_log(entry) for entry in service.get_audit_logs(patient_id)]


@router.get("/deletions")
def list_deletions(
    service: AuditLogService = Depends(get_audit_log_service),
) -> list[dict[str, Any]]:
    """Deleted patients, including those whose audit trail was cascaded away."""

    return [serialize_deletion(record) for record in service.get_deletions()]
