"""Patient endpoints: list, create, read, partial update, delete."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from patient_records.api.deps import get_patient_service
from patient_records.core.config import settings
from patient_records.models import PatientStatus
from patient_records.models.base import ensure_utc
from patient_records.repositories import ListOptions, PatientFilters
from patient_records.schemas import (
    PatientCreate,
    PatientUpdate,
    SortDirection,
    SortField,
    StatusFilter,
)
from patient_records.services import PatientService, serialize_patient

router = APIRouter(prefix="/api/patients", tags=["patients"])


@router.get("")
def list_patients(
    search: str = Query(default="", max_length=255),
    status_filter: StatusFilter = Query(default="ALL", alias="status"),
    sort_field: SortField = Query(default="name", alias="sortField"),
    sort_direction: SortDirection = Query(default="asc", alias="sortDirection"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(
        default=settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        alias="pageSize",
    ),
    date_from: datetime | None = Query(default=None, alias="dateFrom"),
    date_to: datetime | None = Query(default=None, alias="dateTo"),
    service: PatientService = Depends(get_patient_service),
) -> dict[str, Any]:
    """List patients with filtering, sorting and pagination."""

    filters = PatientFilters(
        search=search.strip() or None,
        status=None if status_filter == "ALL" else PatientStatus(status_filter),
        date_from=ensure_utc(date_from) if date_from else None,
        date_to=ensure_utc(date_to) if date_to else None,
    )
    options = ListOptions(
        sort_field=sort_field,
        sort_direction=sort_direction,
        page=page,
        page_size=page_size,
    )
    patients, total_count = service.list_patients(filters, options)
    return {
        "patients": [serialize_patient(patient) for patient in patients],
        "pagination": {
            "page": page,
            "pageSize": page_size,
            "totalCount": total_count,
        },
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_patient(
    payload: PatientCreate,
    service: PatientService = Depends(get_patient_service),
) -> dict[str, Any]:
    patient = service.create_patient(payload.model_dump())
    return serialize_patient(patient)


@router.get("/{patient_id}")
def get_patient(
    patient_id: UUID,
    service: PatientService = Depends(get_patient_service),
) -> dict[str, Any]:
    return serialize_patient(service.get_patient_by_id(patient_id))


@router.patch("/{patient_id}")
def update_patient(
    patient_id: UUID,
    payload: PatientUpdate,
    service: PatientService = Depends(get_patient_service),
) -> dict[str, Any]:
    """Update only the fields present in the request body."""

    patient = service.update_patient(patient_id, payload.to_patch())
    return serialize_patient(patient)


@router.delete("/{patient_id}")
def delete_patient(
    patient_id: UUID,
    service: PatientService = Depends(get_patient_service),
) -> dict[str, bool]:
    service.delete_patient(patient_id)
    return {"success": True}
