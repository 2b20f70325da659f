"""Query building for patient listings.

A listing request is turned into a :class:`PatientQuery` holding a list of
predicates, an ORDER BY descriptor and a LIMIT/OFFSET window. The count and
data statements are built from the same predicates, so the total always
matches the filters regardless of pagination.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, Select, and_, func, or_, select

from patient_records.models import Patient, PatientStatus

DEFAULT_PAGE_SIZE = 10

SORT_COLUMNS: dict[str, tuple[Any, ...]] = {
    "name": (Patient.last_name, Patient.first_name),
    "status": (Patient.status,),
    "dateOfBirth": (Patient.date_of_birth,),
    "createdAt": (Patient.created_at,),
}
SORT_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class PatientFilters:
    """Row filters; ``None`` means "do not filter on this"."""

    search: str | None = None
    status: PatientStatus | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None


@dataclass(frozen=True)
class ListOptions:
    sort_field: str = "name"
    sort_direction: str = "asc"
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Make ``%`` and ``_`` in user input match themselves."""

    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def search_predicate(term: str) -> ColumnElement[bool]:
    """Case-insensitive substring match on names and email, substring on phone."""

    pattern = f"%{escape_like(term)}%"
    return or_(
        Patient.first_name.ilike(pattern, escape=LIKE_ESCAPE),
        Patient.last_name.ilike(pattern, escape=LIKE_ESCAPE),
        func.coalesce(Patient.middle_name, "").ilike(pattern, escape=LIKE_ESCAPE),
        func.coalesce(Patient.email, "").ilike(pattern, escape=LIKE_ESCAPE),
        func.coalesce(Patient.phone, "").like(pattern, escape=LIKE_ESCAPE),
    )


def order_by_clause(sort_field: str, sort_direction: str) -> list[Any]:
    """Translate an allow-listed sort field into ORDER BY expressions."""

    try:
        columns = SORT_COLUMNS[sort_field]
    except KeyError:
        raise ValueError(f"Unsupported sort field: {sort_field!r}") from None
    direction = sort_direction.lower()
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"Unsupported sort direction: {sort_direction!r}")

    clauses = [
        column.asc() if direction == "asc" else column.desc() for column in columns
    ]
    # id keeps page boundaries stable when sort keys tie
    clauses.append(Patient.id.asc())
    return clauses


@dataclass(frozen=True)
class PatientQuery:
    predicates: tuple[ColumnElement[bool], ...] = ()
    order_by: tuple[Any, ...] = field(default_factory=tuple)
    limit: int = DEFAULT_PAGE_SIZE
    offset: int = 0

    @classmethod
    def build(cls, filters: PatientFilters, options: ListOptions) -> "PatientQuery":
        predicates: list[ColumnElement[bool]] = []
        search = (filters.search or "").strip()
        if search:
            predicates.append(search_predicate(search))
        if filters.status is not None:
            predicates.append(Patient.status == filters.status)
        if filters.date_from is not None:
            predicates.append(Patient.created_at >= filters.date_from)
        if filters.date_to is not None:
            predicates.append(Patient.created_at <= filters.date_to)

        return cls(
            predicates=tuple(predicates),
            order_by=tuple(order_by_clause(options.sort_field, options.sort_direction)),
            limit=options.page_size,
            offset=options.offset,
        )

    def _where(self, stmt: Select) -> Select:
        if self.predicates:
            stmt = stmt.where(and_(*self.predicates))
        return stmt

    def count_statement(self) -> Select:
        return self._where(select(func.count()).select_from(Patient))

    def data_statement(self) -> Select:
        return (
            self._where(select(Patient))
            .order_by(*self.order_by)
            .limit(self.limit)
            .offset(self.offset)
        )
