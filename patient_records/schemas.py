"""Request payloads for the patient endpoints.

JSON bodies use camelCase keys; the models expose snake_case attributes.
Optional text fields treat an empty string as "not provided".
"""

from __future__ import annotations

import re
from datetime import date
from typing import Annotated, Any, Literal

from email_validator import EmailNotValidError, validate_email
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from patient_records.models import PatientStatus

DATE_OF_BIRTH_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
ZIP_CODE_PATTERN = r"^\d{5}(-\d{4})?$"

SortField = Literal["name", "status", "dateOfBirth", "createdAt"]
SortDirection = Literal["asc", "desc"]
StatusFilter = Literal["ALL", "Inquiry", "Onboarding", "Active", "Churned"]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _parse_date_of_birth(value: Any) -> Any:
    if isinstance(value, str):
        if not DATE_OF_BIRTH_PATTERN.match(value):
            raise ValueError("Invalid date format (YYYY-MM-DD)")
        return date.fromisoformat(value)
    return value


def _check_email(value: str) -> str:
    """Reject malformed addresses while keeping the submitted spelling."""

    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(f"Invalid email address: {exc}") from exc
    return value


EmailAddress = Annotated[str, Field(max_length=255), AfterValidator(_check_email)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class AddressInput(CamelModel):
    street: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=255)
    state: str = Field(min_length=1, max_length=100)
    zip_code: str = Field(pattern=ZIP_CODE_PATTERN, max_length=20)
    country: str = Field(default="USA", min_length=1, max_length=100)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class AddressPatch(CamelModel):
    street: str | None = Field(default=None, min_length=1, max_length=255)
    city: str | None = Field(default=None, min_length=1, max_length=255)
    state: str | None = Field(default=None, min_length=1, max_length=100)
    zip_code: str | None = Field(default=None, pattern=ZIP_CODE_PATTERN, max_length=20)
    country: str | None = Field(default=None, min_length=1, max_length=100)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    @model_validator(mode="after")
    def _required_parts_not_null(self) -> "AddressPatch":
        for name in ("street", "city", "state", "zip_code", "country"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"address.{to_camel(name)} cannot be null")
        return self


class PatientCreate(CamelModel):
    """Body of ``POST /api/patients``."""

    first_name: str = Field(min_length=1, max_length=255)
    middle_name: str | None = Field(default=None, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    date_of_birth: date
    status: PatientStatus
    email: EmailAddress | None = None
    phone: str | None = Field(default=None, max_length=50)
    address: AddressInput

    @field_validator("middle_name", "email", "phone", mode="before")
    @classmethod
    def _blank_optionals(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _date_of_birth_format(cls, value: Any) -> Any:
        return _parse_date_of_birth(value)


class PatientUpdate(CamelModel):
    """Body of ``PATCH /api/patients/{id}``; every field is optional.

    Only keys present in the request are applied. Sending ``""`` for an
    optional field clears it.
    """

    first_name: str | None = Field(default=None, min_length=1, max_length=255)
    middle_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, min_length=1, max_length=255)
    date_of_birth: date | None = None
    status: PatientStatus | None = None
    email: EmailAddress | None = None
    phone: str | None = Field(default=None, max_length=50)
    address: AddressPatch | None = None

    @field_validator("middle_name", "email", "phone", mode="before")
    @classmethod
    def _blank_optionals(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _date_of_birth_format(cls, value: Any) -> Any:
        return _parse_date_of_birth(value)

    @model_validator(mode="after")
    def _required_fields_not_null(self) -> "PatientUpdate":
        for name in ("first_name", "last_name", "date_of_birth", "status", "address"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

    def to_patch(self) -> dict[str, Any]:
        """Return only the supplied fields, with a nested dict for the address."""

        patch = self.model_dump(exclude_unset=True, exclude={"address"})
        if self.address is not None:
            patch["address"] = self.address.model_dump(exclude_unset=True)
        return patch


__all__ = [
    "AddressInput",
    "AddressPatch",
    "PatientCreate",
    "PatientUpdate",
    "SortDirection",
    "SortField",
    "StatusFilter",
]
