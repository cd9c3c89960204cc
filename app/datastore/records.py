"""Canonical, backend-agnostic student record and its boundary validation."""

import enum
from datetime import datetime
from typing import Any

from pydantic import field_validator

from app.datastore.errors import ValidationError
from app.datastore.timestamps import to_datetime
from app.schemas.common import BaseSchema
from app.schemas.student import (
    DIVISION_PATTERN,
    EMAIL_PATTERN,
    MAX_IDENTIFIER_LENGTH,
    PHONE_PATTERN,
    Branch,
    Year,
    normalize_division,
)


class BackendKind(str, enum.Enum):
    """The two interchangeable data stores. Values are the persisted names."""

    FIRESTORE = "firestore"
    MONGO = "mongodb"

    @classmethod
    def parse(cls, value: Any) -> "BackendKind | None":
        try:
            return cls(value)
        except ValueError:
            return None


REQUIRED_FIELDS = (
    "first_name",
    "surname",
    "roll_number",
    "zprn_number",
    "branch",
    "year",
    "division",
    "email",
    "contact_number",
)

IMMUTABLE_FIELDS = frozenset({"id", "submitted_at"})


class StudentRecord(BaseSchema):
    """Student as the dashboard sees it, whichever backend it came from.

    Required fields default to empty strings so a record can always be built
    from a partial native document; :func:`validate_record` enforces them at
    the write boundary.
    """

    id: str | None = None
    first_name: str = ""
    middle_name: str | None = None
    surname: str = ""
    roll_number: str = ""
    zprn_number: str = ""
    branch: str = ""
    other_branch: str | None = None
    year: str = ""
    division: str = ""
    email: str = ""
    contact_number: str = ""
    address: str = ""
    submitted_at: datetime | None = None

    @field_validator("division", mode="before")
    @classmethod
    def upper_division(cls, value: Any) -> Any:
        if isinstance(value, str):
            return normalize_division(value)
        return value

    @field_validator("submitted_at", mode="before")
    @classmethod
    def normalize_timestamp(cls, value: Any) -> Any:
        return to_datetime(value)


def validate_record(record: StudentRecord, backend: BackendKind | None = None) -> StudentRecord:
    """Check a record before it is written anywhere.

    Returns the record with division normalized; raises
    :class:`ValidationError` listing every offending field.
    """
    errors: dict[str, str] = {}

    for field in REQUIRED_FIELDS:
        if not str(getattr(record, field) or "").strip():
            errors[field] = "This field is required"

    for field in ("roll_number", "zprn_number"):
        value = getattr(record, field)
        if value and len(value) > MAX_IDENTIFIER_LENGTH:
            errors[field] = f"Must be at most {MAX_IDENTIFIER_LENGTH} characters"

    if record.branch and record.branch not in Branch.values():
        errors["branch"] = f"Must be one of: {', '.join(Branch.values())}"
    elif record.branch == Branch.OTHER.value and not (record.other_branch or "").strip():
        errors["other_branch"] = "Please specify the branch"

    if record.year and record.year not in Year.values():
        errors["year"] = f"Must be one of: {', '.join(Year.values())}"

    division = normalize_division(record.division or "")
    if division and not DIVISION_PATTERN.match(division):
        errors["division"] = "Must be a single letter"

    if record.email and not EMAIL_PATTERN.match(record.email):
        errors["email"] = "Please enter a valid email address"

    if record.contact_number and not PHONE_PATTERN.match(record.contact_number):
        errors["contact_number"] = "Please enter a valid 10-digit contact number"

    if errors:
        raise ValidationError(
            "Please fix the highlighted fields: " + ", ".join(sorted(errors)),
            backend=backend,
            details={"fields": errors},
        )
    return record.model_copy(update={"division": division})
