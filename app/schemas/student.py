"""Student schemas."""

import enum
import re
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator, model_validator

from app.schemas.common import CamelSchema

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9]{10}$")
DIVISION_PATTERN = re.compile(r"^[A-Z]$")
MAX_IDENTIFIER_LENGTH = 15


class Branch(str, enum.Enum):
    """Branches offered on the registration form."""

    COMPUTER = "Computer"
    IT = "IT"
    MECHANICAL = "Mechanical"
    ELECTRICAL = "Electrical"
    ELECTRONICS = "Electronics"
    CIVIL = "Civil"
    AI_ML = "AI ML"
    AI_DS = "AI DS"
    OTHER = "Other"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class Year(str, enum.Enum):
    """Year of study."""

    FY = "FY"
    SY = "SY"
    TY = "TY"
    FINAL_YEAR = "Final Year"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


def normalize_division(value: str) -> str:
    """Division is always stored upper-cased."""
    return value.strip().upper()


class StudentFields(CamelSchema):
    """Validators shared by create and update payloads."""

    @field_validator("division", mode="before", check_fields=False)
    @classmethod
    def upper_division(cls, value: Any) -> Any:
        if isinstance(value, str):
            return normalize_division(value)
        return value

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def lower_email(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class StudentCreate(StudentFields):
    """Student creation schema (native REST shape, no id or timestamps)."""

    full_name: str = Field(..., min_length=1, max_length=255)
    roll_no: str = Field(..., min_length=1, max_length=MAX_IDENTIFIER_LENGTH)
    zprn: str = Field(..., min_length=1, max_length=MAX_IDENTIFIER_LENGTH)
    branch: Branch
    other_branch: str | None = Field(None, max_length=100)
    year: Year
    division: str = Field(..., pattern=DIVISION_PATTERN.pattern)
    email: str = Field(..., pattern=EMAIL_PATTERN.pattern, max_length=255)
    phone_no: str = Field(..., pattern=PHONE_PATTERN.pattern)
    address: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def require_other_branch(self) -> "StudentCreate":
        if self.branch == Branch.OTHER and not self.other_branch:
            raise ValueError("otherBranch is required when branch is Other")
        return self


class StudentUpdate(StudentFields):
    """Partial update schema; unset fields are left untouched."""

    full_name: str | None = Field(None, min_length=1, max_length=255)
    roll_no: str | None = Field(None, min_length=1, max_length=MAX_IDENTIFIER_LENGTH)
    zprn: str | None = Field(None, min_length=1, max_length=MAX_IDENTIFIER_LENGTH)
    branch: Branch | None = None
    other_branch: str | None = Field(None, max_length=100)
    year: Year | None = None
    division: str | None = Field(None, pattern=DIVISION_PATTERN.pattern)
    email: str | None = Field(None, pattern=EMAIL_PATTERN.pattern, max_length=255)
    phone_no: str | None = Field(None, pattern=PHONE_PATTERN.pattern)
    address: str | None = Field(None, min_length=1)


class StudentResponse(CamelSchema):
    """Student as returned on the wire."""

    id: str = Field(..., alias="_id")
    full_name: str
    roll_no: str
    zprn: str
    branch: str
    other_branch: str | None = None
    year: str
    division: str
    email: str
    phone_no: str
    address: str
    created_at: datetime
    updated_at: datetime


class StudentEnvelope(CamelSchema):
    """Single-student response envelope."""

    success: bool = True
    message: str | None = None
    data: StudentResponse


class StudentListEnvelope(CamelSchema):
    """Student list response envelope."""

    success: bool = True
    count: int
    data: list[StudentResponse]


class BulkDeleteRequest(CamelSchema):
    """Bulk delete body. ``ids`` is checked by the service to answer 400."""

    ids: Any = None


class BulkDeleteResponse(CamelSchema):
    """Bulk delete result."""

    success: bool = True
    message: str
    deleted_count: int


class GroupCount(CamelSchema):
    """One ``$group`` style bucket."""

    id: str | None = Field(None, alias="_id")
    count: int


class StudentStatistics(CamelSchema):
    """Server-side aggregate counts."""

    total_students: int
    by_branch: list[GroupCount]
    by_year: list[GroupCount]
    by_division: list[GroupCount]


class StudentStatisticsEnvelope(CamelSchema):
    """Statistics response envelope."""

    success: bool = True
    data: StudentStatistics
