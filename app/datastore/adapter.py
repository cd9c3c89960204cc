"""Translation between :class:`StudentRecord` and each backend's native shape.

The REST backend keeps a single ``fullName`` plus ``rollNo``/``zprn``/
``phoneNo``/``address``; Firestore keeps the three name parts and the form's
own field names, and has no address. Each shape is its own model and has one
translation function per direction, so nothing outside this module inspects
native field names.

Name rule: ``fullName`` is the non-empty parts joined by single spaces. Going
back, the first token is the first name, the last token is the surname and
anything in between is the middle name. A multi-word surname therefore does
not survive a trip through the REST backend: ``A B "C D"`` becomes
``A "B C" D``.
"""

from datetime import datetime
from typing import Any, Union

from pydantic import Field, field_validator

from app.datastore.records import BackendKind, StudentRecord
from app.datastore.timestamps import to_datetime
from app.schemas.common import CamelSchema

ADDRESS_PLACEHOLDER = "Not provided"


class RestDocument(CamelSchema):
    """Student as stored by the REST backend."""

    id: str | None = Field(None, alias="_id")
    full_name: str = ""
    roll_no: str = ""
    zprn: str = ""
    branch: str = ""
    other_branch: str | None = None
    year: str = ""
    division: str = ""
    email: str = ""
    phone_no: str = ""
    address: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator(
        "full_name", "roll_no", "zprn", "branch", "year", "division", "email", "phone_no", "address",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def parse_timestamp(cls, value: Any) -> Any:
        return to_datetime(value)

    def payload(self) -> dict[str, Any]:
        """Request body for create/update: no id, no server timestamps."""
        data = self.model_dump(
            by_alias=True,
            exclude={"id", "created_at", "updated_at"},
            exclude_none=True,
        )
        # Sent as null when empty so an update clears the stored value
        data["otherBranch"] = self.other_branch
        return data


class FirestoreDocument(CamelSchema):
    """Student as stored in the Firestore ``students`` collection."""

    id: str | None = None
    first_name: str = ""
    middle_name: str = ""
    surname: str = ""
    contact_number: str = ""
    email: str = ""
    branch: str = ""
    other_branch: str | None = None
    year: str = ""
    division: str = ""
    roll_number: str = ""
    zprn_number: str = ""
    # Kept raw: a Firestore timestamp, a datetime or the server sentinel
    submitted_at: Any = None

    @field_validator(
        "first_name", "middle_name", "surname", "contact_number", "email",
        "branch", "year", "division", "roll_number", "zprn_number",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def payload(self) -> dict[str, Any]:
        """Document fields for a write; the id lives in the document path."""
        data = self.model_dump(
            by_alias=True,
            exclude={"id", "submitted_at"},
            exclude_none=True,
        )
        data["otherBranch"] = self.other_branch
        return data


NativeDoc = Union[RestDocument, FirestoreDocument]


def join_full_name(first_name: str | None, middle_name: str | None, surname: str | None) -> str:
    """Join the name parts with single spaces, skipping empty ones."""
    parts = (first_name, middle_name, surname)
    return " ".join(part.strip() for part in parts if part and part.strip())


def split_full_name(full_name: str | None) -> tuple[str, str | None, str]:
    """Split a full name into (first, middle, surname)."""
    tokens = (full_name or "").split()
    if not tokens:
        return "", None, ""
    if len(tokens) == 1:
        return tokens[0], None, ""
    middle = " ".join(tokens[1:-1]) or None
    return tokens[0], middle, tokens[-1]


def to_native(record: StudentRecord, kind: BackendKind) -> NativeDoc:
    """Translate a canonical record into the shape ``kind`` stores."""
    if kind is BackendKind.MONGO:
        return _to_rest(record)
    if kind is BackendKind.FIRESTORE:
        return _to_firestore(record)
    raise ValueError(f"Unknown backend kind: {kind!r}")


def from_native(doc: NativeDoc) -> StudentRecord:
    """Translate a native document back into a canonical record."""
    if isinstance(doc, RestDocument):
        return _from_rest(doc)
    if isinstance(doc, FirestoreDocument):
        return _from_firestore(doc)
    raise TypeError(f"Unsupported native document: {type(doc).__name__}")


def native_kind(doc: NativeDoc) -> BackendKind:
    return BackendKind.MONGO if isinstance(doc, RestDocument) else BackendKind.FIRESTORE


def _to_rest(record: StudentRecord) -> RestDocument:
    return RestDocument(
        id=record.id,
        full_name=join_full_name(record.first_name, record.middle_name, record.surname),
        roll_no=record.roll_number,
        zprn=record.zprn_number,
        branch=record.branch,
        other_branch=record.other_branch or None,
        year=record.year,
        division=record.division,
        email=record.email,
        phone_no=record.contact_number,
        address=record.address or ADDRESS_PLACEHOLDER,
        created_at=record.submitted_at,
    )


def _from_rest(doc: RestDocument) -> StudentRecord:
    first_name, middle_name, surname = split_full_name(doc.full_name)
    return StudentRecord(
        id=doc.id,
        first_name=first_name,
        middle_name=middle_name,
        surname=surname,
        roll_number=doc.roll_no,
        zprn_number=doc.zprn,
        branch=doc.branch,
        other_branch=doc.other_branch or None,
        year=doc.year,
        division=doc.division,
        email=doc.email,
        contact_number=doc.phone_no,
        address=doc.address,
        submitted_at=doc.created_at,
    )


def _to_firestore(record: StudentRecord) -> FirestoreDocument:
    return FirestoreDocument(
        id=record.id,
        first_name=record.first_name,
        middle_name=record.middle_name or "",
        surname=record.surname,
        contact_number=record.contact_number,
        email=record.email,
        branch=record.branch,
        other_branch=record.other_branch or None,
        year=record.year,
        division=record.division,
        roll_number=record.roll_number,
        zprn_number=record.zprn_number,
        submitted_at=record.submitted_at,
    )


def _from_firestore(doc: FirestoreDocument) -> StudentRecord:
    return StudentRecord(
        id=doc.id,
        first_name=doc.first_name,
        middle_name=doc.middle_name or None,
        surname=doc.surname,
        roll_number=doc.roll_number,
        zprn_number=doc.zprn_number,
        branch=doc.branch,
        other_branch=doc.other_branch or None,
        year=doc.year,
        division=doc.division,
        email=doc.email,
        contact_number=doc.contact_number,
        # Firestore documents carry no address
        address="",
        submitted_at=doc.submitted_at,
    )
