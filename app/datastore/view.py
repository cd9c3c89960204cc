"""Dashboard view helpers: filtering, sorting, pagination and export."""

import csv
from datetime import date
from io import BytesIO, StringIO

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from app.datastore.adapter import join_full_name
from app.datastore.records import StudentRecord
from app.schemas.common import BaseSchema, PaginatedResponse

# (record attribute, column header)
EXPORT_COLUMNS = [
    ("first_name", "First Name"),
    ("middle_name", "Middle Name"),
    ("surname", "Surname"),
    ("contact_number", "Contact Number"),
    ("email", "Email"),
    ("branch", "Branch"),
    ("year", "Year"),
    ("division", "Division"),
    ("roll_number", "Roll Number"),
    ("zprn_number", "ZPRN Number"),
    ("submitted_at", "Submitted At"),
]

SORTABLE_FIELDS = frozenset(StudentRecord.model_fields) | {"full_name"}


class StudentFilter(BaseSchema):
    """Student filter options."""

    search: str | None = None  # Name, email, roll or ZPRN
    branch: str | None = None
    year: str | None = None
    division: str | None = None


class PaginatedStudentView(PaginatedResponse):
    """Paginated student list."""

    items: list[StudentRecord]


def _matches(record: StudentRecord, filters: StudentFilter) -> bool:
    if filters.branch and record.branch != filters.branch:
        return False
    if filters.year and record.year != filters.year:
        return False
    if filters.division and record.division.upper() != filters.division.strip().upper():
        return False
    if filters.search:
        term = filters.search.lower()
        haystack = (
            join_full_name(record.first_name, record.middle_name, record.surname),
            record.email,
            record.roll_number,
            record.zprn_number,
        )
        if not any(term in (value or "").lower() for value in haystack):
            return False
    return True


def filter_records(records: list[StudentRecord], filters: StudentFilter | None = None) -> list[StudentRecord]:
    if not filters:
        return list(records)
    return [record for record in records if _matches(record, filters)]


def sort_records(
    records: list[StudentRecord],
    sort_by: str = "submitted_at",
    descending: bool = True,
) -> list[StudentRecord]:
    """Sort on one field; empty values always sort last."""
    if sort_by not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by {sort_by!r}")

    def value(record: StudentRecord):
        if sort_by == "full_name":
            return join_full_name(record.first_name, record.middle_name, record.surname).lower()
        raw = getattr(record, sort_by)
        return raw.lower() if isinstance(raw, str) else raw

    present = [r for r in records if value(r) not in (None, "")]
    empty = [r for r in records if value(r) in (None, "")]
    return sorted(present, key=value, reverse=descending) + empty


def paginate(records: list[StudentRecord], page: int = 1, page_size: int = 10) -> PaginatedStudentView:
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be positive")
    total = len(records)
    offset = (page - 1) * page_size
    return PaginatedStudentView(
        items=records[offset:offset + page_size],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=(total + page_size - 1) // page_size,
    )


def compose(
    records: list[StudentRecord],
    filters: StudentFilter | None = None,
    sort_by: str = "submitted_at",
    descending: bool = True,
    page: int = 1,
    page_size: int = 10,
) -> PaginatedStudentView:
    """Filter, then sort, then cut one page."""
    return paginate(sort_records(filter_records(records, filters), sort_by, descending), page, page_size)


def _export_row(record: StudentRecord) -> list[str]:
    row = []
    for attr, _ in EXPORT_COLUMNS:
        value = getattr(record, attr)
        if attr == "submitted_at":
            value = value.strftime("%Y-%m-%d %H:%M:%S") if value else ""
        row.append(value or "")
    return row


def export_csv(records: list[StudentRecord]) -> str:
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow([header for _, header in EXPORT_COLUMNS])
    for record in records:
        writer.writerow(_export_row(record))
    return output.getvalue()


def export_xlsx(records: list[StudentRecord]) -> bytes:
    """Spreadsheet export with a bold header row."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Students"

    for col_idx, (_, header) in enumerate(EXPORT_COLUMNS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    for row_idx, record in enumerate(records, start=2):
        for col_idx, value in enumerate(_export_row(record), start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)

    for col_idx in range(1, len(EXPORT_COLUMNS) + 1):
        ws.column_dimensions[get_column_letter(col_idx)].width = 18

    output = BytesIO()
    wb.save(output)
    return output.getvalue()


def export_filename(extension: str, today: date | None = None) -> str:
    today = today or date.today()
    return f"students_data_{today.isoformat()}.{extension}"
