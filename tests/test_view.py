"""
Unit tests for filtering, sorting, pagination and export
"""
import csv
from datetime import date
from io import BytesIO, StringIO

import pytest
from openpyxl import load_workbook

from app.datastore.view import (
    EXPORT_COLUMNS,
    StudentFilter,
    compose,
    export_csv,
    export_filename,
    export_xlsx,
    filter_records,
    paginate,
    sort_records,
)
from tests.fakes import make_record


@pytest.fixture
def records():
    return [
        make_record(id="1", first_name="Asha", surname="Rao", branch="IT", year="FY", division="A",
                    roll_number="R1", submitted_at="2024-01-01T00:00:00Z"),
        make_record(id="2", first_name="Ravi", surname="Patil", branch="Civil", year="SY", division="B",
                    email="ravi@gmail.com", roll_number="R2", submitted_at="2024-01-03T00:00:00Z"),
        make_record(id="3", first_name="Meera", surname="Iyer", branch="IT", year="SY", division="a",
                    email="meera@college.edu", roll_number="R3"),
    ]


class TestFilter:
    """Test record filtering"""

    def test_no_filter(self, records):
        assert filter_records(records) == records

    def test_by_branch_and_year(self, records):
        result = filter_records(records, StudentFilter(branch="IT", year="SY"))
        assert [r.id for r in result] == ["3"]

    def test_division_ignores_case(self, records):
        result = filter_records(records, StudentFilter(division="a"))
        assert [r.id for r in result] == ["1", "3"]

    def test_search_matches_name_email_and_roll(self, records):
        assert [r.id for r in filter_records(records, StudentFilter(search="patil"))] == ["2"]
        assert [r.id for r in filter_records(records, StudentFilter(search="GMAIL"))] == ["2"]
        assert [r.id for r in filter_records(records, StudentFilter(search="r3"))] == ["3"]


class TestSortAndPaginate:
    """Test sorting and pagination"""

    def test_sort_by_submission_puts_undated_last(self, records):
        assert [r.id for r in sort_records(records)] == ["2", "1", "3"]
        assert [r.id for r in sort_records(records, descending=False)] == ["1", "2", "3"]

    def test_sort_by_full_name(self, records):
        result = sort_records(records, "full_name", descending=False)
        assert [r.first_name for r in result] == ["Asha", "Meera", "Ravi"]

    def test_sort_unknown_field(self, records):
        with pytest.raises(ValueError):
            sort_records(records, "team")

    def test_paginate(self, records):
        page = paginate(records, page=2, page_size=2)

        assert [r.id for r in page.items] == ["3"]
        assert page.total == 3
        assert page.total_pages == 2

    def test_paginate_rejects_bad_page(self, records):
        with pytest.raises(ValueError):
            paginate(records, page=0)

    def test_compose(self, records):
        page = compose(records, StudentFilter(branch="IT"), sort_by="roll_number", page_size=1)

        assert [r.id for r in page.items] == ["3"]
        assert page.total == 2


class TestExport:
    """Test CSV and spreadsheet export"""

    def test_csv(self, records):
        rows = list(csv.reader(StringIO(export_csv(records))))

        assert rows[0] == [header for _, header in EXPORT_COLUMNS]
        assert rows[1][:3] == ["Asha", "", "Rao"]
        assert rows[1][-1] == "2024-01-01 00:00:00"
        assert rows[3][-1] == ""

    def test_xlsx(self, records):
        workbook = load_workbook(BytesIO(export_xlsx(records)))
        sheet = workbook.active

        assert sheet.title == "Students"
        assert sheet.cell(row=1, column=1).value == "First Name"
        assert sheet.cell(row=1, column=1).font.bold is True
        assert sheet.cell(row=3, column=1).value == "Ravi"
        assert sheet.max_row == 4
        assert sheet.cell(row=1, column=len(EXPORT_COLUMNS)).value == "Submitted At"

    def test_filename(self):
        assert export_filename("csv", today=date(2024, 5, 1)) == "students_data_2024-05-01.csv"
