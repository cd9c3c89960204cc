"""Student management service (REST backend persistence)."""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestError, NotFoundError, ValidationError
from app.models.student import Student
from app.schemas.student import (
    Branch,
    GroupCount,
    StudentCreate,
    StudentResponse,
    StudentStatistics,
    StudentUpdate,
)

logger = logging.getLogger(__name__)


class StudentService:
    """Student management service."""

    def __init__(self, db: Session):
        self.db = db

    def create_student(self, request: StudentCreate) -> StudentResponse:
        """Create a new student; id and createdAt are assigned here."""
        student = Student(**request.model_dump(mode="json"))
        self.db.add(student)
        self.db.flush()
        self.db.refresh(student)
        logger.info("Student %s created", student.id)
        return StudentResponse.model_validate(student)

    def get_student(self, student_id: str) -> Student:
        """Get student by ID."""
        student = self.db.get(Student, student_id)
        if not student:
            raise NotFoundError("Student", student_id)
        return student

    def list_students(self) -> list[StudentResponse]:
        """List every student, newest first."""
        result = self.db.execute(
            select(Student).order_by(Student.created_at.desc(), Student.id)
        )
        return [StudentResponse.model_validate(s) for s in result.scalars().all()]

    def update_student(self, student_id: str, request: StudentUpdate) -> StudentResponse:
        """Apply a partial update; id and createdAt never change."""
        student = self.get_student(student_id)
        update_data = request.model_dump(mode="json", exclude_unset=True)
        for field, value in update_data.items():
            if value is None and field != "other_branch":
                raise ValidationError(
                    f"{field} cannot be null", details={"field": field}
                )
            setattr(student, field, value)

        if student.branch == Branch.OTHER.value and not student.other_branch:
            raise ValidationError(
                "otherBranch is required when branch is Other",
                details={"field": "other_branch"},
            )

        self.db.flush()
        self.db.refresh(student)
        return StudentResponse.model_validate(student)

    def delete_student(self, student_id: str) -> None:
        """Delete a student."""
        student = self.get_student(student_id)
        self.db.delete(student)
        self.db.flush()
        logger.info("Student %s deleted", student_id)

    def bulk_delete(self, ids: object) -> int:
        """Delete every matching id; returns how many rows were actually removed."""
        if not isinstance(ids, list) or not ids:
            raise BadRequestError("Please provide an array of student IDs")
        if not all(isinstance(i, str) for i in ids):
            raise BadRequestError("Student IDs must be strings")

        result = self.db.execute(delete(Student).where(Student.id.in_(ids)))
        self.db.flush()
        deleted = result.rowcount or 0
        logger.info("Bulk delete removed %d of %d requested students", deleted, len(ids))
        return deleted

    def get_statistics(self) -> StudentStatistics:
        """Counts grouped by branch, year and division."""
        total = self.db.execute(select(func.count(Student.id))).scalar() or 0
        return StudentStatistics(
            total_students=total,
            by_branch=self._group_counts(Student.branch),
            by_year=self._group_counts(Student.year),
            by_division=self._group_counts(Student.division),
        )

    def _group_counts(self, column) -> list[GroupCount]:
        result = self.db.execute(
            select(column, func.count(Student.id)).group_by(column).order_by(column)
        )
        return [GroupCount(id=row[0], count=row[1]) for row in result.all()]
