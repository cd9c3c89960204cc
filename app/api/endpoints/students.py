"""Student management endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.student import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    StudentCreate,
    StudentEnvelope,
    StudentListEnvelope,
    StudentResponse,
    StudentStatisticsEnvelope,
    StudentUpdate,
)
from app.services.student import StudentService

router = APIRouter()


@router.post("", response_model=StudentEnvelope, status_code=status.HTTP_201_CREATED)
def create_student(
    request: StudentCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new student."""
    service = StudentService(db)
    student = service.create_student(request)
    return StudentEnvelope(message="Student added successfully", data=student)


@router.get("", response_model=StudentListEnvelope)
def list_students(db: Annotated[Session, Depends(get_db)]):
    """List all students, newest first."""
    students = StudentService(db).list_students()
    return StudentListEnvelope(count=len(students), data=students)


# Registered before /{student_id} so "stats" is not taken for an id
@router.get("/stats", response_model=StudentStatisticsEnvelope)
def get_statistics(db: Annotated[Session, Depends(get_db)]):
    """Counts by branch, year and division."""
    return StudentStatisticsEnvelope(data=StudentService(db).get_statistics())


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
def bulk_delete_students(
    request: BulkDeleteRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Delete several students in one request.

    The reported count is what was actually removed, which is lower than the
    number of ids sent when some of them no longer exist.
    """
    deleted = StudentService(db).bulk_delete(request.ids)
    return BulkDeleteResponse(
        message=f"{deleted} student(s) deleted successfully",
        deleted_count=deleted,
    )


@router.get("/{student_id}", response_model=StudentEnvelope)
def get_student(
    student_id: str,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a student by ID."""
    student = StudentService(db).get_student(student_id)
    return StudentEnvelope(data=StudentResponse.model_validate(student))


@router.put("/{student_id}", response_model=StudentEnvelope)
def update_student(
    student_id: str,
    request: StudentUpdate,
    db: Annotated[Session, Depends(get_db)],
):
    """Partially update a student."""
    student = StudentService(db).update_student(student_id, request)
    return StudentEnvelope(message="Student updated successfully", data=student)


@router.delete("/{student_id}", response_model=MessageResponse)
def delete_student(
    student_id: str,
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a student."""
    StudentService(db).delete_student(student_id)
    return MessageResponse(message="Student deleted successfully")
