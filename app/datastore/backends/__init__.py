"""Concrete data stores behind the repository."""

from app.datastore.backends.base import StudentBackend
from app.datastore.backends.firestore import FirestoreStudentBackend
from app.datastore.backends.rest import RestStudentBackend

__all__ = [
    "StudentBackend",
    "FirestoreStudentBackend",
    "RestStudentBackend",
]
