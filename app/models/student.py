"""Student model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.base import StringIDMixin, TimestampMixin


class Student(Base, StringIDMixin, TimestampMixin):
    """Student registration as stored by the REST backend (single full name)."""

    __tablename__ = "students"

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    roll_no: Mapped[str] = mapped_column(String(15), nullable=False, index=True)
    zprn: Mapped[str] = mapped_column(String(15), nullable=False, index=True)
    branch: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    other_branch: Mapped[str | None] = mapped_column(String(100), nullable=True)
    year: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    division: Mapped[str] = mapped_column(String(1), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone_no: Mapped[str] = mapped_column(String(10), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name={self.full_name}, roll_no={self.roll_no})>"
