"""Course domain model."""

import re
import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship, validates

from ..core.database import Base
from ..core.errors import ValidationFailed
from ..utils.datetime import utcnow
from .common import Department, check_length, check_range, coerce_enum, enum_column

ACADEMIC_YEAR_PATTERN = re.compile(r"^\d{4}-\d{4}$")


class Course(Base):
    """Course offered by a faculty member with a fixed seat capacity."""

    __tablename__ = "courses"
    __table_args__ = (
        UniqueConstraint("code", name="courses_code_unique"),
        CheckConstraint("max_students >= 1", name="courses_max_students_positive"),
        CheckConstraint("seats_taken >= 0", name="courses_seats_taken_positive"),
    )

    course_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False)
    code = Column(String(20), nullable=False)
    credits = Column(Integer, nullable=False)
    description = Column(String(500), nullable=False)
    department = Column(enum_column(Department, "department"), nullable=False)
    faculty_id = Column(Uuid, ForeignKey("faculty.faculty_id", ondelete="CASCADE"), nullable=False)
    semester = Column(Integer, nullable=False)
    academic_year = Column(String(9), nullable=False)
    max_students = Column(Integer, nullable=False)
    seats_taken = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    faculty = relationship("Faculty", back_populates="courses")
    enrollments = relationship("Enrollment", back_populates="course", passive_deletes=True)

    @property
    def seats_available(self) -> int:
        return max(self.max_students - (self.seats_taken or 0), 0)

    @validates("title")
    def _validate_title(self, key, value):
        return check_length(value, "title", 100)

    @validates("code")
    def _validate_code(self, key, value):
        return check_length(value, "code", 20)

    @validates("description")
    def _validate_description(self, key, value):
        return check_length(value, "description", 500)

    @validates("credits")
    def _validate_credits(self, key, value):
        return check_range(value, "credits", 1, 10)

    @validates("semester")
    def _validate_semester(self, key, value):
        return check_range(value, "semester", 1, 8)

    @validates("max_students")
    def _validate_max_students(self, key, value):
        return check_range(value, "max_students", 1)

    @validates("department")
    def _validate_department(self, key, value):
        return coerce_enum(Department, value, "department")

    @validates("academic_year")
    def _validate_academic_year(self, key, value):
        if value is None or not ACADEMIC_YEAR_PATTERN.match(value):
            raise ValidationFailed("academic_year must use format YYYY-YYYY")
        return value
