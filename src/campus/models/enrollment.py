"""Enrollment aggregate joining one student to one course."""

import enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship, validates

from ..core.database import Base
from ..utils.datetime import utcnow
from .common import coerce_enum, enum_column


class EnrollmentStatus(str, enum.Enum):
    """Enrollment lifecycle states."""

    ENROLLED = "enrolled"
    COMPLETED = "completed"
    DROPPED = "dropped"
    FAILED = "failed"


class LetterGrade(str, enum.Enum):
    """Letter grades accepted for ``grade`` and ``final_grade``."""

    A_PLUS = "A+"
    A = "A"
    A_MINUS = "A-"
    B_PLUS = "B+"
    B = "B"
    B_MINUS = "B-"
    C_PLUS = "C+"
    C = "C"
    C_MINUS = "C-"
    D_PLUS = "D+"
    D = "D"
    F = "F"
    INCOMPLETE = "I"
    WITHDRAWN = "W"
    AUDIT = "AU"


class Enrollment(Base):
    """Grading and attendance state for a student in a course."""

    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="enrollments_student_course_unique"),
    )

    enrollment_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey("students.student_id", ondelete="CASCADE"), nullable=False)
    course_id = Column(Uuid, ForeignKey("courses.course_id", ondelete="CASCADE"), nullable=False)
    enrollment_date = Column(DateTime, default=utcnow, nullable=False)
    status = Column(enum_column(EnrollmentStatus, "enrollment_status"), nullable=False, default=EnrollmentStatus.ENROLLED)
    grade = Column(enum_column(LetterGrade, "letter_grade"))
    final_grade = Column(enum_column(LetterGrade, "letter_grade"))
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    student = relationship("Student", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")
    attendance = relationship(
        "AttendanceRecord",
        back_populates="enrollment",
        order_by="AttendanceRecord.date",
        passive_deletes=True,
    )
    assignments = relationship(
        "Assignment",
        back_populates="enrollment",
        order_by="Assignment.assignment_id",
        passive_deletes=True,
    )
    exams = relationship(
        "Exam",
        back_populates="enrollment",
        order_by="Exam.exam_id",
        passive_deletes=True,
    )

    @validates("status")
    def _validate_status(self, key, value):
        return coerce_enum(EnrollmentStatus, value, "status")

    @validates("grade", "final_grade")
    def _validate_grade(self, key, value):
        return coerce_enum(LetterGrade, value, key)

    @property
    def attendance_percentage(self) -> int:
        from ..services.grading_service import attendance_percentage

        return attendance_percentage(self)

    @property
    def current_grade_percentage(self) -> int:
        from ..services.grading_service import current_grade_percentage

        return current_grade_percentage(self)
