"""Assignment sub-records of an enrollment."""

import enum

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship, validates

from ..core.database import Base
from ..utils.datetime import utcnow
from .common import check_length, coerce_enum, enum_column


class AssignmentStatus(str, enum.Enum):
    NOT_SUBMITTED = "not_submitted"
    SUBMITTED = "submitted"
    GRADED = "graded"
    LATE = "late"


class Assignment(Base):
    """Coursework item tracked per enrollment."""

    __tablename__ = "assignments"

    assignment_id = Column(Integer, primary_key=True, autoincrement=True)
    enrollment_id = Column(Uuid, ForeignKey("enrollments.enrollment_id", ondelete="CASCADE"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(String)
    due_date = Column(DateTime)
    submitted_date = Column(DateTime)
    status = Column(
        enum_column(AssignmentStatus, "assignment_status"),
        nullable=False,
        default=AssignmentStatus.NOT_SUBMITTED,
    )
    score = Column(Float)
    max_score = Column(Float)
    feedback = Column(String)
    file_url = Column(String)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    enrollment = relationship("Enrollment", back_populates="assignments")

    @validates("title")
    def _validate_title(self, key, value):
        return check_length(value, "title", 200)

    @validates("status")
    def _validate_status(self, key, value):
        return coerce_enum(AssignmentStatus, value, "status")
