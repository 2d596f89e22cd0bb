"""Exam sub-records of an enrollment."""

import enum

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship, validates

from ..core.database import Base
from ..core.errors import ValidationFailed
from ..utils.datetime import utcnow
from .common import check_length, coerce_enum, enum_column


class ExamType(str, enum.Enum):
    QUIZ = "quiz"
    MIDTERM = "midterm"
    FINAL = "final"
    PROJECT = "project"
    PRESENTATION = "presentation"


class Exam(Base):
    """Scored assessment attached to an enrollment."""

    __tablename__ = "exams"

    exam_id = Column(Integer, primary_key=True, autoincrement=True)
    enrollment_id = Column(Uuid, ForeignKey("enrollments.enrollment_id", ondelete="CASCADE"), nullable=False)
    title = Column(String, nullable=False)
    exam_type = Column(enum_column(ExamType, "exam_type"), nullable=False)
    date = Column(DateTime)
    score = Column(Float)
    max_score = Column(Float)
    weightage = Column(Float)
    notes = Column(String)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    enrollment = relationship("Enrollment", back_populates="exams")

    @validates("title")
    def _validate_title(self, key, value):
        return check_length(value, "title", 200)

    @validates("exam_type")
    def _validate_exam_type(self, key, value):
        if value is None:
            raise ValidationFailed("exam_type is required")
        return coerce_enum(ExamType, value, "exam_type")
