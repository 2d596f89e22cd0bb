"""Per-day attendance entries for an enrollment."""

import enum

from sqlalchemy import Column, Date, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship, validates

from ..core.database import Base
from ..core.errors import ValidationFailed
from .common import coerce_enum, enum_column


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


class AttendanceRecord(Base):
    """One attendance mark; at most one per enrollment and calendar date."""

    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("enrollment_id", "date", name="attendance_records_enrollment_date_unique"),
    )

    attendance_id = Column(Integer, primary_key=True, autoincrement=True)
    enrollment_id = Column(Uuid, ForeignKey("enrollments.enrollment_id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    status = Column(enum_column(AttendanceStatus, "attendance_status"), nullable=False)
    notes = Column(String)

    enrollment = relationship("Enrollment", back_populates="attendance")

    @validates("status")
    def _validate_status(self, key, value):
        if value is None:
            raise ValidationFailed("attendance status is required")
        return coerce_enum(AttendanceStatus, value, "status")
