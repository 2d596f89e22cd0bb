"""Faculty domain model."""

import enum
import uuid

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship, validates

from ..core.database import Base
from ..core.errors import ValidationFailed
from ..utils.datetime import utcnow
from .common import BloodGroup, Department, Gender, check_length, coerce_enum, enum_column


class Designation(str, enum.Enum):
    PROFESSOR = "Professor"
    ASSOCIATE_PROFESSOR = "Associate Professor"
    ASSISTANT_PROFESSOR = "Assistant Professor"
    LECTURER = "Lecturer"
    VISITING_FACULTY = "Visiting Faculty"
    ADJUNCT_FACULTY = "Adjunct Faculty"


class Qualification(str, enum.Enum):
    PHD = "Ph.D"
    MTECH = "M.Tech"
    ME = "M.E"
    MSC = "M.Sc"
    BTECH = "B.Tech"
    BE = "B.E"
    MPHIL = "M.Phil"
    MS = "MS"
    MBA = "MBA"


class Faculty(Base):
    """Teaching staff profile linked to exactly one account."""

    __tablename__ = "faculty"
    __table_args__ = (
        UniqueConstraint("account_id", name="faculty_account_unique"),
        UniqueConstraint("employee_id", name="faculty_employee_id_unique"),
    )

    faculty_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id = Column(Uuid, nullable=False)
    employee_id = Column(String(20), nullable=False)
    department = Column(enum_column(Department, "department"), nullable=False)
    designation = Column(enum_column(Designation, "designation"), nullable=False)
    qualification = Column(enum_column(Qualification, "qualification"), nullable=False)
    specialization = Column(JSON, nullable=False, default=list)
    date_of_joining = Column(Date, nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(enum_column(Gender, "gender"), nullable=False)
    blood_group = Column(enum_column(BloodGroup, "blood_group"))
    address = Column(JSON)
    contact_number = Column(String(15))
    emergency_contact = Column(JSON)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    courses = relationship("Course", back_populates="faculty", passive_deletes=True)

    @validates("department")
    def _validate_department(self, key, value):
        return coerce_enum(Department, value, "department")

    @validates("designation")
    def _validate_designation(self, key, value):
        if value is None:
            raise ValidationFailed("designation is required")
        return coerce_enum(Designation, value, "designation")

    @validates("qualification")
    def _validate_qualification(self, key, value):
        if value is None:
            raise ValidationFailed("qualification is required")
        return coerce_enum(Qualification, value, "qualification")

    @validates("gender")
    def _validate_gender(self, key, value):
        if value is None:
            raise ValidationFailed("gender is required")
        return coerce_enum(Gender, value, "gender")

    @validates("blood_group")
    def _validate_blood_group(self, key, value):
        return coerce_enum(BloodGroup, value, "blood_group")

    @validates("specialization")
    def _validate_specialization(self, key, value):
        items = [item.strip() for item in (value or []) if item and item.strip()]
        if not items:
            raise ValidationFailed("Please add at least one specialization")
        return items

    @validates("contact_number")
    def _validate_contact_number(self, key, value):
        return check_length(value, "contact_number", 15, required=False)

    @validates("employee_id")
    def _validate_employee_id(self, key, value):
        if self.employee_id is not None and value != self.employee_id:
            raise ValidationFailed("employee_id cannot be changed once assigned")
        return check_length(value, "employee_id", 20)
