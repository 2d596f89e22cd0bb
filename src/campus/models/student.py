"""Student domain model."""

import uuid

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship, validates

from ..core.database import Base
from ..core.errors import ValidationFailed
from ..utils.datetime import utcnow
from .common import BloodGroup, Department, Gender, check_length, check_range, coerce_enum, enum_column


class Student(Base):
    """Academic profile linked to exactly one account."""

    __tablename__ = "students"
    __table_args__ = (
        UniqueConstraint("account_id", name="students_account_unique"),
        UniqueConstraint("registration_number", name="students_registration_number_unique"),
    )

    student_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id = Column(Uuid, nullable=False)
    registration_number = Column(String(20), nullable=False)
    department = Column(enum_column(Department, "department"), nullable=False)
    year = Column(Integer, nullable=False)
    semester = Column(Integer, nullable=False)
    section = Column(String(1), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(enum_column(Gender, "gender"), nullable=False)
    blood_group = Column(enum_column(BloodGroup, "blood_group"))
    address = Column(JSON)
    contact_number = Column(String(15))
    parent_name = Column(String, nullable=False)
    parent_contact = Column(String, nullable=False)
    admission_date = Column(DateTime, default=utcnow, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    enrollments = relationship("Enrollment", back_populates="student", passive_deletes=True)

    @validates("department")
    def _validate_department(self, key, value):
        return coerce_enum(Department, value, "department")

    @validates("gender")
    def _validate_gender(self, key, value):
        if value is None:
            raise ValidationFailed("gender is required")
        return coerce_enum(Gender, value, "gender")

    @validates("blood_group")
    def _validate_blood_group(self, key, value):
        return coerce_enum(BloodGroup, value, "blood_group")

    @validates("year")
    def _validate_year(self, key, value):
        return check_range(value, "year", 1, 4)

    @validates("semester")
    def _validate_semester(self, key, value):
        return check_range(value, "semester", 1, 8)

    @validates("section")
    def _validate_section(self, key, value):
        value = check_length(value, "section", 1)
        value = value.upper()
        if not value.isalpha() or not value.isascii():
            raise ValidationFailed("section must be a single letter")
        return value

    @validates("contact_number")
    def _validate_contact_number(self, key, value):
        return check_length(value, "contact_number", 15, required=False)

    @validates("parent_name", "parent_contact")
    def _validate_parent(self, key, value):
        return check_length(value, key, 100)

    @validates("registration_number")
    def _validate_registration_number(self, key, value):
        if self.registration_number is not None and value != self.registration_number:
            raise ValidationFailed("registration_number cannot be changed once assigned")
        return check_length(value, "registration_number", 20)
