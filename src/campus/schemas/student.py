"""Pydantic schemas for student endpoints."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models import BloodGroup, Department, Gender


class Address(BaseModel):
    """Postal address stored alongside a profile."""

    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    pincode: Optional[str] = None


class StudentCreate(BaseModel):
    """Request body for creating the caller's student profile."""

    department: Department
    year: int = Field(..., ge=1, le=4)
    semester: int = Field(..., ge=1, le=8)
    section: str = Field(..., min_length=1, max_length=1)
    date_of_birth: date
    gender: Gender
    blood_group: Optional[BloodGroup] = None
    address: Optional[Address] = None
    contact_number: Optional[str] = Field(None, max_length=15)
    parent_name: str = Field(..., min_length=1)
    parent_contact: str = Field(..., min_length=1)
    admission_date: Optional[datetime] = None


class StudentUpdate(BaseModel):
    """Partial update; identifiers are not editable."""

    year: Optional[int] = Field(None, ge=1, le=4)
    semester: Optional[int] = Field(None, ge=1, le=8)
    section: Optional[str] = Field(None, min_length=1, max_length=1)
    blood_group: Optional[BloodGroup] = None
    address: Optional[Address] = None
    contact_number: Optional[str] = Field(None, max_length=15)
    parent_name: Optional[str] = None
    parent_contact: Optional[str] = None
    is_active: Optional[bool] = None


class StudentSummary(BaseModel):
    """Lightweight projection of student details."""

    model_config = ConfigDict(from_attributes=True)

    student_id: UUID
    registration_number: str
    department: Department
    year: int
    section: str


class StudentRead(StudentSummary):
    """Full student profile."""

    account_id: UUID
    semester: int
    date_of_birth: date
    gender: Gender
    blood_group: Optional[BloodGroup] = None
    address: Optional[Address] = None
    contact_number: Optional[str] = None
    parent_name: str
    parent_contact: str
    admission_date: datetime
    is_active: bool
    created_at: datetime
