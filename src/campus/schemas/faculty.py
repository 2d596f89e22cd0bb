"""Pydantic schemas for faculty endpoints."""

from datetime import date, datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models import BloodGroup, Department, Designation, Gender, Qualification
from .student import Address


class FacultyCreate(BaseModel):
    """Request body for creating the caller's faculty profile."""

    department: Department
    designation: Designation
    qualification: Qualification
    specialization: List[str] = Field(..., min_length=1)
    date_of_joining: date
    date_of_birth: date
    gender: Gender
    blood_group: Optional[BloodGroup] = None
    address: Optional[Address] = None
    contact_number: Optional[str] = Field(None, max_length=15)
    emergency_contact: Optional[Dict[str, str]] = None


class FacultyUpdate(BaseModel):
    designation: Optional[Designation] = None
    qualification: Optional[Qualification] = None
    specialization: Optional[List[str]] = Field(None, min_length=1)
    blood_group: Optional[BloodGroup] = None
    address: Optional[Address] = None
    contact_number: Optional[str] = Field(None, max_length=15)
    emergency_contact: Optional[Dict[str, str]] = None
    is_active: Optional[bool] = None


class FacultySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    faculty_id: UUID
    employee_id: str
    department: Department
    designation: Designation


class FacultyRead(FacultySummary):
    """Full faculty profile."""

    account_id: UUID
    qualification: Qualification
    specialization: List[str]
    date_of_joining: date
    date_of_birth: date
    gender: Gender
    blood_group: Optional[BloodGroup] = None
    address: Optional[Address] = None
    contact_number: Optional[str] = None
    is_active: bool
    created_at: datetime
