"""Pydantic schemas for course endpoints."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models import Department


class CourseCreate(BaseModel):
    """Request body for adding a course to a faculty member."""

    title: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=20)
    credits: int = Field(..., ge=1, le=10)
    description: str = Field(..., min_length=1, max_length=500)
    department: Department
    semester: int = Field(..., ge=1, le=8)
    academic_year: str = Field(..., pattern=r"^\d{4}-\d{4}$", description="Format YYYY-YYYY")
    max_students: int = Field(..., ge=1)
    is_active: bool = True


class CourseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    code: Optional[str] = Field(None, min_length=1, max_length=20)
    credits: Optional[int] = Field(None, ge=1, le=10)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    semester: Optional[int] = Field(None, ge=1, le=8)
    academic_year: Optional[str] = Field(None, pattern=r"^\d{4}-\d{4}$")
    max_students: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None


class CourseSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    course_id: UUID
    title: str
    code: str
    credits: int


class CourseRead(CourseSummary):
    """Course with capacity figures."""

    description: str
    department: Department
    faculty_id: UUID
    semester: int
    academic_year: str
    max_students: int
    seats_taken: int
    seats_available: int
    is_active: bool
    created_at: datetime
