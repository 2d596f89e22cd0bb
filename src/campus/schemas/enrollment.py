"""Pydantic schemas for enrollment, grading and attendance endpoints."""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models import AssignmentStatus, AttendanceStatus, EnrollmentStatus, ExamType, LetterGrade
from .course import CourseSummary
from .student import StudentSummary


class AttendanceCreate(BaseModel):
    """Attendance mark for one calendar date."""

    date: date
    status: AttendanceStatus
    notes: Optional[str] = None


class AttendanceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    attendance_id: int
    date: date
    status: AttendanceStatus
    notes: Optional[str] = None


class AssignmentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    max_score: Optional[float] = Field(None, gt=0)


class AssignmentSubmit(BaseModel):
    """Submission body; ``filename`` names a file already stored by the upload service."""

    filename: Optional[str] = Field(None, max_length=255)


class AssignmentGrade(BaseModel):
    score: float = Field(..., ge=0)
    feedback: Optional[str] = None


class AssignmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    assignment_id: int
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    submitted_date: Optional[datetime] = None
    status: AssignmentStatus
    score: Optional[float] = None
    max_score: Optional[float] = None
    feedback: Optional[str] = None
    file_url: Optional[str] = None


class ExamCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    exam_type: ExamType
    date: Optional[datetime] = None
    max_score: Optional[float] = Field(None, gt=0)
    weightage: Optional[float] = Field(None, ge=0)
    score: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class ExamScore(BaseModel):
    score: float = Field(..., ge=0)
    notes: Optional[str] = None


class ExamRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    exam_id: int
    title: str
    exam_type: ExamType
    date: Optional[datetime] = None
    score: Optional[float] = None
    max_score: Optional[float] = None
    weightage: Optional[float] = None
    notes: Optional[str] = None


class EnrollmentStatusUpdate(BaseModel):
    status: EnrollmentStatus


class EnrollmentGradeUpdate(BaseModel):
    grade: Optional[LetterGrade] = None


class EnrollmentRead(BaseModel):
    """Enrollment with its sub-records and derived percentages."""

    model_config = ConfigDict(from_attributes=True)

    enrollment_id: UUID
    student: StudentSummary
    course: CourseSummary
    enrollment_date: datetime
    status: EnrollmentStatus
    grade: Optional[LetterGrade] = None
    final_grade: Optional[LetterGrade] = None
    attendance: List[AttendanceRead] = []
    assignments: List[AssignmentRead] = []
    exams: List[ExamRead] = []
    attendance_percentage: int = Field(..., ge=0, le=100)
    current_grade_percentage: int = Field(..., ge=0)
