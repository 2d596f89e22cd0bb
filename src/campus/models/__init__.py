"""SQLAlchemy models for the campus records service."""

from .assignment import Assignment, AssignmentStatus
from .attendance_record import AttendanceRecord, AttendanceStatus
from .common import BloodGroup, Department, Gender
from .course import Course
from .enrollment import Enrollment, EnrollmentStatus, LetterGrade
from .exam import Exam, ExamType
from .faculty import Designation, Faculty, Qualification
from .identifier_sequence import IdentifierSequence
from .student import Student

__all__ = [
    "Assignment",
    "AssignmentStatus",
    "AttendanceRecord",
    "AttendanceStatus",
    "BloodGroup",
    "Course",
    "Department",
    "Designation",
    "Enrollment",
    "EnrollmentStatus",
    "Exam",
    "ExamType",
    "Faculty",
    "Gender",
    "IdentifierSequence",
    "LetterGrade",
    "Qualification",
    "Student",
]
