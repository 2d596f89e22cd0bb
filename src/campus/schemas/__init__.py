"""Public schema exports."""

from .course import CourseCreate, CourseRead, CourseSummary, CourseUpdate
from .enrollment import (
	AssignmentCreate,
	AssignmentGrade,
	AssignmentRead,
	AssignmentSubmit,
	AttendanceCreate,
	AttendanceRead,
	EnrollmentGradeUpdate,
	EnrollmentRead,
	EnrollmentStatusUpdate,
	ExamCreate,
	ExamRead,
	ExamScore,
)
from .faculty import FacultyCreate, FacultyRead, FacultySummary, FacultyUpdate
from .student import Address, StudentCreate, StudentRead, StudentSummary, StudentUpdate

__all__ = [
	"Address",
	"AssignmentCreate",
	"AssignmentGrade",
	"AssignmentRead",
	"AssignmentSubmit",
	"AttendanceCreate",
	"AttendanceRead",
	"CourseCreate",
	"CourseRead",
	"CourseSummary",
	"CourseUpdate",
	"EnrollmentGradeUpdate",
	"EnrollmentRead",
	"EnrollmentStatusUpdate",
	"ExamCreate",
	"ExamRead",
	"ExamScore",
	"FacultyCreate",
	"FacultyRead",
	"FacultySummary",
	"FacultyUpdate",
	"StudentCreate",
	"StudentRead",
	"StudentSummary",
	"StudentUpdate",
]
