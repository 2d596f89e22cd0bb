"""Service layer exports."""

from . import (
	access,
	course_service,
	enrollment_service,
	faculty_service,
	grading_service,
	identifier_service,
	record_store,
	student_service,
)

__all__ = [
	"access",
	"course_service",
	"enrollment_service",
	"faculty_service",
	"grading_service",
	"identifier_service",
	"record_store",
	"student_service",
]
