"""Tests for model field validation."""

import uuid

import pytest

from campus.core.errors import ValidationFailed
from campus.models import Course, Department, Enrollment, EnrollmentStatus, Faculty, Student
from campus.services.record_store import RecordStore


class TestStudent:
    def test_section_is_upper_cased(self):
        student = Student(section="c")
        assert student.section == "C"

    @pytest.mark.parametrize("section", ["AB", "1", ""])
    def test_section_must_be_one_letter(self, section):
        with pytest.raises(ValidationFailed):
            Student(section=section)

    @pytest.mark.parametrize("field, value", [("year", 0), ("year", 5), ("semester", 9), ("semester", 0)])
    def test_year_and_semester_ranges(self, field, value):
        with pytest.raises(ValidationFailed):
            Student(**{field: value})

    def test_department_must_be_known(self):
        with pytest.raises(ValidationFailed):
            Student(department="Astrology")

    def test_department_accepts_display_name(self):
        assert Student(department="Civil").department is Department.CIVIL

    def test_contact_number_length(self):
        with pytest.raises(ValidationFailed):
            Student(contact_number="1" * 16)

    def test_registration_number_cannot_be_reassigned(self):
        student = Student(registration_number="25CS001")
        with pytest.raises(ValidationFailed):
            student.registration_number = "25CS002"


class TestFaculty:
    def test_specialization_needs_an_entry(self):
        with pytest.raises(ValidationFailed):
            Faculty(specialization=[" ", ""])

    def test_specialization_is_trimmed(self):
        assert Faculty(specialization=[" Networks "]).specialization == ["Networks"]

    def test_unknown_designation(self):
        with pytest.raises(ValidationFailed):
            Faculty(designation="Dean of Vibes")


class TestCourse:
    @pytest.mark.parametrize("academic_year", ["2025", "2025-26", "25-26", None])
    def test_academic_year_format(self, academic_year):
        with pytest.raises(ValidationFailed):
            Course(academic_year=academic_year)

    def test_academic_year_accepts_full_years(self):
        assert Course(academic_year="2025-2026").academic_year == "2025-2026"

    @pytest.mark.parametrize("credits", [0, 11, "3"])
    def test_credit_bounds(self, credits):
        with pytest.raises(ValidationFailed):
            Course(credits=credits)

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValidationFailed):
            Course(max_students=0)

    def test_title_length(self):
        with pytest.raises(ValidationFailed):
            Course(title="x" * 101)

    def test_seats_available(self):
        course = Course(max_students=3, seats_taken=1)
        assert course.seats_available == 2


class TestEnrollment:
    def test_status_values(self):
        assert Enrollment(status="completed").status is EnrollmentStatus.COMPLETED
        with pytest.raises(ValidationFailed):
            Enrollment(status="on hold")

    def test_grade_values(self):
        with pytest.raises(ValidationFailed):
            Enrollment(grade="E")

    def test_enrollment_defaults_persist(self, session, make_student, course):
        student, _ = make_student()
        enrollment = Enrollment(student_id=student.student_id, course_id=course.course_id)
        session.add(enrollment)
        session.flush()
        assert enrollment.status is EnrollmentStatus.ENROLLED
        assert enrollment.is_active is True


def test_missing_required_column_is_a_validation_failure(session):
    """A NOT NULL violation is reported as invalid data, not as a duplicate."""
    with pytest.raises(ValidationFailed):
        RecordStore(session).create(
            Student,
            account_id=uuid.uuid4(),
            registration_number="25CS001",
            department="Computer Science",
            year=1,
            semester=1,
            section="A",
            gender="Male",
            parent_name="P",
            parent_contact="1",
        )
