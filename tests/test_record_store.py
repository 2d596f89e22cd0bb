"""Tests for the persistence gateway: uniqueness, cascades and seat accounting."""

import uuid
from datetime import date

import pytest

from campus.core.errors import Conflict, NotFound, ValidationFailed
from campus.models import AttendanceRecord, Course, Enrollment, Exam, Faculty, Student
from campus.services import course_service, enrollment_service, faculty_service, grading_service, student_service
from campus.services.record_store import RecordStore


class TestReads:
    def test_require_missing_raises_not_found(self, session):
        missing = uuid.uuid4()
        with pytest.raises(NotFound) as excinfo:
            RecordStore(session).require(Course, missing)
        assert str(missing) in excinfo.value.detail
        assert excinfo.value.status_code == 404

    def test_find_ignores_none_filters(self, session, make_course):
        make_course(semester=3)
        make_course(semester=5)
        store = RecordStore(session)

        assert len(store.find(Course, semester=None)) == 2
        assert [c.semester for c in store.find(Course, semester=5)] == [5]
        assert store.count(Course) == 2

    def test_unknown_filter_is_rejected(self, session):
        with pytest.raises(ValidationFailed):
            RecordStore(session).find(Course, colour="blue")


class TestUniqueness:
    def test_duplicate_course_code_conflicts(self, make_course):
        make_course(code="CS201")
        with pytest.raises(Conflict):
            make_course(code="CS201")

    def test_second_profile_for_account_conflicts(self, session, make_student):
        student, caller = make_student()
        with pytest.raises(Conflict):
            student_service.create_student(
                session,
                account_id=caller.account_id,
                department="Civil",
                year=1,
                semester=1,
                section="A",
                date_of_birth=date(2006, 1, 1),
                gender="Female",
                parent_name="P",
                parent_contact="1",
            )

    def test_store_level_duplicate_enrollment_conflicts(self, session, enrolled):
        enrollment, _ = enrolled
        with pytest.raises(Conflict):
            RecordStore(session).create(
                Enrollment, student_id=enrollment.student_id, course_id=enrollment.course_id
            )
        # the failed insert did not disturb the existing row
        assert RecordStore(session).count(Enrollment) == 1

    def test_registration_number_is_immutable(self, session, make_student):
        student, _ = make_student()
        with pytest.raises(ValidationFailed):
            student_service.update_student(session, student.student_id, registration_number="99XX999")

    def test_update_course_to_taken_code_conflicts(self, session, make_course, instructor):
        make_course(code="CS201")
        other = make_course(code="CS202")
        with pytest.raises(Conflict):
            course_service.update_course(session, other.course_id, caller=instructor[1], code="CS201")


class TestCascades:
    def test_deleting_course_removes_enrollments_and_sub_records(self, session, enrolled, instructor):
        enrollment, _ = enrolled
        course_id = enrollment.course_id
        enrollment_service.record_attendance(
            session, enrollment_id=enrollment.enrollment_id, caller=instructor[1], date=date(2025, 9, 1), status="present"
        )
        grading_service.add_exam(
            session, enrollment_id=enrollment.enrollment_id, caller=instructor[1], title="Quiz 1", exam_type="quiz"
        )

        summary = course_service.delete_course(session, course_id, caller=instructor[1])

        assert summary["courses"] == 1
        assert summary["enrollments"] == 1
        assert summary["attendance_records"] == 1
        assert summary["exams"] == 1
        store = RecordStore(session)
        assert store.count(Enrollment, course_id=course_id) == 0
        assert store.count(AttendanceRecord) == 0
        assert store.count(Exam) == 0
        assert store.count(Student) == 1

    def test_deleting_student_frees_their_seats(self, session, make_student, course):
        student, _ = make_student()
        enrollment_service.create_enrollment(session, student_id=student.student_id, course_id=course.course_id)
        assert course.seats_taken == 1

        summary = student_service.delete_student(session, student.student_id)

        assert summary == {
            "enrollments": 1,
            "attendance_records": 0,
            "assignments": 0,
            "exams": 0,
            "students": 1,
        }
        assert RecordStore(session).require(Course, course.course_id).seats_taken == 0

    def test_deleting_faculty_removes_courses_and_enrollments(self, session, enrolled, make_course, instructor):
        faculty, _ = instructor
        make_course()

        summary = faculty_service.delete_faculty(session, faculty.faculty_id)

        assert summary["faculty"] == 1
        assert summary["courses"] == 2
        assert summary["enrollments"] == 1
        store = RecordStore(session)
        assert store.count(Course) == 0
        assert store.count(Enrollment) == 0
        assert store.count(Faculty) == 0

    def test_deleting_enrollment_releases_seat(self, session, enrolled, admin):
        enrollment, _ = enrolled
        course_id = enrollment.course_id

        enrollment_service.delete_enrollment(session, enrollment_id=enrollment.enrollment_id, caller=admin)

        assert RecordStore(session).require(Course, course_id).seats_taken == 0


class TestSeats:
    def test_reserve_stops_at_capacity(self, session, make_course):
        course = make_course(max_students=2)
        store = RecordStore(session)

        assert store.reserve_seat(course.course_id) is True
        assert store.reserve_seat(course.course_id) is True
        assert store.reserve_seat(course.course_id) is False
        assert course.seats_taken == 2
        assert course.seats_available == 0

    def test_release_never_goes_negative(self, session, course):
        store = RecordStore(session)
        store.reserve_seat(course.course_id)
        store.release_seats(course.course_id, 5)
        assert course.seats_taken == 0


class TestOwnProfiles:
    def test_profiles_are_found_by_account(self, session, make_student, instructor):
        student, caller = make_student()
        faculty, faculty_caller = instructor

        assert student_service.get_student_for_account(session, caller.account_id) is student
        assert faculty_service.get_faculty_for_account(session, faculty_caller.account_id) is faculty

    def test_account_without_profile(self, session):
        with pytest.raises(NotFound):
            student_service.get_student_for_account(session, uuid.uuid4())
        with pytest.raises(NotFound):
            faculty_service.get_faculty_for_account(session, uuid.uuid4())
