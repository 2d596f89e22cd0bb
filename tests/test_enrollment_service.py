"""Tests for the enrollment lifecycle: capacity, status changes and attendance."""

import uuid
from datetime import date, datetime, timezone

import pytest

from campus.core.errors import CapacityExceeded, Conflict, Forbidden, NotFound, ValidationFailed
from campus.models import AttendanceRecord, AttendanceStatus, Course, Enrollment, EnrollmentStatus, LetterGrade
from campus.services import enrollment_service
from campus.services.access import Caller, Role
from campus.services.record_store import RecordStore


class TestCreateEnrollment:
    def test_new_enrollment_starts_enrolled(self, session, make_student, course):
        student, _ = make_student()
        when = datetime(2025, 8, 1, 10, 0, tzinfo=timezone.utc)

        enrollment = enrollment_service.create_enrollment(
            session, student_id=student.student_id, course_id=course.course_id, now=when
        )

        assert enrollment.status is EnrollmentStatus.ENROLLED
        assert enrollment.enrollment_date == datetime(2025, 8, 1, 10, 0)
        assert enrollment.attendance == []
        assert enrollment.assignments == []
        assert enrollment.exams == []
        assert enrollment.grade is None
        assert course.seats_taken == 1

    def test_capacity_is_enforced(self, session, make_student, make_course):
        """With capacity N the N+1th enrollment fails and nothing is written."""
        course = make_course(max_students=2)
        for _ in range(2):
            student, _ = make_student()
            enrollment_service.create_enrollment(session, student_id=student.student_id, course_id=course.course_id)
        late, _ = make_student()

        with pytest.raises(CapacityExceeded) as excinfo:
            enrollment_service.create_enrollment(session, student_id=late.student_id, course_id=course.course_id)

        assert "maximum capacity of 2 students" in excinfo.value.detail
        assert excinfo.value.status_code == 409
        assert RecordStore(session).count(Enrollment, course_id=course.course_id) == 2
        assert course.seats_taken == 2

    def test_dropped_enrollments_still_hold_seats(self, session, make_student, make_course, admin):
        course = make_course(max_students=1)
        first, _ = make_student()
        enrollment = enrollment_service.create_enrollment(
            session, student_id=first.student_id, course_id=course.course_id
        )
        enrollment_service.update_enrollment_status(
            session, enrollment_id=enrollment.enrollment_id, caller=admin, status="dropped"
        )
        second, _ = make_student()

        with pytest.raises(CapacityExceeded):
            enrollment_service.create_enrollment(session, student_id=second.student_id, course_id=course.course_id)

    def test_duplicate_enrollment_conflicts(self, session, enrolled):
        enrollment, _ = enrolled
        with pytest.raises(Conflict):
            enrollment_service.create_enrollment(
                session, student_id=enrollment.student_id, course_id=enrollment.course_id
            )
        assert RecordStore(session).require(Course, enrollment.course_id).seats_taken == 1

    def test_missing_student_or_course(self, session, make_student, course):
        student, _ = make_student()
        with pytest.raises(NotFound):
            enrollment_service.create_enrollment(session, student_id=uuid.uuid4(), course_id=course.course_id)
        with pytest.raises(NotFound):
            enrollment_service.create_enrollment(session, student_id=student.student_id, course_id=uuid.uuid4())

    def test_inactive_course_is_closed(self, session, make_student, make_course):
        course = make_course(is_active=False)
        student, _ = make_student()
        with pytest.raises(ValidationFailed):
            enrollment_service.create_enrollment(session, student_id=student.student_id, course_id=course.course_id)

    def test_enroll_account_uses_caller_profile(self, session, make_student, course):
        student, caller = make_student()
        enrollment = enrollment_service.enroll_account(session, caller=caller, course_id=course.course_id)
        assert enrollment.student_id == student.student_id

    def test_enroll_account_without_profile(self, session, course):
        stranger = Caller(account_id=uuid.uuid4(), role=Role.STUDENT)
        with pytest.raises(NotFound):
            enrollment_service.enroll_account(session, caller=stranger, course_id=course.course_id)


class TestVisibility:
    def test_student_sees_own_enrollment(self, session, enrolled):
        enrollment, caller = enrolled
        found = enrollment_service.get_enrollment_for(session, caller=caller, enrollment_id=enrollment.enrollment_id)
        assert found is enrollment

    def test_other_student_is_forbidden(self, session, enrolled, make_student):
        enrollment, _ = enrolled
        _, other = make_student()
        with pytest.raises(Forbidden):
            enrollment_service.get_enrollment_for(session, caller=other, enrollment_id=enrollment.enrollment_id)

    def test_instructor_and_admin_see_enrollment(self, session, enrolled, instructor, admin):
        enrollment, _ = enrolled
        for caller in (instructor[1], admin):
            assert enrollment_service.get_enrollment_for(
                session, caller=caller, enrollment_id=enrollment.enrollment_id
            ) is enrollment

    def test_list_filters_by_status(self, session, enrolled, admin):
        enrollment, _ = enrolled
        assert enrollment_service.list_enrollments(session, status="enrolled") == [enrollment]
        assert enrollment_service.list_enrollments(session, status="completed") == []
        with pytest.raises(ValidationFailed):
            enrollment_service.list_enrollments(session, status="graduated")


class TestStatusAndGrade:
    def test_any_transition_is_allowed(self, session, enrolled, instructor):
        enrollment, _ = enrolled
        for status in ("completed", "enrolled", "failed", "dropped"):
            updated = enrollment_service.update_enrollment_status(
                session, enrollment_id=enrollment.enrollment_id, caller=instructor[1], status=status
            )
            assert updated.status is EnrollmentStatus(status)

    def test_unknown_status_is_rejected(self, session, enrolled, admin):
        enrollment, _ = enrolled
        with pytest.raises(ValidationFailed):
            enrollment_service.update_enrollment_status(
                session, enrollment_id=enrollment.enrollment_id, caller=admin, status="paused"
            )
        assert enrollment.status is EnrollmentStatus.ENROLLED

    def test_student_cannot_change_status(self, session, enrolled):
        enrollment, caller = enrolled
        with pytest.raises(Forbidden):
            enrollment_service.update_enrollment_status(
                session, enrollment_id=enrollment.enrollment_id, caller=caller, status="completed"
            )

    def test_other_faculty_cannot_change_status(self, session, enrolled, make_faculty):
        enrollment, _ = enrolled
        _, outsider = make_faculty()
        with pytest.raises(Forbidden):
            enrollment_service.update_enrollment_status(
                session, enrollment_id=enrollment.enrollment_id, caller=outsider, status="completed"
            )

    def test_assign_grade_refreshes_final_grade(self, session, enrolled, admin):
        enrollment, _ = enrolled
        updated = enrollment_service.assign_grade(
            session, enrollment_id=enrollment.enrollment_id, caller=admin, grade="B+"
        )
        assert updated.grade is LetterGrade.B_PLUS
        assert updated.final_grade is LetterGrade.F

    def test_student_cannot_delete_enrollment(self, session, enrolled):
        enrollment, caller = enrolled
        with pytest.raises(Forbidden):
            enrollment_service.delete_enrollment(session, enrollment_id=enrollment.enrollment_id, caller=caller)


class TestAttendance:
    def test_marks_are_kept_in_date_order(self, session, enrolled, instructor):
        enrollment, _ = enrolled
        for day in (date(2025, 9, 3), date(2025, 9, 1), date(2025, 9, 2)):
            records = enrollment_service.record_attendance(
                session, enrollment_id=enrollment.enrollment_id, caller=instructor[1], date=day, status="present"
            )
        assert [record.date for record in records] == [date(2025, 9, 1), date(2025, 9, 2), date(2025, 9, 3)]

    def test_same_date_is_overwritten(self, session, enrolled, instructor):
        """A second mark on the same calendar date replaces the first."""
        enrollment, _ = enrolled
        enrollment_service.record_attendance(
            session,
            enrollment_id=enrollment.enrollment_id,
            caller=instructor[1],
            date=datetime(2025, 9, 1, 8, 0),
            status="absent",
            notes="no show",
        )
        records = enrollment_service.record_attendance(
            session,
            enrollment_id=enrollment.enrollment_id,
            caller=instructor[1],
            date=datetime(2025, 9, 1, 15, 30),
            status="late",
        )

        assert len(records) == 1
        assert records[0].status is AttendanceStatus.LATE
        assert records[0].notes == "no show"

    def test_new_notes_replace_old_notes(self, session, enrolled, admin):
        enrollment, _ = enrolled
        for notes in ("first", "second"):
            records = enrollment_service.record_attendance(
                session,
                enrollment_id=enrollment.enrollment_id,
                caller=admin,
                date="2025-09-01",
                status="excused",
                notes=notes,
            )
        assert records[0].notes == "second"

    def test_student_cannot_record_attendance(self, session, enrolled):
        enrollment, caller = enrolled
        with pytest.raises(Forbidden):
            enrollment_service.record_attendance(
                session, enrollment_id=enrollment.enrollment_id, caller=caller, date=date.today(), status="present"
            )

    def test_invalid_status_is_rejected(self, session, enrolled, admin):
        enrollment, _ = enrolled
        with pytest.raises(ValidationFailed):
            enrollment_service.record_attendance(
                session, enrollment_id=enrollment.enrollment_id, caller=admin, date=date.today(), status="asleep"
            )

    @pytest.mark.parametrize("day", ["not-a-date", "2025-13-01", None])
    def test_malformed_date_is_rejected(self, session, enrolled, admin, day):
        enrollment, _ = enrolled
        with pytest.raises(ValidationFailed):
            enrollment_service.record_attendance(
                session, enrollment_id=enrollment.enrollment_id, caller=admin, date=day, status="present"
            )
        assert enrollment.attendance == []

    def test_mark_inserted_concurrently_is_updated(self, session, enrolled, admin, monkeypatch):
        """The lookup misses a row another request inserted; the insert conflict falls back to an update."""
        enrollment, _ = enrolled
        enrollment_service.record_attendance(
            session, enrollment_id=enrollment.enrollment_id, caller=admin, date=date(2025, 9, 1), status="absent"
        )
        real_lookup = enrollment_service._attendance_on
        misses = []

        def lookup(*args):
            if not misses:
                misses.append(args)
                return None
            return real_lookup(*args)

        monkeypatch.setattr(enrollment_service, "_attendance_on", lookup)
        records = enrollment_service.record_attendance(
            session, enrollment_id=enrollment.enrollment_id, caller=admin, date=date(2025, 9, 1), status="present"
        )

        assert len(misses) == 1
        assert len(records) == 1
        assert records[0].status is AttendanceStatus.PRESENT
        assert RecordStore(session).count(AttendanceRecord) == 1


class TestInsertConflicts:
    def test_duplicate_found_only_at_insert_returns_the_seat(self, session, enrolled, monkeypatch):
        """A concurrent duplicate slips past the lookup; the unique constraint refuses it."""
        enrollment, _ = enrolled
        monkeypatch.setattr(RecordStore, "find_one", lambda self, model, **filters: None)

        with pytest.raises(Conflict):
            enrollment_service.create_enrollment(
                session, student_id=enrollment.student_id, course_id=enrollment.course_id
            )
        monkeypatch.undo()

        store = RecordStore(session)
        assert store.require(Course, enrollment.course_id).seats_taken == 1
        assert store.count(Enrollment) == 1
