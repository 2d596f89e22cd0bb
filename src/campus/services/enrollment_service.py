"""Enrollment lifecycle: creation under capacity, status changes and attendance."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import CapacityExceeded, Conflict, Forbidden, NotFound, ValidationFailed
from ..models import (
    AttendanceRecord,
    AttendanceStatus,
    Course,
    Enrollment,
    EnrollmentStatus,
    LetterGrade,
    Student,
)
from ..models.common import coerce_enum
from ..utils.datetime import as_naive_utc, calendar_date
from .access import Caller, Role, is_course_instructor, require_instructor, student_for_account
from .grading_service import refresh_final_grade
from .record_store import RecordStore

logger = logging.getLogger(__name__)


def create_enrollment(
    session: Session,
    *,
    student_id: UUID,
    course_id: UUID,
    now: Optional[datetime] = None,
) -> Enrollment:
    """Enroll a student in a course, taking one of its seats.

    The seat is claimed with a conditional update on the course row, so two
    concurrent requests can never both take the last seat.
    """

    store = RecordStore(session)
    student = store.require(Student, student_id)
    course = store.require(Course, course_id)
    if not course.is_active:
        raise ValidationFailed(f"Course {course.code} is not open for enrollment")

    if store.find_one(Enrollment, student_id=student.student_id, course_id=course.course_id) is not None:
        logger.warning("duplicate enrollment refused: %s in %s", student.registration_number, course.code)
        raise Conflict("Student is already enrolled in this course")

    try:
        with session.begin_nested():
            if not store.reserve_seat(course.course_id):
                raise CapacityExceeded(
                    f"Course has reached its maximum capacity of {course.max_students} students"
                )
            enrollment = store.create(
                Enrollment,
                student_id=student.student_id,
                course_id=course.course_id,
                status=EnrollmentStatus.ENROLLED,
                enrollment_date=as_naive_utc(now),
            )
    except CapacityExceeded:
        logger.warning("course %s full, refused %s", course.code, student.registration_number)
        raise

    logger.info("student %s enrolled in %s", student.registration_number, course.code)
    return enrollment


def enroll_account(
    session: Session,
    *,
    caller: Caller,
    course_id: UUID,
    now: Optional[datetime] = None,
) -> Enrollment:
    """Enroll the student profile belonging to the calling account."""

    student = student_for_account(session, caller.account_id)
    if student is None:
        raise NotFound(f"No student found for user {caller.account_id}")
    return create_enrollment(session, student_id=student.student_id, course_id=course_id, now=now)


def get_enrollment(session: Session, enrollment_id: UUID) -> Enrollment:
    return RecordStore(session).require(Enrollment, enrollment_id)


def get_enrollment_for(session: Session, *, caller: Caller, enrollment_id: UUID) -> Enrollment:
    """Return an enrollment visible to the caller: its student, the instructor or an admin."""

    enrollment = get_enrollment(session, enrollment_id)
    if caller.is_admin or is_course_instructor(session, caller, enrollment.course):
        return enrollment
    student = student_for_account(session, caller.account_id)
    if student is not None and student.student_id == enrollment.student_id:
        return enrollment
    raise Forbidden(f"User {caller.account_id} is not authorized to access this enrollment")


def list_enrollments(
    session: Session,
    *,
    course_id: Optional[UUID] = None,
    student_id: Optional[UUID] = None,
    status=None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> Sequence[Enrollment]:
    status = coerce_enum(EnrollmentStatus, status, "status")
    return RecordStore(session).find(
        Enrollment,
        course_id=course_id,
        student_id=student_id,
        status=status,
        limit=limit,
        offset=offset,
    )


def _require_staff(session: Session, caller: Caller, enrollment: Enrollment, action: str) -> None:
    if caller.role is Role.STUDENT:
        raise Forbidden(f"User {caller.account_id} is not authorized to {action}")
    require_instructor(session, caller, enrollment.course, action, allow_admin=True)


def update_enrollment_status(
    session: Session,
    *,
    enrollment_id: UUID,
    caller: Caller,
    status,
) -> Enrollment:
    """Move an enrollment to another status.

    Any status may follow any other; no transition table is enforced.
    """

    enrollment = get_enrollment(session, enrollment_id)
    _require_staff(session, caller, enrollment, "update this enrollment")

    new_status = coerce_enum(EnrollmentStatus, status, "status")
    if new_status is None:
        raise ValidationFailed("status is required")
    previous = enrollment.status
    enrollment.status = new_status
    session.flush()
    logger.info("enrollment %s status %s -> %s", enrollment.enrollment_id, previous.value, new_status.value)
    return enrollment


def assign_grade(
    session: Session,
    *,
    enrollment_id: UUID,
    caller: Caller,
    grade,
) -> Enrollment:
    """Post a letter grade; the final grade is recomputed alongside it."""

    enrollment = get_enrollment(session, enrollment_id)
    _require_staff(session, caller, enrollment, "update this enrollment")

    enrollment.grade = coerce_enum(LetterGrade, grade, "grade")
    if enrollment.grade is not None:
        refresh_final_grade(enrollment)
    session.flush()
    return enrollment


def delete_enrollment(
    session: Session,
    *,
    enrollment_id: UUID,
    caller: Optional[Caller] = None,
) -> Dict[str, int]:
    """Remove an enrollment and its sub-records, freeing the seat it held."""

    store = RecordStore(session)
    enrollment = store.require(Enrollment, enrollment_id)
    if caller is not None:
        _require_staff(session, caller, enrollment, "delete this enrollment")
    return store.delete(enrollment)


def _attendance_on(session: Session, enrollment_id: UUID, day: date) -> Optional[AttendanceRecord]:
    stmt = (
        select(AttendanceRecord)
        .where(AttendanceRecord.enrollment_id == enrollment_id, AttendanceRecord.date == day)
        .with_for_update()
    )
    return session.execute(stmt).scalar_one_or_none()


def record_attendance(
    session: Session,
    *,
    enrollment_id: UUID,
    caller: Caller,
    date: Union[date, datetime, str],
    status,
    notes: Optional[str] = None,
) -> List[AttendanceRecord]:
    """Upsert the attendance mark for one calendar date.

    An existing mark for the same date is overwritten; its notes are kept when
    no new notes are given. Only the affected row is written. Returns the
    enrollment's attendance ordered by date.
    """

    enrollment = get_enrollment(session, enrollment_id)
    require_instructor(session, caller, enrollment.course, "record attendance", allow_admin=True)

    day = calendar_date(date)
    status = coerce_enum(AttendanceStatus, status, "status")
    if status is None:
        raise ValidationFailed("attendance status is required")

    with session.begin_nested():
        record = _attendance_on(session, enrollment.enrollment_id, day)
        if record is None:
            try:
                with session.begin_nested():
                    session.add(
                        AttendanceRecord(
                            enrollment_id=enrollment.enrollment_id,
                            date=day,
                            status=status,
                            notes=notes,
                        )
                    )
            except IntegrityError:
                # a concurrent request inserted this date first
                record = _attendance_on(session, enrollment.enrollment_id, day)
        if record is not None:
            record.status = status
            if notes:
                record.notes = notes

    session.expire(enrollment, ["attendance"])
    return list(enrollment.attendance)
