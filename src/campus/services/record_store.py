"""Persistence gateway for students, faculty, courses and enrollments.

Cascades are explicit: deleting a course removes its enrollments, deleting a
student removes their enrollments and frees the seats they held, deleting a
faculty member removes the courses they own (and, through them, those
courses' enrollments). Enrollment sub-records go with their enrollment.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Sequence, Type, TypeVar
from uuid import UUID

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import CampusRuleViolation, Conflict, NotFound, ValidationFailed
from ..models import Assignment, AttendanceRecord, Course, Enrollment, Exam, Faculty, Student

logger = logging.getLogger(__name__)

M = TypeVar("M")

_IMMUTABLE_FIELDS = {
    Student: ("student_id", "registration_number", "account_id"),
    Faculty: ("faculty_id", "employee_id", "account_id"),
    Course: ("course_id", "seats_taken"),
    Enrollment: ("enrollment_id", "student_id", "course_id"),
}

_LABELS = {
    Student: "Student",
    Faculty: "Faculty",
    Course: "Course",
    Enrollment: "Enrollment",
}


def _integrity_violation(model: Type, exc: IntegrityError) -> CampusRuleViolation:
    message = str(exc.orig).lower()
    if "unique" not in message and "duplicate" not in message:
        return ValidationFailed(f"Invalid {_LABELS.get(model, model.__name__)} data: {exc.orig}")
    if model is Enrollment:
        return Conflict("Student is already enrolled in this course")
    if "code" in message and model is Course:
        return Conflict("Course code already exists")
    if "account" in message:
        return Conflict(f"{_LABELS[model]} already exists for this account")
    return Conflict("Duplicate field value entered")


class RecordStore:
    """CRUD and count operations over the four academic entity types."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # -- reads -------------------------------------------------------------

    def get(self, model: Type[M], pk: UUID) -> Optional[M]:
        return self.session.get(model, pk)

    def require(self, model: Type[M], pk: UUID) -> M:
        """Return the entity or raise ``NotFound``."""

        entity = self.get(model, pk)
        if entity is None:
            raise NotFound(f"{_LABELS.get(model, model.__name__)} not found with id of {pk}")
        return entity

    def _filtered(self, stmt, model: Type, filters: Dict[str, Any]):
        for field, value in filters.items():
            if value is None:
                continue
            column = getattr(model, field, None)
            if column is None:
                raise ValidationFailed(f"Unknown filter field {field!r}")
            stmt = stmt.where(column == value)
        return stmt

    def find(self, model: Type[M], *, limit: Optional[int] = None, offset: int = 0, **filters: Any) -> Sequence[M]:
        """Return entities matching equality filters, oldest first; ``None`` filters are ignored."""

        stmt = self._filtered(select(model), model, filters).order_by(model.created_at.asc())
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return self.session.execute(stmt).scalars().all()

    def find_one(self, model: Type[M], **filters: Any) -> Optional[M]:
        stmt = self._filtered(select(model), model, filters)
        return self.session.execute(stmt).scalars().first()

    def count(self, model: Type, **filters: Any) -> int:
        stmt = self._filtered(select(func.count()).select_from(model), model, filters)
        return self.session.execute(stmt).scalar_one()

    # -- writes ------------------------------------------------------------

    def create(self, model: Type[M], **values: Any) -> M:
        """Insert a new entity; unique constraint violations become ``Conflict``."""

        entity = model(**values)
        try:
            with self.session.begin_nested():
                self.session.add(entity)
        except IntegrityError as exc:
            raise _integrity_violation(model, exc) from exc
        return entity

    def update(self, entity: M, **values: Any) -> M:
        """Apply field changes to an entity; identifiers cannot be rewritten."""

        model = type(entity)
        immutable = _IMMUTABLE_FIELDS.get(model, ())
        for field, value in values.items():
            if field in immutable and getattr(entity, field) != value:
                raise ValidationFailed(f"{field} cannot be changed")
            if not hasattr(model, field):
                raise ValidationFailed(f"Unknown field {field!r}")
        try:
            with self.session.begin_nested():
                for field, value in values.items():
                    setattr(entity, field, value)
        except IntegrityError as exc:
            raise _integrity_violation(model, exc) from exc
        return entity

    def delete(self, entity) -> Dict[str, int]:
        """Delete an entity together with everything that depends on it.

        Returns the number of removed rows per table.
        """

        self.session.flush()
        with self.session.begin_nested():
            if isinstance(entity, Faculty):
                summary = self._delete_faculty(entity.faculty_id)
            elif isinstance(entity, Course):
                summary = self._delete_courses([entity.course_id])
            elif isinstance(entity, Student):
                summary = self._delete_student(entity.student_id)
            elif isinstance(entity, Enrollment):
                summary = self._delete_enrollments(
                    select(Enrollment.enrollment_id).where(Enrollment.enrollment_id == entity.enrollment_id),
                    release_seats=True,
                )
            else:
                raise ValidationFailed(f"Cannot delete {type(entity).__name__}")
        self.session.expire_all()
        logger.info("deleted %s with cascade %s", type(entity).__name__, summary)
        return summary

    # -- seat accounting ---------------------------------------------------

    def reserve_seat(self, course_id: UUID) -> bool:
        """Take one seat in a course if one is free; a single conditional write."""

        stmt = (
            update(Course)
            .where(Course.course_id == course_id, Course.seats_taken < Course.max_students)
            .values(seats_taken=Course.seats_taken + 1)
            .execution_options(synchronize_session=False)
        )
        reserved = self.session.execute(stmt).rowcount == 1
        self._expire_seats(course_id)
        return reserved

    def release_seats(self, course_id: UUID, seats: int = 1) -> None:
        stmt = (
            update(Course)
            .where(Course.course_id == course_id)
            .values(seats_taken=case((Course.seats_taken > seats, Course.seats_taken - seats), else_=0))
            .execution_options(synchronize_session=False)
        )
        self.session.execute(stmt)
        self._expire_seats(course_id)

    def _expire_seats(self, course_id: UUID) -> None:
        course = self.session.get(Course, course_id)
        if course is not None:
            self.session.expire(course, ["seats_taken"])

    # -- cascades ----------------------------------------------------------

    def _bulk_delete(self, model: Type, condition) -> int:
        stmt = delete(model).where(condition).execution_options(synchronize_session=False)
        return self.session.execute(stmt).rowcount

    def _delete_enrollments(self, enrollment_ids, *, release_seats: bool) -> Dict[str, int]:
        ids = list(self.session.execute(enrollment_ids).scalars().all())
        summary = {"enrollments": 0, "attendance_records": 0, "assignments": 0, "exams": 0}
        if not ids:
            return summary

        if release_seats:
            seats_stmt = (
                select(Enrollment.course_id, func.count())
                .where(Enrollment.enrollment_id.in_(ids))
                .group_by(Enrollment.course_id)
            )
            for course_id, held in self.session.execute(seats_stmt).all():
                self.release_seats(course_id, held)

        summary["attendance_records"] = self._bulk_delete(AttendanceRecord, AttendanceRecord.enrollment_id.in_(ids))
        summary["assignments"] = self._bulk_delete(Assignment, Assignment.enrollment_id.in_(ids))
        summary["exams"] = self._bulk_delete(Exam, Exam.enrollment_id.in_(ids))
        summary["enrollments"] = self._bulk_delete(Enrollment, Enrollment.enrollment_id.in_(ids))
        return summary

    def _delete_courses(self, course_ids: Iterable[UUID]) -> Dict[str, int]:
        course_ids = list(course_ids)
        summary = self._delete_enrollments(
            select(Enrollment.enrollment_id).where(Enrollment.course_id.in_(course_ids)),
            release_seats=False,
        )
        summary["courses"] = self._bulk_delete(Course, Course.course_id.in_(course_ids))
        return summary

    def _delete_student(self, student_id: UUID) -> Dict[str, int]:
        summary = self._delete_enrollments(
            select(Enrollment.enrollment_id).where(Enrollment.student_id == student_id),
            release_seats=True,
        )
        summary["students"] = self._bulk_delete(Student, Student.student_id == student_id)
        return summary

    def _delete_faculty(self, faculty_id: UUID) -> Dict[str, int]:
        course_ids = self.session.execute(select(Course.course_id).where(Course.faculty_id == faculty_id)).scalars().all()
        summary = self._delete_courses(course_ids)
        summary["faculty"] = self._bulk_delete(Faculty, Faculty.faculty_id == faculty_id)
        return summary
