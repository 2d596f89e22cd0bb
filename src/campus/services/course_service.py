"""Domain logic for courses."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from ..core.errors import Conflict, Forbidden
from ..models import Course, Department, Faculty
from ..models.common import coerce_enum
from .access import Caller
from .record_store import RecordStore

logger = logging.getLogger(__name__)


def _ensure_course_owner(caller: Caller, faculty: Faculty, action: str) -> None:
    if caller.is_admin or faculty.account_id == caller.account_id:
        return
    logger.warning("account %s refused: %s for faculty %s", caller.account_id, action, faculty.employee_id)
    raise Forbidden(f"User {caller.account_id} is not authorized to {action} for faculty {faculty.faculty_id}")


def create_course(
    session: Session,
    *,
    faculty_id: UUID,
    caller: Caller,
    title: str,
    code: str,
    credits: int,
    description: str,
    department,
    semester: int,
    academic_year: str,
    max_students: int,
    is_active: bool = True,
) -> Course:
    """Create a course owned by ``faculty_id``; course codes are globally unique."""

    store = RecordStore(session)
    faculty = store.require(Faculty, faculty_id)
    _ensure_course_owner(caller, faculty, "add a course")

    code = (code or "").strip()
    if code and store.find_one(Course, code=code) is not None:
        raise Conflict(f"Course code {code} already exists")

    course = store.create(
        Course,
        faculty_id=faculty.faculty_id,
        title=title,
        code=code,
        credits=credits,
        description=description,
        department=department,
        semester=semester,
        academic_year=academic_year,
        max_students=max_students,
        is_active=is_active,
    )
    logger.info("course %s created by faculty %s", course.code, faculty.employee_id)
    return course


def get_course(session: Session, course_id: UUID) -> Course:
    return RecordStore(session).require(Course, course_id)


def list_courses(
    session: Session,
    *,
    faculty_id: Optional[UUID] = None,
    department=None,
    semester: Optional[int] = None,
    is_active: Optional[bool] = None,
    limit: int = 50,
    offset: int = 0,
) -> Sequence[Course]:
    """Return courses filtered by owner, department, semester and activity."""

    department = coerce_enum(Department, department, "department")
    return RecordStore(session).find(
        Course,
        faculty_id=faculty_id,
        department=department,
        semester=semester,
        is_active=is_active,
        limit=limit,
        offset=offset,
    )


def update_course(session: Session, course_id: UUID, *, caller: Caller, **changes: Any) -> Course:
    store = RecordStore(session)
    course = store.require(Course, course_id)
    _ensure_course_owner(caller, store.require(Faculty, course.faculty_id), "update this course")

    new_code = changes.get("code")
    if new_code is not None:
        new_code = new_code.strip()
        existing = store.find_one(Course, code=new_code)
        if existing is not None and existing.course_id != course.course_id:
            raise Conflict(f"Course code {new_code} already exists")
        changes["code"] = new_code
    return store.update(course, **changes)


def delete_course(session: Session, course_id: UUID, *, caller: Caller) -> Dict[str, int]:
    """Remove a course together with its enrollments."""

    store = RecordStore(session)
    course = store.require(Course, course_id)
    _ensure_course_owner(caller, store.require(Faculty, course.faculty_id), "delete this course")
    return store.delete(course)
