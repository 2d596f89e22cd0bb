"""Caller identity and ownership checks used by the services."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.errors import Forbidden
from ..models import Course, Faculty, Student

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    ADMIN = "admin"
    FACULTY = "faculty"
    STUDENT = "student"


@dataclass(frozen=True)
class Caller:
    """Identity of whoever triggers an operation, supplied by the outer layer."""

    account_id: UUID
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


def student_for_account(session: Session, account_id: UUID) -> Optional[Student]:
    stmt = select(Student).where(Student.account_id == account_id)
    return session.execute(stmt).scalar_one_or_none()


def faculty_for_account(session: Session, account_id: UUID) -> Optional[Faculty]:
    stmt = select(Faculty).where(Faculty.account_id == account_id)
    return session.execute(stmt).scalar_one_or_none()


def is_course_instructor(session: Session, caller: Caller, course: Course) -> bool:
    """Return True when the caller is the faculty member owning ``course``."""

    if caller.role is not Role.FACULTY:
        return False
    faculty = faculty_for_account(session, caller.account_id)
    return faculty is not None and faculty.faculty_id == course.faculty_id


def require_instructor(session: Session, caller: Caller, course: Course, action: str, *, allow_admin: bool) -> None:
    """Raise ``Forbidden`` unless the caller teaches ``course`` (or is admin when allowed)."""

    if allow_admin and caller.is_admin:
        return
    if is_course_instructor(session, caller, course):
        return
    logger.warning("account %s refused: %s on course %s", caller.account_id, action, course.code)
    raise Forbidden(f"User {caller.account_id} is not authorized to {action}")


def require_own_student(session: Session, caller: Caller, student_id: UUID, action: str) -> Student:
    """Return the caller's student record, raising ``Forbidden`` if it is not ``student_id``."""

    student = student_for_account(session, caller.account_id)
    if student is None or student.student_id != student_id:
        logger.warning("account %s refused: %s for student %s", caller.account_id, action, student_id)
        raise Forbidden(f"User {caller.account_id} is not authorized to {action}")
    return student
