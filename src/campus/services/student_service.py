"""Domain logic for student records."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from ..core.errors import Conflict, NotFound
from ..models import Department, Student
from ..models.common import coerce_enum
from ..utils.datetime import as_naive_utc
from .access import student_for_account
from .identifier_service import create_with_identifier, generate_student_id
from .record_store import RecordStore

logger = logging.getLogger(__name__)


def create_student(
    session: Session,
    *,
    account_id: UUID,
    department,
    year: int,
    semester: int,
    section: str,
    date_of_birth: date,
    gender,
    parent_name: str,
    parent_contact: str,
    blood_group=None,
    address: Optional[Dict[str, Any]] = None,
    contact_number: Optional[str] = None,
    admission_date: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> Student:
    """Create the student profile for an account and assign its registration number."""

    store = RecordStore(session)
    if store.find_one(Student, account_id=account_id) is not None:
        raise Conflict(f"Student with user {account_id} already exists")

    department = coerce_enum(Department, department, "department")
    with session.begin_nested():
        student = create_with_identifier(
            session,
            column=Student.registration_number,
            generate=lambda: generate_student_id(session, department, year, now=now),
            create=lambda registration_number: store.create(
                Student,
                account_id=account_id,
                registration_number=registration_number,
                department=department,
                year=year,
                semester=semester,
                section=section,
                date_of_birth=date_of_birth,
                gender=gender,
                blood_group=blood_group,
                address=address,
                contact_number=contact_number,
                parent_name=parent_name,
                parent_contact=parent_contact,
                admission_date=as_naive_utc(admission_date or now),
            ),
        )
    logger.info("student %s created for account %s", student.registration_number, account_id)
    return student


def get_student(session: Session, student_id: UUID) -> Student:
    return RecordStore(session).require(Student, student_id)


def get_student_for_account(session: Session, account_id: UUID) -> Student:
    """Return the profile owned by ``account_id``."""

    student = student_for_account(session, account_id)
    if student is None:
        raise NotFound(f"No student found for user {account_id}")
    return student


def list_students(
    session: Session,
    *,
    department=None,
    year: Optional[int] = None,
    section: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> Sequence[Student]:
    """Return students filtered by department, year and section."""

    department = coerce_enum(Department, department, "department")
    return RecordStore(session).find(
        Student,
        department=department,
        year=year,
        section=section.upper() if section else None,
        limit=limit,
        offset=offset,
    )


def update_student(session: Session, student_id: UUID, **changes: Any) -> Student:
    store = RecordStore(session)
    student = store.require(Student, student_id)
    return store.update(student, **changes)


def delete_student(session: Session, student_id: UUID) -> Dict[str, int]:
    """Remove a student and every enrollment they hold."""

    store = RecordStore(session)
    student = store.require(Student, student_id)
    return store.delete(student)
