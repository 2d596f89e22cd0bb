"""Domain logic for faculty records."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from ..core.errors import Conflict, NotFound, ValidationFailed
from ..models import Department, Designation, Faculty
from ..models.common import coerce_enum
from .access import faculty_for_account
from .identifier_service import create_with_identifier, generate_faculty_id
from .record_store import RecordStore

logger = logging.getLogger(__name__)


def create_faculty(
    session: Session,
    *,
    account_id: UUID,
    department,
    designation,
    qualification,
    specialization: List[str],
    date_of_joining: date,
    date_of_birth: date,
    gender,
    blood_group=None,
    address: Optional[Dict[str, Any]] = None,
    contact_number: Optional[str] = None,
    emergency_contact: Optional[Dict[str, Any]] = None,
) -> Faculty:
    """Create the faculty profile for an account and assign its employee id."""

    store = RecordStore(session)
    if store.find_one(Faculty, account_id=account_id) is not None:
        raise Conflict(f"Faculty with user {account_id} already exists")
    if date_of_joining is None:
        raise ValidationFailed("Please add date of joining")

    department = coerce_enum(Department, department, "department")
    with session.begin_nested():
        faculty = create_with_identifier(
            session,
            column=Faculty.employee_id,
            generate=lambda: generate_faculty_id(session, department, date_of_joining.year),
            create=lambda employee_id: store.create(
                Faculty,
                account_id=account_id,
                employee_id=employee_id,
                department=department,
                designation=designation,
                qualification=qualification,
                specialization=specialization,
                date_of_joining=date_of_joining,
                date_of_birth=date_of_birth,
                gender=gender,
                blood_group=blood_group,
                address=address,
                contact_number=contact_number,
                emergency_contact=emergency_contact,
            ),
        )
    logger.info("faculty %s created for account %s", faculty.employee_id, account_id)
    return faculty


def get_faculty(session: Session, faculty_id: UUID) -> Faculty:
    return RecordStore(session).require(Faculty, faculty_id)


def get_faculty_for_account(session: Session, account_id: UUID) -> Faculty:
    """Return the profile owned by ``account_id``."""

    faculty = faculty_for_account(session, account_id)
    if faculty is None:
        raise NotFound(f"No faculty found for user {account_id}")
    return faculty


def list_faculty(
    session: Session,
    *,
    department=None,
    designation=None,
    limit: int = 50,
    offset: int = 0,
) -> Sequence[Faculty]:
    department = coerce_enum(Department, department, "department")
    designation = coerce_enum(Designation, designation, "designation")
    return RecordStore(session).find(
        Faculty,
        department=department,
        designation=designation,
        limit=limit,
        offset=offset,
    )


def update_faculty(session: Session, faculty_id: UUID, **changes: Any) -> Faculty:
    store = RecordStore(session)
    faculty = store.require(Faculty, faculty_id)
    return store.update(faculty, **changes)


def delete_faculty(session: Session, faculty_id: UUID) -> Dict[str, int]:
    """Remove a faculty member, the courses they own and those courses' enrollments."""

    store = RecordStore(session)
    faculty = store.require(Faculty, faculty_id)
    return store.delete(faculty)
