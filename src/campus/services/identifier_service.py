"""Human-readable identifiers for students and faculty.

Identifiers look like ``25CS003`` (student) or ``F19CS012`` (faculty): the
last two digits of a year, the initials of the department and a three digit
sequence number. Sequence numbers come from a counter row per bucket that is
advanced with a single conditional ``UPDATE``, so two concurrent creations in
the same bucket never receive the same number.

Different buckets can still render the same text (study years share the
admission-year prefix, and departments such as Mechanical and Mechatronics
share an initial), so records are inserted through ``create_with_identifier``,
which moves on to the next sequence number while the identifier is taken.
"""

from __future__ import annotations

import enum
import logging
from datetime import datetime
from typing import Callable, Optional, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import Conflict
from ..models import Department, Faculty, IdentifierSequence, Student
from ..utils.datetime import two_digit_year, utcnow

logger = logging.getLogger(__name__)

M = TypeVar("M")

STUDENT_SCOPE = "student"
FACULTY_SCOPE = "faculty"
FACULTY_PREFIX = "F"
MAX_IDENTIFIER_ATTEMPTS = 50


def _department_name(department) -> str:
    if isinstance(department, enum.Enum):
        return department.value
    return str(department or "")


def _known_department(name: str) -> Optional[Department]:
    try:
        return Department(name)
    except ValueError:
        return None


def department_code(department) -> str:
    """Concatenate the upper-cased initial of every word in the department name."""

    return "".join(word[0].upper() for word in _department_name(department).split())


def next_sequence_value(
    session: Session,
    *,
    scope: str,
    bucket: str,
    seed: Callable[[], int],
) -> int:
    """Advance the counter for ``(scope, bucket)`` and return the new value.

    ``seed`` returns how many records already exist in the bucket; it is only
    consulted when the counter row is created.
    """

    increment = (
        update(IdentifierSequence)
        .where(IdentifierSequence.scope == scope, IdentifierSequence.bucket == bucket)
        .values(last_value=IdentifierSequence.last_value + 1)
        .execution_options(synchronize_session=False)
    )
    if session.execute(increment).rowcount == 0:
        try:
            with session.begin_nested():
                session.add(IdentifierSequence(scope=scope, bucket=bucket, last_value=seed() + 1))
        except IntegrityError:
            # another transaction created the bucket first
            session.execute(increment)

    value_stmt = select(IdentifierSequence.last_value).where(
        IdentifierSequence.scope == scope,
        IdentifierSequence.bucket == bucket,
    )
    return session.execute(value_stmt).scalar_one()


def _format(prefix: str, year: int, department, sequence: int) -> str:
    return f"{prefix}{two_digit_year(year)}{department_code(department)}{sequence:03d}"


def generate_student_id(
    session: Session,
    department,
    year: int,
    *,
    now: Optional[datetime] = None,
) -> str:
    """Return the next registration number for a (department, study year) bucket.

    The two-digit prefix is the admission (calendar) year taken from ``now``.
    """

    name = _department_name(department)
    admitted = now or utcnow()

    def seed() -> int:
        known = _known_department(name)
        if known is None:
            return 0
        stmt = select(func.count()).select_from(Student).where(Student.department == known, Student.year == year)
        return session.execute(stmt).scalar_one()

    sequence = next_sequence_value(session, scope=STUDENT_SCOPE, bucket=f"{name}|{year}", seed=seed)
    identifier = _format("", admitted.year, name, sequence)
    logger.debug("issued student id %s", identifier)
    return identifier


def generate_faculty_id(session: Session, department, join_year: int) -> str:
    """Return the next employee id for a department, stamped with the joining year."""

    name = _department_name(department)

    def seed() -> int:
        known = _known_department(name)
        if known is None:
            return 0
        stmt = select(func.count()).select_from(Faculty).where(Faculty.department == known)
        return session.execute(stmt).scalar_one()

    sequence = next_sequence_value(session, scope=FACULTY_SCOPE, bucket=name, seed=seed)
    identifier = _format(FACULTY_PREFIX, join_year, name, sequence)
    logger.debug("issued faculty id %s", identifier)
    return identifier


def _identifier_taken(session: Session, column, identifier: str) -> bool:
    stmt = select(column).where(column == identifier).limit(1)
    return session.execute(stmt).first() is not None


def create_with_identifier(
    session: Session,
    *,
    column,
    generate: Callable[[], str],
    create: Callable[[str], M],
) -> M:
    """Insert a record under the first generated identifier not already in use.

    ``create`` must raise ``Conflict`` on a unique violation. A conflict on
    ``column`` means another record holds the identifier, so the next one is
    tried; any other conflict is re-raised.
    """

    for _ in range(MAX_IDENTIFIER_ATTEMPTS):
        identifier = generate()
        if _identifier_taken(session, column, identifier):
            logger.debug("identifier %s already issued, skipping", identifier)
            continue
        try:
            return create(identifier)
        except Conflict:
            if not _identifier_taken(session, column, identifier):
                raise
            logger.warning("identifier %s claimed concurrently, retrying", identifier)
    raise Conflict(f"Could not allocate a unique {column.key} after {MAX_IDENTIFIER_ATTEMPTS} attempts")
