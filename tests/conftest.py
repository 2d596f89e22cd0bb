"""Pytest configuration and shared fixtures.

Every test gets a fresh in-memory SQLite database with the full schema, a
session bound to it and factories for the academic records most tests need.
"""

import os

os.environ.setdefault("CAMPUS_DATABASE_URL", "sqlite+pysqlite:///:memory:")

import uuid
from datetime import date, datetime

import pytest
from sqlalchemy.orm import sessionmaker

from campus.core.database import Base, build_engine
from campus.models import Department
from campus.services import course_service, enrollment_service, faculty_service, student_service
from campus.services.access import Caller, Role

ADMISSION_TIME = datetime(2025, 7, 1, 9, 30)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture()
def engine():
    """Create an isolated in-memory database with all tables."""
    engine = build_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture()
def session(session_factory):
    """Provide a session; uncommitted work is discarded after the test."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


# =============================================================================
# Caller Fixtures
# =============================================================================


@pytest.fixture()
def admin() -> Caller:
    return Caller(account_id=uuid.uuid4(), role=Role.ADMIN)


@pytest.fixture()
def faculty_caller() -> Caller:
    return Caller(account_id=uuid.uuid4(), role=Role.FACULTY)


# =============================================================================
# Record Factories
# =============================================================================


@pytest.fixture()
def make_faculty(session):
    """Create a faculty profile; returns ``(faculty, caller)``."""

    def _make(caller=None, department=Department.COMPUTER_SCIENCE, joined=date(2019, 6, 1)):
        caller = caller or Caller(account_id=uuid.uuid4(), role=Role.FACULTY)
        faculty = faculty_service.create_faculty(
            session,
            account_id=caller.account_id,
            department=department,
            designation="Assistant Professor",
            qualification="Ph.D",
            specialization=["Algorithms"],
            date_of_joining=joined,
            date_of_birth=date(1985, 3, 14),
            gender="Female",
        )
        return faculty, caller

    return _make


@pytest.fixture()
def make_student(session):
    """Create a student profile; returns ``(student, caller)``."""

    def _make(department=Department.COMPUTER_SCIENCE, year=1, section="a", now=ADMISSION_TIME):
        caller = Caller(account_id=uuid.uuid4(), role=Role.STUDENT)
        student = student_service.create_student(
            session,
            account_id=caller.account_id,
            department=department,
            year=year,
            semester=1,
            section=section,
            date_of_birth=date(2006, 4, 12),
            gender="Male",
            parent_name="K. Sharma",
            parent_contact="9800000000",
            now=now,
        )
        return student, caller

    return _make


@pytest.fixture()
def instructor(make_faculty, faculty_caller):
    """Faculty member owning ``course``; returns ``(faculty, caller)``."""
    return make_faculty(caller=faculty_caller)


@pytest.fixture()
def make_course(session, instructor):
    faculty, caller = instructor
    counter = iter(range(100, 1000))

    def _make(max_students=30, **overrides):
        values = dict(
            title="Data Structures",
            code=f"CS{next(counter)}",
            credits=4,
            description="Lists, trees and graphs.",
            department=Department.COMPUTER_SCIENCE,
            semester=3,
            academic_year="2025-2026",
            max_students=max_students,
        )
        values.update(overrides)
        return course_service.create_course(session, faculty_id=faculty.faculty_id, caller=caller, **values)

    return _make


@pytest.fixture()
def course(make_course):
    return make_course()


@pytest.fixture()
def enrolled(session, make_student, course):
    """A student enrolled in ``course``; returns ``(enrollment, student caller)``."""
    student, caller = make_student()
    enrollment = enrollment_service.create_enrollment(
        session, student_id=student.student_id, course_id=course.course_id
    )
    return enrollment, caller
