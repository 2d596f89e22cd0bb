"""Faculty profile and course ownership endpoints."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.errors import CampusRuleViolation
from ...models import Department, Designation
from ...schemas import CourseCreate, CourseRead, FacultyCreate, FacultyRead, FacultyUpdate
from ...services import course_service, faculty_service
from ...services.access import Caller, Role
from .deps import get_caller, require_roles

router = APIRouter(prefix="/faculty", tags=["faculty"])


@router.post(
    "",
    response_model=FacultyRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create the caller's faculty profile",
    responses={409: {"description": "Profile already exists"}},
)
def create_faculty(
    payload: FacultyCreate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> FacultyRead:
    """Create a faculty profile and assign its employee id."""

    require_roles(caller, Role.ADMIN, Role.FACULTY)
    try:
        values = payload.model_dump()
        values["address"] = payload.address.model_dump() if payload.address else None
        faculty = faculty_service.create_faculty(db, account_id=caller.account_id, **values)
        db.commit()
        db.refresh(faculty)
        return faculty
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get("", response_model=List[FacultyRead], summary="List faculty")
def list_faculty(
    *,
    department: Optional[Department] = Query(None),
    designation: Optional[Designation] = Query(None),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> List[FacultyRead]:
    return list(
        faculty_service.list_faculty(db, department=department, designation=designation, limit=limit, offset=offset)
    )


@router.get("/me", response_model=FacultyRead, summary="Fetch the caller's faculty profile")
def get_own_faculty(
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> FacultyRead:
    try:
        return faculty_service.get_faculty_for_account(db, caller.account_id)
    except CampusRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get("/{faculty_id}", response_model=FacultyRead, summary="Fetch a faculty member")
def get_faculty(faculty_id: UUID, db: Session = Depends(get_db)) -> FacultyRead:
    try:
        return faculty_service.get_faculty(db, faculty_id)
    except CampusRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.patch("/{faculty_id}", response_model=FacultyRead, summary="Update a faculty member")
def update_faculty(
    faculty_id: UUID,
    payload: FacultyUpdate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> FacultyRead:
    try:
        faculty = faculty_service.get_faculty(db, faculty_id)
        if not caller.is_admin and faculty.account_id != caller.account_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"User {caller.account_id} is not authorized to update this faculty",
            )
        changes = payload.model_dump(exclude_unset=True)
        if "address" in changes and payload.address is not None:
            changes["address"] = payload.address.model_dump()
        faculty = faculty_service.update_faculty(db, faculty_id, **changes)
        db.commit()
        db.refresh(faculty)
        return faculty
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.delete("/{faculty_id}", summary="Delete a faculty member, their courses and enrollments")
def delete_faculty(
    faculty_id: UUID,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> dict[str, int]:
    require_roles(caller, Role.ADMIN)
    try:
        summary = faculty_service.delete_faculty(db, faculty_id)
        db.commit()
        return summary
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.post(
    "/{faculty_id}/courses",
    response_model=CourseRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add a course taught by this faculty member",
    responses={403: {"description": "Caller does not own the faculty profile"}, 409: {"description": "Duplicate code"}},
)
def create_course(
    faculty_id: UUID,
    payload: CourseCreate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> CourseRead:
    """Create a course.

    Example request body::

        {
            "title": "Data Structures",
            "code": "CS201",
            "credits": 4,
            "description": "Lists, trees, graphs and their algorithms.",
            "department": "Computer Science",
            "semester": 3,
            "academic_year": "2025-2026",
            "max_students": 60
        }
    """

    try:
        course = course_service.create_course(db, faculty_id=faculty_id, caller=caller, **payload.model_dump())
        db.commit()
        db.refresh(course)
        return course
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get("/{faculty_id}/courses", response_model=List[CourseRead], summary="List a faculty member's courses")
def list_faculty_courses(faculty_id: UUID, db: Session = Depends(get_db)) -> List[CourseRead]:
    try:
        faculty = faculty_service.get_faculty(db, faculty_id)
    except CampusRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return list(course_service.list_courses(db, faculty_id=faculty.faculty_id, limit=100))
