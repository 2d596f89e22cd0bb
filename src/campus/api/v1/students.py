"""Student profile endpoints."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.errors import CampusRuleViolation
from ...models import Department
from ...schemas import EnrollmentRead, StudentCreate, StudentRead, StudentUpdate
from ...services import enrollment_service, student_service
from ...services.access import Caller, Role
from .deps import get_caller, require_roles

router = APIRouter(prefix="/students", tags=["students"])


def _ensure_self_or_staff(caller: Caller, student, *, allow_faculty: bool) -> None:
    if caller.is_admin or student.account_id == caller.account_id:
        return
    if allow_faculty and caller.role is Role.FACULTY:
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"User {caller.account_id} is not authorized to access this student",
    )


@router.post(
    "",
    response_model=StudentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create the caller's student profile",
    responses={409: {"description": "Profile already exists"}},
)
def create_student(
    payload: StudentCreate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> StudentRead:
    """Create a student profile and assign its registration number.

    Example request body::

        {
            "department": "Computer Science",
            "year": 1,
            "semester": 1,
            "section": "A",
            "date_of_birth": "2006-04-12",
            "gender": "Female",
            "parent_name": "R. Iyer",
            "parent_contact": "+91 98000 00000"
        }
    """

    try:
        values = payload.model_dump()
        values["address"] = payload.address.model_dump() if payload.address else None
        student = student_service.create_student(db, account_id=caller.account_id, **values)
        db.commit()
        db.refresh(student)
        return student
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get("", response_model=List[StudentRead], summary="List students")
def list_students(
    *,
    department: Optional[Department] = Query(None, description="Filter by department"),
    year: Optional[int] = Query(None, ge=1, le=4),
    section: Optional[str] = Query(None, min_length=1, max_length=1),
    limit: int = Query(50, ge=1, le=100, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> List[StudentRead]:
    require_roles(caller, Role.ADMIN, Role.FACULTY)
    students = student_service.list_students(
        db, department=department, year=year, section=section, limit=limit, offset=offset
    )
    return list(students)


@router.get("/me", response_model=StudentRead, summary="Fetch the caller's student profile")
def get_own_student(
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> StudentRead:
    try:
        return student_service.get_student_for_account(db, caller.account_id)
    except CampusRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get("/{student_id}", response_model=StudentRead, summary="Fetch a student")
def get_student(
    student_id: UUID,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> StudentRead:
    try:
        student = student_service.get_student(db, student_id)
    except CampusRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    _ensure_self_or_staff(caller, student, allow_faculty=True)
    return student


@router.patch("/{student_id}", response_model=StudentRead, summary="Update a student")
def update_student(
    student_id: UUID,
    payload: StudentUpdate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> StudentRead:
    try:
        student = student_service.get_student(db, student_id)
        _ensure_self_or_staff(caller, student, allow_faculty=False)
        changes = payload.model_dump(exclude_unset=True)
        if "address" in changes and payload.address is not None:
            changes["address"] = payload.address.model_dump()
        student = student_service.update_student(db, student_id, **changes)
        db.commit()
        db.refresh(student)
        return student
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.delete("/{student_id}", summary="Delete a student and their enrollments")
def delete_student(
    student_id: UUID,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> dict[str, int]:
    require_roles(caller, Role.ADMIN)
    try:
        summary = student_service.delete_student(db, student_id)
        db.commit()
        return summary
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get(
    "/{student_id}/enrollments",
    response_model=List[EnrollmentRead],
    summary="List a student's enrollments",
)
def list_student_enrollments(
    student_id: UUID,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> List[EnrollmentRead]:
    try:
        student = student_service.get_student(db, student_id)
    except CampusRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    _ensure_self_or_staff(caller, student, allow_faculty=True)
    enrollments = enrollment_service.list_enrollments(db, student_id=student.student_id)
    return [EnrollmentRead.model_validate(enrollment) for enrollment in enrollments]
