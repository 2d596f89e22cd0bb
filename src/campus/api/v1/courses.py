"""Course catalogue and course enrollment endpoints."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.errors import CampusRuleViolation
from ...models import Department
from ...schemas import CourseRead, CourseUpdate, EnrollmentRead
from ...services import course_service, enrollment_service
from ...services.access import Caller, Role, require_instructor
from .deps import get_caller, require_roles

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=List[CourseRead], summary="List courses")
def list_courses(
    *,
    faculty_id: Optional[UUID] = Query(None),
    department: Optional[Department] = Query(None),
    semester: Optional[int] = Query(None, ge=1, le=8),
    is_active: Optional[bool] = Query(None),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> List[CourseRead]:
    courses = course_service.list_courses(
        db,
        faculty_id=faculty_id,
        department=department,
        semester=semester,
        is_active=is_active,
        limit=limit,
        offset=offset,
    )
    return list(courses)


@router.get("/{course_id}", response_model=CourseRead, summary="Fetch a course")
def get_course(course_id: UUID, db: Session = Depends(get_db)) -> CourseRead:
    try:
        return course_service.get_course(db, course_id)
    except CampusRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.patch("/{course_id}", response_model=CourseRead, summary="Update a course")
def update_course(
    course_id: UUID,
    payload: CourseUpdate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> CourseRead:
    try:
        course = course_service.update_course(
            db, course_id, caller=caller, **payload.model_dump(exclude_unset=True)
        )
        db.commit()
        db.refresh(course)
        return course
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.delete("/{course_id}", summary="Delete a course and its enrollments")
def delete_course(
    course_id: UUID,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> dict[str, int]:
    try:
        summary = course_service.delete_course(db, course_id, caller=caller)
        db.commit()
        return summary
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.post(
    "/{course_id}/enrollments",
    response_model=EnrollmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll the calling student",
    responses={
        404: {"description": "Course or student profile not found"},
        409: {"description": "Already enrolled or course full"},
    },
)
def enroll(
    course_id: UUID,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> EnrollmentRead:
    require_roles(caller, Role.STUDENT)
    try:
        enrollment = enrollment_service.enroll_account(db, caller=caller, course_id=course_id)
        db.commit()
        db.refresh(enrollment)
        return EnrollmentRead.model_validate(enrollment)
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get(
    "/{course_id}/enrollments",
    response_model=List[EnrollmentRead],
    summary="List enrollments of a course",
)
def list_course_enrollments(
    course_id: UUID,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> List[EnrollmentRead]:
    try:
        course = course_service.get_course(db, course_id)
        require_instructor(db, caller, course, "view enrollments", allow_admin=True)
    except CampusRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    enrollments = enrollment_service.list_enrollments(db, course_id=course.course_id)
    return [EnrollmentRead.model_validate(enrollment) for enrollment in enrollments]
