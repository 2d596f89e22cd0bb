"""Enrollment lifecycle, attendance and grading endpoints."""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...core.config import get_settings
from ...core.database import get_db
from ...core.errors import CampusRuleViolation
from ...schemas import (
    AssignmentCreate,
    AssignmentGrade,
    AssignmentRead,
    AssignmentSubmit,
    AttendanceCreate,
    AttendanceRead,
    EnrollmentGradeUpdate,
    EnrollmentRead,
    EnrollmentStatusUpdate,
    ExamCreate,
    ExamRead,
    ExamScore,
)
from ...services import enrollment_service, grading_service
from ...services.access import Caller
from .deps import get_caller

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.get("/{enrollment_id}", response_model=EnrollmentRead, summary="Fetch an enrollment")
def get_enrollment(
    enrollment_id: UUID,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> EnrollmentRead:
    try:
        enrollment = enrollment_service.get_enrollment_for(db, caller=caller, enrollment_id=enrollment_id)
    except CampusRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return EnrollmentRead.model_validate(enrollment)


@router.delete("/{enrollment_id}", summary="Delete an enrollment and free its seat")
def delete_enrollment(
    enrollment_id: UUID,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> dict[str, int]:
    try:
        summary = enrollment_service.delete_enrollment(db, enrollment_id=enrollment_id, caller=caller)
        db.commit()
        return summary
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.patch("/{enrollment_id}/status", response_model=EnrollmentRead, summary="Change enrollment status")
def update_status(
    enrollment_id: UUID,
    payload: EnrollmentStatusUpdate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> EnrollmentRead:
    try:
        enrollment = enrollment_service.update_enrollment_status(
            db, enrollment_id=enrollment_id, caller=caller, status=payload.status
        )
        db.commit()
        db.refresh(enrollment)
        return EnrollmentRead.model_validate(enrollment)
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.patch("/{enrollment_id}/grade", response_model=EnrollmentRead, summary="Post a letter grade")
def assign_grade(
    enrollment_id: UUID,
    payload: EnrollmentGradeUpdate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> EnrollmentRead:
    try:
        enrollment = enrollment_service.assign_grade(
            db, enrollment_id=enrollment_id, caller=caller, grade=payload.grade
        )
        db.commit()
        db.refresh(enrollment)
        return EnrollmentRead.model_validate(enrollment)
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.post(
    "/{enrollment_id}/attendance",
    response_model=List[AttendanceRead],
    summary="Record attendance for a date",
)
def record_attendance(
    enrollment_id: UUID,
    payload: AttendanceCreate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> List[AttendanceRead]:
    """Upsert one attendance mark; a second mark for the same date replaces the first."""

    try:
        records = enrollment_service.record_attendance(
            db,
            enrollment_id=enrollment_id,
            caller=caller,
            date=payload.date,
            status=payload.status,
            notes=payload.notes,
        )
        db.commit()
        return [AttendanceRead.model_validate(record) for record in records]
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.post(
    "/{enrollment_id}/assignments",
    response_model=AssignmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add an assignment",
)
def add_assignment(
    enrollment_id: UUID,
    payload: AssignmentCreate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> AssignmentRead:
    try:
        assignment = grading_service.add_assignment(
            db, enrollment_id=enrollment_id, caller=caller, **payload.model_dump()
        )
        db.commit()
        db.refresh(assignment)
        return assignment
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.put(
    "/{enrollment_id}/assignments/{assignment_id}",
    response_model=AssignmentRead,
    summary="Submit an assignment",
)
def submit_assignment(
    enrollment_id: UUID,
    assignment_id: int,
    payload: AssignmentSubmit,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> AssignmentRead:
    file_url = None
    if payload.filename:
        file_url = f"{get_settings().assignment_upload_prefix}/{payload.filename}"
    try:
        assignment = grading_service.submit_assignment(
            db,
            enrollment_id=enrollment_id,
            assignment_id=assignment_id,
            caller=caller,
            file_url=file_url,
        )
        db.commit()
        db.refresh(assignment)
        return assignment
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.put(
    "/{enrollment_id}/assignments/{assignment_id}/grade",
    response_model=AssignmentRead,
    summary="Grade an assignment",
)
def grade_assignment(
    enrollment_id: UUID,
    assignment_id: int,
    payload: AssignmentGrade,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> AssignmentRead:
    try:
        assignment = grading_service.grade_assignment(
            db,
            enrollment_id=enrollment_id,
            assignment_id=assignment_id,
            caller=caller,
            score=payload.score,
            feedback=payload.feedback,
        )
        db.commit()
        db.refresh(assignment)
        return assignment
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.post(
    "/{enrollment_id}/exams",
    response_model=ExamRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add an exam",
)
def add_exam(
    enrollment_id: UUID,
    payload: ExamCreate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> ExamRead:
    try:
        exam = grading_service.add_exam(db, enrollment_id=enrollment_id, caller=caller, **payload.model_dump())
        db.commit()
        db.refresh(exam)
        return exam
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.put("/{enrollment_id}/exams/{exam_id}/score", response_model=ExamRead, summary="Score an exam")
def score_exam(
    enrollment_id: UUID,
    exam_id: int,
    payload: ExamScore,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> ExamRead:
    try:
        exam = grading_service.score_exam(
            db,
            enrollment_id=enrollment_id,
            exam_id=exam_id,
            caller=caller,
            score=payload.score,
            notes=payload.notes,
        )
        db.commit()
        db.refresh(exam)
        return exam
    except CampusRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
