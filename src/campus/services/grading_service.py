"""Grade and attendance calculations plus the grade-affecting mutations.

``calculate_final_grade`` works on raw point totals (90/80/70/60 thresholds);
``current_grade_percentage`` normalises by the maximum score of every scored
item and is the figure shown to students while a course is running.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from fractions import Fraction
from itertools import chain
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from ..core.errors import NotFound, ValidationFailed
from ..models import (
    Assignment,
    AssignmentStatus,
    AttendanceStatus,
    Enrollment,
    Exam,
    LetterGrade,
)
from ..utils.datetime import as_naive_utc
from .access import Caller, require_instructor, require_own_student
from .record_store import RecordStore

logger = logging.getLogger(__name__)

ATTENDED_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.LATE)

GRADE_THRESHOLDS = (
    (90, LetterGrade.A),
    (80, LetterGrade.B),
    (70, LetterGrade.C),
    (60, LetterGrade.D),
)


def _round_half_up(value: Fraction) -> int:
    return math.floor(value + Fraction(1, 2))


def total_score(enrollment) -> float:
    """Sum of every assignment and exam score; unscored items count as zero."""

    return sum(item.score or 0 for item in chain(enrollment.assignments or [], enrollment.exams or []))


def calculate_final_grade(enrollment) -> LetterGrade:
    score = total_score(enrollment)
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return LetterGrade.F


def attendance_percentage(enrollment) -> int:
    """Share of sessions attended (present or late), 0..100."""

    records = enrollment.attendance or []
    if not records:
        return 0
    attended = sum(1 for record in records if record.status in ATTENDED_STATUSES)
    return _round_half_up(Fraction(attended * 100, len(records)))


def current_grade_percentage(enrollment) -> int:
    scored = 0
    possible = 0
    for item in chain(enrollment.assignments or [], enrollment.exams or []):
        if item.score is not None and item.max_score:
            scored += Fraction(item.score)
            possible += Fraction(item.max_score)
    if possible <= 0:
        return 0
    return _round_half_up(scored * 100 / possible)


def refresh_final_grade(enrollment: Enrollment) -> LetterGrade:
    """Recompute and store ``final_grade`` after a grade-affecting change."""

    enrollment.final_grade = calculate_final_grade(enrollment)
    return enrollment.final_grade


def _check_score(score, max_score) -> float:
    if score is None:
        raise ValidationFailed("score is required")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise ValidationFailed("score must be a number")
    if score < 0:
        raise ValidationFailed("score cannot be negative")
    if max_score is not None and score > max_score:
        raise ValidationFailed(f"score cannot be more than {max_score:g}")
    return score


def _check_max_score(max_score) -> Optional[float]:
    if max_score is not None and max_score <= 0:
        raise ValidationFailed("max_score must be positive")
    return max_score


def _find_assignment(session: Session, enrollment: Enrollment, assignment_id: int) -> Assignment:
    assignment = session.get(Assignment, assignment_id)
    if assignment is None or assignment.enrollment_id != enrollment.enrollment_id:
        raise NotFound(f"Assignment not found with id of {assignment_id}")
    return assignment


def _find_exam(session: Session, enrollment: Enrollment, exam_id: int) -> Exam:
    exam = session.get(Exam, exam_id)
    if exam is None or exam.enrollment_id != enrollment.enrollment_id:
        raise NotFound(f"Exam not found with id of {exam_id}")
    return exam


def add_assignment(
    session: Session,
    *,
    enrollment_id: UUID,
    caller: Caller,
    title: str,
    description: Optional[str] = None,
    due_date: Optional[datetime] = None,
    max_score: Optional[float] = None,
) -> Assignment:
    """Attach a new, not yet submitted assignment to an enrollment."""

    enrollment = RecordStore(session).require(Enrollment, enrollment_id)
    require_instructor(session, caller, enrollment.course, "add assignments", allow_admin=True)

    assignment = Assignment(
        title=title,
        description=description,
        due_date=as_naive_utc(due_date) if due_date else None,
        max_score=_check_max_score(max_score),
        status=AssignmentStatus.NOT_SUBMITTED,
    )
    enrollment.assignments.append(assignment)
    session.flush()
    return assignment


def add_exam(
    session: Session,
    *,
    enrollment_id: UUID,
    caller: Caller,
    title: str,
    exam_type,
    date: Optional[datetime] = None,
    max_score: Optional[float] = None,
    weightage: Optional[float] = None,
    score: Optional[float] = None,
    notes: Optional[str] = None,
) -> Exam:
    """Attach an exam; when it arrives already scored the final grade is refreshed."""

    enrollment = RecordStore(session).require(Enrollment, enrollment_id)
    require_instructor(session, caller, enrollment.course, "add exams", allow_admin=True)

    max_score = _check_max_score(max_score)
    exam = Exam(
        title=title,
        exam_type=exam_type,
        date=as_naive_utc(date) if date else None,
        max_score=max_score,
        weightage=weightage,
        score=_check_score(score, max_score) if score is not None else None,
        notes=notes,
    )
    enrollment.exams.append(exam)
    if exam.score is not None:
        refresh_final_grade(enrollment)
    session.flush()
    return exam


def submit_assignment(
    session: Session,
    *,
    enrollment_id: UUID,
    assignment_id: int,
    caller: Caller,
    file_url: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Assignment:
    """Mark an assignment as submitted by the enrolled student."""

    enrollment = RecordStore(session).require(Enrollment, enrollment_id)
    require_own_student(session, caller, enrollment.student_id, "submit this assignment")
    assignment = _find_assignment(session, enrollment, assignment_id)

    assignment.status = AssignmentStatus.SUBMITTED
    assignment.submitted_date = as_naive_utc(now)
    if file_url:
        assignment.file_url = file_url
    session.flush()
    logger.info("assignment %s submitted on enrollment %s", assignment.assignment_id, enrollment.enrollment_id)
    return assignment


def grade_assignment(
    session: Session,
    *,
    enrollment_id: UUID,
    assignment_id: int,
    caller: Caller,
    score: float,
    feedback: Optional[str] = None,
) -> Assignment:
    """Record the instructor's score and feedback, then refresh the final grade."""

    enrollment = RecordStore(session).require(Enrollment, enrollment_id)
    require_instructor(session, caller, enrollment.course, "grade this assignment", allow_admin=False)
    assignment = _find_assignment(session, enrollment, assignment_id)

    assignment.score = _check_score(score, assignment.max_score)
    assignment.feedback = feedback
    assignment.status = AssignmentStatus.GRADED
    final_grade = refresh_final_grade(enrollment)
    session.flush()
    logger.info(
        "assignment %s graded %s on enrollment %s; final grade %s",
        assignment.assignment_id,
        score,
        enrollment.enrollment_id,
        final_grade.value,
    )
    return assignment


def score_exam(
    session: Session,
    *,
    enrollment_id: UUID,
    exam_id: int,
    caller: Caller,
    score: float,
    notes: Optional[str] = None,
) -> Exam:
    """Record an exam score and refresh the final grade."""

    enrollment = RecordStore(session).require(Enrollment, enrollment_id)
    require_instructor(session, caller, enrollment.course, "score this exam", allow_admin=False)
    exam = _find_exam(session, enrollment, exam_id)

    exam.score = _check_score(score, exam.max_score)
    if notes is not None:
        exam.notes = notes
    final_grade = refresh_final_grade(enrollment)
    session.flush()
    logger.info("exam %s scored %s on enrollment %s; final grade %s", exam.exam_id, score, enrollment.enrollment_id, final_grade.value)
    return exam
