# classquiz/api/v1/endpoints/submissions.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from classquiz import grading
from classquiz.db.session import get_db
from classquiz.grading.codec import load_manual_points
from classquiz.models.submission import Submission
from classquiz.schemas.submission import (
    ManualGradeUpdate,
    ManualOverridePublic,
    ManualPointsUpdate,
    ReviewUpdate,
    SubmissionSummary,
)
from classquiz.services import grading_service, submission_service

router = APIRouter(prefix="/submissions", tags=["submissions"])


def _get_or_404(db: Session, submission_id: int) -> Submission:
    sub = submission_service.get_submission(db, submission_id)
    if not sub:
        raise HTTPException(status_code=404, detail="Submission not found")
    return sub


def _override_public(sub: Submission) -> ManualOverridePublic:
    return ManualOverridePublic(
        submission_id=sub.id,
        status=sub.status,
        manual_points=load_manual_points(sub.manual_points),
        manual_grade=sub.manual_grade,
        teacher_comment=sub.teacher_comment,
        effective_grade=grading.effective_grade(sub.auto_grade, sub.manual_grade),
    )


@router.get("/", response_model=List[SubmissionSummary])
def list_submissions(
    db: Session = Depends(get_db),
    test_id: int | None = None,
    skip: int = 0,
    limit: int = 100,
):
    """
    Teacher dashboard, newest first. Submissions of deleted tests stay listed.
    """
    rows = submission_service.list_submissions_with_titles(
        db, test_id=test_id, skip=skip, limit=limit
    )
    return [
        SubmissionSummary(
            id=sub.id,
            test_id=sub.test_id,
            test_title=title,
            student_name=sub.student_name,
            student_class=sub.student_class,
            submitted_at=sub.submitted_at,
            auto_grade=sub.auto_grade,
            manual_grade=sub.manual_grade,
            effective_grade=grading.effective_grade(sub.auto_grade, sub.manual_grade),
            status=sub.status,
        )
        for sub, title in rows
    ]


@router.get("/{submission_id}", response_model=grading.SubmissionDetailView)
def get_submission_detail(submission_id: int, db: Session = Depends(get_db)):
    sub = _get_or_404(db, submission_id)
    return grading_service.get_detail(db, submission=sub)


@router.delete("/{submission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_submission(submission_id: int, db: Session = Depends(get_db)):
    sub = _get_or_404(db, submission_id)
    submission_service.delete_submission(db, db_obj=sub)
    return None


@router.post("/{submission_id}/points", response_model=ManualOverridePublic)
def update_manual_points(
    submission_id: int,
    body: ManualPointsUpdate,
    db: Session = Depends(get_db),
):
    """
    Teacher awards points for one question (usually an open one).
    The automatic grade is left as it is.
    """
    sub = _get_or_404(db, submission_id)
    try:
        sub = grading_service.award_manual_points(
            db, submission=sub, question_index=body.question_index, points=body.points
        )
    except grading.InvalidManualInput as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return _override_public(sub)


@router.post("/{submission_id}/review", response_model=ManualOverridePublic)
def save_review(
    submission_id: int,
    body: ReviewUpdate,
    db: Session = Depends(get_db),
):
    """
    Teacher sets the final grade and a comment; omitted fields keep their value.
    """
    sub = _get_or_404(db, submission_id)
    try:
        sub = grading_service.save_review(
            db,
            submission=sub,
            manual_grade=body.manual_grade,
            teacher_comment=body.teacher_comment,
        )
    except grading.InvalidManualInput as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return _override_public(sub)


# kept for clients that only send a grade
@router.post("/{submission_id}/manual-grade", response_model=ManualOverridePublic)
def save_manual_grade(
    submission_id: int,
    body: ManualGradeUpdate,
    db: Session = Depends(get_db),
):
    sub = _get_or_404(db, submission_id)
    try:
        sub = grading_service.save_review(db, submission=sub, manual_grade=body.manual_grade)
    except grading.InvalidManualInput as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return _override_public(sub)
