# classquiz/services/grading_service.py
from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

from sqlalchemy.orm import Session

from classquiz import grading
from classquiz.core.config import settings
from classquiz.models.submission import Submission
from classquiz.schemas.submission import GradeRequest
from classquiz.services import submission_service, test_service

logger = logging.getLogger(__name__)


def current_scale() -> grading.GradeScale:
    return grading.get_grade_scale(settings.GRADE_SCALE)


def _scale_for(submission: Submission) -> grading.GradeScale:
    """A submission is reviewed on the scale it was graded with."""
    try:
        return grading.get_grade_scale(submission.grade_scale)
    except ValueError:
        logger.warning(
            f"Submission {submission.id} has unknown grade scale {submission.grade_scale!r}, "
            f"using {settings.GRADE_SCALE}"
        )
        return current_scale()


def grade_and_store(
    db: Session,
    *,
    test_id: int,
    request: GradeRequest,
    scale: Optional[grading.GradeScale] = None,
) -> Tuple[Submission, grading.GradeResult]:
    """
    Student submits answers:
      - grade them against the stored test
      - store the submission with its automatic score

    Raises grading.MissingTest when the test does not exist.
    """
    test = test_service.to_engine_test(test_service.get_test(db, test_id))
    if test is None:
        raise grading.MissingTest(f"test {test_id} not found")

    result = grading.grade(test, request.answers, scale or current_scale())

    submission = submission_service.create_submission(
        db,
        test_id=test_id,
        student_name=request.student_name,
        student_class=request.student_class,
        raw_answers=request.answers,
        auto_score=result.auto_score,
    )
    logger.info(
        f"Stored submission {submission.id} for test {test_id} "
        f"({request.student_name!r}): grade={result.auto_score.grade}"
    )
    return submission, result


def get_detail(db: Session, *, submission: Submission) -> grading.SubmissionDetailView:
    db_test = test_service.get_test(db, submission.test_id) if submission.test_id else None
    if db_test is None:
        logger.info(f"Submission {submission.id}: test {submission.test_id} is gone, showing raw answers")
    return grading.build_detail(
        test_service.to_engine_test(db_test),
        submission_service.to_record(submission),
    )


def award_manual_points(
    db: Session,
    *,
    submission: Submission,
    question_index: int,
    points: Any,
) -> Submission:
    override = grading.apply_manual_points(
        submission_service.to_record(submission), question_index, points
    )
    return submission_service.save_manual_override(db, db_obj=submission, override=override)


def save_review(
    db: Session,
    *,
    submission: Submission,
    manual_grade: Any = None,
    teacher_comment: Optional[str] = None,
) -> Submission:
    override = grading.apply_manual_review(
        submission_service.to_record(submission),
        manual_grade,
        teacher_comment,
        _scale_for(submission),
    )
    return submission_service.save_manual_override(db, db_obj=submission, override=override)
