# classquiz/services/submission_service.py
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from classquiz import grading
from classquiz.grading import codec
from classquiz.models.submission import Submission
from classquiz.models.test import Test


def create_submission(
    db: Session,
    *,
    test_id: int,
    student_name: str,
    student_class: str,
    raw_answers: dict,
    auto_score: grading.AutoScore,
) -> Submission:
    """
    store a graded submission; manual review starts empty
    """
    submission = Submission(
        test_id=test_id,
        student_name=student_name,
        student_class=student_class,
        answers=codec.dump_answers(raw_answers),
        auto_earned=auto_score.earned,
        auto_total=auto_score.total,
        auto_percent=auto_score.percent,
        auto_grade=auto_score.grade,
        grade_scale=auto_score.scale,
        status=grading.ReviewStatus.SUBMITTED.value,
        manual_points=codec.dump_manual_points({}),
    )

    db.add(submission)
    db.commit()
    db.refresh(submission)
    return submission


def get_submission(db: Session, submission_id: int) -> Optional[Submission]:
    return db.get(Submission, submission_id)


def list_submissions_with_titles(
    db: Session,
    *,
    test_id: int | None = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Tuple[Submission, Optional[str]]]:
    """
    dashboard: newest first, including submissions whose test was deleted
    """
    query = db.query(Submission, Test.title).outerjoin(Test, Submission.test_id == Test.id)
    if test_id is not None:
        query = query.filter(Submission.test_id == test_id)
    return (
        query.order_by(Submission.submitted_at.desc(), Submission.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def delete_submission(db: Session, *, db_obj: Submission) -> None:
    db.delete(db_obj)
    db.commit()


def save_manual_override(
    db: Session,
    *,
    db_obj: Submission,
    override: grading.ManualOverride,
) -> Submission:
    # last write wins when two teachers review the same submission
    db_obj.manual_points = codec.dump_manual_points(override.points)
    db_obj.manual_grade = override.grade
    db_obj.teacher_comment = override.comment
    db_obj.status = override.status.value

    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def to_record(db_obj: Submission) -> grading.SubmissionRecord:
    return grading.SubmissionRecord(
        id=db_obj.id,
        test_id=db_obj.test_id,
        student_name=db_obj.student_name or "",
        student_class=db_obj.student_class or "",
        raw_answers=codec.load_answers(db_obj.answers),
        auto_score=grading.AutoScore(
            earned=float(db_obj.auto_earned or 0),
            total=float(db_obj.auto_total or 0),
            percent=db_obj.auto_percent or 0,
            grade=db_obj.auto_grade,
            scale=db_obj.grade_scale,
        ),
        manual_override=grading.ManualOverride(
            points=codec.load_manual_points(db_obj.manual_points),
            grade=db_obj.manual_grade,
            comment=db_obj.teacher_comment,
        ),
        created_at=db_obj.submitted_at,
    )
