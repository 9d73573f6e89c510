# classquiz/api/v1/endpoints/grading.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from classquiz.db.session import get_db
from classquiz.grading import MissingTest
from classquiz.schemas.submission import GradeRequest, GradeResponse
from classquiz.services import grading_service

router = APIRouter(tags=["grading"])


@router.post("/grade/{test_id}", response_model=GradeResponse, status_code=status.HTTP_201_CREATED)
def grade_test(
    test_id: int,
    request: GradeRequest,
    db: Session = Depends(get_db),
):
    """
    Student submits answers; objective questions are graded immediately
    and open questions are left for the teacher.
    """
    try:
        submission, result = grading_service.grade_and_store(
            db, test_id=test_id, request=request
        )
    except MissingTest:
        raise HTTPException(status_code=404, detail="Test not found")

    return GradeResponse(
        submission_id=submission.id,
        auto_score=result.auto_score,
        mistakes=result.mistakes,
        open_answers=result.open_answers,
        warnings=result.warnings,
    )
