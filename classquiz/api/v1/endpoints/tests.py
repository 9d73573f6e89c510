# classquiz/api/v1/endpoints/tests.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from classquiz.db.session import get_db
from classquiz.schemas.test import (
    QuestionForStudent,
    TestCreate,
    TestCreated,
    TestForStudent,
    TestPublic,
    TestSummary,
)
from classquiz.services import test_service

router = APIRouter(prefix="/tests", tags=["tests"])


@router.get("/", response_model=List[TestSummary])
def list_tests(
    db: Session = Depends(get_db),
    creator_id: int | None = None,
    skip: int = 0,
    limit: int = 100,
):
    """
    List tests, newest first, with their question count.
    """
    tests = test_service.list_tests(db, creator_id=creator_id, skip=skip, limit=limit)
    return [
        TestSummary(
            id=t.id,
            title=t.title,
            creator_id=t.creator_id,
            question_count=len(test_service.load_questions(t)),
            created_at=t.created_at,
        )
        for t in tests
    ]


@router.post("/", response_model=TestCreated, status_code=status.HTTP_201_CREATED)
def create_test(obj_in: TestCreate, db: Session = Depends(get_db)):
    t = test_service.create_test(db, obj_in=obj_in)
    return TestCreated(id=t.id)


@router.get("/{test_id}", response_model=TestPublic)
def get_test(test_id: int, db: Session = Depends(get_db)):
    """
    Teacher view including the answer key.
    """
    t = test_service.get_test(db, test_id)
    if not t:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Test not found")
    return TestPublic(
        id=t.id,
        title=t.title,
        creator_id=t.creator_id,
        questions=test_service.load_questions(t),
        created_at=t.created_at,
    )


@router.get("/{test_id}/take", response_model=TestForStudent)
def get_test_for_student(test_id: int, db: Session = Depends(get_db)):
    """
    Student view: same questions in the same order, answer key removed.
    """
    t = test_service.get_test(db, test_id)
    if not t:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Test not found")
    return TestForStudent(
        id=t.id,
        title=t.title,
        questions=[
            QuestionForStudent(
                text=q.text, type=q.type, options=q.options, points=q.points, image=q.image
            )
            for q in test_service.load_questions(t)
        ],
    )


@router.delete("/{test_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_test(test_id: int, db: Session = Depends(get_db)):
    t = test_service.get_test(db, test_id)
    if not t:
        raise HTTPException(status_code=404, detail="Test not found")

    test_service.delete_test(db, db_obj=t)
    return None
