# classquiz/schemas/test.py
from datetime import datetime
from typing import List

from pydantic import BaseModel, field_validator

from classquiz.grading import Question, QuestionType


class TestCreate(BaseModel):
    title: str
    creator_id: int | None = None
    questions: List[Question] = []

    @field_validator("questions")
    @classmethod
    def _known_types_only(cls, questions: List[Question]) -> List[Question]:
        for i, q in enumerate(questions):
            if q.type == QuestionType.UNKNOWN:
                raise ValueError(f"question {i}: type must be single, multiple or open")
        return questions


class TestPublic(BaseModel):
    """Teacher view, answer key included."""

    id: int
    title: str
    creator_id: int | None = None
    questions: List[Question]
    created_at: datetime | None = None


class TestSummary(BaseModel):
    id: int
    title: str
    creator_id: int | None = None
    question_count: int
    created_at: datetime | None = None


class QuestionForStudent(BaseModel):
    text: str
    type: QuestionType
    options: List[str] = []
    points: float
    image: str | None = None


class TestForStudent(BaseModel):
    """What a student sees while taking the test: no answer key."""

    id: int
    title: str
    questions: List[QuestionForStudent]


class TestCreated(BaseModel):
    id: int
