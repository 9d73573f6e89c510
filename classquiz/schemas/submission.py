# classquiz/schemas/submission.py
import re
from datetime import datetime
from typing import Any, Dict, List

from pydantic import AliasChoices, BaseModel, Field, model_validator

from classquiz.grading.aggregator import AutoScore
from classquiz.grading.records import Mistake, OpenAnswer, ReviewStatus

_ANSWER_KEY_RE = re.compile(r"^q\d+$")


class GradeRequest(BaseModel):
    student_name: str = Field(default="", validation_alias=AliasChoices("student_name", "studentName"))
    student_class: str = Field(default="", validation_alias=AliasChoices("student_class", "studentClass"))
    answers: Dict[str, Any] = {}

    @model_validator(mode="before")
    @classmethod
    def _collect_flat_answers(cls, data: Any) -> Any:
        # older form posts send q0, q1, ... next to the student fields
        if isinstance(data, dict) and "answers" not in data:
            answers = {k: v for k, v in data.items() if _ANSWER_KEY_RE.match(str(k))}
            rest = {k: v for k, v in data.items() if k not in answers}
            return {**rest, "answers": answers}
        return data


class GradeResponse(BaseModel):
    submission_id: int
    auto_score: AutoScore
    mistakes: List[Mistake]
    open_answers: List[OpenAnswer]
    warnings: List[str] = []


class SubmissionSummary(BaseModel):
    """Dashboard row; test_title is None once the test is deleted."""

    id: int
    test_id: int | None = None
    test_title: str | None = None
    student_name: str
    student_class: str
    submitted_at: datetime | None = None
    auto_grade: str
    manual_grade: str | None = None
    effective_grade: str
    status: ReviewStatus


class ManualPointsUpdate(BaseModel):
    question_index: int = Field(ge=0)
    points: float = Field(ge=0)


class ReviewUpdate(BaseModel):
    manual_grade: str | float | None = None
    teacher_comment: str | None = None


class ManualGradeUpdate(BaseModel):
    manual_grade: str | float


class ManualOverridePublic(BaseModel):
    submission_id: int
    status: ReviewStatus
    manual_points: Dict[int, float]
    manual_grade: str | None = None
    teacher_comment: str | None = None
    effective_grade: str
