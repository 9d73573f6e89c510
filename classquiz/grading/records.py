# classquiz/grading/records.py
"""
Submission records: grading a fresh answer bag, building the teacher's
detail view, and merging manual review into a stored submission.

Every function here takes values and returns new values. Reading and
writing rows is left to ``classquiz.services``.
"""
from __future__ import annotations

import logging
import math
import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from classquiz.grading.aggregator import AutoScore, aggregate, effective_grade
from classquiz.grading.answers import (
    MultipleChoice,
    NormalizedAnswer,
    OpenText,
    RawAnswerBag,
    SingleChoice,
    normalize_answer,
)
from classquiz.grading.errors import InvalidManualInput, MissingTest, UnknownQuestionType
from classquiz.grading.questions import Question, QuestionType, Test, answer_key
from classquiz.grading.scales import DEFAULT_SCALE, GradeScale
from classquiz.grading.scorer import Verdict, score

logger = logging.getLogger(__name__)

DELETED_QUESTION_TEXT = "<deleted>"
DELETED_TEST_TITLE = "<deleted test>"

_ANSWER_KEY_RE = re.compile(r"^q(\d+)$")


class ReviewStatus(str, Enum):
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    REVIEWED = "reviewed"


class ManualOverride(BaseModel):
    model_config = ConfigDict(frozen=True)

    points: Dict[int, float] = {}
    grade: Optional[str] = None
    comment: Optional[str] = None

    @property
    def status(self) -> ReviewStatus:
        if self.grade is not None:
            return ReviewStatus.REVIEWED
        if self.points:
            return ReviewStatus.UNDER_REVIEW
        return ReviewStatus.SUBMITTED

    @property
    def points_total(self) -> float:
        return sum(self.points.values())


class SubmissionRecord(BaseModel):
    """A stored submission as the engine sees it."""

    id: Optional[int] = None
    test_id: Optional[int] = None
    student_name: str = ""
    student_class: str = ""
    raw_answers: RawAnswerBag = {}
    auto_score: AutoScore
    manual_override: ManualOverride = ManualOverride()
    created_at: Optional[datetime] = None


class Mistake(BaseModel):
    index: int
    question: str
    points: float
    student_answer: List[str]
    correct_answer: List[str]


class OpenAnswer(BaseModel):
    index: int
    question: str
    points: float
    answer: str


class GradeResult(BaseModel):
    auto_score: AutoScore
    verdicts: List[Verdict]
    mistakes: List[Mistake]
    open_answers: List[OpenAnswer]
    warnings: List[str] = []


class AnswerDetail(BaseModel):
    index: Optional[int]
    question: str
    type: QuestionType
    points: float
    options: List[str] = []
    correct_answer: int | List[int] | None = None
    student_answer: Any = None
    is_correct: Optional[bool] = None
    manual_points: Optional[float] = None
    image: Optional[str] = None


class SubmissionDetailView(BaseModel):
    id: Optional[int] = None
    test_id: Optional[int] = None
    test_title: str
    test_deleted: bool = False
    student_name: str
    student_class: str
    submitted_at: Optional[datetime] = None
    auto_score: AutoScore
    manual_grade: Optional[str] = None
    teacher_comment: Optional[str] = None
    effective_grade: Optional[str] = None
    status: ReviewStatus
    manual_points: Dict[int, float] = {}
    manual_points_total: float = 0
    answers: List[AnswerDetail]
    mistakes: List[Mistake] = []
    open_answers: List[OpenAnswer] = []


def _selected_text(question: Question, answer: NormalizedAnswer) -> List[str]:
    if isinstance(answer, SingleChoice):
        return [question.option_text(answer.index)]
    if isinstance(answer, MultipleChoice):
        return [question.option_text(i) for i in sorted(answer.indices)]
    return []


def _evaluate(
    test: Test, raw_answers: RawAnswerBag
) -> List[Tuple[Question, NormalizedAnswer, Verdict]]:
    if not isinstance(raw_answers, dict):
        logger.warning(f"Answer bag for test {test.id} is a {type(raw_answers).__name__}, ignoring it")
        raw_answers = {}

    rows = []
    for i, question in enumerate(test.questions):
        answer = normalize_answer(question, raw_answers, i)
        rows.append((question, answer, score(question, answer)))
    return rows


def _mistakes_and_open(
    rows: List[Tuple[Question, NormalizedAnswer, Verdict]],
) -> Tuple[List[Mistake], List[OpenAnswer]]:
    mistakes: List[Mistake] = []
    open_answers: List[OpenAnswer] = []
    for i, (question, answer, verdict) in enumerate(rows):
        if verdict.objective and not verdict.is_correct:
            mistakes.append(
                Mistake(
                    index=i,
                    question=question.text,
                    points=question.points,
                    student_answer=_selected_text(question, answer),
                    correct_answer=[question.option_text(c) for c in sorted(question.correct_set)],
                )
            )
        elif question.type == QuestionType.OPEN:
            open_answers.append(
                OpenAnswer(
                    index=i,
                    question=question.text,
                    points=question.points,
                    answer=answer.text if isinstance(answer, OpenText) else "",
                )
            )
    return mistakes, open_answers


def grade(
    test: Optional[Test], raw_answers: RawAnswerBag, scale: GradeScale = DEFAULT_SCALE
) -> GradeResult:
    """Grade one answer bag against a test's answer key."""
    if test is None:
        raise MissingTest("cannot grade without a test")

    rows = _evaluate(test, raw_answers)

    warnings = []
    for i, (question, _answer, _verdict) in enumerate(rows):
        if question.type == QuestionType.UNKNOWN:
            warning = str(UnknownQuestionType(i, question.type.value))
            logger.warning(f"Test {test.id}: {warning}")
            warnings.append(warning)

    auto_score = aggregate(((q, v) for q, _a, v in rows), scale)
    mistakes, open_answers = _mistakes_and_open(rows)

    logger.info(
        f"Graded test {test.id}: earned={auto_score.earned} total={auto_score.total} "
        f"percent={auto_score.percent} grade={auto_score.grade}"
    )

    return GradeResult(
        auto_score=auto_score,
        verdicts=[v for _q, _a, v in rows],
        mistakes=mistakes,
        open_answers=open_answers,
        warnings=warnings,
    )


def _deleted_test_answers(submission: SubmissionRecord) -> List[AnswerDetail]:
    def sort_key(item: Tuple[int, str]) -> Tuple[int, int, str]:
        position, key = item
        match = _ANSWER_KEY_RE.match(key)
        if match:
            return (0, int(match.group(1)), key)
        return (1, position, key)

    keys = sorted(enumerate(submission.raw_answers), key=sort_key)
    details = []
    for position, key in keys:
        match = _ANSWER_KEY_RE.match(key)
        # keys that are not q{i} have no question position
        index = int(match.group(1)) if match else None
        details.append(
            AnswerDetail(
                index=index,
                question=DELETED_QUESTION_TEXT,
                type=QuestionType.UNKNOWN,
                points=0,
                student_answer=submission.raw_answers[key],
                manual_points=submission.manual_override.points.get(index) if index is not None else None,
            )
        )
    return details


def build_detail(test: Optional[Test], submission: SubmissionRecord) -> SubmissionDetailView:
    """
    Teacher view of one submission.

    When the test is gone the questions are rebuilt from the stored answer
    keys alone, so the teacher still sees what the student sent.
    """
    override = submission.manual_override

    if test is None:
        answers = _deleted_test_answers(submission)
        mistakes: List[Mistake] = []
        open_answers: List[OpenAnswer] = []
        title = DELETED_TEST_TITLE
    else:
        rows = _evaluate(test, submission.raw_answers)
        answers = [
            AnswerDetail(
                index=i,
                question=question.text,
                type=question.type,
                points=question.points,
                options=question.options,
                correct_answer=question.correct,
                student_answer=submission.raw_answers.get(answer_key(i)),
                is_correct=verdict.is_correct,
                manual_points=override.points.get(i),
                image=question.image,
            )
            for i, (question, _answer, verdict) in enumerate(rows)
        ]
        mistakes, open_answers = _mistakes_and_open(rows)
        title = test.title

    return SubmissionDetailView(
        id=submission.id,
        test_id=submission.test_id,
        test_title=title,
        test_deleted=test is None,
        student_name=submission.student_name,
        student_class=submission.student_class,
        submitted_at=submission.created_at,
        auto_score=submission.auto_score,
        manual_grade=override.grade,
        teacher_comment=override.comment,
        effective_grade=effective_grade(submission.auto_score.grade, override.grade),
        status=override.status,
        manual_points=dict(override.points),
        manual_points_total=override.points_total,
        answers=answers,
        mistakes=mistakes,
        open_answers=open_answers,
    )


def apply_manual_points(
    submission: SubmissionRecord, question_index: int, points: Any
) -> ManualOverride:
    if isinstance(question_index, bool) or not isinstance(question_index, int) or question_index < 0:
        raise InvalidManualInput(f"invalid question index {question_index!r}")
    if isinstance(points, bool):
        raise InvalidManualInput(f"invalid points {points!r}")
    try:
        value = float(points)
    except (TypeError, ValueError):
        raise InvalidManualInput(f"invalid points {points!r}") from None
    if not math.isfinite(value) or value < 0:
        raise InvalidManualInput(f"points must be a non-negative number, got {points!r}")

    current = submission.manual_override
    updated = dict(current.points)
    updated[question_index] = value
    return current.model_copy(update={"points": updated})


def apply_manual_review(
    submission: SubmissionRecord,
    grade: Any,
    comment: Optional[str],
    scale: GradeScale = DEFAULT_SCALE,
) -> ManualOverride:
    """Set the final grade and comment; a ``None`` argument keeps the stored value."""
    current = submission.manual_override
    update: Dict[str, Any] = {}
    if grade is not None:
        update["grade"] = scale.validate(grade)
    if comment is not None:
        update["comment"] = comment
    return current.model_copy(update=update)
