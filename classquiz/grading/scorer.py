# classquiz/grading/scorer.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from classquiz.grading.answers import MultipleChoice, NormalizedAnswer, SingleChoice
from classquiz.grading.questions import Question, QuestionType


class Verdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    # None for open and unknown questions, which are never auto-scored
    is_correct: bool | None
    points_earned: float
    points_possible: float
    objective: bool


def score(question: Question, answer: NormalizedAnswer) -> Verdict:
    """
    Compare one normalized answer against the question's answer key.

    Single choice needs the exact index, multiple choice the exact set
    of indices. There is no partial credit.
    """
    if question.type == QuestionType.SINGLE:
        is_correct = isinstance(answer, SingleChoice) and answer.index == question.correct
    elif question.type == QuestionType.MULTIPLE:
        is_correct = (
            isinstance(answer, MultipleChoice) and answer.indices == question.correct_set
        )
    elif question.type == QuestionType.OPEN:
        return Verdict(
            is_correct=None,
            points_earned=0,
            points_possible=question.points,
            objective=False,
        )
    else:
        return Verdict(is_correct=None, points_earned=0, points_possible=0, objective=False)

    return Verdict(
        is_correct=is_correct,
        points_earned=question.points if is_correct else 0,
        points_possible=question.points,
        objective=True,
    )
