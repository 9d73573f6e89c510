# classquiz/grading/aggregator.py
from __future__ import annotations

from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from classquiz.grading.questions import Question
from classquiz.grading.scales import GradeScale, round_percent
from classquiz.grading.scorer import Verdict


class AutoScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    earned: float
    total: float
    percent: int
    grade: str
    scale: str


def aggregate(pairs: Iterable[Tuple[Question, Verdict]], scale: GradeScale) -> AutoScore:
    """
    Sum objective questions only; open questions wait for a teacher and
    stay out of both the earned points and the denominator.
    """
    earned = 0.0
    total = 0.0
    for _question, verdict in pairs:
        if not verdict.objective:
            continue
        earned += verdict.points_earned
        total += verdict.points_possible

    ratio = earned / total if total > 0 else 0.0
    percent = round_percent(ratio) if total > 0 else 0

    return AutoScore(
        earned=earned,
        total=total,
        percent=percent,
        grade=scale.grade(ratio),
        scale=scale.name,
    )


def effective_grade(auto_grade: Optional[str], manual_grade: Optional[str]) -> Optional[str]:
    return manual_grade if manual_grade is not None else auto_grade
