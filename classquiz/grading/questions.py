# classquiz/grading/questions.py
from __future__ import annotations

import logging
import math
from datetime import datetime
from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

logger = logging.getLogger(__name__)


class QuestionType(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"
    OPEN = "open"
    # types written by older clients, and rows synthesized for deleted tests
    UNKNOWN = "unknown"

    @property
    def is_objective(self) -> bool:
        return self in (QuestionType.SINGLE, QuestionType.MULTIPLE)


def answer_key(index: int) -> str:
    """Positional key used by the answer bag: question 0 is ``q0``."""
    return f"q{index}"


def parse_points(value: Any) -> float:
    """
    Points as stored by the authoring UI (number or numeric string).

    Anything missing, unparsable, non-finite or not positive becomes 1.
    """
    if isinstance(value, bool) or value is None:
        return 1.0
    try:
        points = float(value)
    except (TypeError, ValueError):
        return 1.0
    if not math.isfinite(points) or points <= 0:
        return 1.0
    return points


def _parse_index(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"invalid option index {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str):
        value = int(value.strip())
    if not isinstance(value, int):
        raise ValueError(f"invalid option index {value!r}")
    return value


def _require_in_range(indices: List[int], options: List[str]) -> None:
    for index in indices:
        if index < 0 or index >= len(options):
            raise ValueError(f"correct index {index} is outside the {len(options)} options")


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = ""
    type: QuestionType
    options: List[str] = []
    correct: int | List[int] | None = Field(default=None, validate_default=True)
    points: float = Field(default=1.0, validate_default=True)
    image: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, value: Any) -> Any:
        try:
            return QuestionType(value)
        except ValueError:
            logger.warning(f"Unrecognized question type {value!r}, treating as unknown")
            return QuestionType.UNKNOWN

    @field_validator("options", mode="before")
    @classmethod
    def _options_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("correct", mode="before")
    @classmethod
    def _normalize_correct(cls, value: Any, info: ValidationInfo) -> Any:
        question_type = info.data.get("type")
        options = info.data.get("options", [])

        if question_type == QuestionType.SINGLE:
            if isinstance(value, (list, tuple, set)):
                raise ValueError("single-choice question takes exactly one correct index")
            if value is None:
                raise ValueError("single-choice question needs a correct index")
            index = _parse_index(value)
            _require_in_range([index], options)
            return index

        if question_type == QuestionType.MULTIPLE:
            raw = value if isinstance(value, (list, tuple, set)) else [value]
            indices = sorted({_parse_index(v) for v in raw if v is not None})
            if not indices:
                raise ValueError("multiple-choice question needs at least one correct index")
            _require_in_range(indices, options)
            return indices

        return None

    @field_validator("points", mode="before")
    @classmethod
    def _default_points(cls, value: Any) -> float:
        return parse_points(value)

    @property
    def correct_set(self) -> frozenset[int]:
        if self.type == QuestionType.SINGLE:
            return frozenset([self.correct])
        if self.type == QuestionType.MULTIPLE:
            return frozenset(self.correct)
        return frozenset()

    def option_text(self, index: int) -> str:
        if 0 <= index < len(self.options):
            return self.options[index]
        return f"#{index}"


class Test(BaseModel):
    """A test definition; ``questions`` keeps its authored order."""

    model_config = ConfigDict(frozen=True)
    # not a pytest test class
    __test__ = False

    id: int | None = None
    title: str = ""
    creator_id: int | None = None
    questions: List[Question] = []
    created_at: datetime | None = None
