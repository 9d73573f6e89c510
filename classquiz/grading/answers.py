# classquiz/grading/answers.py
"""
Answer normalizer.

Students submit a bag of ``q{i}`` entries whose values may be missing, a
scalar, or a list, depending on the form control that produced them. This
module turns one entry into a ``NormalizedAnswer`` so the scorer only ever
sees one shape per question type.

Policy for malformed values: anything that cannot be read as an answer for
the question's type degrades to ``NoAnswer``. Nothing is raised to the caller.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, FrozenSet, Literal, Union

from pydantic import BaseModel, ConfigDict

from classquiz.grading.errors import MalformedAnswerInput
from classquiz.grading.questions import Question, QuestionType, answer_key

logger = logging.getLogger(__name__)

RawAnswerBag = Dict[str, Any]


class NoAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["none"] = "none"


class SingleChoice(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["single"] = "single"
    index: int


class MultipleChoice(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["multiple"] = "multiple"
    indices: FrozenSet[int]


class OpenText(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["open"] = "open"
    text: str


NormalizedAnswer = Union[NoAnswer, SingleChoice, MultipleChoice, OpenText]


def coerce_index(value: Any) -> int:
    """Read one option index out of a form value; raises MalformedAnswerInput."""
    if isinstance(value, bool) or value is None:
        raise MalformedAnswerInput(f"not an option index: {value!r}")
    if isinstance(value, int):
        index = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise MalformedAnswerInput(f"not an option index: {value!r}")
        index = int(value)
    elif isinstance(value, str):
        try:
            index = int(value.strip())
        except ValueError:
            raise MalformedAnswerInput(f"not an option index: {value!r}") from None
    else:
        raise MalformedAnswerInput(f"not an option index: {value!r}")

    if index < 0:
        raise MalformedAnswerInput(f"negative option index: {index}")
    return index


def _normalize_single(value: Any) -> NormalizedAnswer:
    if isinstance(value, (list, tuple)):
        # a radio group posted as an array: only an unambiguous one-element list counts
        if len(value) != 1:
            raise MalformedAnswerInput(f"expected one choice, got {len(value)}")
        value = value[0]
    return SingleChoice(index=coerce_index(value))


def _normalize_multiple(value: Any) -> NormalizedAnswer:
    values = value if isinstance(value, (list, tuple, set)) else [value]
    indices = set()
    for item in values:
        try:
            indices.add(coerce_index(item))
        except MalformedAnswerInput:
            continue
    if not indices:
        return NoAnswer()
    return MultipleChoice(indices=frozenset(indices))


def _normalize_open(value: Any) -> NormalizedAnswer:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return OpenText(text="")
    return OpenText(text=str(value))


def normalize_answer(question: Question, raw: RawAnswerBag, index: int) -> NormalizedAnswer:
    key = answer_key(index)
    if key not in raw or raw[key] is None:
        return NoAnswer()

    value = raw[key]
    try:
        if question.type == QuestionType.SINGLE:
            return _normalize_single(value)
        if question.type == QuestionType.MULTIPLE:
            return _normalize_multiple(value)
        if question.type == QuestionType.OPEN:
            return _normalize_open(value)
    except MalformedAnswerInput as e:
        logger.debug(f"Answer {key} treated as unanswered: {e}")
        return NoAnswer()

    return NoAnswer()
