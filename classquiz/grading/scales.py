# classquiz/grading/scales.py
"""
Grade-scale policies.

A scale turns the earned/total ratio of a submission into the label shown to
students and teachers, and decides which manual grades a teacher may enter.
Deployments pick one by name (``GRADE_SCALE`` in the settings).
"""
from __future__ import annotations

import math
from typing import Dict, List, Tuple

from classquiz.grading.errors import InvalidManualInput


def round_percent(ratio: float) -> int:
    """Half-up rounding of ``ratio * 100``."""
    return int(math.floor(ratio * 100 + 0.5))


class GradeScale:
    name: str = ""

    def grade(self, ratio: float) -> str:
        raise NotImplementedError

    def validate(self, label: object) -> str:
        """Return the canonical label for a manual grade, or raise InvalidManualInput."""
        raise NotImplementedError

    @property
    def minimum(self) -> str:
        return self.grade(0.0)

    @property
    def maximum(self) -> str:
        return self.grade(1.0)


class SixPointScale(GradeScale):
    """Continuous 2..6 scale: ``2 + 4 * ratio`` with two decimals."""

    name = "six_point"
    low = 2.0
    high = 6.0

    def _clamp(self, value: float) -> float:
        if math.isnan(value):
            return self.low
        return min(self.high, max(self.low, value))

    def grade(self, ratio: float) -> str:
        value = self._clamp(self.low + (self.high - self.low) * ratio)
        return f"{value:.2f}"

    def validate(self, label: object) -> str:
        if isinstance(label, bool):
            raise InvalidManualInput(f"invalid grade {label!r}")
        try:
            value = float(label)
        except (TypeError, ValueError):
            raise InvalidManualInput(f"invalid grade {label!r}") from None
        if not math.isfinite(value) or value < self.low or value > self.high:
            raise InvalidManualInput(
                f"grade {label!r} is outside {self.low:.0f}..{self.high:.0f}"
            )
        return f"{value:.2f}"


class LetterScale(GradeScale):
    """A-F by percent thresholds."""

    name = "letter"
    thresholds: List[Tuple[int, str]] = [(90, "A"), (80, "B"), (70, "C"), (60, "D")]
    fallback = "F"

    def grade(self, ratio: float) -> str:
        if math.isnan(ratio):
            return self.fallback
        percent = round_percent(ratio)
        for threshold, letter in self.thresholds:
            if percent >= threshold:
                return letter
        return self.fallback

    def validate(self, label: object) -> str:
        letter = str(label).strip().upper() if label is not None else ""
        allowed = [letter for _, letter in self.thresholds] + [self.fallback]
        if letter not in allowed:
            raise InvalidManualInput(f"invalid grade {label!r}, expected one of {allowed}")
        return letter


DEFAULT_SCALE = SixPointScale()

GRADE_SCALES: Dict[str, GradeScale] = {
    SixPointScale.name: DEFAULT_SCALE,
    LetterScale.name: LetterScale(),
}


def get_grade_scale(name: str) -> GradeScale:
    try:
        return GRADE_SCALES[name]
    except KeyError:
        raise ValueError(
            f"unknown grade scale {name!r}, expected one of {sorted(GRADE_SCALES)}"
        ) from None
