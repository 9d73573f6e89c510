# classquiz/grading/codec.py
"""Text columns stored on a submission: the raw answer bag and manual points."""
from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def dump_answers(answers: Dict[str, Any]) -> str:
    return json.dumps(answers, ensure_ascii=False)


def load_answers(text: Optional[str]) -> Dict[str, Any]:
    if not text:
        return {}
    try:
        data = json.loads(text)
    except ValueError as e:
        logger.warning(f"Stored answers are not valid JSON, treating as empty: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Stored answers are a {type(data).__name__}, expected an object")
        return {}
    return data


def dump_manual_points(points: Dict[int, float]) -> str:
    # JSON object keys are strings; index order keeps the text stable
    return json.dumps({str(index): points[index] for index in sorted(points)})


def load_manual_points(text: Optional[str]) -> Dict[int, float]:
    if not text:
        return {}
    try:
        data = json.loads(text)
    except ValueError as e:
        logger.warning(f"Stored manual points are not valid JSON, treating as empty: {e}")
        return {}
    if not isinstance(data, dict):
        return {}

    points: Dict[int, float] = {}
    for key, value in data.items():
        try:
            index = int(key)
            number = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Skipping stored manual points entry {key!r}: {value!r}")
            continue
        if index < 0 or not math.isfinite(number):
            logger.warning(f"Skipping stored manual points entry {key!r}: {value!r}")
            continue
        points[index] = number
    return points
