# classquiz/grading/__init__.py
"""Pure grading engine: no database, no HTTP, no settings."""
from classquiz.grading.aggregator import AutoScore, aggregate, effective_grade
from classquiz.grading.answers import (
    MultipleChoice,
    NoAnswer,
    NormalizedAnswer,
    OpenText,
    RawAnswerBag,
    SingleChoice,
    normalize_answer,
)
from classquiz.grading.errors import (
    GradingError,
    InvalidManualInput,
    MalformedAnswerInput,
    MissingTest,
    UnknownQuestionType,
)
from classquiz.grading.questions import Question, QuestionType, Test, answer_key
from classquiz.grading.records import (
    GradeResult,
    ManualOverride,
    ReviewStatus,
    SubmissionDetailView,
    SubmissionRecord,
    apply_manual_points,
    apply_manual_review,
    build_detail,
    grade,
)
from classquiz.grading.scales import (
    DEFAULT_SCALE,
    GradeScale,
    LetterScale,
    SixPointScale,
    get_grade_scale,
)
from classquiz.grading.scorer import Verdict, score

__all__ = [
    "DEFAULT_SCALE",
    "AutoScore",
    "GradeResult",
    "GradeScale",
    "GradingError",
    "InvalidManualInput",
    "LetterScale",
    "MalformedAnswerInput",
    "ManualOverride",
    "MissingTest",
    "MultipleChoice",
    "NoAnswer",
    "NormalizedAnswer",
    "OpenText",
    "Question",
    "QuestionType",
    "RawAnswerBag",
    "ReviewStatus",
    "SingleChoice",
    "SixPointScale",
    "SubmissionDetailView",
    "SubmissionRecord",
    "Test",
    "UnknownQuestionType",
    "Verdict",
    "aggregate",
    "answer_key",
    "apply_manual_points",
    "apply_manual_review",
    "build_detail",
    "effective_grade",
    "get_grade_scale",
    "grade",
    "normalize_answer",
    "score",
]
