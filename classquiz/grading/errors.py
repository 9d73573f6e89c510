# classquiz/grading/errors.py


class GradingError(Exception):
    pass


class MissingTest(GradingError):
    """No answer key to grade against; callers answer with a not-found."""


class MalformedAnswerInput(GradingError, ValueError):
    """Raised by the coercion helpers; the normalizer turns it into NoAnswer."""


class UnknownQuestionType(GradingError):
    """Recorded as a warning for questions whose type the engine cannot grade."""

    def __init__(self, index: int, question_type: str):
        self.index = index
        self.question_type = question_type
        super().__init__(
            f"question {index} has unknown type {question_type!r}; graded as zero points"
        )


class InvalidManualInput(GradingError, ValueError):
    """Teacher supplied manual points or a manual grade the scale cannot hold."""
