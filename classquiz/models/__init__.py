# classquiz/models/__init__.py
from classquiz.models.test import Test  # noqa
from classquiz.models.submission import Submission  # noqa
