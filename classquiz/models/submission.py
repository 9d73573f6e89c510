# classquiz/models/submission.py
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Float,
)
from sqlalchemy.sql import func
from classquiz.db.base import Base


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)

    # no foreign key: submissions outlive the test they were written for
    test_id = Column(Integer, nullable=True, index=True)
    student_name = Column(String(100), nullable=False, default="")
    student_class = Column(String(50), nullable=False, default="")

    # raw answer bag as JSON text
    answers = Column(Text, nullable=False, default="{}")

    # automatic score, computed once at submission time
    auto_earned = Column(Float, nullable=False, default=0)
    auto_total = Column(Float, nullable=False, default=0)
    auto_percent = Column(Integer, nullable=False, default=0)
    auto_grade = Column(String(10), nullable=False)
    grade_scale = Column(String(20), nullable=False)

    # status: submitted / under_review / reviewed
    status = Column(String(20), nullable=False, default="submitted", index=True)

    # teacher review
    manual_points = Column(Text, nullable=False, default="{}")
    manual_grade = Column(String(10), nullable=True)
    teacher_comment = Column(Text, nullable=True)

    submitted_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
