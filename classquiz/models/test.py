# classquiz/models/test.py
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from classquiz.db.base import Base


class Test(Base):
    __tablename__ = "tests"

    id = Column(Integer, primary_key=True, index=True)
    # owning teacher; accounts live outside this service
    creator_id = Column(Integer, nullable=True, index=True)

    title = Column(String(255), nullable=False, default="")
    # ordered JSON list of questions; never reordered after creation
    questions = Column(Text, nullable=False, default="[]")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
