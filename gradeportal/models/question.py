# gradeportal/models/question.py
from sqlalchemy import JSON, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from gradeportal.db.base import Base


class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(255), nullable=False)
    prompt = Column(Text, nullable=False)

    # multiple-choice / short-answer / essay
    type = Column(String(20), nullable=False, default="short-answer")
    points = Column(Integer, nullable=False, default=5)

    rubric = Column(Text, nullable=False, default="")
    sample_answer = Column(Text, nullable=False, default="")
    keywords = Column(JSON, nullable=False, default=list)
    correct_answer = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
