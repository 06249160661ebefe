# gradeportal/models/evaluation.py
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.sql import func

from gradeportal.db.base import Base


class Evaluation(Base):
    __tablename__ = "evaluations"

    id = Column(Integer, primary_key=True, index=True)

    file_id = Column(String(255), nullable=False, default="", index=True)
    student_name = Column(String(255), nullable=False, default="")
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False, index=True)

    extracted_answer = Column(Text, nullable=False, default="")

    score = Column(Integer, nullable=False, default=0)
    max_points = Column(Integer, nullable=False, default=0)
    confidence = Column(Integer, nullable=False, default=0)
    feedback = Column(Text, nullable=False, default="")
    rubric_match = Column(JSON, nullable=False, default=list)
    # remote / keyword
    grading_source = Column(String(20), nullable=False, default="keyword")

    # 状态：pending / reviewed / approved
    status = Column(String(20), nullable=False, default="pending", index=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
