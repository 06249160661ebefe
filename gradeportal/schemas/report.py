# gradeportal/schemas/report.py
from pydantic import BaseModel


class QuestionStat(BaseModel):
    id: int
    title: str
    submissions: int
    avg_score: int  # percentage of max points
    difficulty: str


class StudentPerformance(BaseModel):
    name: str
    score: int  # percentage of max points
    submissions: int
    status: str


class ReportOverview(BaseModel):
    total_submissions: int
    evaluated: int
    pending: int
    average_score: float
    question_stats: list[QuestionStat]
    top_students: list[StudentPerformance]
