# gradeportal/schemas/question.py
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    SHORT_ANSWER = "short-answer"
    ESSAY = "essay"


def _clean_keywords(keywords: list[str] | None) -> list[str] | None:
    if keywords is None:
        return None
    return [k.strip() for k in keywords if k and k.strip()]


class QuestionBase(BaseModel):
    title: str
    prompt: str
    type: QuestionType = QuestionType.SHORT_ANSWER
    points: int = Field(default=5, ge=0)
    rubric: str = ""
    sample_answer: str = ""
    keywords: list[str] = Field(default_factory=list)
    # exact option/answer used by multiple-choice and as a short-answer shortcut
    correct_answer: str | None = None

    @field_validator("keywords")
    @classmethod
    def strip_keywords(cls, v: list[str]) -> list[str]:
        return _clean_keywords(v)


class QuestionCreate(QuestionBase):
    pass


class QuestionUpdate(BaseModel):
    title: str | None = None
    prompt: str | None = None
    type: QuestionType | None = None
    points: int | None = Field(default=None, ge=0)
    rubric: str | None = None
    sample_answer: str | None = None
    keywords: list[str] | None = None
    correct_answer: str | None = None

    @field_validator("keywords")
    @classmethod
    def strip_keywords(cls, v: list[str] | None) -> list[str] | None:
        return _clean_keywords(v)


class QuestionPublic(QuestionBase):
    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True, "frozen": True}
