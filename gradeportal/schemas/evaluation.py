# gradeportal/schemas/evaluation.py
import math
from datetime import datetime
from enum import Enum

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)


class EvaluationStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    APPROVED = "approved"


class GradingSource(str, Enum):
    REMOTE = "remote"
    KEYWORD = "keyword"


class ScoreResult(BaseModel):
    """Local scoring outcome for one answer."""
    score: int
    confidence: int


class RemoteGrade(BaseModel):
    """
    Validated reply of the external grading service.

    Field names follow the wire format. Strict types so that `true` is never
    accepted as a number and `1` never as a boolean.
    """
    isCorrect: StrictBool
    score: StrictInt | StrictFloat
    confidence: StrictInt | StrictFloat
    feedback: StrictStr

    @field_validator("score", "confidence")
    @classmethod
    def must_be_finite(cls, v):
        # huge integers overflow float(); inf sneaks in via 1e999
        try:
            finite = math.isfinite(float(v))
        except OverflowError:
            finite = False
        if not finite:
            raise ValueError("must be a finite number")
        return v


class EvaluationDraft(BaseModel):
    """A graded answer ready to be persisted."""
    file_id: str = ""
    student_name: str = ""
    question_id: int
    extracted_answer: str
    score: int = Field(ge=0)
    max_points: int = Field(ge=0)
    confidence: int = Field(ge=0, le=100)
    feedback: str
    rubric_match: list[str] = Field(default_factory=list)
    grading_source: GradingSource = GradingSource.KEYWORD
    status: EvaluationStatus = EvaluationStatus.PENDING


class EvaluationCreate(BaseModel):
    """Upstream hand-off: text extracted from one uploaded file."""
    file_id: str = ""
    student_name: str = ""
    question_id: int
    text: str | None = None
    mime_type: str = "text/plain"


class EvaluationReview(BaseModel):
    """Reviewer decision, optionally overriding score and feedback."""
    status: EvaluationStatus
    score: int | None = None
    feedback: str | None = None


class EvaluationPublic(BaseModel):
    id: int
    file_id: str
    student_name: str
    question_id: int
    extracted_answer: str
    score: int
    max_points: int
    confidence: int
    feedback: str
    rubric_match: list[str]
    grading_source: GradingSource
    status: EvaluationStatus
    reviewed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class BatchItemResult(BaseModel):
    index: int
    evaluation: EvaluationPublic | None = None
    # populated for unsaved records (persistence failure)
    draft: EvaluationDraft | None = None
    error: dict | None = None


class EnqueuedEvaluation(BaseModel):
    job_id: str
