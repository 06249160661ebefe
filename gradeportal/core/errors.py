# gradeportal/core/errors.py
from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    SANITIZATION_FAILURE = "sanitization_failure"
    UNKNOWN_QUESTION = "unknown_question"
    REMOTE_GRADER_UNAVAILABLE = "remote_grader_unavailable"
    MALFORMED_REMOTE_RESPONSE = "malformed_remote_response"
    INVALID_REMOTE_RESPONSE_SHAPE = "invalid_remote_response_shape"
    PERSISTENCE_FAILURE = "persistence_failure"
    INVALID_STATUS_TRANSITION = "invalid_status_transition"
    INVALID_REVIEW_SCORE = "invalid_review_score"
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"


class GradingError(Exception):
    kind: ErrorKind

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": str(self)}


class SanitizationFailure(GradingError):
    kind = ErrorKind.SANITIZATION_FAILURE


class UnknownQuestion(GradingError):
    kind = ErrorKind.UNKNOWN_QUESTION

    def __init__(self, question_id: Any):
        super().__init__(f"question {question_id} not found")
        self.question_id = question_id


class RemoteGraderError(GradingError):
    """Base for every failure of the external grading service."""


class RemoteGraderUnavailable(RemoteGraderError):
    kind = ErrorKind.REMOTE_GRADER_UNAVAILABLE


class MalformedRemoteResponse(RemoteGraderError):
    kind = ErrorKind.MALFORMED_REMOTE_RESPONSE


class InvalidRemoteResponseShape(RemoteGraderError):
    kind = ErrorKind.INVALID_REMOTE_RESPONSE_SHAPE


class PersistenceFailure(GradingError):
    """
    The store rejected a computed evaluation.

    The unsaved record travels with the exception so the caller can retry the write.
    """

    kind = ErrorKind.PERSISTENCE_FAILURE

    def __init__(self, message: str, *, evaluation: Any = None):
        super().__init__(message)
        self.evaluation = evaluation


class InvalidStatusTransition(GradingError):
    kind = ErrorKind.INVALID_STATUS_TRANSITION

    def __init__(self, current: str, requested: str):
        super().__init__(f"cannot move evaluation from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class InvalidReviewScore(GradingError):
    kind = ErrorKind.INVALID_REVIEW_SCORE


class UnsupportedMediaType(GradingError):
    kind = ErrorKind.UNSUPPORTED_MEDIA_TYPE

    def __init__(self, mime_type: str | None):
        super().__init__(f"unsupported file type: {mime_type!r}")
        self.mime_type = mime_type
