# gradeportal/services/evaluation_service.py
from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gradeportal.core.errors import (
    GradingError,
    InvalidReviewScore,
    InvalidStatusTransition,
    PersistenceFailure,
    UnknownQuestion,
    UnsupportedMediaType,
)
from gradeportal.models.evaluation import Evaluation
from gradeportal.schemas.evaluation import (
    BatchItemResult,
    EvaluationCreate,
    EvaluationDraft,
    EvaluationPublic,
    EvaluationStatus,
)
from gradeportal.services.evaluation_engine import evaluate
from gradeportal.services.question_catalog import QuestionCatalog
from gradeportal.services.remote_grader import RemoteGrader
from gradeportal.services.text_sanitizer import sanitize

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = ("text/plain", "application/pdf")
SUPPORTED_MIME_PREFIXES = ("image/",)

# pending -> reviewed -> approved, or pending -> approved. approved is terminal.
ALLOWED_TRANSITIONS = {
    EvaluationStatus.PENDING: {EvaluationStatus.REVIEWED, EvaluationStatus.APPROVED},
    EvaluationStatus.REVIEWED: {EvaluationStatus.APPROVED},
    EvaluationStatus.APPROVED: set(),
}


def check_mime_type(mime_type: Optional[str]) -> None:
    mime = (mime_type or "").split(";")[0].strip().lower()
    if mime in SUPPORTED_MIME_TYPES or mime.startswith(SUPPORTED_MIME_PREFIXES):
        return
    raise UnsupportedMediaType(mime_type)


def save_evaluation(db: Session, draft: EvaluationDraft) -> Evaluation:
    """Persist a draft; on failure the draft rides along on PersistenceFailure."""
    data = draft.model_dump(mode="json")
    db_obj = Evaluation(**data)
    try:
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to save evaluation for question {draft.question_id}: {e}")
        raise PersistenceFailure(
            f"could not save evaluation: {e.__class__.__name__}", evaluation=draft
        ) from e
    return db_obj


def create_evaluation(
    db: Session,
    *,
    obj_in: EvaluationCreate,
    catalog: QuestionCatalog,
    grader: Optional[RemoteGrader] = None,
    rng: Optional[random.Random] = None,
) -> Evaluation:
    """
    Grade one extracted answer and store it.

    Raises UnsupportedMediaType, UnknownQuestion or PersistenceFailure.
    """
    check_mime_type(obj_in.mime_type)

    question = catalog.get(db, obj_in.question_id)
    if question is None:
        raise UnknownQuestion(obj_in.question_id)

    draft = evaluate(
        obj_in.text,
        question,
        obj_in.student_name,
        file_id=obj_in.file_id,
        grader=grader,
        rng=rng,
    )
    return save_evaluation(db, draft)


def create_evaluations(
    db: Session,
    *,
    items: Sequence[EvaluationCreate],
    catalog: QuestionCatalog,
    grader: Optional[RemoteGrader] = None,
    rng: Optional[random.Random] = None,
) -> List[BatchItemResult]:
    """Grade a batch; a failing item is reported in place and the rest carry on."""
    results: List[BatchItemResult] = []
    for index, obj_in in enumerate(items):
        try:
            evaluation = create_evaluation(
                db, obj_in=obj_in, catalog=catalog, grader=grader, rng=rng
            )
        except PersistenceFailure as e:
            results.append(
                BatchItemResult(index=index, draft=e.evaluation, error=e.to_dict())
            )
        except GradingError as e:
            logger.warning(f"Batch item {index} rejected: {e}")
            results.append(BatchItemResult(index=index, error=e.to_dict()))
        else:
            results.append(
                BatchItemResult(
                    index=index, evaluation=EvaluationPublic.model_validate(evaluation)
                )
            )
    return results


def get_evaluation(db: Session, evaluation_id: int) -> Optional[Evaluation]:
    return db.get(Evaluation, evaluation_id)


def list_evaluations(
    db: Session,
    *,
    question_id: Optional[int] = None,
    status: Optional[EvaluationStatus] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Evaluation]:
    query = db.query(Evaluation)
    if question_id is not None:
        query = query.filter(Evaluation.question_id == question_id)
    if status is not None:
        query = query.filter(Evaluation.status == status.value)
    return (
        query.order_by(Evaluation.created_at.desc(), Evaluation.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def list_pending_evaluations(
    db: Session,
    *,
    skip: int = 0,
    limit: int = 100,
) -> List[Evaluation]:
    """
    Evaluations waiting for a reviewer, oldest first.
    """
    return (
        db.query(Evaluation)
        .filter(Evaluation.status == EvaluationStatus.PENDING.value)
        .order_by(Evaluation.created_at.asc(), Evaluation.id.asc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def update_evaluation_status(
    db: Session,
    *,
    evaluation: Evaluation,
    status: EvaluationStatus,
    feedback: Optional[str] = None,
    score: Optional[int] = None,
) -> Evaluation:
    """
    Apply a reviewer decision.

    Only pending -> reviewed|approved and reviewed -> approved are allowed.
    The reviewer may overwrite score (within [0, max_points]) and feedback.
    """
    current = EvaluationStatus(evaluation.status)
    status = EvaluationStatus(status)
    if status not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStatusTransition(current.value, status.value)

    if score is not None:
        if score < 0 or score > evaluation.max_points:
            raise InvalidReviewScore(
                f"score {score} outside [0, {evaluation.max_points}]"
            )
        evaluation.score = score
    if feedback is not None:
        evaluation.feedback = sanitize(feedback)

    evaluation.status = status.value
    evaluation.reviewed_at = datetime.now(timezone.utc)

    try:
        db.add(evaluation)
        db.commit()
        db.refresh(evaluation)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update evaluation {evaluation.id}: {e}")
        raise PersistenceFailure(f"could not update evaluation {evaluation.id}") from e

    logger.info(f"Evaluation {evaluation.id}: {current.value} -> {status.value}")
    return evaluation
