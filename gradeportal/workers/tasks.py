"""
Evaluation Tasks for Worker
Executed by rq workers to grade uploaded answers once text extraction is done
"""

import logging
from typing import Any, Dict

from gradeportal.core.config import settings
from gradeportal.core.errors import GradingError, PersistenceFailure
from gradeportal.db.session import SessionLocal
from gradeportal.schemas.evaluation import EvaluationCreate
from gradeportal.services.evaluation_service import create_evaluation
from gradeportal.services.question_catalog import QuestionCatalog
from gradeportal.services.remote_grader import build_remote_grader

logger = logging.getLogger(__name__)

# one catalog per worker process
_catalog = QuestionCatalog(ttl_seconds=settings.QUESTION_CACHE_TTL_SECONDS)


def evaluation_task(payload: Dict[str, Any], *, session_factory=SessionLocal) -> dict:
    """
    Worker task that grades one extracted answer and stores the evaluation.

    Args:
        payload: fields of EvaluationCreate
        session_factory: SQLAlchemy session factory, swapped in tests

    Returns:
        Dictionary with the result summary; failures are reported, not raised,
        so one bad upload never stops the worker.
    """
    obj_in = EvaluationCreate.model_validate(payload)
    db = session_factory()
    grader = build_remote_grader()
    try:
        logger.info(f"Starting evaluation task for file '{obj_in.file_id}'")

        evaluation = create_evaluation(db, obj_in=obj_in, catalog=_catalog, grader=grader)

        return {
            "status": "success",
            "evaluation_id": evaluation.id,
            "question_id": evaluation.question_id,
            "score": evaluation.score,
            "max_points": evaluation.max_points,
            "confidence": evaluation.confidence,
            "grading_source": evaluation.grading_source,
            "message": f"Successfully evaluated file '{obj_in.file_id}'",
        }

    except PersistenceFailure as e:
        logger.error(f"Evaluation for file '{obj_in.file_id}' computed but not saved: {e}")
        return {
            "status": "error",
            "file_id": obj_in.file_id,
            "error": e.to_dict(),
            "evaluation": e.evaluation.model_dump(mode="json") if e.evaluation else None,
            "message": "Evaluation computed but could not be saved",
        }

    except GradingError as e:
        logger.error(f"Evaluation failed for file '{obj_in.file_id}': {e}")
        return {
            "status": "error",
            "file_id": obj_in.file_id,
            "error": e.to_dict(),
            "message": f"Evaluation failed for file '{obj_in.file_id}'",
        }

    finally:
        if grader is not None:
            grader.close()
        db.close()
