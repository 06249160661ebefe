# gradeportal/api/v1/endpoints/evaluations.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from gradeportal.api.deps import get_question_catalog, get_remote_grader
from gradeportal.core.errors import (
    InvalidReviewScore,
    InvalidStatusTransition,
    PersistenceFailure,
    UnknownQuestion,
    UnsupportedMediaType,
)
from gradeportal.db.session import get_db
from gradeportal.schemas.evaluation import (
    BatchItemResult,
    EnqueuedEvaluation,
    EvaluationCreate,
    EvaluationPublic,
    EvaluationReview,
    EvaluationStatus,
)
from gradeportal.services import evaluation_service
from gradeportal.services.question_catalog import QuestionCatalog
from gradeportal.services.remote_grader import RemoteGrader
from gradeportal.workers.queue import enqueue_evaluation_task

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


@router.post("/", response_model=EvaluationPublic, status_code=status.HTTP_201_CREATED)
def create_evaluation(
    obj_in: EvaluationCreate,
    db: Session = Depends(get_db),
    catalog: QuestionCatalog = Depends(get_question_catalog),
    grader: Optional[RemoteGrader] = Depends(get_remote_grader),
):
    """
    Grade text extracted from one upload and store the pending evaluation.
    """
    try:
        return evaluation_service.create_evaluation(
            db, obj_in=obj_in, catalog=catalog, grader=grader
        )
    except UnsupportedMediaType as e:
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(e))
    except UnknownQuestion as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PersistenceFailure as e:
        # hand the computed record back so the client can retry the save
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                **e.to_dict(),
                "evaluation": e.evaluation.model_dump(mode="json") if e.evaluation else None,
            },
        )


@router.post("/batch", response_model=List[BatchItemResult])
def create_evaluations(
    items: List[EvaluationCreate],
    db: Session = Depends(get_db),
    catalog: QuestionCatalog = Depends(get_question_catalog),
    grader: Optional[RemoteGrader] = Depends(get_remote_grader),
):
    return evaluation_service.create_evaluations(
        db, items=items, catalog=catalog, grader=grader
    )


@router.post("/async", response_model=EnqueuedEvaluation, status_code=status.HTTP_202_ACCEPTED)
def enqueue_evaluation(obj_in: EvaluationCreate):
    """
    Queue grading on the rq worker instead of grading in the request.
    """
    try:
        evaluation_service.check_mime_type(obj_in.mime_type)
    except UnsupportedMediaType as e:
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(e))
    job_id = enqueue_evaluation_task(obj_in.model_dump())
    return EnqueuedEvaluation(job_id=job_id)


@router.get("/", response_model=List[EvaluationPublic])
def list_evaluations(
    db: Session = Depends(get_db),
    question_id: Optional[int] = None,
    status_filter: Optional[EvaluationStatus] = Query(default=None, alias="status"),
    skip: int = 0,
    limit: int = 100,
):
    return evaluation_service.list_evaluations(
        db, question_id=question_id, status=status_filter, skip=skip, limit=limit
    )


@router.get("/pending", response_model=List[EvaluationPublic])
def list_pending_evaluations(
    db: Session = Depends(get_db),
    skip: int = 0,
    limit: int = 100,
):
    return evaluation_service.list_pending_evaluations(db, skip=skip, limit=limit)


@router.get("/{evaluation_id}", response_model=EvaluationPublic)
def get_evaluation(
    evaluation_id: int,
    db: Session = Depends(get_db),
):
    ev = evaluation_service.get_evaluation(db, evaluation_id)
    if not ev:
        raise HTTPException(status_code=404, detail="Evaluation not found")
    return ev


@router.put("/{evaluation_id}/review", response_model=EvaluationPublic)
def review_evaluation(
    evaluation_id: int,
    review_in: EvaluationReview,
    db: Session = Depends(get_db),
):
    """
    Reviewer marks an evaluation reviewed or approved, optionally overriding
    score and feedback.
    """
    ev = evaluation_service.get_evaluation(db, evaluation_id)
    if not ev:
        raise HTTPException(status_code=404, detail="Evaluation not found")

    try:
        return evaluation_service.update_evaluation_status(
            db,
            evaluation=ev,
            status=review_in.status,
            feedback=review_in.feedback,
            score=review_in.score,
        )
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except InvalidReviewScore as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except PersistenceFailure as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
