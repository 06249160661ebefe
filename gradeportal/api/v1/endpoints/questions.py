# gradeportal/api/v1/endpoints/questions.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from gradeportal.api.deps import get_question_catalog
from gradeportal.db.session import get_db
from gradeportal.schemas.question import (
    QuestionCreate,
    QuestionPublic,
    QuestionUpdate,
)
from gradeportal.services import evaluation_service, question_service
from gradeportal.services.question_catalog import QuestionCatalog

router = APIRouter(prefix="/questions", tags=["questions"])


@router.post("/", response_model=QuestionPublic, status_code=status.HTTP_201_CREATED)
def create_question(
    obj_in: QuestionCreate,
    db: Session = Depends(get_db),
    catalog: QuestionCatalog = Depends(get_question_catalog),
):
    q = question_service.create_question(db, obj_in=obj_in)
    catalog.invalidate()
    return q


@router.get("/", response_model=List[QuestionPublic])
def list_questions(
    db: Session = Depends(get_db),
    skip: int = 0,
    limit: int = 100,
):
    return question_service.list_questions(db, skip=skip, limit=limit)


@router.get("/{question_id}", response_model=QuestionPublic)
def get_question(
    question_id: int,
    db: Session = Depends(get_db),
):
    q = question_service.get_question(db, question_id)
    if not q:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Question not found",
        )
    return q


@router.put("/{question_id}", response_model=QuestionPublic)
def update_question(
    question_id: int,
    obj_in: QuestionUpdate,
    db: Session = Depends(get_db),
    catalog: QuestionCatalog = Depends(get_question_catalog),
):
    q = question_service.get_question(db, question_id)
    if not q:
        raise HTTPException(status_code=404, detail="Question not found")

    q = question_service.update_question(db, db_obj=q, obj_in=obj_in)
    catalog.invalidate()
    return q


@router.delete("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_question(
    question_id: int,
    db: Session = Depends(get_db),
    catalog: QuestionCatalog = Depends(get_question_catalog),
):
    q = question_service.get_question(db, question_id)
    if not q:
        raise HTTPException(status_code=404, detail="Question not found")

    if evaluation_service.list_evaluations(db, question_id=question_id, limit=1):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Question already has evaluations",
        )

    question_service.delete_question(db, db_obj=q)
    catalog.invalidate()
    return None
