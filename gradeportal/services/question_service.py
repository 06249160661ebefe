# gradeportal/services/question_service.py
from typing import List, Optional

from sqlalchemy.orm import Session

from gradeportal.models.question import Question
from gradeportal.schemas.question import QuestionCreate, QuestionUpdate


def create_question(db: Session, *, obj_in: QuestionCreate) -> Question:
    data = obj_in.model_dump()
    data["type"] = obj_in.type.value
    db_obj = Question(**data)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def get_question(db: Session, question_id: int) -> Optional[Question]:
    return db.get(Question, question_id)


def list_questions(
    db: Session,
    *,
    skip: int = 0,
    limit: Optional[int] = 100,
) -> List[Question]:
    query = db.query(Question).order_by(Question.id.asc()).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def update_question(
    db: Session,
    *,
    db_obj: Question,
    obj_in: QuestionUpdate,
) -> Question:
    update_data = obj_in.model_dump(exclude_unset=True)
    if update_data.get("type") is not None:
        update_data["type"] = obj_in.type.value
    for field, value in update_data.items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def delete_question(db: Session, *, db_obj: Question) -> None:
    db.delete(db_obj)
    db.commit()
