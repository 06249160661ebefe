"""
Question Catalog
Read-through cache over the questions table, shared by every evaluation in a process.
"""

import logging
import threading
import time
from typing import Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from gradeportal.schemas.question import QuestionPublic
from gradeportal.services import question_service

logger = logging.getLogger(__name__)


class QuestionCatalog:
    """
    Snapshot of all questions, reloaded after `ttl_seconds` or on `invalidate()`.

    Entries are frozen QuestionPublic objects, so graders never touch ORM state.
    `clock` returns seconds; tests inject a fake one.
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._questions: Optional[Dict[int, QuestionPublic]] = None
        self._loaded_at = 0.0

    def _is_fresh(self) -> bool:
        return (
            self._questions is not None
            and self._clock() - self._loaded_at < self.ttl_seconds
        )

    def _load(self, db: Session) -> Dict[int, QuestionPublic]:
        with self._lock:
            if not self._is_fresh():
                rows = question_service.list_questions(db, limit=None)
                self._questions = {
                    row.id: QuestionPublic.model_validate(row) for row in rows
                }
                self._loaded_at = self._clock()
                logger.debug(f"Question catalog loaded: {len(self._questions)} question(s)")
            return self._questions

    def all(self, db: Session) -> List[QuestionPublic]:
        return list(self._load(db).values())

    def get(self, db: Session, question_id: int) -> Optional[QuestionPublic]:
        questions = self._load(db)
        question = questions.get(question_id)
        if question is None:
            # may have been created by another process since the last load
            row = question_service.get_question(db, question_id)
            if row is not None:
                question = QuestionPublic.model_validate(row)
                with self._lock:
                    questions[question_id] = question
        return question

    def invalidate(self) -> None:
        with self._lock:
            self._questions = None
            self._loaded_at = 0.0
