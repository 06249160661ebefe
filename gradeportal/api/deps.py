# gradeportal/api/deps.py
from typing import Generator, Optional

from fastapi import Request

from gradeportal.services.question_catalog import QuestionCatalog
from gradeportal.services.remote_grader import RemoteGrader, build_remote_grader


def get_question_catalog(request: Request) -> QuestionCatalog:
    return request.app.state.question_catalog


def get_remote_grader() -> Generator[Optional[RemoteGrader], None, None]:
    grader = build_remote_grader()
    try:
        yield grader
    finally:
        if grader is not None:
            grader.close()
