"""
Shared fixtures: in-memory SQLite, seeded questions, FastAPI client.
"""

import os
import random

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REMOTE_GRADER_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gradeportal import models  # noqa
from gradeportal.api.deps import get_remote_grader
from gradeportal.db.base import Base
from gradeportal.db.session import get_db
from gradeportal.main import app
from gradeportal.models.question import Question
from gradeportal.services.question_catalog import QuestionCatalog

from helpers import MATH_KEYWORDS, PHOTOSYNTHESIS_KEYWORDS

TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="function")
def session_factory():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        yield factory
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def math_question(db_session):
    question = Question(
        title="Basic Math",
        prompt="What is 2 + 2?",
        type="short-answer",
        points=5,
        rubric="Correct answer: 4. Partial credit for showing work.",
        sample_answer="4",
        keywords=MATH_KEYWORDS,
        correct_answer="4",
    )
    db_session.add(question)
    db_session.commit()
    db_session.refresh(question)
    return question


@pytest.fixture
def essay_question(db_session):
    question = Question(
        title="Science Question",
        prompt="What is photosynthesis?",
        type="essay",
        points=10,
        rubric="Should mention: sunlight, chlorophyll, carbon dioxide, oxygen, glucose",
        sample_answer=(
            "Photosynthesis is the process by which plants convert sunlight into energy "
            "using chlorophyll, taking in carbon dioxide and producing oxygen and glucose."
        ),
        keywords=PHOTOSYNTHESIS_KEYWORDS,
    )
    db_session.add(question)
    db_session.commit()
    db_session.refresh(question)
    return question


@pytest.fixture
def catalog():
    return QuestionCatalog(ttl_seconds=300)


@pytest.fixture
def rng():
    return random.Random(547)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_remote_grader] = lambda: None
    app.state.question_catalog = QuestionCatalog(ttl_seconds=300)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
