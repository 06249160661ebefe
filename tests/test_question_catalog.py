import pytest
from pydantic import ValidationError

from gradeportal.models.question import Question
from gradeportal.schemas.question import QuestionCreate, QuestionPublic, QuestionUpdate
from gradeportal.services import question_service
from gradeportal.services.question_catalog import QuestionCatalog


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def test_get_returns_frozen_snapshot(db_session, math_question):
    catalog = QuestionCatalog(ttl_seconds=60)

    q = catalog.get(db_session, math_question.id)

    assert isinstance(q, QuestionPublic)
    assert q.points == 5
    assert q.keywords == ["4", "four", "2+2", "addition"]
    with pytest.raises(ValidationError):
        q.points = 100


def test_cached_until_ttl_expires(db_session, math_question, clock):
    catalog = QuestionCatalog(ttl_seconds=60, clock=clock)
    assert catalog.get(db_session, math_question.id).points == 5

    math_question.points = 8
    db_session.commit()

    clock.now += 59
    assert catalog.get(db_session, math_question.id).points == 5

    clock.now += 2
    assert catalog.get(db_session, math_question.id).points == 8


def test_invalidate_forces_reload(db_session, math_question, clock):
    catalog = QuestionCatalog(ttl_seconds=60, clock=clock)
    catalog.get(db_session, math_question.id)

    question_service.update_question(
        db_session, db_obj=math_question, obj_in=QuestionUpdate(title="Arithmetic")
    )
    catalog.invalidate()

    assert catalog.get(db_session, math_question.id).title == "Arithmetic"


def test_miss_looks_up_new_question(db_session, math_question, clock):
    catalog = QuestionCatalog(ttl_seconds=60, clock=clock)
    assert len(catalog.all(db_session)) == 1

    created = question_service.create_question(
        db_session, obj_in=QuestionCreate(title="New", prompt="?", keywords=["x"])
    )

    assert catalog.get(db_session, created.id).title == "New"
    assert catalog.get(db_session, 4242) is None


def test_question_service_cleans_keywords(db_session):
    q = question_service.create_question(
        db_session,
        obj_in=QuestionCreate(
            title="Essay", prompt="Discuss.", type="essay", keywords=[" light ", "", "  ", "water"]
        ),
    )

    assert q.type == "essay"
    assert q.keywords == ["light", "water"]
    assert db_session.query(Question).count() == 1


def test_negative_points_rejected():
    with pytest.raises(ValidationError):
        QuestionCreate(title="Bad", prompt="?", points=-1)
