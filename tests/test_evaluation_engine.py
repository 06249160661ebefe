import logging

import httpx

from gradeportal.schemas.evaluation import EvaluationStatus, GradingSource
from gradeportal.services.evaluation_engine import evaluate
from gradeportal.services.feedback_generator import MANUAL_REVIEW_FEEDBACK

from helpers import MATH_KEYWORDS, PHOTOSYNTHESIS_KEYWORDS, completion_body, make_grader, make_question

MATH = make_question(
    id=2,
    title="Basic Math",
    prompt="What is 2 + 2?",
    type="short-answer",
    points=5,
    sample_answer="4",
    keywords=MATH_KEYWORDS,
    correct_answer="4",
)

PHOTOSYNTHESIS = make_question(
    id=1,
    title="Science Question",
    prompt="What is photosynthesis?",
    type="essay",
    points=10,
    keywords=PHOTOSYNTHESIS_KEYWORDS,
)


def test_short_answer_full_credit(rng):
    draft = evaluate(
        "The answer is 4, which is the result of addition 2+2", MATH, "Ada", rng=rng
    )

    assert draft.score == 5
    # "four" is not spelled out in the answer
    assert draft.rubric_match == ["4", "2+2", "addition"]
    assert draft.feedback.startswith("Excellent")
    assert draft.status == EvaluationStatus.PENDING
    assert draft.grading_source == GradingSource.KEYWORD
    assert 85 <= draft.confidence <= 100


def test_short_answer_zero_credit(rng):
    draft = evaluate("The answer is 5", MATH, "Ada", rng=rng)

    assert draft.score == 0
    assert draft.rubric_match == []
    assert 60 <= draft.confidence <= 85
    assert "needs improvement" in draft.feedback


def test_essay_partial_lists_missing_keywords():
    draft = evaluate("Plants need sunlight.", PHOTOSYNTHESIS, "Grace")

    assert draft.rubric_match == ["sunlight", "plants"]
    assert draft.score == 2
    assert draft.confidence == 80
    assert "Consider including" in draft.feedback
    assert "chlorophyll, carbon dioxide, oxygen, glucose, energy" in draft.feedback


def test_essay_full_answer():
    text = (
        "Photosynthesis is the process by which plants convert sunlight into energy "
        "using chlorophyll, taking in carbon dioxide and producing oxygen and glucose."
    )
    draft = evaluate(text, PHOTOSYNTHESIS, "Grace")

    assert draft.score == 10
    assert draft.rubric_match == PHOTOSYNTHESIS_KEYWORDS
    assert draft.feedback == "Excellent essay! You covered all the key concepts comprehensively."


def test_text_and_submitter_are_sanitized():
    draft = evaluate("  Plants\x00 need\\n sunlight ", PHOTOSYNTHESIS, " Grace\x01  Hopper ")

    assert draft.extracted_answer == "Plants need sunlight"
    assert draft.student_name == "Grace Hopper"


def test_missing_text_grades_as_empty(rng):
    draft = evaluate(None, MATH, "Ada", rng=rng, file_id="f-1")

    assert draft.extracted_answer == ""
    assert draft.score == 0
    assert draft.file_id == "f-1"
    assert draft.max_points == 5


def test_multiple_choice_without_key_is_left_for_review():
    q = make_question(type="multiple-choice", points=1, keywords=[])
    draft = evaluate("B", q, "Ada")

    assert draft.score == 0
    assert draft.confidence == 0
    assert draft.feedback == MANUAL_REVIEW_FEEDBACK


def test_multiple_choice_with_key():
    q = make_question(type="multiple-choice", points=1, keywords=[], correct_answer="B")

    assert evaluate("b", q, "Ada").feedback == "Correct answer!"
    assert evaluate("c", q, "Ada").feedback == "Incorrect answer."


def test_remote_grade_is_mapped_to_question_points():
    grader = make_grader(lambda request: httpx.Response(200, json=completion_body(
        {"isCorrect": True, "score": 80, "confidence": 87.6, "feedback": "Good\\n answer."}
    )))

    draft = evaluate("four, by addition", MATH, "Ada", grader=grader)

    assert draft.grading_source == GradingSource.REMOTE
    assert draft.score == 4
    assert draft.confidence == 88
    assert draft.feedback == "Good answer."
    # rubric match still comes from the local matcher
    assert draft.rubric_match == ["four", "addition"]


def test_remote_scores_out_of_range_are_clamped():
    grader = make_grader(lambda request: httpx.Response(200, json=completion_body(
        {"isCorrect": True, "score": 250, "confidence": -3, "feedback": "?"}
    )))

    draft = evaluate("4", MATH, "Ada", grader=grader)

    assert draft.score == 5
    assert draft.confidence == 0


def test_remote_failure_falls_back_to_keyword_scoring(rng, caplog):
    grader = make_grader(lambda request: httpx.Response(502, text="bad gateway"))

    with caplog.at_level(logging.WARNING):
        draft = evaluate(
            "The answer is 4, which is the result of addition 2+2", MATH, "Ada",
            grader=grader, rng=rng,
        )

    assert draft.grading_source == GradingSource.KEYWORD
    assert draft.score == 5
    assert draft.rubric_match == ["4", "2+2", "addition"]
    assert "remote_grader_unavailable" in caplog.text
    assert "falling back" in caplog.text


def test_invalid_remote_shape_falls_back(caplog):
    grader = make_grader(lambda request: httpx.Response(200, json=completion_body(
        {"isCorrect": "yes", "score": 80, "confidence": 90, "feedback": "ok"}
    )))

    with caplog.at_level(logging.WARNING):
        draft = evaluate("Plants need sunlight.", PHOTOSYNTHESIS, "Grace", grader=grader)

    assert draft.grading_source == GradingSource.KEYWORD
    assert draft.score == 2
    assert "invalid_remote_response_shape" in caplog.text


def test_remote_timeout_falls_back():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    draft = evaluate("Plants need sunlight.", PHOTOSYNTHESIS, "Grace", grader=make_grader(handler))

    assert draft.grading_source == GradingSource.KEYWORD
    assert draft.score == 2


def test_remote_grader_is_called_once_per_answer():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500)

    evaluate("Plants need sunlight.", PHOTOSYNTHESIS, "Grace", grader=make_grader(handler))

    assert len(calls) == 1


def test_overflowing_remote_numbers_fall_back(rng, caplog):
    content = (
        '{"isCorrect": true, "score": ' + "9" * 400 + ', "confidence": 1e999, "feedback": "ok"}'
    )
    grader = make_grader(lambda request: httpx.Response(200, json=completion_body(content)))

    with caplog.at_level(logging.WARNING):
        draft = evaluate("4", MATH, "Ada", grader=grader, rng=rng)

    assert draft.grading_source == GradingSource.KEYWORD
    assert draft.score == 5
    assert "invalid_remote_response_shape" in caplog.text


def test_answer_key_inside_a_larger_number_is_not_full_credit(rng):
    draft = evaluate("The answer is 14", MATH, "Ada", rng=rng)

    assert draft.rubric_match == ["4"]
    assert draft.score == 1
    assert not draft.feedback.startswith("Excellent")


def test_zero_point_multiple_choice_feedback_follows_the_key():
    q = make_question(type="multiple-choice", points=0, keywords=[], correct_answer="B")

    assert evaluate("b", q, "Ada").feedback == "Correct answer!"
    assert evaluate("c", q, "Ada").feedback == "Incorrect answer."
