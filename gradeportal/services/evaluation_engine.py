"""
Evaluation Engine
Single entry point that grades one extracted answer against one question.

sanitize -> keyword match -> remote grade (optional) or local scoring -> feedback
"""

import logging
import math
import random
from typing import Optional

from gradeportal.core.errors import RemoteGraderError
from gradeportal.schemas.evaluation import EvaluationDraft, GradingSource
from gradeportal.schemas.question import QuestionType
from gradeportal.services.feedback_generator import MANUAL_REVIEW_FEEDBACK, generate_feedback
from gradeportal.services.keyword_matcher import match_keywords
from gradeportal.services.remote_grader import RemoteGrader, build_expected_concepts
from gradeportal.services.scoring_policy import is_correct_choice, score_answer
from gradeportal.services.text_sanitizer import sanitize

logger = logging.getLogger(__name__)


def _clamp(value: float, low: int, high: int) -> int:
    return max(low, min(int(value), high))


def _grade_with_remote(grader: RemoteGrader, text: str, question) -> tuple[int, int, str]:
    grade = grader.grade_remotely(
        question=question.prompt,
        expected_answer=build_expected_concepts(question),
        student_answer=text,
    )
    percent = max(0.0, min(float(grade.score), 100.0))
    points = max(question.points, 0)
    score = _clamp(math.floor(points * percent / 100), 0, points)
    confidence = _clamp(round(grade.confidence), 0, 100)
    return score, confidence, sanitize(grade.feedback)


def _grade_locally(text: str, question, matched: list[str], rng: Optional[random.Random]) -> tuple[int, int, str]:
    result = score_answer(text, question, matched, rng=rng)

    qtype = QuestionType(question.type)
    if qtype == QuestionType.MULTIPLE_CHOICE and not (question.correct_answer or "").strip():
        feedback = MANUAL_REVIEW_FEEDBACK
    else:
        correct = None
        if qtype == QuestionType.MULTIPLE_CHOICE:
            correct = is_correct_choice(text, question.correct_answer)
        feedback = generate_feedback(
            result.score, question.points, matched, question.keywords, qtype, correct=correct
        )
    return result.score, result.confidence, sanitize(feedback)


def evaluate(
    text: Optional[str],
    question,
    submitter_label: str,
    *,
    file_id: str = "",
    grader: Optional[RemoteGrader] = None,
    rng: Optional[random.Random] = None,
) -> EvaluationDraft:
    """
    Grade raw extracted text against `question` and build a pending record.

    When `grader` is given it is tried once; any RemoteGraderError is logged and
    the answer is scored locally from its keyword matches instead.
    """
    clean_text = sanitize(text)
    matched = match_keywords(clean_text, question.keywords)

    source = GradingSource.KEYWORD
    outcome = None
    if grader is not None:
        try:
            outcome = _grade_with_remote(grader, clean_text, question)
            source = GradingSource.REMOTE
        except RemoteGraderError as e:
            logger.warning(
                f"Remote grading failed for question {question.id} ({e.kind.value}: {e}); "
                f"falling back to keyword scoring"
            )

    if outcome is None:
        outcome = _grade_locally(clean_text, question, matched, rng)
    score, confidence, feedback = outcome

    logger.info(
        f"Evaluated answer for question {question.id}: source={source.value}, "
        f"score={score}/{question.points}, confidence={confidence}, matched={len(matched)}"
    )

    return EvaluationDraft(
        file_id=file_id or "",
        student_name=sanitize(submitter_label),
        question_id=question.id,
        extracted_answer=clean_text,
        score=score,
        max_points=max(question.points, 0),
        confidence=confidence,
        feedback=feedback,
        rubric_match=matched,
        grading_source=source,
    )
