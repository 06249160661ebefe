"""
Scoring Policy
Maps keyword matches to a bounded score and a confidence estimate, per question type.
"""

import math
import random
import re
from typing import Optional, Sequence

from gradeportal.schemas.evaluation import ScoreResult
from gradeportal.schemas.question import QuestionType

ESSAY_LENGTH_THRESHOLD = 50
ESSAY_LENGTH_BONUS = 0.1
MULTIPLE_CHOICE_CONFIDENCE = 95


def keyword_ratio(matched: Sequence[str], keywords: Sequence[str]) -> float:
    """Matched count over keyword count; 0 when the question lists no keywords."""
    if not keywords:
        return 0.0
    return len(matched) / len(keywords)


def _normalize_answer(value: str) -> str:
    return value.strip().casefold()


def contains_correct_answer(text: str, correct: Optional[str]) -> bool:
    """True when the answer key appears in the text as a whole token, ignoring case."""
    if not correct or not correct.strip():
        return False
    # "4" must not match inside "14" or "42"
    pattern = rf"(?<!\w){re.escape(correct.strip())}(?!\w)"
    return re.search(pattern, text, re.IGNORECASE) is not None


def is_correct_choice(text: str, correct: Optional[str]) -> bool:
    """Multiple-choice check: trimmed, case-insensitive equality with the key."""
    if not correct or not correct.strip():
        return False
    return _normalize_answer(text) == _normalize_answer(correct)


def _short_answer(
    text: str,
    question,
    matched: Sequence[str],
    rng: random.Random,
) -> tuple[float, float]:
    if contains_correct_answer(text, question.correct_answer):
        score = question.points
    else:
        score = math.floor(question.points * keyword_ratio(matched, question.keywords))

    # Jitter stays inside the band; reproducible when rng is seeded.
    if matched:
        confidence = 85 + rng.random() * 15
    else:
        confidence = 60 + rng.random() * 25
    return score, confidence


def _essay(text: str, question, matched: Sequence[str]) -> tuple[float, float]:
    ratio = keyword_ratio(matched, question.keywords)
    length_bonus = ESSAY_LENGTH_BONUS if len(text) > ESSAY_LENGTH_THRESHOLD else 0.0
    score = math.floor(question.points * (ratio + length_bonus))
    confidence = min(95, 70 + 5 * len(matched))
    return score, confidence


def _multiple_choice(text: str, question) -> tuple[float, float]:
    correct = question.correct_answer
    if not correct or not correct.strip():
        # no answer key: leave it to a reviewer
        return 0, 0
    if is_correct_choice(text, correct):
        return question.points, MULTIPLE_CHOICE_CONFIDENCE
    return 0, MULTIPLE_CHOICE_CONFIDENCE


def score_answer(
    text: str,
    question,
    matched: Sequence[str],
    *,
    rng: Optional[random.Random] = None,
) -> ScoreResult:
    """
    Score sanitized answer text against a question.

    `question` is anything exposing type, points, keywords and correct_answer
    (ORM row or QuestionPublic). `rng` drives the short-answer confidence jitter.
    """
    rng = rng or random.Random()
    text = text or ""
    qtype = QuestionType(question.type)

    if qtype == QuestionType.SHORT_ANSWER:
        score, confidence = _short_answer(text, question, matched, rng)
    elif qtype == QuestionType.ESSAY:
        score, confidence = _essay(text, question, matched)
    else:
        score, confidence = _multiple_choice(text, question)

    points = max(question.points, 0)
    score = max(0, min(int(score), points))
    confidence = max(0, min(int(round(confidence)), 100))
    return ScoreResult(score=score, confidence=confidence)
