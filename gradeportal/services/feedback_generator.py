# gradeportal/services/feedback_generator.py
from typing import List, Optional, Sequence

from gradeportal.schemas.question import QuestionType

MANUAL_REVIEW_FEEDBACK = "No answer key is configured for this question. Manual review required."


def score_percentage(score: int, max_points: int) -> float:
    if max_points <= 0:
        return 0.0
    return score / max_points * 100


def missed_keywords(matched: Sequence[str], all_keywords: Sequence[str]) -> List[str]:
    return [k for k in all_keywords if k not in matched]


def _short_answer_feedback(percentage: float, matched: Sequence[str]) -> str:
    if percentage >= 90:
        return "Excellent! Your answer is correct and complete."
    elif percentage >= 70:
        return (
            "Good work! You got most of it right. "
            f"Key concepts identified: {', '.join(matched)}"
        )
    elif percentage >= 50:
        return "Partial credit. Your answer shows some understanding but could be more complete."
    else:
        return (
            "Your answer needs improvement. "
            "Please review the question and try to include the key concepts."
        )


def _essay_feedback(
    percentage: float,
    matched: Sequence[str],
    all_keywords: Sequence[str],
) -> str:
    if percentage >= 90:
        feedback = "Excellent essay! You covered all the key concepts comprehensively."
    elif percentage >= 70:
        feedback = f"Good essay with solid understanding. You mentioned: {', '.join(matched)}."
    elif percentage >= 50:
        feedback = "Your essay shows basic understanding but could be expanded."
    else:
        feedback = "Your essay needs significant improvement."

    missed = missed_keywords(matched, all_keywords)
    if missed:
        feedback += f" Consider including: {', '.join(missed)}."
    return feedback


def generate_feedback(
    score: int,
    max_points: int,
    matched: Sequence[str],
    all_keywords: Sequence[str],
    question_type: QuestionType,
    *,
    correct: Optional[bool] = None,
) -> str:
    """
    Human-readable feedback for a locally scored answer.

    Bands on score percentage, first match wins: >=90, >=70, >=50, below.
    Essays also list the keywords they missed; multiple-choice is right/wrong only:
    `correct` when given, otherwise score == max_points.
    """
    question_type = QuestionType(question_type)

    if question_type == QuestionType.MULTIPLE_CHOICE:
        if correct is None:
            correct = score == max_points
        return "Correct answer!" if correct else "Incorrect answer."

    percentage = score_percentage(score, max_points)
    if question_type == QuestionType.ESSAY:
        return _essay_feedback(percentage, matched, all_keywords)
    return _short_answer_feedback(percentage, matched)
