# gradeportal/services/report_service.py
from typing import Dict, List

from sqlalchemy.orm import Session

from gradeportal.models.evaluation import Evaluation
from gradeportal.models.question import Question
from gradeportal.schemas.evaluation import EvaluationStatus
from gradeportal.schemas.report import QuestionStat, ReportOverview, StudentPerformance

TOP_STUDENTS = 5


def difficulty_from_points(points: int) -> str:
    if points <= 3:
        return "Easy"
    if points <= 7:
        return "Medium"
    return "Hard"


def status_from_score(percentage: int) -> str:
    if percentage >= 90:
        return "Excellent"
    if percentage >= 75:
        return "Good"
    if percentage >= 60:
        return "Satisfactory"
    return "Needs Improvement"


def _percent(score: int, max_points: int) -> float:
    return score / max_points * 100 if max_points > 0 else 0.0


def _question_stats(
    questions: List[Question], evaluations: List[Evaluation]
) -> List[QuestionStat]:
    totals: Dict[int, List[int]] = {q.id: [0, 0] for q in questions}
    for ev in evaluations:
        if ev.question_id in totals:
            totals[ev.question_id][0] += 1
            totals[ev.question_id][1] += ev.score

    stats = []
    for q in questions:
        submissions, total_score = totals[q.id]
        possible = submissions * q.points
        stats.append(
            QuestionStat(
                id=q.id,
                title=q.title,
                submissions=submissions,
                avg_score=round(total_score / possible * 100) if possible > 0 else 0,
                difficulty=difficulty_from_points(q.points),
            )
        )
    # stable sort keeps id order among equal counts
    return sorted(stats, key=lambda s: s.submissions, reverse=True)


def _top_students(evaluations: List[Evaluation]) -> List[StudentPerformance]:
    students: Dict[str, List[int]] = {}
    for ev in evaluations:
        entry = students.setdefault(ev.student_name, [0, 0, 0])
        entry[0] += ev.score
        entry[1] += ev.max_points
        entry[2] += 1

    performance = []
    for name, (total_score, total_max, submissions) in students.items():
        percentage = round(total_score / total_max * 100) if total_max > 0 else 0
        performance.append(
            StudentPerformance(
                name=name,
                score=percentage,
                submissions=submissions,
                status=status_from_score(percentage),
            )
        )
    performance.sort(key=lambda s: s.score, reverse=True)
    return performance[:TOP_STUDENTS]


def build_overview(db: Session) -> ReportOverview:
    """
    Dashboard numbers over every stored evaluation.

    `evaluated` counts approved evaluations only; everything else is pending.
    """
    evaluations = db.query(Evaluation).order_by(Evaluation.id.asc()).all()
    questions = db.query(Question).order_by(Question.id.asc()).all()

    total = len(evaluations)
    evaluated = sum(1 for ev in evaluations if ev.status == EvaluationStatus.APPROVED.value)
    percent_sum = sum(_percent(ev.score, ev.max_points) for ev in evaluations)
    average = round(percent_sum / total, 1) if total > 0 else 0.0

    return ReportOverview(
        total_submissions=total,
        evaluated=evaluated,
        pending=total - evaluated,
        average_score=average,
        question_stats=_question_stats(questions, evaluations),
        top_students=_top_students(evaluations),
    )
