# gradeportal/workers/queue.py

from typing import Any, Dict

from redis import Redis
from rq import Queue

from gradeportal.core.config import settings

EVALUATION_QUEUE_NAME = "evaluation"

_redis_conn: Redis | None = None


def get_redis_connection() -> Redis:
    global _redis_conn
    if _redis_conn is None:
        _redis_conn = Redis.from_url(settings.REDIS_URL)
    return _redis_conn


def get_queue(name: str = EVALUATION_QUEUE_NAME) -> Queue:
    return Queue(name, connection=get_redis_connection())


def enqueue_evaluation_task(payload: Dict[str, Any]) -> str:
    """Queue grading of one extracted answer; payload is an EvaluationCreate dump."""
    from gradeportal.workers.tasks import evaluation_task

    q = get_queue(EVALUATION_QUEUE_NAME)
    job = q.enqueue(evaluation_task, payload)
    return job.id
