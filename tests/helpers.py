"""
Builders shared by the test modules.
"""

import json

import httpx

from gradeportal.schemas.question import QuestionPublic
from gradeportal.services.remote_grader import RemoteGrader

PHOTOSYNTHESIS_KEYWORDS = [
    "sunlight", "chlorophyll", "carbon dioxide", "oxygen", "glucose", "plants", "energy",
]
MATH_KEYWORDS = ["4", "four", "2+2", "addition"]


def make_question(**overrides) -> QuestionPublic:
    """Detached question snapshot for pure engine tests."""
    data = {
        "id": 1,
        "title": "Q",
        "prompt": "Explain.",
        "type": "short-answer",
        "points": 10,
        "keywords": ["alpha", "beta"],
    }
    data.update(overrides)
    return QuestionPublic(**data)


def completion_body(content) -> dict:
    if not isinstance(content, str):
        content = json.dumps(content)
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def make_grader(handler) -> RemoteGrader:
    """RemoteGrader whose HTTP calls are answered by `handler(request)`."""
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return RemoteGrader(
        url="https://grader.test/v1/chat/completions",
        api_key="test-key",
        client=client,
    )
