"""
Remote Grader Client
Delegates grading of a free-text answer to an OpenAI-compatible chat-completions service.

Every failure surfaces as a RemoteGraderError subclass; the caller owns the fallback.
One attempt per answer, no retries.
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from gradeportal.core.config import settings
from gradeportal.core.errors import (
    InvalidRemoteResponseShape,
    MalformedRemoteResponse,
    RemoteGraderUnavailable,
)
from gradeportal.schemas.evaluation import RemoteGrade

logger = logging.getLogger(__name__)

SYSTEM_DIRECTIVE = "You are an expert educational evaluator. Always respond with valid JSON."

PROMPT_TEMPLATE = """
You are an expert educational evaluator. Please evaluate the student's answer against the expected answer.

Question: {question}
Expected Answer: {expected}
Student Answer: {answer}

Please provide a comprehensive evaluation with the following criteria:
1. Accuracy and completeness of the answer
2. Understanding of key concepts
3. Clarity and coherence of explanation
4. Use of relevant terminology

Respond in the following JSON format:
{{
  "isCorrect": boolean,
  "score": number (0-100),
  "confidence": number (0-100),
  "feedback": "detailed feedback explaining the evaluation"
}}

The score should reflect how well the student answered the question, and confidence should indicate how certain you are about your evaluation.
"""


def build_expected_concepts(question) -> str:
    """Reference answer followed by the rubric keywords."""
    parts = []
    if question.sample_answer:
        parts.append(question.sample_answer.strip())
    if question.keywords:
        parts.append("Key concepts: " + ", ".join(question.keywords))
    return "\n".join(parts)


def _reject_constant(name: str):
    # NaN and Infinity are not valid scores
    raise ValueError(f"non-finite number {name}")


class RemoteGrader:
    """
    Thin client for the grading service.

    `client` can be any httpx.Client; tests pass one built on httpx.MockTransport.
    """

    def __init__(
        self,
        *,
        url: str,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        timeout: float = 20.0,
        temperature: float = 0.3,
        max_tokens: int = 500,
        client: Optional[httpx.Client] = None,
    ):
        self.url = url
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def _build_payload(self, question: str, expected: str, answer: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_DIRECTIVE},
                {
                    "role": "user",
                    "content": PROMPT_TEMPLATE.format(
                        question=question, expected=expected, answer=answer
                    ),
                },
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        try:
            response = self._client.post(
                self.url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )
        except httpx.HTTPError as e:
            raise RemoteGraderUnavailable(f"transport error: {e}") from e

        if not response.is_success:
            raise RemoteGraderUnavailable(f"grading service returned HTTP {response.status_code}")
        return response

    @staticmethod
    def _extract_content(response: httpx.Response) -> str:
        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise MalformedRemoteResponse(f"unexpected completion envelope: {e}") from e

        if not isinstance(content, str) or not content.strip():
            raise MalformedRemoteResponse("empty completion content")
        return content

    @staticmethod
    def _parse_grade(content: str) -> RemoteGrade:
        try:
            parsed = json.loads(content, parse_constant=_reject_constant)
        except ValueError as e:
            raise MalformedRemoteResponse(f"completion is not valid JSON: {e}") from e

        if not isinstance(parsed, dict):
            raise InvalidRemoteResponseShape("completion JSON is not an object")
        try:
            return RemoteGrade.model_validate(parsed)
        except ValidationError as e:
            raise InvalidRemoteResponseShape(
                f"completion JSON has wrong fields: {e.error_count()} error(s)"
            ) from e

    def grade_remotely(self, question: str, expected_answer: str, student_answer: str) -> RemoteGrade:
        """
        Ask the service to grade one answer.

        Raises:
            RemoteGraderUnavailable: transport failure, timeout or non-2xx status
            MalformedRemoteResponse: body or completion content is not parseable
            InvalidRemoteResponseShape: JSON lacks a field or has a wrong type
        """
        payload = self._build_payload(question, expected_answer, student_answer)
        response = self._post(payload)
        grade = self._parse_grade(self._extract_content(response))

        logger.info(
            f"Remote grade received: isCorrect={grade.isCorrect}, "
            f"score={grade.score}, confidence={grade.confidence}"
        )
        return grade


def build_remote_grader() -> Optional[RemoteGrader]:
    """Grader configured from settings, or None when remote grading is off."""
    if not settings.REMOTE_GRADER_ENABLED:
        return None
    if not settings.REMOTE_GRADER_API_KEY:
        logger.warning("REMOTE_GRADER_ENABLED is set but REMOTE_GRADER_API_KEY is missing")
        return None
    return RemoteGrader(
        url=settings.REMOTE_GRADER_URL,
        api_key=settings.REMOTE_GRADER_API_KEY,
        model=settings.REMOTE_GRADER_MODEL,
        timeout=settings.REMOTE_GRADER_TIMEOUT_SECONDS,
        temperature=settings.REMOTE_GRADER_TEMPERATURE,
        max_tokens=settings.REMOTE_GRADER_MAX_TOKENS,
    )
