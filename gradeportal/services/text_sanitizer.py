"""
Text Sanitizer
Normalizes text handed over by the upload/extraction pipeline into bounded plain text
that is safe to grade and to store.
"""

import logging
import re
import unicodedata

from gradeportal.core.errors import SanitizationFailure

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 10_000
TRUNCATION_SUFFIX = "... [truncated]"
FALLBACK_TEXT = "Error processing extracted text"

# Applied in order; each one is a pure rewrite of the string.
_REWRITES = [
    (re.compile(r"\x00"), ""),
    (re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]"), ""),
    # literal escape sequences left behind by extractors
    (re.compile(r"\\u[0-9a-fA-F]{4}"), " "),
    (re.compile(r"\\x[0-9a-fA-F]{2}"), " "),
    (re.compile(r"\\[0-7]{1,3}"), " "),
    (re.compile(r"\\n"), " "),
    (re.compile(r"\\r"), " "),
    (re.compile(r"\\t"), " "),
    (re.compile(r"\\\\"), r"\\"),
    # BOM counts as whitespace too
    (re.compile(r"[\s\uFEFF]+"), " "),
]


def _sanitize(raw: str) -> str:
    if not isinstance(raw, str):
        raise SanitizationFailure(f"expected str, got {type(raw).__name__}")

    text = raw
    for pattern, replacement in _REWRITES:
        text = pattern.sub(replacement, text)
    text = text.strip()

    text = unicodedata.normalize("NFKC", text)

    if len(text) > MAX_TEXT_LENGTH:
        text = text[:MAX_TEXT_LENGTH] + TRUNCATION_SUFFIX
    return text


def sanitize(raw: str | None) -> str:
    """
    Clean extracted text. Never raises.

    Empty or missing input gives "". Any internal failure gives FALLBACK_TEXT.
    """
    if not raw:
        return ""
    try:
        return _sanitize(raw)
    except Exception as e:
        logger.warning(f"Sanitization failed, using placeholder text: {e}")
        return FALLBACK_TEXT
