# gradeportal/services/keyword_matcher.py
from typing import Iterable, List


def match_keywords(text: str, keywords: Iterable[str]) -> List[str]:
    """
    Return the keywords found in `text`, in keyword-list order.

    Case-insensitive substring search: "add" matches inside "addition".
    No stemming, no fuzzy matching.
    """
    haystack = (text or "").lower()
    return [keyword for keyword in keywords if keyword.lower() in haystack]
