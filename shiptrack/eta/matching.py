"""
Rule matching - Test status text against a single ETA rule
"""

import logging
import re
from functools import lru_cache
from typing import Optional, Pattern

from ..models import MatchType, Rule

logger = logging.getLogger(__name__)


def normalize_for_match(text: Optional[str]) -> str:
    """Trim and lowercase, treating None as empty"""
    return str(text or "").strip().lower()


@lru_cache(maxsize=256)
def _compile(pattern: str) -> Optional[Pattern[str]]:
    """Compile a case-insensitive pattern, None if it is invalid"""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        logger.warning(f"Invalid regex in ETA rule {pattern!r}: {e}")
        return None


def matches_rule(text: Optional[str], rule: Rule) -> bool:
    """
    Check whether status text satisfies a rule.

    - equals: case-insensitive equality after trimming
    - regex: case-insensitive search on the original, untrimmed text;
      an invalid pattern never matches
    - contains (and any unrecognised match_type): case-insensitive substring

    Empty text or an empty match value never matches.
    """
    normalized_text = normalize_for_match(text)
    normalized_value = normalize_for_match(rule.match_value)
    if not normalized_text or not normalized_value:
        return False

    if rule.match_type == MatchType.EQUALS.value:
        return normalized_text == normalized_value

    if rule.match_type == MatchType.REGEX.value:
        pattern = _compile(rule.match_value)
        if pattern is None:
            return False
        return pattern.search(str(text)) is not None

    if rule.match_type != MatchType.CONTAINS.value:
        logger.debug(f"Unsupported match_type {rule.match_type!r}, using contains")

    return normalized_value in normalized_text
