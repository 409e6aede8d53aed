"""Intent detection for submitted prompts.

Tags a prompt with zero or more intents from a fixed vocabulary.  Every
pattern is evaluated independently, so a prompt such as "fix the failing
test" carries both ``debugging`` and ``testing``.
"""

from __future__ import annotations

import re
from typing import NamedTuple


class IntentPattern(NamedTuple):
    """One row of the intent table."""

    tag: str
    pattern: re.Pattern[str]


def _compile(alternatives: str) -> re.Pattern[str]:
    return re.compile(alternatives, re.IGNORECASE)


# Evaluated in order; the order only affects the order of returned tags.
INTENT_PATTERNS: tuple[IntentPattern, ...] = (
    IntentPattern("code_request", _compile(r"write|create|implement|build|code|function|class")),
    IntentPattern("explanation", _compile(r"explain|what is|how does|why|understand")),
    IntentPattern("debugging", _compile(r"fix|debug|error|issue|problem|not working")),
    IntentPattern("refactor", _compile(r"refactor|improve|optimize|clean up")),
    IntentPattern("documentation", _compile(r"document|comment|readme|docs")),
    IntentPattern("testing", _compile(r"test|spec|unit test|integration test")),
)

INTENT_TAGS: tuple[str, ...] = tuple(p.tag for p in INTENT_PATTERNS)


def detect_intents(text: str) -> list[str]:
    """Return every intent tag whose pattern matches *text*.

    Args:
        text: The prompt text.

    Returns:
        Matching tags in table order (possibly empty).
    """
    if not text:
        return []
    return [entry.tag for entry in INTENT_PATTERNS if entry.pattern.search(text)]
