"""
Suspicious-term matching over profile comments.

The term set is configuration (SUSPICIOUS_TERMS); terms are matched as
case-insensitive substrings of each comment.
"""

from __future__ import annotations

import re
from typing import Iterable


class CommentMatcher:
    """Compiled case-insensitive alternation of suspicious terms."""

    def __init__(self, terms: Iterable[str]) -> None:
        self.terms = tuple(t for t in (s.strip() for s in terms) if t)
        if self.terms:
            self._pattern: re.Pattern[str] | None = re.compile(
                "|".join(re.escape(t) for t in self.terms),
                re.IGNORECASE,
            )
        else:
            self._pattern = None

    def matches(self, text: str) -> bool:
        if self._pattern is None or not text:
            return False
        return self._pattern.search(text) is not None

    def any_match(self, comments: Iterable[str]) -> bool:
        """True if any comment contains any term."""
        return any(self.matches(c) for c in comments)
