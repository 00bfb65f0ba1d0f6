"""Prompt matchers used by ``UserPromptSubmit`` hooks."""
from __future__ import annotations

import re
from typing import List

DEFAULT_FUZZY_CONFIDENCE = 0.7
_WORD_SPLIT = re.compile(r"\s+")


def levenshtein(a: str, b: str) -> int:
    """Classic edit distance, two-row variant."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def _words(text: str) -> List[str]:
    return [w for w in _WORD_SPLIT.split(text.strip().lower()) if w]


class KeywordMatcher:
    """Match prompts against a keyword expression.

    Tokens prefixed with ``+`` are required, ``-`` excluded and ``?``
    optional. When plain tokens are present at least one must appear.
    """

    def __init__(self, pattern: str) -> None:
        self.required: List[str] = []
        self.excluded: List[str] = []
        self.optional: List[str] = []
        self.plain: List[str] = []
        for token in _words(pattern):
            if token.startswith("+") and len(token) > 1:
                self.required.append(token[1:])
            elif token.startswith("-") and len(token) > 1:
                self.excluded.append(token[1:])
            elif token.startswith("?") and len(token) > 1:
                self.optional.append(token[1:])
            else:
                self.plain.append(token)

    def matches(self, text: str) -> bool:
        lowered = text.lower()
        if any(word in lowered for word in self.excluded):
            return False
        if not all(word in lowered for word in self.required):
            return False
        if self.plain and not any(word in lowered for word in self.plain):
            return False
        return True


class FuzzyMatcher:
    """Tolerant matcher over ``|``-separated alternatives."""

    def __init__(self, pattern: str, confidence: float = DEFAULT_FUZZY_CONFIDENCE) -> None:
        self.patterns = [p.strip().lower() for p in pattern.split("|") if p.strip()]
        self.confidence = confidence

    def score(self, text: str) -> float:
        lowered = text.lower()
        text_words = _words(lowered)
        best = 0.0
        for pattern in self.patterns:
            if pattern in lowered:
                return 1.0
            pattern_words = _words(pattern)
            if not pattern_words:
                continue
            total = 0.0
            for pw in pattern_words:
                if any(pw in tw or tw in pw for tw in text_words):
                    total += 1.0
                elif any(levenshtein(pw, tw) <= 2 for tw in text_words):
                    total += 0.8
            best = max(best, total / len(pattern_words))
        return best

    def matches(self, text: str) -> bool:
        return self.score(text) >= self.confidence


__all__ = ["DEFAULT_FUZZY_CONFIDENCE", "FuzzyMatcher", "KeywordMatcher", "levenshtein"]
