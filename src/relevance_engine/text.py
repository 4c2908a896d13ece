"""Tokenization and keyword ranking for free-text knowledge descriptions."""

from __future__ import annotations

import re
from collections import Counter
from typing import Final, List, Tuple

# Closed set of English function words; not configurable per call.
STOPWORDS: Final[frozenset[str]] = frozenset(
    {
        "a", "an", "the", "and", "or", "but", "is", "are", "was", "were",
        "be", "been", "being", "have", "has", "had", "do", "does", "did",
        "to", "from", "in", "out", "on", "off", "over", "under", "again",
        "further", "then", "once", "here", "there", "when", "where", "why",
        "how", "all", "any", "both", "each", "few", "more", "most", "other",
        "some", "such", "no", "nor", "not", "only", "own", "same", "so",
        "than", "too", "very", "can", "will", "just", "should", "now",
    }
)

MAX_KEYWORDS: Final[int] = 15
MIN_TOKEN_LENGTH: Final[int] = 3

_PUNCTUATION_RE = re.compile(r"[^A-Za-z0-9_\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def tokenize(text: str) -> List[str]:
    """Return lowercase word tokens with punctuation, stop words and short words removed."""

    if not text:
        return []
    cleaned = _PUNCTUATION_RE.sub("", text.lower())
    return [
        word
        for word in _WHITESPACE_RE.split(cleaned)
        if len(word) >= MIN_TOKEN_LENGTH and word not in STOPWORDS
    ]


def rank_terms(tokens: List[str]) -> List[Tuple[str, int]]:
    """Return ``(term, count)`` pairs by descending count.

    Equal counts keep the order in which the term first appeared.
    """

    counter: Counter[str] = Counter(tokens)
    # Counter preserves insertion order and sorted() is stable.
    return sorted(counter.items(), key=lambda item: -item[1])


def extract_keywords(text: str, *, limit: int = MAX_KEYWORDS) -> List[str]:
    """Return the most frequent tokens of ``text``, at most ``limit`` of them."""

    ranked = rank_terms(tokenize(text))
    return [term for term, _count in ranked[: max(0, limit)]]
