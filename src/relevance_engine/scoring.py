"""Pure similarity measures shared by every scoring strategy."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence

from .errors import DimensionMismatchError

FALLBACK_KEYWORD_WEIGHT = 0.6
FALLBACK_ENTITY_WEIGHT = 0.4


def _normalise(items: Iterable[object]) -> set[object]:
    return {item.lower() if isinstance(item, str) else item for item in items}


def overlap(left: Sequence[object], right: Sequence[object]) -> float:
    """Case-insensitive Jaccard similarity; 0.0 when either side is empty."""

    if not left or not right:
        return 0.0
    left_set = _normalise(left)
    right_set = _normalise(right)
    intersection = left_set & right_set
    union = left_set | right_set
    return len(intersection) / len(union)


def shared_terms(primary: Sequence[str], secondary: Sequence[str]) -> List[str]:
    """Return items of ``primary`` also present in ``secondary`` (case-insensitive)."""

    lookup = {item.lower() for item in secondary}
    return [item for item in primary if item.lower() in lookup]


def topic_similarity(primary_terms: Sequence[str], secondary_terms: Sequence[str]) -> float:
    """Count-normalised topic overlap: ``|shared| / sqrt(|primary| * |secondary|)``."""

    if not primary_terms or not secondary_terms:
        return 0.0
    secondary_set = set(secondary_terms)
    shared = [term for term in primary_terms if term in secondary_set]
    return len(shared) / math.sqrt(len(primary_terms) * len(secondary_terms))


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors.

    Raises :class:`DimensionMismatchError` when the vectors differ in length.
    Returns 0.0 when either vector has zero magnitude.
    """

    if len(vec_a) != len(vec_b):
        raise DimensionMismatchError(
            f"Vectors must be of the same length (got {len(vec_a)} and {len(vec_b)})"
        )
    dot = sum(float(a) * float(b) for a, b in zip(vec_a, vec_b))
    norm_a = math.sqrt(sum(float(a) * float(a) for a in vec_a))
    norm_b = math.sqrt(sum(float(b) * float(b) for b in vec_b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return dot / (norm_a * norm_b)


def fallback_similarity(keyword_overlap: float, entity_overlap: float) -> float:
    """Lexical stand-in for semantic similarity when embeddings are unavailable."""

    return keyword_overlap * FALLBACK_KEYWORD_WEIGHT + entity_overlap * FALLBACK_ENTITY_WEIGHT
