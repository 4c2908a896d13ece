from __future__ import annotations

import math

import pytest

from relevance_engine.errors import DimensionMismatchError
from relevance_engine.scoring import (
    cosine_similarity,
    fallback_similarity,
    overlap,
    shared_terms,
    topic_similarity,
)
from relevance_engine.text import extract_keywords


def test_overlap_is_zero_when_either_side_is_empty() -> None:
    assert overlap([], []) == 0.0
    assert overlap([], ["aws"]) == 0.0
    assert overlap(["aws"], []) == 0.0


def test_overlap_is_case_insensitive_jaccard() -> None:
    assert overlap(["AWS", "budget"], ["aws", "Budget"]) == 1.0
    assert overlap(["alpha", "beta"], ["beta", "gamma"]) == pytest.approx(1 / 3)


def test_overlap_of_non_empty_collection_with_itself_is_one() -> None:
    keywords = extract_keywords("Quarterly cloud spend review with finance and product teams")

    assert overlap(keywords, keywords) == 1.0


def test_overlap_is_symmetric_for_extracted_keywords() -> None:
    first = "The database queries are slow during peak traffic hours."
    second = "Customers complain about slow page loads during peak hours."

    forward = overlap(extract_keywords(first), extract_keywords(second))
    backward = overlap(extract_keywords(second), extract_keywords(first))

    assert forward == backward
    assert 0.0 < forward < 1.0


def test_shared_terms_keep_primary_order_and_casing() -> None:
    assert shared_terms(["Sarah Johnson", "AWS", "$5,000"], ["aws", "sarah johnson"]) == [
        "Sarah Johnson",
        "AWS",
    ]


def test_topic_similarity_normalises_by_term_counts() -> None:
    assert topic_similarity(["a", "b", "c", "d"], ["a", "x"]) == pytest.approx(1 / math.sqrt(8))
    assert topic_similarity([], ["a"]) == 0.0
    assert topic_similarity(["a", "b"], ["a", "b"]) == pytest.approx(1.0)


def test_cosine_similarity_basic_cases() -> None:
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0
    assert cosine_similarity([1.0, 2.0], [2.0, 4.0]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)


def test_cosine_similarity_zero_magnitude_is_zero() -> None:
    assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0


def test_cosine_similarity_rejects_mismatched_dimensions() -> None:
    with pytest.raises(DimensionMismatchError):
        cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])


def test_fallback_similarity_blends_lexical_scores() -> None:
    assert fallback_similarity(0.5, 0.25) == 0.5 * 0.6 + 0.25 * 0.4
