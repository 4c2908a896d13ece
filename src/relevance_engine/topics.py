"""TF-IDF term ranking used as a lightweight stand-in for topic modelling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from sklearn.feature_extraction.text import TfidfVectorizer


@dataclass(frozen=True, slots=True)
class TopicTerm:
    """A term and its TF-IDF weight within one document."""

    term: str
    weight: float


def _identity(tokens: Sequence[str]) -> Sequence[str]:
    return tokens


def rank_topics(documents: Sequence[Sequence[str]], *, limit: int = 15) -> List[List[TopicTerm]]:
    """Rank each tokenised document's terms by TF-IDF weight across ``documents``.

    Returns one list per document holding at most ``limit`` terms with a
    positive weight, highest first. Equal weights keep first-occurrence order.
    """

    if not any(documents):
        return [[] for _ in documents]

    vectorizer = TfidfVectorizer(analyzer=_identity)
    matrix = vectorizer.fit_transform([list(tokens) for tokens in documents])
    vocabulary = vectorizer.vocabulary_

    ranked: List[List[TopicTerm]] = []
    for row_index, tokens in enumerate(documents):
        row = matrix[row_index].toarray()[0]
        terms = [
            TopicTerm(term=term, weight=float(row[vocabulary[term]]))
            for term in dict.fromkeys(tokens)
        ]
        terms = [item for item in terms if item.weight > 0.0]
        terms.sort(key=lambda item: -item.weight)
        ranked.append(terms[: max(0, limit)])
    return ranked
