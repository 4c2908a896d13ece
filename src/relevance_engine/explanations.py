"""Render relevance results as a short prose explanation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

HIGH_RELEVANCE_THRESHOLD = 0.7
ENTITY_DISPLAY_LIMIT = 5
TERM_DISPLAY_LIMIT = 7


@dataclass(frozen=True, slots=True)
class SharedGroup:
    """Items both texts have in common, with the label used in the sentence."""

    label: str
    items: Sequence[str]
    limit: int = ENTITY_DISPLAY_LIMIT


@dataclass(frozen=True, slots=True)
class ComponentLine:
    label: str
    value: float


@dataclass(frozen=True, slots=True)
class ExplanationContext:
    """Everything the formatter needs, computed before any text is produced."""

    score: float
    threshold: float
    entity_groups: Sequence[SharedGroup] = field(default_factory=tuple)
    term_group: SharedGroup | None = None
    components: Sequence[ComponentLine] = field(default_factory=tuple)
    semantic_similarity: float | None = None


def _relevance_sentence(score: float, threshold: float) -> str:
    if score > HIGH_RELEVANCE_THRESHOLD:
        return "High relevance detected."
    if score > threshold:
        return "Moderate relevance detected."
    return "Low relevance detected."


def _semantic_sentence(similarity: float) -> str:
    if similarity > 0.8:
        return "The texts are highly semantically similar."
    if similarity > 0.5:
        return "The texts share moderate semantic similarity."
    if similarity > 0.3:
        return "The texts have some semantic relationship."
    return "The texts have limited semantic connection."


def _listing(items: Sequence[str], limit: int) -> str:
    suffix = "..." if len(items) > limit else ""
    return f"{', '.join(items[:limit])}{suffix}"


def format_percentage(value: float) -> str:
    return f"{value * 100:.1f}%"


def render_explanation(context: ExplanationContext) -> str:
    sentences: List[str] = [_relevance_sentence(context.score, context.threshold)]

    if context.semantic_similarity is not None:
        sentences.append(_semantic_sentence(context.semantic_similarity))

    for group in context.entity_groups:
        if group.items:
            sentences.append(f"Both texts mention the same {group.label}: {_listing(group.items, group.limit)}.")

    term_group = context.term_group
    if term_group is not None and term_group.items:
        sentences.append(
            f"Both texts share {term_group.label} related to: {_listing(term_group.items, term_group.limit)}."
        )

    for line in context.components:
        sentences.append(f"{line.label}: {format_percentage(line.value)}.")

    return " ".join(sentences)
