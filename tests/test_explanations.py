from __future__ import annotations

from relevance_engine.explanations import (
    ComponentLine,
    ExplanationContext,
    SharedGroup,
    render_explanation,
)


def test_render_explanation_full_semantic_layout() -> None:
    context = ExplanationContext(
        score=0.5,
        threshold=0.35,
        entity_groups=[SharedGroup("entities", ["Sarah Johnson"])],
        term_group=SharedGroup("keywords", ["aws", "budget"], limit=7),
        components=[
            ComponentLine("Entity overlap", 1 / 3),
            ComponentLine("Keyword similarity", 0.25),
            ComponentLine("Semantic similarity", 0.9),
        ],
        semantic_similarity=0.9,
    )

    assert render_explanation(context) == (
        "Moderate relevance detected. "
        "The texts are highly semantically similar. "
        "Both texts mention the same entities: Sarah Johnson. "
        "Both texts share keywords related to: aws, budget. "
        "Entity overlap: 33.3%. "
        "Keyword similarity: 25.0%. "
        "Semantic similarity: 90.0%."
    )


def test_render_explanation_truncates_long_listings() -> None:
    context = ExplanationContext(
        score=0.9,
        threshold=0.3,
        entity_groups=[SharedGroup("entities", ["A", "B", "C", "D", "E", "F"])],
        term_group=SharedGroup("keywords", [f"k{index}" for index in range(9)], limit=7),
    )

    text = render_explanation(context)

    assert text.startswith("High relevance detected. ")
    assert "Both texts mention the same entities: A, B, C, D, E...." in text
    assert "Both texts share keywords related to: k0, k1, k2, k3, k4, k5, k6...." in text


def test_render_explanation_skips_empty_groups() -> None:
    context = ExplanationContext(
        score=0.3,
        threshold=0.3,
        entity_groups=[SharedGroup("people", []), SharedGroup("places", ["Paris"])],
        term_group=SharedGroup("topics", [], limit=7),
        components=[ComponentLine("Entity overlap", 0.0), ComponentLine("Topic similarity", 0.0)],
    )

    assert render_explanation(context) == (
        "Low relevance detected. "
        "Both texts mention the same places: Paris. "
        "Entity overlap: 0.0%. "
        "Topic similarity: 0.0%."
    )


def test_semantic_sentence_bands() -> None:
    def sentence(similarity: float) -> str:
        text = render_explanation(ExplanationContext(score=0.0, threshold=0.35, semantic_similarity=similarity))
        return text.split(". ", 1)[1]

    assert sentence(0.81) == "The texts are highly semantically similar."
    assert sentence(0.8) == "The texts share moderate semantic similarity."
    assert sentence(0.4) == "The texts have some semantic relationship."
    assert sentence(0.3) == "The texts have limited semantic connection."
