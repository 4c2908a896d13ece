"""Relevance engine: runs one scoring strategy and fuses its component scores."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Tuple

from .config import Settings
from .embeddings import EmbeddingService, SemanticSimilarityScorer
from .entities import extract_named_entities, extract_simple_entities
from .errors import ConfigError, InputError, RelevanceError
from .explanations import ComponentLine, ExplanationContext, SharedGroup, TERM_DISPLAY_LIMIT, render_explanation
from .observability import MetricsRecorder
from .scoring import fallback_similarity, overlap, shared_terms, topic_similarity
from .text import extract_keywords, tokenize
from .topics import rank_topics

logger = logging.getLogger(__name__)

KEYWORD_OVERLAP = "keywordOverlap"
ENTITY_OVERLAP = "entityOverlap"
TOPIC_SIMILARITY = "topicSimilarity"
SEMANTIC_SIMILARITY = "semanticSimilarity"

TOPIC_LIMIT = 15


class ScoringStrategy(str, Enum):
    """Available scoring pipelines."""

    LEXICAL = "lexical"
    ENTITY_TOPIC = "entity-topic"
    SEMANTIC = "semantic"

    @classmethod
    def parse(cls, value: "ScoringStrategy | str") -> "ScoringStrategy":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "-")
        for member in cls:
            if member.value == normalized:
                return member
        msg = f"Unknown scoring strategy '{value}'. Expected one of: {', '.join(m.value for m in cls)}."
        raise ConfigError(msg)


@dataclass(frozen=True, slots=True)
class FusionPolicy:
    """Fixed component weights and relevance threshold of one strategy."""

    weights: Tuple[Tuple[str, float], ...]
    threshold: float

    def fuse(self, components: Mapping[str, float]) -> float:
        return sum(components[name] * weight for name, weight in self.weights)

    def is_relevant(self, score: float) -> bool:
        return score > self.threshold


FUSION_POLICIES: Mapping[ScoringStrategy, FusionPolicy] = MappingProxyType(
    {
        ScoringStrategy.LEXICAL: FusionPolicy(
            weights=((KEYWORD_OVERLAP, 0.6), (ENTITY_OVERLAP, 0.4)),
            threshold=0.3,
        ),
        ScoringStrategy.ENTITY_TOPIC: FusionPolicy(
            weights=((ENTITY_OVERLAP, 0.6), (TOPIC_SIMILARITY, 0.4)),
            threshold=0.3,
        ),
        ScoringStrategy.SEMANTIC: FusionPolicy(
            weights=((KEYWORD_OVERLAP, 0.3), (ENTITY_OVERLAP, 0.2), (SEMANTIC_SIMILARITY, 0.5)),
            threshold=0.35,
        ),
    }
)


@dataclass(frozen=True, slots=True)
class RelevanceResult:
    """Outcome of one relevance assessment."""

    is_relevant: bool
    score: float
    explanation: str
    components: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    strategy: ScoringStrategy = ScoringStrategy.LEXICAL

    @classmethod
    def failure(cls, message: str, strategy: ScoringStrategy = ScoringStrategy.LEXICAL) -> "RelevanceResult":
        """Uniform result for texts whose relevance could not be assessed."""

        return cls(is_relevant=False, score=0.0, explanation=message, strategy=strategy)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isRelevant": self.is_relevant,
            "score": self.score,
            "explanation": self.explanation,
            "components": dict(self.components),
        }


@dataclass(slots=True)
class _Analysis:
    components: Dict[str, float]
    entity_groups: List[SharedGroup]
    term_group: SharedGroup
    component_lines: List[ComponentLine]
    semantic_similarity: float | None = None


EmbeddingServiceFactory = Callable[..., EmbeddingService]


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _require_text(value: str | None) -> str:
    if value is None or not str(value).strip():
        raise InputError("Both primaryText and secondaryText are required")
    return str(value)


class RelevanceEngine:
    """Score how relevant the primary text's knowledge is to the secondary text."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        metrics: MetricsRecorder | None = None,
        embedding_service_factory: EmbeddingServiceFactory = EmbeddingService,
    ) -> None:
        self._settings = settings or Settings()
        self._metrics = metrics
        self._embedding_service_factory = embedding_service_factory

    @property
    def settings(self) -> Settings:
        return self._settings

    def calculate_relevance(
        self,
        primary_text: str,
        secondary_text: str,
        *,
        strategy: ScoringStrategy | str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ) -> RelevanceResult:
        """Compare two texts with the selected strategy.

        Raises :class:`InputError` when either text is blank and
        :class:`ConfigError` when the semantic strategy has no credential.
        """

        primary_text = _require_text(primary_text)
        secondary_text = _require_text(secondary_text)
        selected = ScoringStrategy.parse(strategy or self._settings.default_strategy)
        credential = api_key or self._settings.openai_api_key
        if selected is ScoringStrategy.SEMANTIC and self._settings.requires_api_key and not credential:
            raise ConfigError("OpenAI API key is not configured")

        if self._metrics is not None:
            self._metrics.increment("relevance.requests", strategy=selected.value)
            with self._metrics.track_timing("relevance.duration", strategy=selected.value):
                result = self._score(selected, primary_text, secondary_text, credential, timeout)
            self._metrics.increment(
                "relevance.relevant" if result.is_relevant else "relevance.not_relevant",
                strategy=selected.value,
            )
        else:
            result = self._score(selected, primary_text, secondary_text, credential, timeout)

        logger.info(
            "relevance.completed strategy=%s score=%.4f relevant=%s",
            selected.value,
            result.score,
            result.is_relevant,
        )
        return result

    def assess(
        self,
        primary_text: str,
        secondary_text: str,
        *,
        strategy: ScoringStrategy | str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ) -> RelevanceResult:
        """Like :meth:`calculate_relevance` but reports failures as a zero-score result."""

        try:
            return self.calculate_relevance(
                primary_text,
                secondary_text,
                strategy=strategy,
                api_key=api_key,
                timeout=timeout,
            )
        except RelevanceError as exc:
            logger.warning("relevance.failed error=%s", exc)
            try:
                selected = ScoringStrategy.parse(strategy or self._settings.default_strategy)
            except ConfigError:
                selected = ScoringStrategy.LEXICAL
            return RelevanceResult.failure(f"Could not assess relevance: {exc}", selected)

    # Internal helpers -------------------------------------------------

    def _score(
        self,
        strategy: ScoringStrategy,
        primary_text: str,
        secondary_text: str,
        credential: str | None,
        timeout: float | None,
    ) -> RelevanceResult:
        if strategy is ScoringStrategy.ENTITY_TOPIC:
            analysis = self._analyse_entity_topic(primary_text, secondary_text)
        elif strategy is ScoringStrategy.SEMANTIC:
            analysis = self._analyse_semantic(primary_text, secondary_text, credential, timeout)
        else:
            analysis = self._analyse_lexical(primary_text, secondary_text)

        policy = FUSION_POLICIES[strategy]
        score = _clamp(policy.fuse(analysis.components))
        explanation = render_explanation(
            ExplanationContext(
                score=score,
                threshold=policy.threshold,
                entity_groups=analysis.entity_groups,
                term_group=analysis.term_group,
                components=analysis.component_lines,
                semantic_similarity=analysis.semantic_similarity,
            )
        )
        return RelevanceResult(
            is_relevant=policy.is_relevant(score),
            score=score,
            explanation=explanation,
            components=MappingProxyType(dict(analysis.components)),
            strategy=strategy,
        )

    def _analyse_lexical(self, primary_text: str, secondary_text: str) -> _Analysis:
        primary_keywords = extract_keywords(primary_text)
        secondary_keywords = extract_keywords(secondary_text)
        primary_entities = extract_simple_entities(primary_text)
        secondary_entities = extract_simple_entities(secondary_text)

        keyword_overlap = overlap(primary_keywords, secondary_keywords)
        entity_overlap = overlap(primary_entities, secondary_entities)
        return _Analysis(
            components={KEYWORD_OVERLAP: keyword_overlap, ENTITY_OVERLAP: entity_overlap},
            entity_groups=[SharedGroup("entities", shared_terms(primary_entities, secondary_entities))],
            term_group=SharedGroup(
                "keywords",
                shared_terms(primary_keywords, secondary_keywords),
                limit=TERM_DISPLAY_LIMIT,
            ),
            component_lines=[
                ComponentLine("Entity overlap", entity_overlap),
                ComponentLine("Keyword similarity", keyword_overlap),
            ],
        )

    def _analyse_entity_topic(self, primary_text: str, secondary_text: str) -> _Analysis:
        primary_profile = extract_named_entities(primary_text)
        secondary_profile = extract_named_entities(secondary_text)
        primary_topics, secondary_topics = rank_topics(
            [tokenize(primary_text), tokenize(secondary_text)],
            limit=TOPIC_LIMIT,
        )
        primary_terms = [item.term for item in primary_topics]
        secondary_terms = [item.term for item in secondary_topics]

        entity_overlap = overlap(primary_profile.all_terms(), secondary_profile.all_terms())
        similarity = topic_similarity(primary_terms, secondary_terms)
        return _Analysis(
            components={ENTITY_OVERLAP: entity_overlap, TOPIC_SIMILARITY: similarity},
            entity_groups=[
                SharedGroup("people", shared_terms(primary_profile.people, secondary_profile.people)),
                SharedGroup(
                    "organizations",
                    shared_terms(primary_profile.organizations, secondary_profile.organizations),
                ),
                SharedGroup("places", shared_terms(primary_profile.places, secondary_profile.places)),
            ],
            term_group=SharedGroup(
                "topics",
                shared_terms(primary_terms, secondary_terms),
                limit=TERM_DISPLAY_LIMIT,
            ),
            component_lines=[
                ComponentLine("Entity overlap", entity_overlap),
                ComponentLine("Topic similarity", similarity),
            ],
        )

    def _analyse_semantic(
        self,
        primary_text: str,
        secondary_text: str,
        credential: str | None,
        timeout: float | None,
    ) -> _Analysis:
        analysis = self._analyse_lexical(primary_text, secondary_text)
        keyword_overlap = analysis.components[KEYWORD_OVERLAP]
        entity_overlap = analysis.components[ENTITY_OVERLAP]

        service = self._embedding_service_factory(self._settings, api_key=credential)
        try:
            scorer = SemanticSimilarityScorer(service, max_tokens=self._settings.embedding_max_tokens)
            effective_timeout = self._settings.embedding_timeout if timeout is None else timeout
            if self._metrics is not None:
                with self._metrics.track_timing("embedding.duration", backend=service.backend.name.lower()):
                    outcome = scorer.measure(primary_text, secondary_text, timeout=effective_timeout)
            else:
                outcome = scorer.measure(primary_text, secondary_text, timeout=effective_timeout)
        finally:
            service.close()

        if outcome.failed:
            logger.warning("semantic.fallback reason=%s", outcome.error)
            if self._metrics is not None:
                self._metrics.increment("semantic.fallback")
        similarity = _clamp(outcome.resolve(fallback_similarity(keyword_overlap, entity_overlap)))

        analysis.components[SEMANTIC_SIMILARITY] = similarity
        analysis.component_lines.append(ComponentLine("Semantic similarity", similarity))
        analysis.semantic_similarity = similarity
        return analysis
