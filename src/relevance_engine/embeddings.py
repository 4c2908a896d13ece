"""Embedding service and semantic similarity scoring."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from enum import Enum, auto
from typing import Final, List

import httpx
from openai import OpenAI

from .config import Settings
from .errors import ConfigError, ExternalServiceError
from .scoring import cosine_similarity

CHARS_PER_TOKEN: Final[int] = 4

logger = logging.getLogger(__name__)


class EmbeddingBackend(Enum):
    """Supported embedding backends."""

    OPENAI = auto()
    OLLAMA = auto()


def truncate_text(text: str, max_tokens: int) -> str:
    """Cut ``text`` to roughly ``max_tokens`` tokens (one token is about four characters)."""

    max_chars = max_tokens * CHARS_PER_TOKEN
    if len(text) <= max_chars:
        return text
    return text[:max_chars]


class EmbeddingService:
    """Produce one embedding vector per text from the configured provider."""

    def __init__(
        self,
        settings: Settings,
        *,
        api_key: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._settings = settings
        self._timeout = settings.embedding_timeout if timeout is None else timeout
        self._backend = (
            EmbeddingBackend.OLLAMA if settings.is_ollama_embedding_backend else EmbeddingBackend.OPENAI
        )
        self._openai_client: OpenAI | None = None
        self._ollama_client: httpx.Client | None = None
        self._ollama_model: str | None = None
        self._ollama_base_url: str | None = None

        if self._backend is EmbeddingBackend.OPENAI:
            self._setup_openai(api_key)
        else:
            self._setup_ollama()

    @property
    def backend(self) -> EmbeddingBackend:
        """Return the active backend type."""

        return self._backend

    @property
    def model_identifier(self) -> str:
        """Return the configured embedding model identifier."""

        return self._settings.embedding_model

    def embed_one(self, text: str) -> List[float]:
        """Generate an embedding for a single piece of text.

        Any provider failure is raised as :class:`ExternalServiceError`.
        """

        if self._backend is EmbeddingBackend.OPENAI:
            assert self._openai_client is not None  # for mypy
            try:
                result = self._openai_client.embeddings.create(
                    model=self._settings.openai_embedding_model,
                    input=text,
                )
                return [float(value) for value in result.data[0].embedding]
            except Exception as exc:
                raise ExternalServiceError(f"OpenAI embedding request failed: {exc}") from exc

        return self._ollama_embed(text)

    def close(self) -> None:
        """Release any underlying client resources."""

        if self._ollama_client is not None:
            self._ollama_client.close()
            self._ollama_client = None
        if self._openai_client is not None:
            self._openai_client.close()
            self._openai_client = None

    # Internal helpers -------------------------------------------------

    def _setup_openai(self, api_key: str | None) -> None:
        key = (api_key or "").strip()
        if not key:
            msg = "OPENAI_API_KEY must be set when using the OpenAI embedding backend."
            raise ConfigError(msg)
        # A failed request falls back to lexical scoring instead of retrying.
        self._openai_client = OpenAI(api_key=key, timeout=self._timeout, max_retries=0)

    def _setup_ollama(self) -> None:
        try:
            model, base_url = self._settings.ollama_embedding_endpoint
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

        self._ollama_model = model
        self._ollama_base_url = base_url
        self._ollama_client = httpx.Client(base_url=base_url, timeout=self._timeout)

    def _ollama_embed(self, text: str) -> List[float]:
        if self._ollama_client is None or not self._ollama_model:
            msg = "Ollama embedding backend is not initialised."
            raise RuntimeError(msg)

        # Build a fully-qualified URL to preserve any base path prefix.
        assert self._ollama_base_url is not None  # for type checkers
        url = f"{self._ollama_base_url.rstrip('/')}/api/embeddings"
        payload = {"model": self._ollama_model, "prompt": text}

        try:
            response = self._ollama_client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
        except Exception as exc:
            raise ExternalServiceError(f"Ollama embedding request failed: {exc}") from exc

        embedding = data.get("embedding") if isinstance(data, dict) else None
        if embedding is None:
            msg = "Ollama embedding response did not include an 'embedding' field."
            raise ExternalServiceError(msg)
        try:
            return [float(value) for value in embedding]
        except (TypeError, ValueError) as exc:
            raise ExternalServiceError(f"Ollama embedding response is malformed: {exc}") from exc


@dataclass(frozen=True, slots=True)
class SimilarityOutcome:
    """Result of a semantic similarity measurement: a value or an error message."""

    value: float | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.value is None

    def resolve(self, fallback: float) -> float:
        """Return the measured similarity, or ``fallback`` when the measurement failed."""

        if self.value is None:
            return fallback
        return self.value


class SemanticSimilarityScorer:
    """Compare two texts through their embedding vectors."""

    def __init__(self, embedding_service: EmbeddingService, *, max_tokens: int = 8000) -> None:
        self._embedding_service = embedding_service
        self._max_tokens = max_tokens

    def measure(self, primary_text: str, secondary_text: str, *, timeout: float | None = None) -> SimilarityOutcome:
        """Embed both texts concurrently and return their cosine similarity.

        Provider failures and timeouts yield a failed outcome. A dimension
        mismatch between the two vectors is raised.
        """

        texts = [
            truncate_text(primary_text, self._max_tokens),
            truncate_text(secondary_text, self._max_tokens),
        ]
        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="relevance-embed")
        try:
            futures = [executor.submit(self._embedding_service.embed_one, text) for text in texts]
            vectors = [future.result(timeout=timeout) for future in futures]
        except ExternalServiceError as exc:
            logger.warning("semantic.embedding.failed error=%s", exc)
            return SimilarityOutcome(error=str(exc))
        except FutureTimeoutError:
            logger.warning("semantic.embedding.timeout timeout=%s", timeout)
            return SimilarityOutcome(error=f"Embedding request timed out after {timeout} seconds")
        finally:
            # A timed-out request keeps running on its worker until the client's
            # own timeout ends it; its result is discarded.
            executor.shutdown(wait=False, cancel_futures=True)

        return SimilarityOutcome(value=cosine_similarity(vectors[0], vectors[1]))
