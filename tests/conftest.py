from __future__ import annotations

import threading
import time
from typing import Any, Callable

import pytest

from relevance_engine.config import Settings
from relevance_engine.embeddings import EmbeddingBackend
from relevance_engine.errors import ExternalServiceError


class StubEmbeddingService:
    """In-memory embedding service returning vectors from a callable."""

    def __init__(
        self,
        *,
        vector_fn: Callable[[str], list[float]] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.backend = EmbeddingBackend.OPENAI
        self.api_key: str | None = None
        self.requests: list[str] = []
        self.closed = False
        self._vector_fn = vector_fn or (lambda _text: [1.0, 0.0, 0.0])
        self._error = error
        self._delay = delay
        self._lock = threading.Lock()

    def embed_one(self, text: str) -> list[float]:
        with self._lock:
            self.requests.append(text)
        if self._delay:
            time.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._vector_fn(text)

    def close(self) -> None:
        self.closed = True


class StubEmbeddingFactory:
    def __init__(self, service: StubEmbeddingService) -> None:
        self.service = service
        self.calls: list[dict[str, Any]] = []

    def __call__(self, settings: Settings, *, api_key: str | None = None) -> StubEmbeddingService:
        self.calls.append({"settings": settings, "api_key": api_key})
        self.service.api_key = api_key
        return self.service


@pytest.fixture()
def embedding_factory() -> Callable[..., StubEmbeddingFactory]:
    def _build(**kwargs: Any) -> StubEmbeddingFactory:
        return StubEmbeddingFactory(StubEmbeddingService(**kwargs))

    return _build


@pytest.fixture()
def failing_embedding_factory(embedding_factory) -> StubEmbeddingFactory:
    return embedding_factory(error=ExternalServiceError("rate limited"))


@pytest.fixture()
def settings() -> Settings:
    return Settings(openai_api_key="test-key", observability_metrics_enabled=False)
