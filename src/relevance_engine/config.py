"""Configuration helpers for the relevance engine."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import TYPE_CHECKING, Final

from dotenv import load_dotenv

if TYPE_CHECKING:
    from .observability import MetricsRecorder

load_dotenv()

_DEFAULT_EMBEDDING_MODEL: Final[str] = "text-embedding-ada-002"
_DEFAULT_OLLAMA_URL: Final[str] = "http://localhost:11434"
_DEFAULT_EMBEDDING_TIMEOUT: Final[float] = 30.0
_DEFAULT_EMBEDDING_MAX_TOKENS: Final[int] = 8000
_DEFAULT_STRATEGY: Final[str] = "lexical"
_DEFAULT_NAMESPACE: Final[str] = "relevance_engine"


def _env_optional_bool(name: str) -> bool | None:
    """Read an optional boolean environment variable."""

    raw = os.getenv(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    msg = f"Environment variable {name} must be a boolean value (true/false)."
    raise ValueError(msg)


def _env_optional_float(name: str) -> float | None:
    """Read an optional float environment variable."""

    raw = os.getenv(name)
    if raw is None:
        return None
    value = raw.strip()
    if not value:
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be a float") from exc


def _env_optional_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    value = raw.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer") from exc


def _env_float(name: str, default: float) -> float:
    """Read a float environment variable with a fallback (preserving zero)."""

    value = _env_optional_float(name)
    return default if value is None else value


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean environment variable with a fallback."""

    value = _env_optional_bool(name)
    if value is None:
        return default
    return value


def _split_remote_model_spec(spec: str) -> tuple[str, str | None]:
    """
    Split an embedding model spec into (model, base_url).

    Accepts either a bare model name or a full URL ending with the model name,
    in which case the final path segment is treated as the model name.
    """

    value = spec.strip()
    if not value:
        return "", None

    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        base, sep, model = value.rpartition("/")
        model = model.strip()
        if not sep or not base.strip():
            msg = f"Embedding model spec '{spec}' must include a URL ending with the model name."
            raise ValueError(msg)
        return model, base.strip()

    return value, None


@dataclass(slots=True)
class Settings:
    """Runtime settings loaded from environment variables."""

    embedding_model: str = _DEFAULT_EMBEDDING_MODEL
    openai_api_key: str | None = None
    ollama_base_url: str = _DEFAULT_OLLAMA_URL
    embedding_timeout: float = _DEFAULT_EMBEDDING_TIMEOUT
    embedding_max_tokens: int = _DEFAULT_EMBEDDING_MAX_TOKENS
    default_strategy: str = _DEFAULT_STRATEGY
    log_level: str | None = None
    observability_metrics_enabled: bool = True
    observability_namespace: str = _DEFAULT_NAMESPACE
    observability_prometheus_enabled: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings by reading environment variables."""

        max_tokens = _env_optional_int("EMBEDDING_MAX_TOKENS")
        return cls(
            embedding_model=os.getenv("EMBEDDING_MODEL", _DEFAULT_EMBEDDING_MODEL),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", _DEFAULT_OLLAMA_URL),
            embedding_timeout=_env_float("EMBEDDING_TIMEOUT", _DEFAULT_EMBEDDING_TIMEOUT),
            embedding_max_tokens=max(1, max_tokens) if max_tokens is not None else _DEFAULT_EMBEDDING_MAX_TOKENS,
            default_strategy=os.getenv("DEFAULT_STRATEGY", _DEFAULT_STRATEGY),
            log_level=os.getenv("RELEVANCE_LOG_LEVEL"),
            observability_metrics_enabled=_env_bool("OBSERVABILITY_METRICS_ENABLED", True),
            observability_namespace=os.getenv("OBSERVABILITY_NAMESPACE", _DEFAULT_NAMESPACE),
            observability_prometheus_enabled=_env_bool("OBSERVABILITY_PROMETHEUS_ENABLED", False),
        )

    @property
    def is_ollama_embedding_backend(self) -> bool:
        """Return True when embeddings should be generated via an Ollama-hosted model."""

        return self.embedding_model.strip().lower().startswith("ollama:")

    @property
    def is_openai_backend(self) -> bool:
        """Return True when the configured embedding backend is OpenAI."""

        return not self.is_ollama_embedding_backend

    @property
    def requires_api_key(self) -> bool:
        """Return True when the embedding backend needs a provider credential."""

        return self.is_openai_backend

    @property
    def ollama_embedding_endpoint(self) -> tuple[str, str]:
        """Return the Ollama embedding model and resolved base URL for embeddings."""

        if not self.is_ollama_embedding_backend:
            msg = "Ollama embedding endpoint requested but EMBEDDING_MODEL is not an Ollama model."
            raise ValueError(msg)
        _, _, name = self.embedding_model.partition(":")
        model, base = _split_remote_model_spec(name)
        if not model:
            msg = "EMBEDDING_MODEL must include an Ollama model identifier."
            raise ValueError(msg)
        base_url = (base or self.ollama_base_url or _DEFAULT_OLLAMA_URL).rstrip("/")
        if not base_url:
            msg = "Resolved Ollama embedding base URL is empty."
            raise ValueError(msg)
        return model, base_url

    @property
    def openai_embedding_model(self) -> str:
        """Return the OpenAI embedding model identifier, validating the selection."""

        if not self.is_openai_backend:
            msg = "OpenAI model requested but embedding_model is not an OpenAI model."
            raise ValueError(msg)
        return self.embedding_model.strip() or _DEFAULT_EMBEDDING_MODEL

    def build_metrics_recorder(self) -> "MetricsRecorder":
        """Instantiate the configured metrics recorder."""

        from .observability import MetricsRecorder

        return MetricsRecorder(
            enabled=self.observability_metrics_enabled,
            namespace=self.observability_namespace,
            prometheus_enabled=self.observability_prometheus_enabled,
        )
