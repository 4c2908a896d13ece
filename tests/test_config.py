from __future__ import annotations

import pytest

from relevance_engine.config import Settings, _split_remote_model_spec

_ENV_VARS = (
    "EMBEDDING_MODEL",
    "OPENAI_API_KEY",
    "OLLAMA_BASE_URL",
    "EMBEDDING_TIMEOUT",
    "EMBEDDING_MAX_TOKENS",
    "DEFAULT_STRATEGY",
    "RELEVANCE_LOG_LEVEL",
    "OBSERVABILITY_METRICS_ENABLED",
    "OBSERVABILITY_NAMESPACE",
    "OBSERVABILITY_PROMETHEUS_ENABLED",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_from_env_defaults(clean_env: pytest.MonkeyPatch) -> None:
    settings = Settings.from_env()

    assert settings.embedding_model == "text-embedding-ada-002"
    assert settings.openai_api_key is None
    assert settings.embedding_timeout == 30.0
    assert settings.embedding_max_tokens == 8000
    assert settings.default_strategy == "lexical"
    assert settings.observability_metrics_enabled is True
    assert settings.observability_prometheus_enabled is False
    assert settings.requires_api_key is True


def test_from_env_reads_overrides(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("EMBEDDING_MODEL", "text-embedding-3-small")
    clean_env.setenv("OPENAI_API_KEY", "sk-test")
    clean_env.setenv("EMBEDDING_TIMEOUT", "0")
    clean_env.setenv("EMBEDDING_MAX_TOKENS", "0")
    clean_env.setenv("DEFAULT_STRATEGY", "semantic")
    clean_env.setenv("RELEVANCE_LOG_LEVEL", "debug")
    clean_env.setenv("OBSERVABILITY_METRICS_ENABLED", "off")
    clean_env.setenv("OBSERVABILITY_PROMETHEUS_ENABLED", "yes")

    settings = Settings.from_env()

    assert settings.openai_embedding_model == "text-embedding-3-small"
    assert settings.openai_api_key == "sk-test"
    assert settings.embedding_timeout == 0.0
    assert settings.embedding_max_tokens == 1
    assert settings.default_strategy == "semantic"
    assert settings.log_level == "debug"
    assert settings.observability_metrics_enabled is False
    assert settings.observability_prometheus_enabled is True


def test_invalid_boolean_env_is_rejected(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("OBSERVABILITY_METRICS_ENABLED", "maybe")

    with pytest.raises(ValueError, match="OBSERVABILITY_METRICS_ENABLED"):
        Settings.from_env()


def test_invalid_timeout_env_is_rejected(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("EMBEDDING_TIMEOUT", "soon")

    with pytest.raises(ValueError, match="EMBEDDING_TIMEOUT"):
        Settings.from_env()


def test_ollama_model_resolves_endpoint() -> None:
    settings = Settings(embedding_model="ollama:nomic-embed-text", ollama_base_url="http://gpu-box:11434/")

    assert settings.is_ollama_embedding_backend is True
    assert settings.requires_api_key is False
    assert settings.ollama_embedding_endpoint == ("nomic-embed-text", "http://gpu-box:11434")
    with pytest.raises(ValueError):
        settings.openai_embedding_model


def test_openai_model_has_no_ollama_endpoint() -> None:
    with pytest.raises(ValueError):
        Settings().ollama_embedding_endpoint


def test_split_remote_model_spec() -> None:
    assert _split_remote_model_spec("nomic-embed-text") == ("nomic-embed-text", None)
    assert _split_remote_model_spec("https://host:1234/base/model-a") == ("model-a", "https://host:1234/base")
    assert _split_remote_model_spec("  ") == ("", None)


def test_build_metrics_recorder_follows_settings() -> None:
    recorder = Settings(observability_prometheus_enabled=True).build_metrics_recorder()

    assert recorder.enabled is True
    assert recorder.prometheus_enabled is True

    disabled = Settings(observability_metrics_enabled=False).build_metrics_recorder()
    assert disabled.enabled is False
