"""Relevance engine package."""

from __future__ import annotations

from .config import Settings
from .engine import RelevanceEngine, RelevanceResult, ScoringStrategy
from .errors import (
    ConfigError,
    DimensionMismatchError,
    ExternalServiceError,
    InputError,
    RelevanceError,
)

__all__ = [
    "Settings",
    "RelevanceEngine",
    "RelevanceResult",
    "ScoringStrategy",
    "RelevanceError",
    "InputError",
    "ConfigError",
    "ExternalServiceError",
    "DimensionMismatchError",
    "create_app",
]


def __getattr__(name: str):  # pragma: no cover - small helper
    if name == "create_app":
        from .app import create_app

        return create_app
    raise AttributeError(f"module 'relevance_engine' has no attribute {name}")
