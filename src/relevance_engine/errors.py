"""Error types raised by the relevance engine."""

from __future__ import annotations


class RelevanceError(Exception):
    """Base class for failures surfaced by the relevance engine."""

    status_code: int = 500
    error_label: str = "Failed to calculate relevance"


class InputError(RelevanceError):
    """Raised when a required text is missing or blank."""

    status_code = 400
    error_label = "Invalid input"


class ConfigError(RelevanceError):
    """Raised when the selected strategy lacks a required credential."""

    status_code = 500
    error_label = "Configuration error"


class ExternalServiceError(RelevanceError):
    """Raised when the embedding provider call fails."""

    status_code = 502
    error_label = "Embedding provider error"


class DimensionMismatchError(RelevanceError, ValueError):
    """Raised when two embedding vectors have different lengths."""

    error_label = "Embedding dimension mismatch"
