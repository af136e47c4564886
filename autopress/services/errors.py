"""Batch-scoped errors raised before any item is processed."""

from __future__ import annotations


class ValidationError(ValueError):
    """Raised when a batch request is malformed or missing required fields."""


class ConfigurationError(RuntimeError):
    """Raised when the batch cannot run at all, e.g. no API key or unknown site."""


__all__ = ["ConfigurationError", "ValidationError"]
