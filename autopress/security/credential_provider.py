"""Interfaces and basic implementations for secret resolution."""

from __future__ import annotations

from abc import ABC, abstractmethod
from os import environ
from typing import Iterable, Mapping


class SecretNotFoundError(KeyError):
    """Raised when a secret cannot be resolved."""


class SecretProvider(ABC):
    """Abstract secret lookup contract."""

    @abstractmethod
    def get_secret(self, key: str) -> str:
        """Return the secret associated with ``key``; blank values count as missing."""


class EnvSecretProvider(SecretProvider):
    """Reads secrets from process environment variables.

    ``gemini_api_key`` maps to ``GEMINI_API_KEY`` (or ``<PREFIX>GEMINI_API_KEY``).
    """

    def __init__(self, prefix: str = "", env: Mapping[str, str] | None = None) -> None:
        self._env = env if env is not None else environ
        self._prefix = prefix

    def get_secret(self, key: str) -> str:
        name = f"{self._prefix}{key}".upper().replace(".", "_")
        value = self._env.get(name, "").strip()
        if not value:
            raise SecretNotFoundError(name)
        return value


class MappingSecretProvider(SecretProvider):
    """Wraps a simple dictionary; used by tests and by the registry."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = mapping

    def get_secret(self, key: str) -> str:
        value = (self._mapping.get(key) or "").strip()
        if not value:
            raise SecretNotFoundError(key)
        return value


class ChainedSecretProvider(SecretProvider):
    """Tries multiple providers until one returns a secret."""

    def __init__(self, providers: Iterable[SecretProvider]) -> None:
        self._providers = tuple(providers)

    def get_secret(self, key: str) -> str:
        for provider in self._providers:
            try:
                return provider.get_secret(key)
            except SecretNotFoundError:
                continue
        raise SecretNotFoundError(key)


__all__ = [
    "ChainedSecretProvider",
    "EnvSecretProvider",
    "MappingSecretProvider",
    "SecretNotFoundError",
    "SecretProvider",
]
