"""Shared helpers for Gemini-powered generators."""

from __future__ import annotations

import logging
from typing import Any

from google import genai
from google.genai import types

from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


class BaseAIGenerator:
    """Holds the Gemini client and issues ``generate_content`` calls."""

    def __init__(
        self,
        client: genai.Client,
        *,
        model: str,
        thinking_budget: int | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._thinking_budget = thinking_budget
        self._logger = logger or LOGGER

    @property
    def model(self) -> str:
        return self._model

    @staticmethod
    def create_client(api_key: str) -> genai.Client:
        if not api_key:
            raise RuntimeError("Gemini API key not configured. Run 'autopress key set <KEY>'.")
        return genai.Client(api_key=api_key)

    def _make_request(
        self,
        prompt_text: str,
        *,
        model: str | None = None,
        response_modalities: list[str] | None = None,
    ) -> Any:
        request_kwargs: dict[str, object] = {
            "model": model or self._model,
            "contents": prompt_text,
        }
        config_kwargs: dict[str, object] = {}
        if response_modalities:
            config_kwargs["response_modalities"] = response_modalities
        elif self._thinking_budget and self._thinking_budget > 0:
            config_kwargs["thinking_config"] = types.ThinkingConfig(
                thinking_budget=self._thinking_budget
            )
            self._logger.debug("Thinking mode enabled budget=%s", self._thinking_budget)
        if config_kwargs:
            request_kwargs["config"] = types.GenerateContentConfig(**config_kwargs)
        return self._client.models.generate_content(**request_kwargs)
