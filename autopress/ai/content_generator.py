"""Article and featured-image generation on top of Gemini."""

from __future__ import annotations

import base64
import time
from typing import Any

from google import genai

from ..services.models import Article, ImageAsset, LinkSpec
from ..settings import GenerationSettings
from ..utils.logging import get_logger
from .article_parser import ArticleParseError, parse_article
from .base_node import BaseAIGenerator
from .prompts import render_article_prompt, render_image_prompt

LOGGER = get_logger(__name__)


class GenerationFailure(RuntimeError):
    """Raised when the backend errors or its reply holds no recoverable article."""


class ImageFailure(RuntimeError):
    """Image generation problem; degraded to "no image" and never raised to callers."""


class ContentGenerator(BaseAIGenerator):
    """Builds prompts, calls Gemini and turns replies into articles and images."""

    def __init__(
        self,
        client: genai.Client,
        *,
        model: str,
        image_model: str,
        language: str = "English",
        min_words: int = 800,
        thinking_budget: int | None = None,
    ) -> None:
        super().__init__(client, model=model, thinking_budget=thinking_budget, logger=LOGGER)
        self._image_model = image_model
        self._language = language
        self._min_words = min_words

    @classmethod
    def from_settings(cls, settings: GenerationSettings, *, api_key: str) -> "ContentGenerator":
        client = BaseAIGenerator.create_client(api_key)
        LOGGER.info(
            "Initialized ContentGenerator model=%s image_model=%s language=%s",
            settings.text_model,
            settings.image_model,
            settings.language,
        )
        return cls(
            client,
            model=settings.text_model,
            image_model=settings.image_model,
            language=settings.language,
            min_words=settings.min_words,
            thinking_budget=settings.thinking_budget,
        )

    def build_prompt(self, topic: str, link: LinkSpec | None = None) -> str:
        return render_article_prompt(
            topic, link, language=self._language, min_words=self._min_words
        )

    def generate_article(self, topic: str, link: LinkSpec | None = None) -> Article:
        prompt_text = self.build_prompt(topic, link)
        LOGGER.info(
            "Generating article model=%s chars=%s link=%s",
            self._model,
            len(prompt_text),
            link.url if link else None,
            extra={"event": "generate.article", "topic": topic},
        )
        start = time.monotonic()
        try:
            response = self._make_request(prompt_text)
        except Exception as exc:
            raise GenerationFailure(f"Gemini API call failed: {exc}") from exc

        text = getattr(response, "text", None) or ""
        if not text.strip():
            raise GenerationFailure("Gemini returned an empty response")

        try:
            article = parse_article(text, topic)
        except ArticleParseError as exc:
            LOGGER.error(
                "Unparseable model reply: %s",
                exc,
                extra={"event": "generate.parse_error", "topic": topic, "raw": text[:500]},
            )
            raise GenerationFailure(f"Invalid JSON response from AI: {exc}") from exc

        LOGGER.info(
            "Article generated in %.2fs title=%r tags=%d",
            time.monotonic() - start,
            article.title,
            len(article.tags),
            extra={"event": "generate.article.done", "topic": topic},
        )
        return article

    def generate_image(self, topic: str, title: str) -> ImageAsset | None:
        """Return a featured image, or ``None`` when the backend produced none."""
        try:
            return self._request_image(topic, title)
        except ImageFailure as exc:
            LOGGER.warning(
                "Featured image unavailable: %s", exc, extra={"event": "generate.image", "topic": topic}
            )
            return None

    def _request_image(self, topic: str, title: str) -> ImageAsset:
        prompt_text = render_image_prompt(topic, title)
        try:
            response = self._make_request(
                prompt_text,
                model=self._image_model,
                response_modalities=["TEXT", "IMAGE"],
            )
        except Exception as exc:
            raise ImageFailure(f"Gemini image call failed: {exc}") from exc

        try:
            image = _first_inline_image(response)
        except Exception as exc:
            raise ImageFailure(f"unusable image response: {exc}") from exc
        if image is None:
            raise ImageFailure("response contained no inline image part")
        LOGGER.info(
            "Featured image generated bytes=%d mime=%s",
            len(image.data),
            image.mime_type,
            extra={"event": "generate.image.done", "topic": topic},
        )
        return image


def _first_inline_image(response: Any) -> ImageAsset | None:
    for part in _response_parts(response):
        inline = getattr(part, "inline_data", None)
        if inline is None or not getattr(inline, "data", None):
            continue
        data = inline.data
        if isinstance(data, str):
            data = base64.b64decode(data, validate=True)
        return ImageAsset(data=bytes(data), mime_type=getattr(inline, "mime_type", None) or "image/png")
    return None


def _response_parts(response: Any) -> list[Any]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return list(getattr(content, "parts", None) or [])


__all__ = ["ContentGenerator", "GenerationFailure", "ImageFailure"]
