"""AI utilities for article and featured-image generation."""

from .article_parser import ArticleParseError, parse_article
from .content_generator import ContentGenerator, GenerationFailure, ImageFailure

__all__ = [
    "ArticleParseError",
    "ContentGenerator",
    "GenerationFailure",
    "ImageFailure",
    "parse_article",
]
