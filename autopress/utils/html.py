"""Helpers for inspecting generated HTML content."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from markdown import markdown

_HTML_TAG_PATTERN = re.compile(r"<\s*/?\s*[a-zA-Z][a-zA-Z0-9]*(?:\s[^<>]*)?/?\s*>")


def looks_like_html(text: str) -> bool:
    return bool(_HTML_TAG_PATTERN.search(text))


def ensure_html(text: str) -> str:
    """Render Markdown to HTML unless the text already carries HTML markup."""
    if not text.strip() or looks_like_html(text):
        return text
    return markdown(text, extensions=["extra"])


def link_targets(html: str, *, parser: str = "html.parser") -> list[str]:
    """Return the ``href`` of every anchor in document order."""
    soup = BeautifulSoup(html, parser)
    return [str(anchor.get("href", "")) for anchor in soup.find_all("a")]


def count_links_to(html: str, url: str) -> int:
    target = url.rstrip("/")
    return sum(1 for href in link_targets(html) if href.rstrip("/") == target)
