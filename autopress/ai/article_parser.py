"""Recover an :class:`Article` from the model's loosely structured reply.

Three layers are tried in order: strict JSON, JSON after a repair pass, and
finally regex salvage of the individual fields. Whatever layer succeeds, the
result is a complete article; defaults fill in optional fields.
"""

from __future__ import annotations

import json
import re
from typing import Any

from ..services.models import Article
from ..utils.html import ensure_html
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

_JSON_SPAN = re.compile(r"\{[\s\S]*\}")
# Control characters except tab, newline and carriage return.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")

_TITLE_FIELD = re.compile(r'"title"\s*:\s*"([^"]+)"')
_CONTENT_FIELD = re.compile(r'"content"\s*:\s*"([\s\S]+?)"\s*,\s*"tags"')
_TAGS_FIELD = re.compile(r'"tags"\s*:\s*\[([\s\S]*?)\]')
_META_FIELD = re.compile(r'"meta_description"\s*:\s*"([^"]+)"')
_QUOTED = re.compile(r'"([^"]*)"')

_STRING_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


class ArticleParseError(ValueError):
    """Raised when no usable article can be recovered from the reply."""


def default_tags(topic: str) -> list[str]:
    return ["SEO", "WordPress", topic]


def default_meta_description(topic: str) -> str:
    return f"Article about {topic}"


def extract_json_span(text: str) -> str | None:
    """Return the greedy ``{...}`` span from the first ``{`` to the last ``}``."""
    match = _JSON_SPAN.search(text)
    return match.group(0) if match else None


def repair_json(span: str) -> str:
    cleaned = _CONTROL_CHARS.sub("", span)
    cleaned = _TRAILING_COMMA.sub(r"\1", cleaned)
    return _escape_breaks_in_strings(cleaned)


def _escape_breaks_in_strings(text: str) -> str:
    """Escape raw newlines, carriage returns and tabs that sit inside string literals."""
    out: list[str] = []
    in_string = False
    escaped = False
    for ch in text:
        if not in_string:
            if ch == '"':
                in_string = True
            out.append(ch)
            continue
        if escaped:
            escaped = False
            out.append(ch)
        elif ch == "\\":
            escaped = True
            out.append(ch)
        elif ch == '"':
            in_string = False
            out.append(ch)
        else:
            out.append(_STRING_ESCAPES.get(ch, ch))
    return "".join(out)


def _unescape(value: str) -> str:
    return (
        value.replace("\\n", "\n")
        .replace("\\r", "\r")
        .replace("\\t", "\t")
        .replace('\\"', '"')
        .replace("\\/", "/")
    )


def _salvage_tags(raw: str) -> list[str]:
    try:
        parsed = json.loads(f"[{raw}]")
    except json.JSONDecodeError:
        parsed = _QUOTED.findall(raw)
    return _coerce_tags(parsed)


def salvage_fields(text: str) -> dict[str, Any]:
    """Pull individual fields out of text that is not valid JSON."""
    title = _TITLE_FIELD.search(text)
    content = _CONTENT_FIELD.search(text)
    if not title or not content:
        raise ArticleParseError("model reply has no recoverable title and content")
    data: dict[str, Any] = {
        "title": _unescape(title.group(1)),
        "content": _unescape(content.group(1)),
    }
    tags = _TAGS_FIELD.search(text)
    if tags:
        data["tags"] = _salvage_tags(tags.group(1))
    meta = _META_FIELD.search(text)
    if meta:
        data["meta_description"] = _unescape(meta.group(1))
    return data


def _coerce_tags(raw: Any) -> list[str]:
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, (list, tuple)):
        return []
    tags: list[str] = []
    for item in raw:
        if isinstance(item, (str, int, float)) and str(item).strip():
            tags.append(str(item).strip())
    return tags


def _required_text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ArticleParseError(f"model reply is missing '{key}'")
    return value


def build_article(data: dict[str, Any], topic: str) -> Article:
    title = _required_text(data, "title").strip()
    content = _required_text(data, "content")
    tags = _coerce_tags(data.get("tags")) or default_tags(topic)
    meta = data.get("meta_description")
    if not isinstance(meta, str) or not meta.strip():
        meta = default_meta_description(topic)
    return Article(
        title=title,
        html_content=ensure_html(content.strip()),
        tags=tuple(tags),
        meta_description=meta.strip(),
    )


def parse_article(text: str, topic: str) -> Article:
    span = extract_json_span(text)
    if span is None:
        raise ArticleParseError("model reply contains no JSON object")

    for layer, candidate in (("strict", span), ("repaired", repair_json(span))):
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError as exc:
            LOGGER.debug("JSON parse failed layer=%s: %s", layer, exc)
            continue
        if isinstance(data, dict):
            if layer != "strict":
                LOGGER.info("Recovered article JSON after repair", extra={"topic": topic})
            return build_article(data, topic)

    LOGGER.warning(
        "Falling back to field salvage for model reply",
        extra={"topic": topic, "reply_chars": len(text)},
    )
    return build_article(salvage_fields(text), topic)


__all__ = [
    "ArticleParseError",
    "build_article",
    "default_meta_description",
    "default_tags",
    "extract_json_span",
    "parse_article",
    "repair_json",
    "salvage_fields",
]
