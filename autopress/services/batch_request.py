"""Validated description of one generate/publish batch."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping

from .errors import ValidationError
from .models import BatchMode, LinkConfig

DEFAULT_DELAY_SECONDS = 10.0

_ALIASES = {
    "bulkTopics": "bulk_topics",
    "siteId": "site_id",
    "selectedMultisites": "selected_multisites",
    "generateImage": "generate_image",
    "autoPublish": "auto_publish",
    "scheduleTime": "schedule_time",
    "includeMoneySite": "include_money_site",
    "isInternalLink": "is_internal_link",
    "moneySiteUrl": "money_site_url",
    "moneySiteKeyword": "money_site_keyword",
    "internalPath": "internal_path",
    "bulkPost": "bulk_post",
    "multisitePost": "multisite_post",
    "bulkDelay": "bulk_delay",
}

_TRUE_STRINGS = {"1", "true", "yes", "on"}


def _normalise_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    normalised: dict[str, Any] = {}
    for key, value in payload.items():
        normalised[_ALIASES.get(key, key)] = value
    return normalised


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _topic_list(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        items: Iterable[Any] = value.splitlines()
    elif isinstance(value, Iterable):
        items = value
    else:
        raise ValidationError("bulk topics must be a list of strings")
    return tuple(str(item).strip() for item in items if str(item).strip())


def _id_list(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(str(item).strip() for item in value if str(item).strip())


def parse_schedule_time(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ValidationError(f"scheduleTime is not an ISO-8601 timestamp: {value!r}") from exc


def parse_delay(value: Any) -> float:
    if value is None or value == "":
        return DEFAULT_DELAY_SECONDS
    if isinstance(value, bool):
        raise ValidationError("bulkDelay must be a number of seconds")
    try:
        delay = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"bulkDelay must be a number of seconds: {value!r}") from exc
    if delay < 0:
        raise ValidationError("bulkDelay must not be negative")
    return delay


@dataclass(frozen=True, slots=True)
class BatchRequest:
    """Everything the orchestrator needs to enumerate and process a batch."""

    topic: str | None = None
    topics: tuple[str, ...] = ()
    site_id: str | None = None
    site_ids: tuple[str, ...] = ()
    generate_image: bool = False
    auto_publish: bool = False
    schedule_time: datetime | None = None
    link: LinkConfig = field(default_factory=LinkConfig)
    bulk: bool = False
    multisite: bool = False
    delay_seconds: float = DEFAULT_DELAY_SECONDS

    def __post_init__(self) -> None:
        if self.bulk:
            if not self.topics:
                raise ValidationError("Bulk topics are required for bulk posting")
        elif not self.topic:
            raise ValidationError("Topic is required")
        if self.multisite and not self.site_ids:
            raise ValidationError("Select at least one site for multisite posting")
        if self.delay_seconds < 0:
            raise ValidationError("bulkDelay must not be negative")
        if self.link.enabled and not self.link.is_internal and not self.link.external_url:
            raise ValidationError("Money site URL is required for an external link")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "BatchRequest":
        """Build a request from camelCase or snake_case field names."""
        data = _normalise_keys(payload)
        link = LinkConfig(
            enabled=_as_bool(data.get("include_money_site")),
            is_internal=_as_bool(data.get("is_internal_link")),
            external_url=_as_text(data.get("money_site_url")),
            internal_path=_as_text(data.get("internal_path")),
            anchor_keyword=_as_text(data.get("money_site_keyword")),
        )
        return cls(
            topic=_as_text(data.get("topic")),
            topics=_topic_list(data.get("bulk_topics")),
            site_id=_as_text(data.get("site_id")),
            site_ids=_id_list(data.get("selected_multisites")),
            generate_image=_as_bool(data.get("generate_image")),
            auto_publish=_as_bool(data.get("auto_publish")),
            schedule_time=parse_schedule_time(data.get("schedule_time")),
            link=link,
            bulk=_as_bool(data.get("bulk_post")),
            multisite=_as_bool(data.get("multisite_post")),
            delay_seconds=parse_delay(data.get("bulk_delay")),
        )

    @property
    def mode(self) -> BatchMode:
        if self.bulk and self.multisite:
            return BatchMode.BULK_MULTISITE
        if self.bulk:
            return BatchMode.BULK_SINGLE_SITE
        if self.multisite:
            return BatchMode.MULTISITE
        return BatchMode.SINGLE

    @property
    def publish_requested(self) -> bool:
        return self.auto_publish or self.schedule_time is not None

    def topic_list(self) -> tuple[str, ...]:
        if self.bulk:
            return self.topics
        return (self.topic,) if self.topic else ()


__all__ = ["BatchRequest", "DEFAULT_DELAY_SECONDS", "parse_delay", "parse_schedule_time"]
