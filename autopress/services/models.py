"""Data models for the batch publishing workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class Site:
    """A WordPress site the operator can publish to."""

    id: str
    name: str
    url: str
    username: str
    password: str = field(repr=False)
    created_at: str | None = None

    def public_dict(self) -> dict[str, Any]:
        """Return the site without its password."""
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "username": self.username,
            "created_at": self.created_at,
        }

    def to_dict(self) -> dict[str, Any]:
        data = self.public_dict()
        data["password"] = self.password
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Site":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            url=str(data.get("url", "")).rstrip("/"),
            username=str(data.get("username", "")),
            password=str(data.get("password", "")),
            created_at=data.get("created_at"),
        )


@dataclass(frozen=True, slots=True)
class LinkConfig:
    """Request-level settings for the single contextual link."""

    enabled: bool = False
    is_internal: bool = False
    external_url: str | None = None
    internal_path: str | None = None
    anchor_keyword: str | None = None


@dataclass(frozen=True, slots=True)
class LinkSpec:
    """A link resolved for one (topic, site) pair."""

    url: str
    is_internal: bool
    anchor_keyword: str | None = None


@dataclass(frozen=True, slots=True)
class Article:
    title: str
    html_content: str
    tags: tuple[str, ...]
    meta_description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.html_content,
            "tags": list(self.tags),
            "meta_description": self.meta_description,
        }


_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}


@dataclass(frozen=True, slots=True)
class ImageAsset:
    data: bytes = field(repr=False)
    mime_type: str = "image/png"

    @property
    def extension(self) -> str:
        return _EXTENSIONS.get(self.mime_type.lower(), "png")


@dataclass(frozen=True, slots=True)
class Published:
    post_id: int
    url: str
    scheduled: bool = False
    scheduled_time: str | None = None
    kind: str = field(default="published", init=False)


@dataclass(frozen=True, slots=True)
class Skipped:
    reason: str = "publish not requested"
    kind: str = field(default="skipped", init=False)


@dataclass(frozen=True, slots=True)
class Failed:
    error: str
    kind: str = field(default="failed", init=False)


PublishOutcome = Union[Published, Skipped, Failed]


class ItemStatus(str, Enum):
    """Terminal state of a batch item."""

    GENERATION_FAILED = "generation_failed"
    GENERATED = "generated"
    PUBLISHED = "published"
    SCHEDULED = "scheduled"
    PUBLISH_FAILED = "publish_failed"


class BatchMode(str, Enum):
    SINGLE = "single"
    BULK_SINGLE_SITE = "bulk_single_site"
    MULTISITE = "multisite"
    BULK_MULTISITE = "bulk_multisite"


@dataclass(frozen=True, slots=True)
class BatchItemResult:
    topic: str
    topic_index: int
    outcome: PublishOutcome
    status: ItemStatus
    site_name: str | None = None
    site_index: int | None = None
    article: Article | None = None
    error: str | None = None
    image_ref: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status in {ItemStatus.GENERATED, ItemStatus.PUBLISHED, ItemStatus.SCHEDULED}

    def to_dict(self) -> dict[str, Any]:
        outcome: dict[str, Any] = {"kind": self.outcome.kind}
        if isinstance(self.outcome, Published):
            outcome.update(
                post_id=self.outcome.post_id,
                url=self.outcome.url,
                scheduled=self.outcome.scheduled,
                scheduled_time=self.outcome.scheduled_time,
            )
        elif isinstance(self.outcome, Failed):
            outcome["error"] = self.outcome.error
        else:
            outcome["reason"] = self.outcome.reason
        return {
            "topic": self.topic,
            "site": self.site_name,
            "status": self.status.value,
            "article": self.article.to_dict() if self.article else None,
            "error": self.error,
            "image_ref": self.image_ref,
            "publish_result": outcome,
            "topic_index": self.topic_index,
            "site_index": self.site_index,
        }


@dataclass(slots=True)
class BatchReport:
    """Aggregate result of one batch; built incrementally, returned whole."""

    mode: BatchMode
    total_topics: int
    delay_used: float
    total_sites: int | None = None
    items: list[BatchItemResult] = field(default_factory=list)
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def total_processed(self) -> int:
        return len(self.items)

    def append(self, item: BatchItemResult) -> None:
        self.items.append(item)

    def counts(self) -> dict[str, int]:
        tally: dict[str, int] = {status.value: 0 for status in ItemStatus}
        for item in self.items:
            tally[item.status.value] += 1
        return tally

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "bulk": self.mode in {BatchMode.BULK_SINGLE_SITE, BatchMode.BULK_MULTISITE},
            "multisite": self.mode in {BatchMode.MULTISITE, BatchMode.BULK_MULTISITE},
            "results": [item.to_dict() for item in self.items],
            "total_topics": self.total_topics,
            "total_sites": self.total_sites,
            "total_processed": self.total_processed,
            "delay_used": self.delay_used,
            "counts": self.counts(),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


__all__ = [
    "Article",
    "BatchItemResult",
    "BatchMode",
    "BatchReport",
    "Failed",
    "ImageAsset",
    "ItemStatus",
    "LinkConfig",
    "LinkSpec",
    "PublishOutcome",
    "Published",
    "Site",
    "Skipped",
]
