"""Base contracts for remote publishing targets."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, Sequence

from ..services.models import ImageAsset, Site


@dataclass(slots=True)
class MediaUploadResult:
    """Represents the outcome of a single media upload."""

    media_id: int
    source_url: str | None = None


class PublishTarget(ABC):
    """One remote site that accepts tags, media and posts."""

    @abstractmethod
    def test_connection(self) -> bool:
        """Check credentials; pre-flight only, never part of the publish path."""

    @abstractmethod
    def resolve_or_create_tags(self, names: Sequence[str]) -> list[int]:
        """Map tag names to ids, creating missing tags; bad names are dropped."""

    @abstractmethod
    def upload_media(self, image: ImageAsset, *, filename: str | None = None) -> MediaUploadResult:
        """Upload an image and return its media id."""

    @abstractmethod
    def create_post(
        self,
        title: str,
        html_content: str,
        tag_names: Sequence[str],
        featured_media_id: int | None = None,
        schedule_time: datetime | None = None,
    ) -> int:
        """Publish (or schedule, when ``schedule_time`` is set) and return the post id."""

    @abstractmethod
    def post_url(self, post_id: int) -> str:
        """Return a public URL for the post."""


class TargetFactory(Protocol):
    """Builds a publish target for a registered site."""

    def __call__(self, site: Site) -> PublishTarget:
        ...
