"""WordPress publish target composed from the REST helpers."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

import requests

from ...services.models import ImageAsset, Site
from ...utils.logging import get_logger
from ..base import MediaUploadResult, PublishTarget
from .api import WordPressApiError, WordPressClient
from .media import WordPressMediaUploader
from .posts import WordPressPostClient
from .tags import WordPressTagResolver

LOGGER = get_logger(__name__)


class WordPressPublishTarget(PublishTarget):
    """Publishes to one WordPress site through the REST API."""

    def __init__(self, client: WordPressClient, *, site_name: str | None = None) -> None:
        self._client = client
        self._site_name = site_name or client.base_url
        self._tags = WordPressTagResolver(client)
        self._media = WordPressMediaUploader(client)
        self._posts = WordPressPostClient(client, self._tags)

    @classmethod
    def from_site(
        cls,
        site: Site,
        *,
        timeout: float | None = 60.0,
        session: requests.Session | None = None,
    ) -> "WordPressPublishTarget":
        client = WordPressClient(
            site.url, site.username, site.password, timeout=timeout, session=session
        )
        return cls(client, site_name=site.name)

    @property
    def site_name(self) -> str:
        return self._site_name

    def test_connection(self) -> bool:
        try:
            user = self._client.request("GET", "users/me")
        except WordPressApiError as exc:
            LOGGER.warning(
                "Connection test failed: %s",
                exc,
                extra={"event": "wordpress.test", "site": self._site_name},
            )
            return False
        LOGGER.info(
            "Connected as %s",
            (user or {}).get("name", self._client.username),
            extra={"event": "wordpress.test", "site": self._site_name},
        )
        return True

    def resolve_or_create_tags(self, names: Sequence[str]) -> list[int]:
        return self._tags.resolve(names)

    def upload_media(self, image: ImageAsset, *, filename: str | None = None) -> MediaUploadResult:
        return self._media.upload(image, filename=filename)

    def create_post(
        self,
        title: str,
        html_content: str,
        tag_names: Sequence[str],
        featured_media_id: int | None = None,
        schedule_time: datetime | None = None,
    ) -> int:
        return self._posts.create(title, html_content, tag_names, featured_media_id, schedule_time)

    def post_url(self, post_id: int) -> str:
        return f"{self._client.base_url}/?p={post_id}"
