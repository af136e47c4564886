"""WordPress post creation."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Sequence

from ...utils.logging import get_logger
from .api import PublishFailure, WordPressApiError, WordPressClient
from .tags import WordPressTagResolver

LOGGER = get_logger(__name__)


def format_schedule_time(value: datetime) -> str:
    """Render a schedule instant as UTC ISO-8601; naive values are local time."""
    moment = value.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class WordPressPostClient:
    """Creates published or scheduled posts."""

    def __init__(self, client: WordPressClient, tags: WordPressTagResolver) -> None:
        self._client = client
        self._tags = tags

    def build_payload(
        self,
        title: str,
        html_content: str,
        tag_ids: Sequence[int],
        featured_media_id: int | None = None,
        schedule_time: datetime | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": title,
            "content": html_content,
            "status": "future" if schedule_time else "publish",
            "tags": list(tag_ids),
            "format": "standard",
        }
        if featured_media_id:
            payload["featured_media"] = featured_media_id
        if schedule_time:
            payload["date"] = format_schedule_time(schedule_time)
        return payload

    def create(
        self,
        title: str,
        html_content: str,
        tag_names: Sequence[str],
        featured_media_id: int | None = None,
        schedule_time: datetime | None = None,
    ) -> int:
        tag_ids = self._tags.resolve(tag_names)
        payload = self.build_payload(title, html_content, tag_ids, featured_media_id, schedule_time)
        try:
            data = self._client.request("POST", "posts", json=payload)
        except WordPressApiError as exc:
            raise PublishFailure(f"Post creation failed: {exc}", details=exc.details) from exc

        post_id = data.get("id") if isinstance(data, dict) else None
        if not post_id:
            raise PublishFailure("Post creation returned no id", details={"title": title})

        LOGGER.info(
            "Created post id=%s status=%s tags=%d",
            post_id,
            payload["status"],
            len(tag_ids),
            extra={"event": "wordpress.post", "site": self._client.base_url},
        )
        return int(post_id)
