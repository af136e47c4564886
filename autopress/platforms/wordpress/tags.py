"""Tag name to tag id resolution."""

from __future__ import annotations

from typing import Sequence

from ...utils.logging import get_logger
from .api import WordPressApiError, WordPressClient

LOGGER = get_logger(__name__)


class WordPressTagResolver:
    """Finds tags by search and creates the ones that do not exist yet.

    The first search hit is reused, so a partial name match counts as a hit.
    """

    def __init__(self, client: WordPressClient) -> None:
        self._client = client

    def resolve(self, names: Sequence[str]) -> list[int]:
        tag_ids: list[int] = []
        for name in names:
            name = name.strip()
            if not name:
                continue
            try:
                tag_ids.append(self._resolve_one(name))
            except (WordPressApiError, LookupError, TypeError, ValueError) as exc:
                LOGGER.error(
                    'Error resolving tag "%s": %s',
                    name,
                    exc,
                    extra={"event": "wordpress.tag_error", "site": self._client.base_url},
                )
        return tag_ids

    def _resolve_one(self, name: str) -> int:
        found = self._client.request("GET", "tags", params={"search": name})
        if found:
            return int(found[0]["id"])
        created = self._client.request("POST", "tags", json={"name": name})
        tag_id = created["id"]
        LOGGER.debug("Created tag %r id=%s", name, tag_id)
        return int(tag_id)
