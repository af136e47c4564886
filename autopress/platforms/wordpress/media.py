"""WordPress media upload implementation."""

from __future__ import annotations

from ...services.models import ImageAsset
from ...utils.file_helper import timestamped_name
from ...utils.logging import get_logger
from ..base import MediaUploadResult
from .api import UploadFailure, WordPressApiError, WordPressClient

LOGGER = get_logger(__name__)


class WordPressMediaUploader:
    """Uploads a generated image to the media library as a single multipart file."""

    def __init__(self, client: WordPressClient) -> None:
        self._client = client

    def upload(self, image: ImageAsset, *, filename: str | None = None) -> MediaUploadResult:
        name = filename or timestamped_name("featured-image", image.extension)
        files = {"file": (name, image.data, image.mime_type)}
        headers = {"Content-Disposition": f'attachment; filename="{name}"'}
        try:
            data = self._client.request("POST", "media", files=files, headers=headers)
        except WordPressApiError as exc:
            raise UploadFailure(f"Media upload failed: {exc}", details=exc.details) from exc

        media_id = data.get("id") if isinstance(data, dict) else None
        if not media_id:
            raise UploadFailure("Media upload returned no id", details={"file": name})

        LOGGER.info(
            "Uploaded media id=%s file=%s",
            media_id,
            name,
            extra={"event": "wordpress.media", "site": self._client.base_url},
        )
        return MediaUploadResult(media_id=int(media_id), source_url=data.get("source_url"))
