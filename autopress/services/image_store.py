"""Local persistence for generated featured images."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from ..utils.file_helper import timestamped_name, write_bytes
from ..utils.logging import get_logger
from .models import ImageAsset

LOGGER = get_logger(__name__)


class ImageStore:
    def __init__(self, directory: Path) -> None:
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory

    def save(self, image: ImageAsset, *, now: datetime | None = None) -> Path:
        path = self._directory / timestamped_name("featured-image", image.extension, now=now)
        write_bytes(path, image.data)
        LOGGER.debug("Saved featured image %s (%d bytes)", path, len(image.data))
        return path


__all__ = ["ImageStore"]
