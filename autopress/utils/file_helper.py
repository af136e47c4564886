"""Filesystem helpers."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path


def ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def write_text(path: Path, data: str, *, encoding: str = "utf-8") -> Path:
    ensure_parent(path)
    with path.open("w", encoding=encoding) as fp:
        fp.write(data)
    return path


def write_bytes(path: Path, data: bytes) -> Path:
    ensure_parent(path)
    with path.open("wb") as fp:
        fp.write(data)
    return path


def timestamped_name(prefix: str, suffix: str, *, now: datetime | None = None) -> str:
    """Build names such as ``featured-image-20250101T120000123456.png``."""
    moment = now or datetime.now()
    return f"{prefix}-{moment.strftime('%Y%m%dT%H%M%S%f')}.{suffix.lstrip('.')}"
