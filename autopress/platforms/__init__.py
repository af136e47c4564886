"""Platform integration package."""

from __future__ import annotations

from .base import MediaUploadResult, PublishTarget, TargetFactory

__all__ = ["MediaUploadResult", "PublishTarget", "TargetFactory"]
