"""WordPress REST integration."""

from .api import PublishFailure, UploadFailure, WordPressApiError, WordPressClient
from .posts import format_schedule_time
from .publisher import WordPressPublishTarget

__all__ = [
    "PublishFailure",
    "UploadFailure",
    "WordPressApiError",
    "WordPressClient",
    "WordPressPublishTarget",
    "format_schedule_time",
]
