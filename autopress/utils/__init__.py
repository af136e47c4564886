"""Utility exports."""

from .file_helper import ensure_parent, timestamped_name, write_bytes, write_text
from .html import count_links_to, ensure_html, link_targets, looks_like_html
from .logging import configure_logging, get_logger

__all__ = [
    "count_links_to",
    "ensure_html",
    "ensure_parent",
    "link_targets",
    "looks_like_html",
    "timestamped_name",
    "write_bytes",
    "write_text",
    "configure_logging",
    "get_logger",
]
