"""Settings package exports."""

from .loader import (
    AppConfig,
    GenerationSettings,
    PathSettings,
    PublishSettings,
    load_config,
)
from .registry import SiteRegistry, select_sites

__all__ = [
    "AppConfig",
    "GenerationSettings",
    "PathSettings",
    "PublishSettings",
    "SiteRegistry",
    "load_config",
    "select_sites",
]
