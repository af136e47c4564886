"""Wiring of the batch orchestrator from configuration."""

from __future__ import annotations

import time
from typing import Callable

from ..ai.content_generator import ContentGenerator
from ..platforms.wordpress import WordPressPublishTarget
from ..services.batch_orchestrator import BatchOrchestrator
from ..services.image_store import ImageStore
from ..services.models import Site
from ..settings import AppConfig, SiteRegistry


def build_registry(config: AppConfig) -> SiteRegistry:
    return SiteRegistry(config.paths.registry)


def build_target_factory(config: AppConfig) -> Callable[[Site], WordPressPublishTarget]:
    timeout = config.publish.timeout

    def factory(site: Site) -> WordPressPublishTarget:
        return WordPressPublishTarget.from_site(site, timeout=timeout)

    return factory


def build_orchestrator(
    config: AppConfig,
    *,
    registry: SiteRegistry | None = None,
    save_images: bool = True,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchOrchestrator:
    """Create an orchestrator backed by Gemini and the WordPress REST API."""

    def generator_factory(api_key: str) -> ContentGenerator:
        return ContentGenerator.from_settings(config.generation, api_key=api_key)

    return BatchOrchestrator(
        registry or build_registry(config),
        generator_factory,
        target_factory=build_target_factory(config),
        image_store=ImageStore(config.paths.images_dir) if save_images else None,
        sleep=sleep,
    )


__all__ = ["build_orchestrator", "build_registry", "build_target_factory"]
