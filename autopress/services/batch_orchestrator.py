"""Sequential generate-and-publish over topics and sites."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Protocol

from ..ai.content_generator import GenerationFailure
from ..core.rate_limiter import Pacer
from ..platforms.base import TargetFactory
from ..settings.registry import SiteRegistry, select_sites
from ..utils.html import count_links_to
from ..utils.logging import get_logger
from .batch_request import BatchRequest
from .errors import ConfigurationError
from .image_store import ImageStore
from .link_resolver import resolve
from .models import (
    Article,
    BatchItemResult,
    BatchMode,
    BatchReport,
    Failed,
    ImageAsset,
    ItemStatus,
    LinkSpec,
    Published,
    Site,
    Skipped,
)

LOGGER = get_logger(__name__)


class ArticleGenerator(Protocol):
    def generate_article(self, topic: str, link: LinkSpec | None = None) -> Article:
        ...

    def generate_image(self, topic: str, title: str) -> ImageAsset | None:
        ...


GeneratorFactory = Callable[[str], ArticleGenerator]


@dataclass(frozen=True, slots=True)
class _WorkItem:
    topic: str
    topic_index: int
    site: Site | None
    site_index: int | None


class BatchOrchestrator:
    """Runs a batch one (topic, site) pair at a time.

    Batch-scoped problems (no API key, unknown sites) raise
    ``ConfigurationError`` before anything is generated. Per-item problems are
    recorded on the item and the batch carries on.
    """

    def __init__(
        self,
        registry: SiteRegistry,
        generator_factory: GeneratorFactory,
        *,
        target_factory: TargetFactory,
        image_store: ImageStore | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._registry = registry
        self._generator_factory = generator_factory
        self._target_factory = target_factory
        self._image_store = image_store
        self._sleep = sleep

    def run(self, request: BatchRequest) -> BatchReport:
        api_key = self._registry.get_api_key()
        if not api_key:
            raise ConfigurationError("Gemini API key not configured")

        mode = request.mode
        sites = self._target_sites(request, mode)
        work = self._enumerate(request, mode, sites)

        report = BatchReport(
            mode=mode,
            total_topics=len(request.topic_list()),
            delay_used=request.delay_seconds,
            total_sites=len(sites) if mode in {BatchMode.MULTISITE, BatchMode.BULK_MULTISITE} else None,
            started_at=datetime.now(timezone.utc),
        )
        LOGGER.info(
            "Batch started mode=%s items=%d delay=%.1fs",
            mode.value,
            len(work),
            request.delay_seconds,
            extra={"event": "batch.start", "mode": mode.value},
        )
        if not work:
            report.finished_at = datetime.now(timezone.utc)
            return report

        generator = self._generator_factory(api_key)
        pacer = Pacer(request.delay_seconds, sleep=self._sleep)
        last = len(work) - 1
        for position, item in enumerate(work):
            report.append(self._process(request, generator, item))
            if position < last:
                LOGGER.debug("Waiting %.1fs before next item", pacer.delay)
                pacer.wait()

        report.finished_at = datetime.now(timezone.utc)
        LOGGER.info(
            "Batch finished processed=%d waits=%d",
            report.total_processed,
            pacer.waits,
            extra={"event": "batch.done", "mode": mode.value, "counts": report.counts()},
        )
        return report

    def _target_sites(self, request: BatchRequest, mode: BatchMode) -> list[Site]:
        registered = self._registry.list_sites()
        if mode in {BatchMode.MULTISITE, BatchMode.BULK_MULTISITE}:
            selected, missing = select_sites(registered, request.site_ids)
            if missing:
                raise ConfigurationError(f"Unknown site id(s): {', '.join(missing)}")
            return selected

        if request.site_id is None:
            if mode is BatchMode.BULK_SINGLE_SITE:
                raise ConfigurationError("Bulk posting needs a target site")
            return []
        selected, missing = select_sites(registered, [request.site_id])
        if missing:
            raise ConfigurationError(f"Unknown site id: {request.site_id}")
        return selected

    @staticmethod
    def _enumerate(request: BatchRequest, mode: BatchMode, sites: list[Site]) -> list[_WorkItem]:
        topics = request.topic_list()
        if mode in {BatchMode.MULTISITE, BatchMode.BULK_MULTISITE}:
            return [
                _WorkItem(topic, topic_index, site, site_index)
                for topic_index, topic in enumerate(topics, start=1)
                for site_index, site in enumerate(sites, start=1)
            ]
        site = sites[0] if sites else None
        return [
            _WorkItem(topic, topic_index, site, None)
            for topic_index, topic in enumerate(topics, start=1)
        ]

    def _process(
        self, request: BatchRequest, generator: ArticleGenerator, item: _WorkItem
    ) -> BatchItemResult:
        site_name = item.site.name if item.site else None
        log_extra = {"event": "batch.item", "topic": item.topic, "site": site_name}
        link = resolve(request.link, item.site)

        try:
            article = generator.generate_article(item.topic, link)
        except GenerationFailure as exc:
            LOGGER.error("Generation failed: %s", exc, extra=log_extra)
            return self._generation_failed(item, str(exc))
        except Exception as exc:
            LOGGER.exception("Unexpected generator error", extra=log_extra)
            return self._generation_failed(item, str(exc) or exc.__class__.__name__)

        if link is not None:
            _check_link(article, link, log_extra)

        image: ImageAsset | None = None
        image_ref: str | None = None
        if request.generate_image:
            try:
                image = generator.generate_image(item.topic, article.title)
            except Exception as exc:
                LOGGER.warning("Image generation failed: %s", exc, extra=log_extra)
                image = None
            if image is not None and self._image_store is not None:
                try:
                    image_ref = str(self._image_store.save(image))
                except OSError as exc:
                    LOGGER.warning("Could not save image locally: %s", exc, extra=log_extra)

        def result(outcome, status: ItemStatus, error: str | None = None) -> BatchItemResult:
            return BatchItemResult(
                topic=item.topic,
                topic_index=item.topic_index,
                outcome=outcome,
                status=status,
                site_name=site_name,
                site_index=item.site_index,
                article=article,
                error=error,
                image_ref=image_ref,
            )

        if not request.publish_requested:
            return result(Skipped(), ItemStatus.GENERATED)
        if item.site is None:
            return result(Skipped(reason="no target site"), ItemStatus.GENERATED)

        try:
            target = self._target_factory(item.site)
            media_id: int | None = None
            if image is not None:
                upload = target.upload_media(image)
                media_id = upload.media_id
                if upload.source_url:
                    image_ref = upload.source_url
            post_id = target.create_post(
                article.title,
                article.html_content,
                list(article.tags),
                featured_media_id=media_id,
                schedule_time=request.schedule_time,
            )
            url = target.post_url(post_id)
        except Exception as exc:
            LOGGER.error("Publish failed: %s", exc, extra=log_extra)
            message = str(exc) or exc.__class__.__name__
            return result(Failed(error=message), ItemStatus.PUBLISH_FAILED, error=message)

        scheduled = request.schedule_time is not None
        LOGGER.info(
            "%s post %s at %s",
            "Scheduled" if scheduled else "Published",
            post_id,
            url,
            extra=log_extra,
        )
        return result(
            Published(
                post_id=post_id,
                url=url,
                scheduled=scheduled,
                scheduled_time=request.schedule_time.isoformat() if scheduled else None,
            ),
            ItemStatus.SCHEDULED if scheduled else ItemStatus.PUBLISHED,
        )

    @staticmethod
    def _generation_failed(item: _WorkItem, message: str) -> BatchItemResult:
        return BatchItemResult(
            topic=item.topic,
            topic_index=item.topic_index,
            outcome=Skipped(reason="generation failed"),
            status=ItemStatus.GENERATION_FAILED,
            site_name=item.site.name if item.site else None,
            site_index=item.site_index,
            error=message,
        )


def _check_link(article: Article, link: LinkSpec, log_extra: dict[str, object]) -> None:
    found = count_links_to(article.html_content, link.url)
    if found != 1:
        LOGGER.warning(
            "Expected one link to %s, found %d",
            link.url,
            found,
            extra={**log_extra, "event": "batch.link_check"},
        )


__all__ = ["ArticleGenerator", "BatchOrchestrator", "GeneratorFactory"]
