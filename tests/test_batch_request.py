from __future__ import annotations

from datetime import datetime

import pytest

from autopress.services.batch_request import DEFAULT_DELAY_SECONDS, BatchRequest
from autopress.services.errors import ValidationError
from autopress.services.models import BatchMode


def test_camel_case_payload() -> None:
    request = BatchRequest.from_payload(
        {
            "bulkTopics": ["  coffee ", "", "tea"],
            "bulkPost": True,
            "multisitePost": True,
            "selectedMultisites": ["s2", "s1"],
            "generateImage": True,
            "autoPublish": "true",
            "scheduleTime": "2030-01-01T09:00:00",
            "includeMoneySite": True,
            "moneySiteUrl": "https://money.example",
            "moneySiteKeyword": "beans",
            "bulkDelay": "5",
        }
    )
    assert request.topics == ("coffee", "tea")
    assert request.site_ids == ("s2", "s1")
    assert request.mode is BatchMode.BULK_MULTISITE
    assert request.generate_image and request.auto_publish
    assert request.schedule_time == datetime(2030, 1, 1, 9, 0)
    assert request.link.enabled and not request.link.is_internal
    assert request.link.external_url == "https://money.example"
    assert request.link.anchor_keyword == "beans"
    assert request.delay_seconds == 5.0


def test_snake_case_payload_and_defaults() -> None:
    request = BatchRequest.from_payload({"topic": "coffee", "site_id": "s1"})
    assert request.mode is BatchMode.SINGLE
    assert request.site_id == "s1"
    assert request.delay_seconds == DEFAULT_DELAY_SECONDS
    assert not request.publish_requested
    assert request.topic_list() == ("coffee",)


def test_bulk_topics_accept_newline_text() -> None:
    request = BatchRequest.from_payload({"bulk_post": True, "bulk_topics": "one\n\ntwo\n"})
    assert request.topics == ("one", "two")
    assert request.mode is BatchMode.BULK_SINGLE_SITE


def test_schedule_time_alone_requests_publishing() -> None:
    request = BatchRequest.from_payload({"topic": "x", "scheduleTime": "2030-01-01T09:00:00Z"})
    assert request.publish_requested
    assert request.schedule_time is not None and request.schedule_time.tzinfo is not None


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"topic": "   "},
        {"bulkPost": True, "bulkTopics": []},
        {"bulkPost": True, "bulkTopics": ["  ", ""]},
        {"topic": "x", "scheduleTime": "tomorrow"},
        {"topic": "x", "bulkDelay": -1},
        {"topic": "x", "bulkDelay": "soon"},
        {"topic": "x", "includeMoneySite": True},
        {"topic": "x", "multisitePost": True, "selectedMultisites": []},
    ],
)
def test_invalid_payloads(payload: dict) -> None:
    with pytest.raises(ValidationError):
        BatchRequest.from_payload(payload)


def test_internal_link_needs_no_url() -> None:
    request = BatchRequest.from_payload(
        {"topic": "x", "includeMoneySite": True, "isInternalLink": True, "internalPath": "/about"}
    )
    assert request.link.is_internal
    assert request.link.internal_path == "/about"
