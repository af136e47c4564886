from __future__ import annotations

import base64
from datetime import datetime, timezone
from typing import Any

import pytest
import requests

from autopress.platforms.wordpress import (
    PublishFailure,
    UploadFailure,
    WordPressClient,
    WordPressPublishTarget,
    format_schedule_time,
)
from autopress.services.models import ImageAsset, Site


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    """Returns queued responses per (method, endpoint suffix) and records calls."""

    def __init__(self, routes: dict[tuple[str, str], list[Any]]) -> None:
        self._routes = {key: list(value) for key, value in routes.items()}
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        for (route_method, suffix), queue in self._routes.items():
            if route_method == method and url.endswith(suffix) and queue:
                item = queue.pop(0)
                if isinstance(item, Exception):
                    raise item
                return item
        raise AssertionError(f"unexpected request {method} {url}")

    def calls_to(self, method: str, suffix: str) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method and c["url"].endswith(suffix)]


def _target(session: FakeSession) -> WordPressPublishTarget:
    site = Site(id="s1", name="Blog", url="https://blog.example.com/", username="admin", password="app pass")
    return WordPressPublishTarget.from_site(site, timeout=5, session=session)


def test_auth_header_and_timeout_on_every_call() -> None:
    session = FakeSession({("GET", "/users/me"): [FakeResponse(payload={"name": "Admin"})]})
    assert _target(session).test_connection() is True
    call = session.calls[0]
    expected = base64.b64encode(b"admin:app pass").decode("ascii")
    assert call["url"] == "https://blog.example.com/wp-json/wp/v2/users/me"
    assert call["headers"]["Authorization"] == f"Basic {expected}"
    assert call["timeout"] == 5


def test_test_connection_reports_failures_without_raising() -> None:
    session = FakeSession(
        {
            ("GET", "/users/me"): [
                FakeResponse(401, {"code": "rest_not_logged_in", "message": "Bad credentials"}),
                requests.ConnectionError("refused"),
            ]
        }
    )
    target = _target(session)
    assert target.test_connection() is False
    assert target.test_connection() is False


def test_tags_reuse_existing_and_create_missing() -> None:
    session = FakeSession(
        {
            ("GET", "/tags"): [FakeResponse(payload=[{"id": 7, "name": "coffee"}]), FakeResponse(payload=[])],
            ("POST", "/tags"): [FakeResponse(201, {"id": 9, "name": "beans"})],
        }
    )
    ids = _target(session).resolve_or_create_tags(["coffee", " ", "beans"])
    assert ids == [7, 9]
    assert session.calls_to("GET", "/tags")[0]["params"] == {"search": "coffee"}
    assert session.calls_to("POST", "/tags")[0]["json"] == {"name": "beans"}


def test_tag_failures_are_skipped() -> None:
    session = FakeSession(
        {
            ("GET", "/tags"): [FakeResponse(500, {"message": "db down"}), FakeResponse(payload=[{"id": 3}])],
        }
    )
    assert _target(session).resolve_or_create_tags(["broken", "ok"]) == [3]


def test_upload_media_sends_multipart_file() -> None:
    session = FakeSession(
        {("POST", "/media"): [FakeResponse(201, {"id": 55, "source_url": "https://blog.example.com/img.png"})]}
    )
    result = _target(session).upload_media(ImageAsset(data=b"png-bytes"), filename="cover.png")
    assert result.media_id == 55
    assert result.source_url == "https://blog.example.com/img.png"
    call = session.calls[0]
    assert call["files"]["file"] == ("cover.png", b"png-bytes", "image/png")
    assert call["headers"]["Content-Disposition"] == 'attachment; filename="cover.png"'


def test_upload_errors_raise_upload_failure() -> None:
    session = FakeSession({("POST", "/media"): [FakeResponse(413, {"message": "too large"})]})
    with pytest.raises(UploadFailure) as excinfo:
        _target(session).upload_media(ImageAsset(data=b"x"))
    assert "413" in str(excinfo.value)


def test_create_post_publishes_immediately() -> None:
    session = FakeSession(
        {
            ("GET", "/tags"): [FakeResponse(payload=[{"id": 1}])],
            ("POST", "/posts"): [FakeResponse(201, {"id": 101})],
        }
    )
    target = _target(session)
    post_id = target.create_post("Title", "<p>x</p>", ["seo"], featured_media_id=55)
    assert post_id == 101
    payload = session.calls_to("POST", "/posts")[0]["json"]
    assert payload == {
        "title": "Title",
        "content": "<p>x</p>",
        "status": "publish",
        "tags": [1],
        "format": "standard",
        "featured_media": 55,
    }
    assert target.post_url(post_id) == "https://blog.example.com/?p=101"


def test_create_post_schedules_with_utc_date() -> None:
    session = FakeSession({("POST", "/posts"): [FakeResponse(201, {"id": 5})]})
    when = datetime(2030, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    _target(session).create_post("Title", "<p>x</p>", [], schedule_time=when)
    payload = session.calls_to("POST", "/posts")[0]["json"]
    assert payload["status"] == "future"
    assert payload["date"] == "2030-01-02T03:04:05.000Z"
    assert "featured_media" not in payload


def test_create_post_failures_raise_publish_failure() -> None:
    session = FakeSession(
        {
            ("POST", "/posts"): [
                FakeResponse(403, {"message": "Sorry, you are not allowed"}),
                FakeResponse(201, {"unexpected": True}),
            ]
        }
    )
    target = _target(session)
    with pytest.raises(PublishFailure):
        target.create_post("Title", "<p>x</p>", [])
    with pytest.raises(PublishFailure):
        target.create_post("Title", "<p>x</p>", [])


def test_client_strips_trailing_slash() -> None:
    client = WordPressClient("https://blog.example.com///", "u", "p")
    assert client.endpoint("posts") == "https://blog.example.com/wp-json/wp/v2/posts"


def test_schedule_time_is_converted_to_utc() -> None:
    aware = datetime.fromisoformat("2030-06-01T09:00:00+02:00")
    assert format_schedule_time(aware) == "2030-06-01T07:00:00.000Z"


def test_tag_resolution_is_idempotent() -> None:
    session = FakeSession(
        {
            ("GET", "/tags"): [FakeResponse(payload=[]), FakeResponse(payload=[{"id": 9, "name": "beans"}])],
            ("POST", "/tags"): [FakeResponse(201, {"id": 9, "name": "beans"})],
        }
    )
    target = _target(session)
    first = target.resolve_or_create_tags(["beans"])
    second = target.resolve_or_create_tags(["beans"])
    assert first == second == [9]
    assert len(session.calls_to("POST", "/tags")) == 1


def test_tag_created_with_non_object_body_is_dropped() -> None:
    session = FakeSession(
        {
            ("GET", "/tags"): [FakeResponse(payload=[]), FakeResponse(payload=[{"id": 4}])],
            ("POST", "/tags"): [FakeResponse(201, ["unexpected"])],
        }
    )
    assert _target(session).resolve_or_create_tags(["odd", "fine"]) == [4]
