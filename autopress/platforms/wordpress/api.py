"""WordPress REST API helpers."""

from __future__ import annotations

import base64
import json
from typing import Any, Mapping

import requests

from ...utils.logging import get_logger

LOGGER = get_logger(__name__)

REST_PREFIX = "/wp-json/wp/v2"


class WordPressApiError(RuntimeError):
    """Raised when WordPress REST calls fail."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = dict(details or {})

    def __str__(self) -> str:
        base = super().__str__()
        if not self.details:
            return base
        try:
            detail_repr = json.dumps(self.details, ensure_ascii=False, default=str)
        except TypeError:
            detail_repr = str(self.details)
        return f"{base} | details: {detail_repr}"


class UploadFailure(WordPressApiError):
    """Media upload rejected or unreachable."""


class PublishFailure(WordPressApiError):
    """Post creation rejected or unreachable."""


def basic_auth_header(username: str, password: str) -> dict[str, str]:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


class WordPressClient:
    """Authenticated access to one site's ``/wp-json/wp/v2`` endpoints."""

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        *,
        timeout: float | None = 60.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._username = username
        self._auth_header = basic_auth_header(username, password)
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def username(self) -> str:
        return self._username

    def endpoint(self, path: str) -> str:
        return f"{self._base_url}{REST_PREFIX}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> Any:
        """Send a request and return the decoded JSON body."""
        url = self.endpoint(path)
        merged = dict(self._auth_header)
        if headers:
            merged.update(headers)
        try:
            response = self._session.request(
                method.upper(), url, headers=merged, timeout=self._timeout, **kwargs
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise WordPressApiError(
                _http_error_message(exc.response),
                details={"method": method.upper(), "url": url},
            ) from exc
        except requests.RequestException as exc:
            raise WordPressApiError(
                f"Cannot reach WordPress at {self._base_url}: {exc}",
                details={"method": method.upper(), "url": url},
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise WordPressApiError(
                "Failed to decode WordPress response",
                details={"url": url, "response": (response.text or "")[:200]},
            ) from exc


def _http_error_message(response: Any) -> str:
    status = getattr(response, "status_code", "?")
    message = ""
    if response is not None:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = str(body.get("message") or body.get("code") or "")
        if not message:
            message = (getattr(response, "text", "") or "")[:200]
    return f"WordPress API error {status}: {message}".rstrip(": ")


__all__ = [
    "PublishFailure",
    "UploadFailure",
    "WordPressApiError",
    "WordPressClient",
    "basic_auth_header",
]
