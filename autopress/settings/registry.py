"""On-disk registry of WordPress sites and the Gemini API key."""

from __future__ import annotations

import json
import os
import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from ..security import (
    ChainedSecretProvider,
    EnvSecretProvider,
    MappingSecretProvider,
    SecretNotFoundError,
    SecretProvider,
)
from ..services.errors import ConfigurationError
from ..services.models import Site
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

API_KEY_SECRET = "gemini_api_key"


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class SiteRegistry:
    """Stores site records and the API key in a single JSON document.

    The document looks like ``{"api_key": "...", "sites": [...]}``. Sites are
    returned newest first. When no key is stored, ``get_api_key`` falls back to
    the configured secret provider (the ``GEMINI_API_KEY`` environment variable
    by default).
    """

    def __init__(self, path: Path, *, secrets: SecretProvider | None = None) -> None:
        self._path = path
        self._secrets = secrets if secrets is not None else EnvSecretProvider()

    @property
    def path(self) -> Path:
        return self._path

    # -- sites -----------------------------------------------------------

    def list_sites(self) -> list[Site]:
        data = self._read()
        sites = [Site.from_dict(item) for item in data.get("sites", [])]
        return sorted(sites, key=lambda site: site.created_at or "", reverse=True)

    def get_site(self, site_id: str) -> Site | None:
        for site in self.list_sites():
            if site.id == site_id:
                return site
        return None

    def add_site(self, *, name: str, url: str, username: str, password: str) -> Site:
        site = Site(
            id=str(uuid.uuid4()),
            name=name.strip() or url,
            url=url.strip().rstrip("/"),
            username=username.strip(),
            password=password,
            created_at=_now(),
        )
        data = self._read()
        data.setdefault("sites", []).append(site.to_dict())
        self._write(data)
        LOGGER.info("Added site", extra={"event": "registry.add", "site": site.name, "site_id": site.id})
        return site

    def update_site(self, site_id: str, **changes: str) -> Site | None:
        data = self._read()
        for index, raw in enumerate(data.get("sites", [])):
            if str(raw.get("id")) != site_id:
                continue
            updated = dict(raw)
            for key in ("name", "url", "username", "password"):
                value = changes.get(key)
                if value is not None:
                    updated[key] = value.rstrip("/") if key == "url" else value
            data["sites"][index] = updated
            self._write(data)
            return Site.from_dict(updated)
        return None

    def remove_site(self, site_id: str) -> bool:
        data = self._read()
        sites = data.get("sites", [])
        remaining = [raw for raw in sites if str(raw.get("id")) != site_id]
        if len(remaining) == len(sites):
            return False
        data["sites"] = remaining
        self._write(data)
        LOGGER.info("Removed site", extra={"event": "registry.remove", "site_id": site_id})
        return True

    # -- api key ---------------------------------------------------------

    def get_api_key(self) -> str:
        """Return the API key or an empty string when none is configured."""
        stored = {API_KEY_SECRET: str(self._read().get("api_key") or "")}
        chain = ChainedSecretProvider((MappingSecretProvider(stored), self._secrets))
        try:
            return chain.get_secret(API_KEY_SECRET)
        except SecretNotFoundError:
            return ""

    def set_api_key(self, key: str) -> None:
        data = self._read()
        data["api_key"] = key.strip()
        self._write(data)

    # -- backup / restore ------------------------------------------------

    def backup(self) -> str:
        data = self._read()
        backup = {
            "timestamp": _now(),
            "settings": {
                "api_key": data.get("api_key", ""),
                "sites": data.get("sites", []),
            },
        }
        return json.dumps(backup, ensure_ascii=False, indent=2)

    def restore(self, backup_json: str) -> bool:
        """Replace the registry contents with a backup produced by ``backup``."""
        try:
            settings = json.loads(backup_json)["settings"]
            sites = [Site.from_dict(raw) for raw in settings.get("sites") or []]
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as exc:
            LOGGER.error("Invalid settings backup: %s", exc, extra={"event": "registry.restore"})
            return False
        data = self._read()
        if settings.get("api_key"):
            data["api_key"] = settings["api_key"]
        data["sites"] = [site.to_dict() for site in sites]
        self._write(data)
        LOGGER.info("Restored settings", extra={"event": "registry.restore", "sites": len(sites)})
        return True

    def clear(self) -> None:
        self._write({"api_key": "", "sites": []})

    # -- storage ---------------------------------------------------------

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {"api_key": "", "sites": []}
        raw = self._path.read_text(encoding="utf-8")
        if not raw.strip():
            return {"api_key": "", "sites": []}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid registry file {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"Invalid registry file {self._path}: expected an object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        path = self._path
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(data, ensure_ascii=False, indent=2)
        with tempfile.NamedTemporaryFile(
            "w", delete=False, dir=str(path.parent), encoding="utf-8"
        ) as tmp:
            tmp.write(payload)
            tmp_path = Path(tmp.name)
        tmp_path.replace(path)
        if os.name != "nt":
            os.chmod(path, 0o600)


def select_sites(sites: Iterable[Site], site_ids: Iterable[str]) -> tuple[list[Site], list[str]]:
    """Return the sites matching ``site_ids`` in request order, plus unknown ids."""
    by_id = {site.id: site for site in sites}
    selected: list[Site] = []
    missing: list[str] = []
    for site_id in site_ids:
        site = by_id.get(site_id)
        if site is None:
            missing.append(site_id)
        else:
            selected.append(site)
    return selected, missing


__all__ = ["API_KEY_SECRET", "SiteRegistry", "select_sites"]
