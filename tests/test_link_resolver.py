from __future__ import annotations

from autopress.services.link_resolver import resolve
from autopress.services.models import LinkConfig, Site

SITE = Site(id="s1", name="Blog", url="https://blog.example.com", username="u", password="p")


def test_disabled_link_resolves_to_none() -> None:
    assert resolve(LinkConfig(enabled=False, external_url="https://money.example"), SITE) is None


def test_internal_link_uses_site_url_and_path() -> None:
    link = resolve(LinkConfig(enabled=True, is_internal=True, internal_path="/shop"), SITE)
    assert link is not None
    assert link.url == "https://blog.example.com/shop"
    assert link.is_internal


def test_internal_link_without_path_targets_site_root() -> None:
    link = resolve(LinkConfig(enabled=True, is_internal=True, anchor_keyword="coffee"), SITE)
    assert link is not None
    assert link.url == "https://blog.example.com"
    assert link.anchor_keyword == "coffee"


def test_internal_link_without_site_is_none() -> None:
    assert resolve(LinkConfig(enabled=True, is_internal=True), None) is None


def test_external_link_ignores_site() -> None:
    config = LinkConfig(enabled=True, external_url="https://money.example/offer", anchor_keyword="deal")
    for site in (SITE, None):
        link = resolve(config, site)
        assert link is not None
        assert link.url == "https://money.example/offer"
        assert not link.is_internal
        assert link.anchor_keyword == "deal"


def test_external_link_without_url_is_none() -> None:
    assert resolve(LinkConfig(enabled=True), SITE) is None
