"""Turns request-level link settings into a concrete link per site."""

from __future__ import annotations

from .models import LinkConfig, LinkSpec, Site


def resolve(link_config: LinkConfig, site: Site | None) -> LinkSpec | None:
    """Return the link to embed for ``site``, or ``None`` when no link applies.

    Internal links point at the target site itself (optionally at
    ``internal_path`` below it); external links always use the money-site URL.
    """
    if not link_config.enabled:
        return None

    if link_config.is_internal:
        if site is None:
            return None
        path = (link_config.internal_path or "").strip()
        url = f"{site.url}{path}" if path else site.url
        return LinkSpec(url=url, is_internal=True, anchor_keyword=link_config.anchor_keyword)

    external = (link_config.external_url or "").strip()
    if not external:
        return None
    return LinkSpec(url=external, is_internal=False, anchor_keyword=link_config.anchor_keyword)


__all__ = ["resolve"]
