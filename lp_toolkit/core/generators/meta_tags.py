from __future__ import annotations

"""Description, Open Graph and Twitter Card ``<meta>`` tags."""

from typing import List

from lp_toolkit.core.models import SiteConfig
from lp_toolkit.core.utils import escape_html

__all__ = ["generate_meta_tags"]


def _meta_property(prop: str, content: str) -> str:
    return f'<meta property="{prop}" content="{escape_html(content)}">'


def _meta_name(name: str, content: str) -> str:
    return f'<meta name="{name}" content="{escape_html(content)}">'


def generate_meta_tags(site: SiteConfig) -> str:
    """Return the OGP fragment for *site*.

    ``og:type``, ``og:locale`` and ``twitter:card`` always emit (with
    defaults); every other tag only when its source value is present.  The
    image width/height pair is emitted together with ``og:image``.
    """
    if not _has_any_source(site):
        return ""

    tags: List[str] = []

    if site.site_description:
        tags.append(_meta_name("description", site.site_description))

    tags.append(_meta_property("og:type", site.resolved_og_type()))

    if site.site_title:
        tags.append(_meta_property("og:title", site.site_title))
    if site.site_description:
        tags.append(_meta_property("og:description", site.site_description))
    if site.og_url:
        tags.append(_meta_property("og:url", site.og_url))
    if site.og_image_url:
        width, height = site.resolved_og_image_size()
        tags.append(_meta_property("og:image", site.og_image_url))
        tags.append(_meta_property("og:image:width", width))
        tags.append(_meta_property("og:image:height", height))
    if site.og_site_name:
        tags.append(_meta_property("og:site_name", site.og_site_name))

    tags.append(_meta_property("og:locale", site.resolved_og_locale()))

    tags.append(_meta_name("twitter:card", site.resolved_twitter_card()))
    if site.twitter_site:
        tags.append(_meta_name("twitter:site", site.twitter_site))
    if site.site_title:
        tags.append(_meta_name("twitter:title", site.site_title))
    if site.site_description:
        tags.append(_meta_name("twitter:description", site.site_description))
    if site.og_image_url:
        tags.append(_meta_name("twitter:image", site.og_image_url))

    return "<!-- OGP -->\n" + "\n".join(tags)


def _has_any_source(site: SiteConfig) -> bool:
    # Defaults alone never produce a fragment.
    return any(
        (
            site.site_title,
            site.site_description,
            site.og_url,
            site.og_image_url,
            site.og_type,
            site.og_site_name,
            site.og_locale,
            site.twitter_card,
            site.twitter_site,
        )
    )
