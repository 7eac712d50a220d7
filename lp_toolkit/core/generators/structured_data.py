from __future__ import annotations

"""schema.org JSON-LD blocks.

``STRUCTURED_DATA_TYPE`` lists one or more of ``Event``, ``Product``,
``LocalBusiness``, ``Organization`` and ``FAQPage`` (comma-separated,
case-insensitive).  Each entry is resolved on its own: an unknown type, or a
type whose required fields are missing, is skipped with a warning while the
remaining types still render.

``FAQPage`` reads no configuration.  Its questions come from the assembled
page: every ``<summary>`` followed by a ``<p>`` yields one Question/Answer
pair.  Richer answer markup (several paragraphs, lists) is not extracted.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Optional

from lp_toolkit.core.models import SiteConfig
from lp_toolkit.core.utils import escape_json_ld

logger = logging.getLogger(__name__)

__all__ = [
    "generate_structured_data",
    "build_structured_data",
    "extract_faq_items",
    "SUPPORTED_TYPES",
]

SCHEMA_CONTEXT = "https://schema.org"
IN_STOCK = "https://schema.org/InStock"

_FAQ_PATTERN = re.compile(
    # The gap after </summary> never crosses into the next disclosure block.
    r"<summary[^>]*>([\s\S]*?)</summary>(?:(?!</details>|<summary)[\s\S])*?<p[^>]*>([\s\S]*?)</p>",
    re.IGNORECASE,
)

JsonObject = Dict[str, Any]


def _compact(obj: JsonObject) -> JsonObject:
    """Drop keys whose value is ``None``."""
    return {k: v for k, v in obj.items() if v is not None}


def _event(site: SiteConfig, html: str) -> Optional[JsonObject]:
    name = site.event_name_or_title()
    if not name:
        logger.warning("Event structured data requires EVENT_NAME or SITE_TITLE")
        return None

    location = None
    if site.event_location_name or site.event_location_address:
        location = _compact({
            "@type": "Place",
            "name": site.event_location_name,
            "address": site.event_location_address,
        })

    offers = None
    if site.event_offer_price:
        offers = _compact({
            "@type": "Offer",
            "price": site.event_offer_price,
            "priceCurrency": site.event_offer_currency or "JPY",
            "availability": IN_STOCK,
            "url": site.event_offer_url_or_og(),
        })

    performer = {"@type": "Person", "name": site.event_performer} if site.event_performer else None
    organizer = {"@type": "Organization", "name": site.og_site_name} if site.og_site_name else None

    return _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "Event",
        "name": name,
        "description": site.event_description_or_site(),
        "image": site.event_image_or_og(),
        "startDate": site.event_start_date,
        "endDate": site.event_end_date,
        "location": location,
        "offers": offers,
        "performer": performer,
        "organizer": organizer,
    })


def _product(site: SiteConfig, html: str) -> Optional[JsonObject]:
    name = site.product_name_or_title()
    if not name:
        logger.warning("Product structured data requires PRODUCT_NAME or SITE_TITLE")
        return None

    offers = None
    if site.product_price:
        offers = {
            "@type": "Offer",
            "price": site.product_price,
            "priceCurrency": site.product_currency or "JPY",
            "availability": site.product_availability or IN_STOCK,
        }

    return _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "Product",
        "name": name,
        "description": site.site_description,
        "image": site.og_image_url,
        "brand": site.product_brand,
        "offers": offers,
    })


def _local_business(site: SiteConfig, html: str) -> Optional[JsonObject]:
    name = site.business_name_or_site()
    if not name:
        logger.warning("LocalBusiness structured data requires BUSINESS_NAME or OG_SITE_NAME")
        return None

    # A PostalAddress needs both the street and the city.
    address = None
    if site.business_address and site.business_city:
        address = _compact({
            "@type": "PostalAddress",
            "streetAddress": site.business_address,
            "addressLocality": site.business_city,
            "addressRegion": site.business_region,
            "postalCode": site.business_postal_code,
            "addressCountry": site.business_country or "JP",
        })

    return _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": site.business_type or "LocalBusiness",
        "name": name,
        "description": site.site_description,
        "image": site.business_image_or_og(),
        "telephone": site.business_phone,
        "url": site.business_url_or_og(),
        "priceRange": site.business_price_range,
        "address": address,
    })


def _organization(site: SiteConfig, html: str) -> Optional[JsonObject]:
    name = site.organization_name()
    url = site.organization_url()
    if not name or not url:
        logger.warning("Organization structured data requires name and url")
        return None

    return _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "Organization",
        "name": name,
        "url": url,
        "logo": site.organization_logo(),
        "description": site.organization_description(),
        "email": site.org_email,
        "telephone": site.org_phone,
    })


def extract_faq_items(html: str) -> List[JsonObject]:
    """Return one schema.org ``Question`` per ``<summary>``/``<p>`` pair in *html*."""
    items: List[JsonObject] = []
    for match in _FAQ_PATTERN.finditer(html):
        question = match.group(1).strip()
        answer = match.group(2).strip()
        if question and answer:
            items.append({
                "@type": "Question",
                "name": question,
                "acceptedAnswer": {"@type": "Answer", "text": answer},
            })
    return items


def _faq_page(site: SiteConfig, html: str) -> Optional[JsonObject]:
    items = extract_faq_items(html)
    if not items:
        logger.warning("FAQPage structured data found no <summary>/<p> pairs in the page")
        return None
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FAQPage",
        "mainEntity": items,
    }


_BUILDERS: Dict[str, Callable[[SiteConfig, str], Optional[JsonObject]]] = {
    "event": _event,
    "product": _product,
    "localbusiness": _local_business,
    "organization": _organization,
    "faqpage": _faq_page,
}

SUPPORTED_TYPES = ("Event", "Product", "LocalBusiness", "Organization", "FAQPage")


def build_structured_data(type_name: str, site: SiteConfig, html: str = "") -> Optional[JsonObject]:
    """Resolve one structured-data type into its JSON-LD object (or ``None``)."""
    builder = _BUILDERS.get(type_name.strip().lower())
    if builder is None:
        logger.warning("Unknown structured data type: %s", type_name)
        return None
    return builder(site, html)


def generate_structured_data(site: SiteConfig, html: str) -> str:
    """Return one ``<script type="application/ld+json">`` tag per resolved type."""
    scripts: List[str] = []
    for type_name in site.structured_data_types():
        data = build_structured_data(type_name, site, html)
        if data:
            scripts.append(f'<script type="application/ld+json">{escape_json_ld(data)}</script>')
    return "\n".join(scripts)
