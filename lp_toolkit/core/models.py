from __future__ import annotations

"""Shared data structures used across the LP Toolkit core.

This module is intentionally free of I/O code so that the contained objects
can be reused in any context (unit-tests, CLI, other front-ends).
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from lp_toolkit.core.utils import normalize_base_path, parse_bool, parse_int_list

__all__ = [
    "SiteConfig",
    "ImageSize",
    "ImageDimensionTable",
    "BuildContext",
    "RewriteResult",
    "BuildReport",
]


@dataclass(frozen=True)
class SiteConfig:
    """Typed view of the flat site/campaign configuration map.

    Every attribute mirrors the upper-cased environment key of the same name
    (``site_title`` <- ``SITE_TITLE``).  All values are optional; blank values
    are normalised to ``None`` so generators only ever test for presence.
    Keys that are not recognised are kept verbatim in :attr:`extras`.
    """

    # Site metadata
    site_title: Optional[str] = None
    site_description: Optional[str] = None
    og_url: Optional[str] = None
    og_image_url: Optional[str] = None
    og_image_width: Optional[str] = None
    og_image_height: Optional[str] = None
    og_type: Optional[str] = None
    og_site_name: Optional[str] = None
    og_locale: Optional[str] = None
    twitter_card: Optional[str] = None
    twitter_site: Optional[str] = None
    base_path: Optional[str] = None

    # Tracking providers
    ga_measurement_id: Optional[str] = None
    ga_ads_id: Optional[str] = None
    ga_ads_conversion_label: Optional[str] = None
    meta_pixel_id: Optional[str] = None
    line_tag_id: Optional[str] = None
    yahoo_retargeting_id: Optional[str] = None
    yahoo_conversion_id: Optional[str] = None
    yahoo_conversion_label: Optional[str] = None
    clarity_project_id: Optional[str] = None
    track_scroll_depth: Optional[str] = None
    track_time_on_page: Optional[str] = None

    # Structured data
    structured_data_type: Optional[str] = None
    event_name: Optional[str] = None
    event_description: Optional[str] = None
    event_image_url: Optional[str] = None
    event_start_date: Optional[str] = None
    event_end_date: Optional[str] = None
    event_location_name: Optional[str] = None
    event_location_address: Optional[str] = None
    event_offer_price: Optional[str] = None
    event_offer_currency: Optional[str] = None
    event_offer_url: Optional[str] = None
    event_performer: Optional[str] = None
    product_name: Optional[str] = None
    product_brand: Optional[str] = None
    product_price: Optional[str] = None
    product_currency: Optional[str] = None
    product_availability: Optional[str] = None
    business_name: Optional[str] = None
    business_type: Optional[str] = None
    business_image_url: Optional[str] = None
    business_phone: Optional[str] = None
    business_url: Optional[str] = None
    business_price_range: Optional[str] = None
    business_address: Optional[str] = None
    business_city: Optional[str] = None
    business_region: Optional[str] = None
    business_postal_code: Optional[str] = None
    business_country: Optional[str] = None
    org_name: Optional[str] = None
    org_url: Optional[str] = None
    org_logo_url: Optional[str] = None
    org_description: Optional[str] = None
    org_email: Optional[str] = None
    org_phone: Optional[str] = None

    extras: Dict[str, str] = field(default_factory=dict, compare=False)

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "SiteConfig":
        """Build a config from a flat ``KEY -> value`` mapping (e.g. a parsed .env)."""
        known = {f.name for f in fields(cls) if f.name != "extras"}
        kwargs: Dict[str, Any] = {}
        extras: Dict[str, str] = {}
        for key, raw in values.items():
            value = raw.strip() if isinstance(raw, str) else raw
            name = key.strip().lower()
            if name in known:
                kwargs[name] = value or None
            else:
                extras[key] = raw
        return cls(extras=extras, **kwargs)

    # ------------------------------------------------------------------
    # Defaults and fallback chains
    # ------------------------------------------------------------------
    def resolved_og_type(self) -> str:
        return self.og_type or "website"

    def resolved_og_locale(self) -> str:
        return self.og_locale or "ja_JP"

    def resolved_twitter_card(self) -> str:
        return self.twitter_card or "summary_large_image"

    def resolved_og_image_size(self) -> tuple[str, str]:
        return self.og_image_width or "1200", self.og_image_height or "630"

    def normalized_base_path(self) -> str:
        return normalize_base_path(self.base_path)

    def structured_data_types(self) -> List[str]:
        """Comma-separated ``STRUCTURED_DATA_TYPE`` entries, trimmed, blanks dropped."""
        if not self.structured_data_type:
            return []
        return [t.strip() for t in self.structured_data_type.split(",") if t.strip()]

    def scroll_depth_enabled(self) -> bool:
        return parse_bool(self.track_scroll_depth)

    def time_on_page_thresholds(self) -> List[int]:
        return parse_int_list(self.track_time_on_page)

    def event_name_or_title(self) -> Optional[str]:
        return self.event_name or self.site_title

    def event_description_or_site(self) -> Optional[str]:
        return self.event_description or self.site_description

    def event_image_or_og(self) -> Optional[str]:
        return self.event_image_url or self.og_image_url

    def event_offer_url_or_og(self) -> Optional[str]:
        return self.event_offer_url or self.og_url

    def product_name_or_title(self) -> Optional[str]:
        return self.product_name or self.site_title

    def business_name_or_site(self) -> Optional[str]:
        return self.business_name or self.og_site_name

    def business_image_or_og(self) -> Optional[str]:
        return self.business_image_url or self.og_image_url

    def business_url_or_og(self) -> Optional[str]:
        return self.business_url or self.og_url

    def organization_name(self) -> Optional[str]:
        return self.org_name or self.og_site_name

    def organization_url(self) -> Optional[str]:
        return self.org_url or self.og_url

    def organization_logo(self) -> Optional[str]:
        return self.org_logo_url or self.og_image_url

    def organization_description(self) -> Optional[str]:
        return self.org_description or self.site_description


@dataclass(frozen=True)
class ImageSize:
    width: int
    height: int


class ImageDimensionTable:
    """Read-only mapping of image path -> :class:`ImageSize` with suffix lookup.

    Keys recorded by the image analysis step may carry a different prefix than
    the ``src`` attribute in the page (``src/images/a.png`` vs ``images/a.png``),
    so :meth:`lookup` matches any key that *ends with* the requested path.
    When several keys match, the shortest key wins and equal lengths are
    ordered lexicographically, so the result never depends on file order.
    """

    def __init__(self, entries: Optional[Mapping[str, ImageSize]] = None) -> None:
        self._entries: Dict[str, ImageSize] = dict(entries or {})
        self._ordered_keys = sorted(self._entries, key=lambda k: (len(k), k))

    @classmethod
    def from_json_payload(cls, payload: Mapping[str, Any]) -> "ImageDimensionTable":
        """Build from the ``{"path": {"width": w, "height": h}}`` JSON shape.

        Entries that lack an integer width/height are ignored.
        """
        entries: Dict[str, ImageSize] = {}
        for key, value in payload.items():
            if not isinstance(value, Mapping):
                continue
            try:
                entries[str(key)] = ImageSize(int(value["width"]), int(value["height"]))
            except (KeyError, TypeError, ValueError):
                continue
        return cls(entries)

    def lookup(self, relative_path: str) -> Optional[ImageSize]:
        if not relative_path:
            return None
        for key in self._ordered_keys:
            if key.endswith(relative_path):
                return self._entries[key]
        return None

    def to_json_payload(self) -> Dict[str, Dict[str, int]]:
        return {
            key: {"width": size.width, "height": size.height}
            for key, size in sorted(self._entries.items())
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


@dataclass(frozen=True)
class BuildContext:
    """Everything the HTML transformation needs for one build.

    Attributes
    ----------
    site
        Typed site/campaign configuration.
    dimensions
        Image path -> pixel size table used to fill missing width/height.
    sp_images
        PC-side relative paths that have a ``-sp`` sibling in the source tree.
    """

    site: SiteConfig = field(default_factory=SiteConfig)
    dimensions: ImageDimensionTable = field(default_factory=ImageDimensionTable)
    sp_images: FrozenSet[str] = frozenset()

    @property
    def base_path(self) -> str:
        return self.site.normalized_base_path()


@dataclass
class RewriteResult:
    """Output of the image tag rewriter.

    ``warnings`` is part of the contract for future diagnostics; the current
    rewriter never populates it.
    """

    html: str
    warnings: List[str] = field(default_factory=list)


@dataclass
class BuildReport:
    """Per-stage outcome of one :class:`~lp_toolkit.core.services.BuildService` run."""

    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        parts = [f"{len(self.succeeded)} succeeded"]
        if self.skipped:
            parts.append(f"{len(self.skipped)} skipped")
        if self.failed:
            parts.append(f"{len(self.failed)} failed ({', '.join(self.failed)})")
        return ", ".join(parts)
