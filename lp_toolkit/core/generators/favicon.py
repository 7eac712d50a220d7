from __future__ import annotations

"""Favicon files and their ``<link>`` tags.

Given a single square source icon (``images/favicon.png``) the PNG size set
from ``build.yml`` and a ``favicon.ico`` are written to the output root with
Pillow.  A missing source icon is not an error: nothing is written and the
fragment is empty.

Link tags come from the same size table: an entry with ``link: icon`` or
``link: apple-touch-icon`` gets a ``<link>``, entries without ``link`` (the
Android manifest sizes) are written but not linked.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Sequence

from PIL import Image

from lp_toolkit.config import ConfigManager

logger = logging.getLogger(__name__)

__all__ = ["FaviconSize", "generate_favicons", "favicon_link_tags", "parse_favicon_sizes"]


class FaviconSize(NamedTuple):
    size: int
    name: str
    link: Optional[str] = None


def parse_favicon_sizes(entries: Optional[Iterable[Mapping[str, Any]]]) -> List[FaviconSize]:
    """Turn the ``favicon.sizes`` list from ``build.yml`` into :class:`FaviconSize` rows."""
    return [
        FaviconSize(int(e["size"]), str(e["name"]), e.get("link") or None)
        for e in entries or []
    ]


def _configured_sizes() -> List[FaviconSize]:
    return parse_favicon_sizes(ConfigManager().get_build_config().get("favicon", {}).get("sizes"))


def _as_rows(sizes: Iterable[Sequence[Any]]) -> List[FaviconSize]:
    return [FaviconSize(*entry) for entry in sizes]


def favicon_link_tags(base_path: str = "", sizes: Optional[Iterable[Sequence[Any]]] = None) -> str:
    """Return the favicon ``<link>`` fragment with hrefs under *base_path*."""
    rows = _configured_sizes() if sizes is None else _as_rows(sizes)
    tags = [f'<link rel="icon" type="image/x-icon" href="{base_path}/favicon.ico">']
    for row in rows:
        if row.link == "icon":
            tags.append(f'<link rel="icon" type="image/png" sizes="{row.size}x{row.size}" href="{base_path}/{row.name}">')
        elif row.link == "apple-touch-icon":
            tags.append(f'<link rel="apple-touch-icon" sizes="{row.size}x{row.size}" href="{base_path}/{row.name}">')
        elif row.link:
            logger.warning("Unknown favicon link type %r for %s; not linked", row.link, row.name)
    return "<!-- Favicon -->\n" + "\n".join(tags)


def _square(img: Image.Image, size: int) -> Image.Image:
    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA")
    return img.resize((size, size), Image.Resampling.LANCZOS)


def generate_favicons(
    source: Path,
    output_dir: Path,
    base_path: str = "",
    sizes: Optional[Iterable[Sequence[Any]]] = None,
    ico_size: Optional[int] = None,
) -> str:
    """Write the favicon set for *source* into *output_dir*.

    *sizes* rows are ``(size, name)`` or ``(size, name, link)``.
    Returns the link-tag fragment, or ``''`` when *source* does not exist.
    Pillow errors propagate to the caller (the favicon build stage).
    """
    if not source.is_file():
        logger.info("  %s not found, skipping favicon generation", source.name)
        return ""

    rows = _configured_sizes() if sizes is None else _as_rows(sizes)
    if ico_size is None:
        ico_size = int(ConfigManager().get_build_config().get("favicon", {}).get("ico_size", 32))

    output_dir.mkdir(parents=True, exist_ok=True)
    with Image.open(source) as img:
        img.load()
        for row in rows:
            _square(img, row.size).save(output_dir / row.name, format="PNG")
            logger.debug("Favicon written: %s (%dx%d)", row.name, row.size, row.size)
        _square(img, ico_size).save(output_dir / "favicon.ico", format="ICO", sizes=[(ico_size, ico_size)])

    logger.info("✓ Favicon generated")
    return favicon_link_tags(base_path, rows)
