from __future__ import annotations

"""Responsive image rewriting for the landing page.

Every ``<img>`` outside an existing ``<picture>`` or ``<noscript>`` gets, in
document order:

1. missing ``width``/``height`` filled from the image dimension table;
2. ``loading="lazy"`` unless it is the first image or already has ``loading``;
3. for PNG/JPEG sources, a ``<picture>`` wrapper offering AVIF and WebP
   variants, plus ``-sp`` smartphone variants under
   ``(max-width: 767px)`` when the image has one;
4. the base path prefix on relative ``src``/``srcset`` values.

Hand-written ``<picture>`` blocks and ``<noscript>`` blocks (tracking pixels)
are swapped for placeholder tokens before the pass and restored verbatim
afterwards, so an analytics pixel in ``<head>`` never counts as the first
image.

The rewriter works on text with regular expressions, not on a parsed DOM.
Supported input is the shape the page templates use: ``<img>`` tags with a
quoted ``src``, ``<picture>`` blocks that do not nest.
"""

import logging
import posixpath
import re
import uuid
from typing import AbstractSet, List, Optional, Set

from lp_toolkit.core.models import ImageDimensionTable, RewriteResult
from lp_toolkit.core.utils import (
    is_external_src,
    normalize_base_path,
    strip_leading_slash,
    with_base_path,
)

logger = logging.getLogger(__name__)

__all__ = [
    "rewrite_images",
    "attribute_names",
    "SP_MEDIA_QUERY",
    "PICTURE_EXTENSIONS",
]

SP_MEDIA_QUERY = "(max-width: 767px)"
SP_SUFFIX = "-sp"
PICTURE_EXTENSIONS = (".png", ".jpg", ".jpeg")

# Left verbatim and not counted as images.
_PROTECTED_PATTERN = re.compile(
    r"<picture[\s\S]*?</picture>|<noscript[\s\S]*?</noscript>",
    re.IGNORECASE,
)
_IMG_PATTERN = re.compile(
    r"<img\b(?P<before>[^>]*?\s)src=(?P<quote>[\"'])(?P<src>[^\"']+)(?P=quote)(?P<after>[^>]*)>",
    re.IGNORECASE,
)
_ATTR_PATTERN = re.compile(
    r"([^\s=\"'/>]+)(?:\s*=\s*(?:\"[^\"]*\"|'[^']*'|[^\s>]+))?"
)
_SELF_CLOSE_PATTERN = re.compile(r"^(?P<body>[\s\S]*?)(?P<slash>\s*/)?$")
_EXTENSION_PATTERN = re.compile(r"\.(png|jpe?g)$", re.IGNORECASE)


def attribute_names(attr_text: str) -> Set[str]:
    """Return the lower-cased attribute names present in *attr_text*.

    Examples:
        >>> sorted(attribute_names(' alt="a=b" width="10" data-height="3"'))
        ['alt', 'data-height', 'width']
    """
    return {m.group(1).lower() for m in _ATTR_PATTERN.finditer(attr_text)}


class _ImageRewriter:
    """One document pass; holds the running image index."""

    def __init__(
        self,
        dimensions: ImageDimensionTable,
        base_path: str,
        sp_images: AbstractSet[str],
    ) -> None:
        self.dimensions = dimensions
        self.base_path = normalize_base_path(base_path)
        self.sp_images = sp_images
        self.image_index = 0

    def __call__(self, match: "re.Match[str]") -> str:
        self.image_index += 1
        is_first = self.image_index == 1

        before = match.group("before")
        quote = match.group("quote")
        src = match.group("src")
        tail = _SELF_CLOSE_PATTERN.match(match.group("after"))
        after = tail.group("body") if tail else match.group("after")
        slash = (tail.group("slash") or "") if tail else ""

        names = attribute_names(before + after)
        has_width = "width" in names
        has_height = "height" in names

        additions: List[str] = []
        if not has_width or not has_height:
            size = self.dimensions.lookup(strip_leading_slash(src))
            if size is not None:
                if not has_width:
                    additions.append(f' width="{size.width}"')
                if not has_height:
                    additions.append(f' height="{size.height}"')
            else:
                logger.debug("No dimensions recorded for %s", src)

        if not is_first and "loading" not in names:
            additions.append(' loading="lazy"')

        new_after = after + "".join(additions) + slash
        served_src = with_base_path(src, self.base_path)
        img_tag = f"<img{before}src={quote}{served_src}{quote}{new_after}>"

        extension = posixpath.splitext(src)[1].lower()
        if extension not in PICTURE_EXTENSIONS:
            return img_tag

        return self._picture(src, img_tag)

    def _picture(self, src: str, img_tag: str) -> str:
        base_name = _EXTENSION_PATTERN.sub("", src)
        original_ext = src[len(base_name):]
        served_base = with_base_path(base_name, self.base_path)

        lines = ["<picture>"]
        if strip_leading_slash(src) in self.sp_images:
            sp_base = with_base_path(base_name + SP_SUFFIX, self.base_path)
            lines.extend([
                f'  <source media="{SP_MEDIA_QUERY}" srcset="{sp_base}.avif" type="image/avif">',
                f'  <source media="{SP_MEDIA_QUERY}" srcset="{sp_base}.webp" type="image/webp">',
                f'  <source media="{SP_MEDIA_QUERY}" srcset="{sp_base}{original_ext}">',
            ])
        lines.extend([
            f'  <source srcset="{served_base}.avif" type="image/avif">',
            f'  <source srcset="{served_base}.webp" type="image/webp">',
            f"  {img_tag}",
            "</picture>",
        ])
        return "\n".join(lines)


def rewrite_images(
    html: str,
    dimensions: Optional[ImageDimensionTable] = None,
    base_path: str = "",
    sp_images: Optional[AbstractSet[str]] = None,
) -> RewriteResult:
    """Rewrite every ``<img>`` in *html* outside ``<picture>``/``<noscript>`` blocks.

    Parameters
    ----------
    html
        Whole document text.
    dimensions
        Path -> pixel size table for filling missing width/height.
    base_path
        Sub-directory the site is served from ('' for the domain root).
    sp_images
        Relative PC image paths that have a ``-sp`` variant.
    """
    token = uuid.uuid4().hex
    protected: List[str] = []

    def _protect(match: "re.Match[str]") -> str:
        protected.append(match.group(0))
        return f"__PROTECTED_BLOCK_{token}_{len(protected) - 1}__"

    html = _PROTECTED_PATTERN.sub(_protect, html)

    rewriter = _ImageRewriter(dimensions or ImageDimensionTable(), base_path, sp_images or frozenset())
    html = _IMG_PATTERN.sub(rewriter, html)

    for index, block in enumerate(protected):
        html = html.replace(f"__PROTECTED_BLOCK_{token}_{index}__", block, 1)

    if rewriter.image_index:
        logger.debug(
            "Rewrote %d image(s), %d picture/noscript block(s) left untouched",
            rewriter.image_index, len(protected),
        )
    return RewriteResult(html=html)
