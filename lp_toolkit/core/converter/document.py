from __future__ import annotations

"""Landing page document assembly.

Turns the source ``index.html`` into the pre-minification build document:

1. ``<title>`` replaced when ``SITE_TITLE`` is set;
2. OGP, analytics, favicon and structured-data fragments injected, in that
   order, right before ``</head>``.  Structured data runs last because FAQ
   extraction reads the assembled page;
3. the image rewriting pass;
4. stylesheet/script references pointed at the minified, base-path-prefixed
   outputs.
"""

import logging
import re
from typing import Iterable, Optional

from lp_toolkit.core.converter.image_rewriter import rewrite_images
from lp_toolkit.core.exceptions import StageError
from lp_toolkit.core.generators import (
    generate_analytics_tags,
    generate_meta_tags,
    generate_structured_data,
)
from lp_toolkit.core.models import BuildContext
from lp_toolkit.core.utils import escape_html

logger = logging.getLogger(__name__)

__all__ = [
    "HEAD_CLOSE",
    "replace_title",
    "inject_before_head_close",
    "rewrite_asset_references",
    "assemble_document",
]

HEAD_CLOSE = "</head>"

_TITLE_PATTERN = re.compile(r"<title>[^<]*</title>", re.IGNORECASE)


def replace_title(html: str, title: Optional[str]) -> str:
    """Replace the first ``<title>`` element with the escaped *title*."""
    if not title:
        return html
    return _TITLE_PATTERN.sub(lambda _m: f"<title>{escape_html(title)}</title>", html, count=1)


def inject_before_head_close(html: str, fragment: str) -> str:
    """Insert *fragment* (plus a newline) before the first ``</head>``.

    Empty fragments leave *html* untouched.  Raises :class:`StageError` when
    there is something to inject but the document has no ``</head>``.
    """
    if not fragment:
        return html
    if HEAD_CLOSE not in html:
        raise StageError("html", f"document has no {HEAD_CLOSE} to inject into")
    return html.replace(HEAD_CLOSE, f"{fragment}\n{HEAD_CLOSE}", 1)


def rewrite_asset_references(
    html: str,
    base_path: str = "",
    css_source: str = "style.css",
    css_output: str = "style.min.css",
    js_source: str = "script.js",
    js_output: str = "script.min.js",
) -> str:
    """Point the first stylesheet ``href`` and script ``src`` at the built files."""
    css_href = f"{base_path}/{css_output}" if base_path else css_output
    js_src = f"{base_path}/{js_output}" if base_path else js_output
    html = html.replace(f'href="{css_source}"', f'href="{css_href}"', 1)
    html = html.replace(f'src="{js_source}"', f'src="{js_src}"', 1)
    return html


def assemble_document(
    html: str,
    context: BuildContext,
    favicon_tags: str = "",
    asset_names: Optional[Iterable[str]] = None,
) -> str:
    """Run the full text transformation for one build.

    *asset_names* optionally overrides ``(css_source, css_output, js_source,
    js_output)``; the defaults match the packaged ``build.yml``.
    """
    site = context.site
    html = replace_title(html, site.site_title)

    html = inject_before_head_close(html, generate_meta_tags(site))
    html = inject_before_head_close(html, generate_analytics_tags(site))
    html = inject_before_head_close(html, favicon_tags)
    html = inject_before_head_close(html, generate_structured_data(site, html))

    result = rewrite_images(html, context.dimensions, context.base_path, context.sp_images)
    for warning in result.warnings:
        logger.warning("Image rewrite: %s", warning)

    names = tuple(asset_names) if asset_names is not None else ()
    return rewrite_asset_references(result.html, context.base_path, *names)
