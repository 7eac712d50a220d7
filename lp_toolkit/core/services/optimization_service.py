from __future__ import annotations

"""Minification of the built HTML, CSS and JavaScript.

Thin wrappers over the third-party minifiers so the build service does not
depend on their call signatures:

- HTML: ``minify-html`` (inline CSS/JS minified too)
- CSS: ``rcssmin``
- JS: ``rjsmin``

Each minifier can be switched off in ``build.yml`` (``minify:`` section), in
which case the text passes through unchanged.
"""

import logging
import re
from typing import Any, Dict, Optional

import minify_html
import rcssmin
import rjsmin

from lp_toolkit.config import ConfigManager
from lp_toolkit.core.generators import generate_conversion_code
from lp_toolkit.core.models import SiteConfig

logger = logging.getLogger(__name__)

__all__ = ["OptimizationService", "CONVERSION_PLACEHOLDER_PATTERN"]

CONVERSION_PLACEHOLDER_PATTERN = re.compile(r"//\s*__CONVERSION_CODE_PLACEHOLDER__")


class OptimizationService:
    """Minifiers configured from the ``minify`` section of ``build.yml``."""

    def __init__(self, switches: Optional[Dict[str, Any]] = None) -> None:
        if switches is None:
            switches = ConfigManager().get_build_config().get("minify", {})
        self.switches = switches

    def _enabled(self, kind: str) -> bool:
        return bool(self.switches.get(kind, True))

    def minify_html(self, html: str) -> str:
        if not self._enabled("html"):
            return html
        return minify_html.minify(html, minify_css=True, minify_js=True)

    def minify_css(self, css: str) -> str:
        if not self._enabled("css"):
            return css
        return rcssmin.cssmin(css)

    def minify_js(self, js: str) -> str:
        if not self._enabled("js"):
            return js
        return rjsmin.jsmin(js)

    def prepare_script(self, js: str, site: SiteConfig) -> str:
        """Drop the conversion placeholder comment and append the conversion code."""
        js = CONVERSION_PLACEHOLDER_PATTERN.sub("", js).strip()
        conversion = generate_conversion_code(site)
        if not conversion:
            return js
        return js + "\n\n" + conversion

    def optimize_script(self, js: str, site: SiteConfig) -> str:
        return self.minify_js(self.prepare_script(js, site))
