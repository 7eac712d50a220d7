from __future__ import annotations

"""Client-side conversion tracking script.

The generated script is appended to the page's JavaScript bundle.  It binds a
click handler to every element carrying ``data-cv`` and forwards the marker
value (and the element text as a label) to each configured provider.  Each
provider call is wrapped in a ``typeof fn === 'function'`` guard so a blocked
or failed tracking script never raises in the page.  Without any provider
there is no script at all.

Optional extras, both requiring ``GA_MEASUREMENT_ID``:

- scroll depth events at 25/50/75/90 percent (``TRACK_SCROLL_DEPTH=true``)
- time-on-page events at the seconds listed in ``TRACK_TIME_ON_PAGE``

Both fire at most once per threshold per page load.
"""

import json
from typing import List

from lp_toolkit.core.generators.analytics import safe_tracking_id
from lp_toolkit.core.models import SiteConfig

__all__ = ["generate_conversion_code", "CONVERSION_MARKER", "SCROLL_DEPTH_POINTS"]

CONVERSION_MARKER = "data-cv"
SCROLL_DEPTH_POINTS = (25, 50, 75, 90)


def _provider_branches(site: SiteConfig) -> List[str]:
    branches: List[str] = []

    if safe_tracking_id(site.ga_measurement_id, "GA_MEASUREMENT_ID"):
        branches.append("""
      if (typeof gtag === 'function') {
        gtag('event', cvType, { event_category: 'conversion', event_label: label });
      }""")

    ads_id = safe_tracking_id(site.ga_ads_id, "GA_ADS_ID")
    ads_label = safe_tracking_id(site.ga_ads_conversion_label, "GA_ADS_CONVERSION_LABEL")
    if ads_id and ads_label:
        branches.append(f"""
      if (typeof gtag === 'function') {{
        gtag('event', 'conversion', {{ send_to: '{ads_id}/{ads_label}' }});
      }}""")

    if safe_tracking_id(site.meta_pixel_id, "META_PIXEL_ID"):
        branches.append("""
      if (typeof fbq === 'function') {
        fbq('track', cvType === 'tel' ? 'Contact' : 'Lead');
      }""")

    if safe_tracking_id(site.line_tag_id, "LINE_TAG_ID"):
        branches.append("""
      if (typeof _lt === 'function') {
        _lt('send', 'cv', { type: cvType });
      }""")

    yahoo_id = safe_tracking_id(site.yahoo_conversion_id, "YAHOO_CONVERSION_ID")
    yahoo_label = safe_tracking_id(site.yahoo_conversion_label, "YAHOO_CONVERSION_LABEL")
    if yahoo_id and yahoo_label:
        branches.append(f"""
      if (typeof ytag === 'function') {{
        ytag('conversion', {{ yahoo_conversion_id: '{yahoo_id}', yahoo_conversion_label: '{yahoo_label}' }});
      }}""")

    return branches


def _scroll_depth_block() -> str:
    points = json.dumps(list(SCROLL_DEPTH_POINTS))
    return f"""
  var scrollTracked = {{}};
  window.addEventListener('scroll', function() {{
    var scrollPercent = Math.floor((window.scrollY + window.innerHeight) / document.body.scrollHeight * 100);
    {points}.forEach(function(point) {{
      if (scrollPercent >= point && !scrollTracked[point]) {{
        scrollTracked[point] = true;
        if (typeof gtag === 'function') {{ gtag('event', 'scroll_depth', {{ depth: point }}); }}
      }}
    }});
  }});
"""


def _time_on_page_block(thresholds: List[int]) -> str:
    return f"""
  var timeTracked = {{}};
  var timePoints = {json.dumps(thresholds)};
  var startTime = Date.now();
  setInterval(function() {{
    var elapsed = Math.floor((Date.now() - startTime) / 1000);
    timePoints.forEach(function(seconds) {{
      if (elapsed >= seconds && !timeTracked[seconds]) {{
        timeTracked[seconds] = true;
        if (typeof gtag === 'function') {{ gtag('event', 'time_on_page', {{ seconds: seconds }}); }}
      }}
    }});
  }}, 1000);
"""


def generate_conversion_code(site: SiteConfig) -> str:
    """Return the self-invoking conversion tracking script for *site*.

    Returns ``''`` when no conversion provider is configured; the scroll and
    time-on-page extras depend on GA, so they never stand alone.
    """
    branches = _provider_branches(site)
    if not branches:
        return ""

    code: List[str] = [f"""
(function() {{
  document.querySelectorAll('[{CONVERSION_MARKER}]').forEach(function(el) {{
    el.addEventListener('click', function() {{
      var cvType = this.getAttribute('{CONVERSION_MARKER}');
      var label = this.textContent || this.innerText;
"""]
    code.extend(branches)
    code.append("""
    });
  });
""")

    has_ga = safe_tracking_id(site.ga_measurement_id, "GA_MEASUREMENT_ID") is not None
    if has_ga and site.scroll_depth_enabled():
        code.append(_scroll_depth_block())

    thresholds = site.time_on_page_thresholds()
    if has_ga and thresholds:
        # De-duplicate so one threshold maps to one event.
        code.append(_time_on_page_block(sorted(set(thresholds))))

    code.append("})();")
    return "".join(code)
