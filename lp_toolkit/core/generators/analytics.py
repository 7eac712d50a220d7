from __future__ import annotations

"""Tracking provider initialisation snippets.

Five providers are supported, each gated by its own identifier key:

- Google Analytics 4 (``GA_MEASUREMENT_ID``, optional ``GA_ADS_ID``)
- Meta Pixel (``META_PIXEL_ID``)
- LINE Tag (``LINE_TAG_ID``)
- Yahoo retargeting (``YAHOO_RETARGETING_ID``)
- Microsoft Clarity (``CLARITY_PROJECT_ID``)

Identifiers are interpolated into script text, so they are restricted to
``[A-Za-z0-9_-]``; anything else suppresses that provider with a warning.
"""

import logging
import re
from typing import Callable, List, Optional

from lp_toolkit.core.models import SiteConfig

logger = logging.getLogger(__name__)

__all__ = ["generate_analytics_tags", "safe_tracking_id"]

_ID_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")


def safe_tracking_id(value: Optional[str], key: str) -> Optional[str]:
    """Return *value* when it is usable inside a quoted JS string, else ``None``."""
    if not value:
        return None
    if not _ID_PATTERN.match(value):
        logger.warning("Ignoring %s: unexpected characters in identifier %r", key, value)
        return None
    return value


def _google_analytics(site: SiteConfig) -> str:
    measurement_id = safe_tracking_id(site.ga_measurement_id, "GA_MEASUREMENT_ID")
    if not measurement_id:
        return ""
    ads_id = safe_tracking_id(site.ga_ads_id, "GA_ADS_ID")
    ads_line = f"gtag('config', '{ads_id}');" if ads_id else ""
    return f"""
<!-- Google Analytics -->
<script async src="https://www.googletagmanager.com/gtag/js?id={measurement_id}"></script>
<script>
  window.dataLayer = window.dataLayer || [];
  function gtag(){{dataLayer.push(arguments);}}
  gtag('js', new Date());
  gtag('config', '{measurement_id}');
  {ads_line}
</script>"""


def _meta_pixel(site: SiteConfig) -> str:
    pixel_id = safe_tracking_id(site.meta_pixel_id, "META_PIXEL_ID")
    if not pixel_id:
        return ""
    return f"""
<!-- Meta Pixel -->
<script>
  !function(f,b,e,v,n,t,s){{if(f.fbq)return;n=f.fbq=function(){{n.callMethod?
  n.callMethod.apply(n,arguments):n.queue.push(arguments)}};if(!f._fbq)f._fbq=n;
  n.push=n;n.loaded=!0;n.version='2.0';n.queue=[];t=b.createElement(e);t.async=!0;
  t.src=v;s=b.getElementsByTagName(e)[0];s.parentNode.insertBefore(t,s)}}(window,
  document,'script','https://connect.facebook.net/en_US/fbevents.js');
  fbq('init', '{pixel_id}');
  fbq('track', 'PageView');
</script>
<noscript><img height="1" width="1" style="display:none" src="https://www.facebook.com/tr?id={pixel_id}&ev=PageView&noscript=1"/></noscript>"""


def _line_tag(site: SiteConfig) -> str:
    tag_id = safe_tracking_id(site.line_tag_id, "LINE_TAG_ID")
    if not tag_id:
        return ""
    return f"""
<!-- LINE Tag -->
<script>
  (function(g,d,o){{g._ltq=g._ltq||[];g._lt=g._lt||function(){{g._ltq.push(arguments)}};
  var h=d.getElementsByTagName(o)[0];var s=d.createElement(o);s.async=1;
  s.src='https://d.line-scdn.net/n/line_tag/public/release/v1/lt.js';
  h.parentNode.insertBefore(s,h)}})(window,document,'script');
  _lt('init',{{customerType:'account',tagId:'{tag_id}'}});
  _lt('send','pv',['{tag_id}']);
</script>
<noscript><img height="1" width="1" style="display:none" src="https://tr.line.me/tag.gif?c_t=lap&t_id={tag_id}&e=pv&noscript=1"/></noscript>"""


def _yahoo_retargeting(site: SiteConfig) -> str:
    retargeting_id = safe_tracking_id(site.yahoo_retargeting_id, "YAHOO_RETARGETING_ID")
    if not retargeting_id:
        return ""
    return f"""
<!-- Yahoo Tag -->
<script async src="https://s.yimg.jp/images/listing/tool/cv/ytag.js"></script>
<script>
  window.yjDataLayer = window.yjDataLayer || [];
  function ytag(){{yjDataLayer.push(arguments);}}
  ytag('config', {{ yahoo_ss_retargeting_id: '{retargeting_id}' }});
</script>"""


def _clarity(site: SiteConfig) -> str:
    project_id = safe_tracking_id(site.clarity_project_id, "CLARITY_PROJECT_ID")
    if not project_id:
        return ""
    return f"""
<!-- Microsoft Clarity -->
<script>
  (function(c,l,a,r,i,t,y){{c[a]=c[a]||function(){{(c[a].q=c[a].q||[]).push(arguments)}};
  t=l.createElement(r);t.async=1;t.src="https://www.clarity.ms/tag/"+i;
  y=l.getElementsByTagName(r)[0];y.parentNode.insertBefore(t,y);
  }})(window,document,"clarity","script","{project_id}");
</script>"""


# Fixed emission order.
_PROVIDERS: List[Callable[[SiteConfig], str]] = [
    _google_analytics,
    _meta_pixel,
    _line_tag,
    _yahoo_retargeting,
    _clarity,
]


def generate_analytics_tags(site: SiteConfig) -> str:
    """Concatenate the snippet of every configured provider ('' if none)."""
    blocks = [block for block in (provider(site) for provider in _PROVIDERS) if block]
    return "\n".join(blocks)
