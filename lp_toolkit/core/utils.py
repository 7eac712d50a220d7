from __future__ import annotations

"""Simple reusable helper functions.

These helpers are side-effect-free and contain no disk I/O; they can be used
across all layers of the toolkit.
"""

import json
import re
from typing import Any, List, Optional

__all__ = [
    "escape_html",
    "escape_json_ld",
    "normalize_base_path",
    "is_external_src",
    "strip_leading_slash",
    "with_base_path",
    "parse_bool",
    "parse_int_list",
]

_TRUE_VALUES = {"1", "true", "yes", "on"}


def escape_html(text: Optional[str]) -> str:
    """Escape *text* for use inside a double- or single-quoted attribute.

    Examples:
        >>> escape_html('A&B "quoted"')
        'A&amp;B &quot;quoted&quot;'
        >>> escape_html(None)
        ''
    """
    if not text:
        return ""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def escape_json_ld(payload: Any) -> str:
    """Serialise *payload* to JSON safe for embedding in a ``<script>`` tag.

    Every ``</`` is written as ``<\\/`` so a value cannot close the script
    element early.
    """
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).replace("</", "<\\/")


def normalize_base_path(base_path: Optional[str]) -> str:
    """Return *base_path* without a trailing slash ('' when unset)."""
    if not base_path:
        return ""
    return base_path.strip().rstrip("/")


def is_external_src(src: str) -> bool:
    """True for root-absolute paths and full URLs, which are never prefixed."""
    return src.startswith("/") or src.startswith("http")


def strip_leading_slash(path: str) -> str:
    return path[1:] if path.startswith("/") else path


def with_base_path(src: str, base_path: str) -> str:
    """Prefix a relative *src* with the normalised *base_path*."""
    if is_external_src(src) or not base_path:
        return src
    return f"{base_path}/{src}"


def parse_bool(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in _TRUE_VALUES


def parse_int_list(value: Optional[str]) -> List[int]:
    """Parse ``"10, 30,x,60"`` into ``[10, 30, 60]``; non-integers are dropped."""
    if not value:
        return []
    result: List[int] = []
    for part in value.split(","):
        part = part.strip()
        if re.fullmatch(r"-?\d+", part):
            result.append(int(part))
    return result
