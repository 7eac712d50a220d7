from __future__ import annotations

"""Generators turning site configuration into HTML/JS fragments."""

from .meta_tags import generate_meta_tags  # noqa: F401
from .analytics import generate_analytics_tags  # noqa: F401
from .conversion import generate_conversion_code  # noqa: F401
from .structured_data import generate_structured_data  # noqa: F401
from .favicon import generate_favicons, favicon_link_tags, parse_favicon_sizes  # noqa: F401

__all__: list[str] = [
    "generate_meta_tags",
    "generate_analytics_tags",
    "generate_conversion_code",
    "generate_structured_data",
    "generate_favicons",
    "favicon_link_tags",
    "parse_favicon_sizes",
]
