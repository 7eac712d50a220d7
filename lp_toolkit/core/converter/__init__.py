"""Text transformations applied to the landing page document.

Public API:
    - rewrite_images: <img> -> responsive <picture> rewriting
    - assemble_document: full HTML stage transformation (pre-minification)
"""

from .image_rewriter import rewrite_images  # noqa: F401
from .document import (  # noqa: F401
    assemble_document,
    inject_before_head_close,
    replace_title,
    rewrite_asset_references,
)

__all__ = [
    "rewrite_images",
    "assemble_document",
    "inject_before_head_close",
    "replace_title",
    "rewrite_asset_references",
]
