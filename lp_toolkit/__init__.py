"""Top-level package for LP Toolkit, a static landing-page build pipeline.

Front-ends (the CLI in ``run.py``) should only depend on the public API exposed
here and in :mod:`lp_toolkit.core.services` rather than importing internal
modules directly.
"""

from .core.models import BuildContext, SiteConfig  # re-export for convenience

__all__: list[str] = [
    "BuildContext",
    "SiteConfig",
]
