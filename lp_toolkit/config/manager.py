from __future__ import annotations

"""Configuration loading and access helpers.

This module centralises the declarative build rules (directory layout, source
file names, favicon size table, minifier switches, logging).  It loads YAML
files packaged with *lp_toolkit* and optionally merges them with user overrides.

On Windows: ``%LOCALAPPDATA%\\LPToolkit\\config\\*.yml``
On Unix: ``~/.lp_toolkit/*.yml``

Site and campaign parameters (titles, tracking IDs...) do not live here; they
come from the project ``.env`` file, see :mod:`lp_toolkit.core.importers`.
"""

import importlib.resources as pkg_resources
import logging
import os
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager"]


def _get_user_config_dir() -> Path:
    """Get the user configuration directory."""
    override = os.environ.get("LP_CONFIG_DIR")
    if override:
        return Path(override)
    if os.name == 'nt':  # Windows
        local_appdata = os.environ.get('LOCALAPPDATA')
        if local_appdata:
            return Path(local_appdata) / "LPToolkit" / "config"
        return Path.home() / "AppData" / "Local" / "LPToolkit" / "config"
    return Path.home() / ".lp_toolkit"


def _read_packaged(filename: str) -> str:
    return pkg_resources.files(__package__).joinpath(filename).read_text(encoding="utf-8")


class _Singleton(type):
    _instance: "ConfigManager" | None = None

    def __call__(cls, *args, **kwargs):  # type: ignore[no-self-use]
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance

    def reset(cls) -> None:
        """Drop the cached instance so the next call reloads from disk."""
        cls._instance = None


class ConfigManager(metaclass=_Singleton):
    """Lazy-loads and exposes configuration sections as dictionaries."""

    _DEFAULT_FILENAMES = {
        "build": "build.yml",
        "logging": "logging.yml",
    }

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self._ensure_loaded()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def get_build_config(self) -> Dict[str, Any]:
        return self._data.get("build", {})

    def get_logging_config(self) -> Dict[str, Any]:
        return self._data.get("logging", {})

    # ------------------------------------------------------------------
    # Internal loading logic
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if self._data:
            return  # already loaded

        try:
            import yaml  # type: ignore
        except ModuleNotFoundError:
            logger.warning("PyYAML not installed – falling back to built-in defaults")
            self._data = self._builtin_defaults()
            return

        startup_summary = []
        user_config_dir = _get_user_config_dir()

        for key, filename in self._DEFAULT_FILENAMES.items():
            merged_cfg: Dict[str, Any] = dict(self._builtin_defaults()[key])
            status = "builtin"

            # 1. load packaged default
            try:
                packaged_data = yaml.safe_load(_read_packaged(filename)) or {}
                merged_cfg.update(packaged_data)
                status = "loaded"
            except (FileNotFoundError, OSError):
                logger.error("Missing packaged config for %s (%s)", key, filename)
            except Exception as exc:
                logger.error("Invalid packaged config for %s (%s): %s", key, filename, exc)
                status = "invalid"

            # 2. load user overrides
            user_path = user_config_dir / filename
            if user_path.exists():
                try:
                    user_data = yaml.safe_load(user_path.read_text(encoding="utf-8")) or {}
                    merged_cfg.update(user_data)
                    if status == "loaded":
                        status = "loaded+overrides"
                except Exception as exc:
                    logger.error("Could not parse user config %s: %s", user_path, exc)

            self._data[key] = merged_cfg
            startup_summary.append(f"{key}: {status}")

        logger.debug("Config startup: %s", " | ".join(startup_summary))

    @staticmethod
    def _builtin_defaults() -> Dict[str, Dict[str, Any]]:
        """Return the minimal layout needed to run a build without YAML files."""
        return {
            "build": {
                "paths": {
                    "source_dir": "src",
                    "output_dir": "build",
                    "images_dir": "images",
                    "env_file": ".env",
                    "dimensions_file": ".image-dimensions.json",
                },
                "sources": {
                    "html": "index.html",
                    "css": "style.css",
                    "js": "script.js",
                    "htaccess": ".htaccess",
                },
                "outputs": {
                    "html": "index.html",
                    "css": "style.min.css",
                    "js": "script.min.js",
                },
                "favicon": {
                    "source": "favicon.png",
                    "ico_size": 32,
                    "sizes": [
                        {"size": 16, "name": "favicon-16x16.png", "link": "icon"},
                        {"size": 32, "name": "favicon-32x32.png", "link": "icon"},
                        {"size": 180, "name": "apple-touch-icon.png", "link": "apple-touch-icon"},
                        {"size": 192, "name": "android-chrome-192x192.png"},
                        {"size": 512, "name": "android-chrome-512x512.png"},
                    ],
                },
                "minify": {"html": True, "css": True, "js": True},
                "images": {"webp_quality": 80, "avif_quality": 60},
            },
            "logging": {},
        }
