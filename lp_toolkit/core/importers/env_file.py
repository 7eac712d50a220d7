from __future__ import annotations

"""``.env`` file loading.

The format is the usual ``KEY=VALUE`` one: blank lines and lines starting with
``#`` are ignored, the value is everything after the first ``=`` and both sides
are whitespace-trimmed.  No quoting or variable expansion is performed.
"""

import logging
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

__all__ = ["load_env", "parse_env_text"]


def parse_env_text(text: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        if key:
            values[key] = value.strip()
    return values


def load_env(path: Path) -> Dict[str, str]:
    """Return the parsed contents of *path*, or ``{}`` when it does not exist."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info("Note: %s not found, using defaults", path.name)
        return {}
    values = parse_env_text(text)
    logger.debug("Loaded %d configuration value(s) from %s", len(values), path)
    return values
