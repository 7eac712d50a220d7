from __future__ import annotations

"""Central logging configuration for LP Toolkit.

Import and call :func:`setup_logging` at start-up (the CLI does this).
"""

import copy
import logging
import logging.config
import os

from lp_toolkit.config import ConfigManager

__all__ = ["setup_logging"]


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the build using configuration from YAML files."""
    log_dir = os.environ.get("LP_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "build.log")

    try:
        logging_config = copy.deepcopy(ConfigManager().get_logging_config())

        if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
            if "handlers" in logging_config and "file" in logging_config["handlers"]:
                logging_config["handlers"]["file"]["filename"] = log_file
            if verbose and "console" in logging_config.get("handlers", {}):
                logging_config["handlers"]["console"]["level"] = "DEBUG"

            logging.config.dictConfig(logging_config)
            logging.getLogger("lp_toolkit").debug("===== Logging initialised from config files =====")
        else:
            _setup_minimal_logging(verbose)
    except Exception as exc:
        print(f"Error loading logging config: {exc}")
        _setup_minimal_logging(verbose)

    _apply_debug_overrides()


def _setup_minimal_logging(verbose: bool = False) -> None:
    """Set up minimal console-only logging when config is unavailable."""
    level = 'DEBUG' if verbose else 'INFO'
    minimal_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '%(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': level,
            },
        },
        'root': {
            'level': level,
            'handlers': ['console'],
        },
    }

    logging.config.dictConfig(minimal_config)
    logging.debug("===== Logging initialised with minimal fallback =====")


def _apply_debug_overrides() -> None:
    """Apply environment-driven module-specific debug overrides.

    Supports ``LP_DEBUG_MODULES=comma,separated,logger,names`` -> DEBUG for the
    listed loggers.
    """
    extra_modules = os.environ.get('LP_DEBUG_MODULES', '').strip()
    targets = [m.strip() for m in extra_modules.split(',') if m.strip()]
    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        has_debug_handler = any(
            h.level == logging.NOTSET or h.level <= logging.DEBUG for h in logger.handlers
        )
        if not has_debug_handler:
            h = logging.StreamHandler()
            h.setLevel(logging.DEBUG)
            h.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            logger.addHandler(h)
        logger.info("Debug override active for logger '%s'", name)
