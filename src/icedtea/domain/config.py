from __future__ import annotations

"""
Configuration Domain Management.

Defines the default runtime configuration and its JSON persistence in the
user data directory. The CLI layers command-line overrides on top of the
loaded values before validation.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from icedtea.domain import constants as const
from icedtea.infra.fs import ensure_parent_dir, get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


def get_config_path() -> str:
    """Location of the persistent configuration file."""
    return os.path.join(get_user_data_dir(create=False), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # File format
        "source_extension": const.DEFAULT_SOURCE_EXTENSION,
        "target_extension": const.DEFAULT_TARGET_EXTENSION,
        "open_tag": const.DEFAULT_OPEN_TAG,
        "close_tag": const.DEFAULT_CLOSE_TAG,
        "target_open_tag": const.DEFAULT_TARGET_OPEN_TAG,
        "target_close_tag": const.DEFAULT_TARGET_CLOSE_TAG,
        "encoding": const.DEFAULT_ENCODING,

        # Translation
        "compiler": const.DEFAULT_COMPILER,

        # Traversal
        "stat_failure_policy": "skip",
        "stat_retries": 2,

        # Batch behaviour & diagnostics
        "fail_fast": False,
        "save_error_log": False,
        "error_log_name": const.DEFAULT_ERROR_LOG_NAME,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the configuration from disk, merged over the defaults.

    A missing file yields the defaults. A corrupted file is reported and
    ignored.

    Args:
        path: Explicit config file; defaults to the user data directory.

    Returns:
        Dict[str, Any]: The merged configuration.
    """
    config = get_default_config()
    target = path or get_config_path()

    if not os.path.exists(target):
        logger.debug(f"No configuration file at '{target}'. Using defaults.")
        return config

    try:
        with open(target, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Configuration file '{target}' unreadable ({e}). Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning(f"Configuration file '{target}' is not a JSON object. Using defaults.")
        return config

    settings = data.get("settings", data)
    if isinstance(settings, dict):
        config.update({k: v for k, v in settings.items() if k in config})
    return config


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> str:
    """
    Persist *config* as JSON.

    Only known keys are written, wrapped with the schema version.

    Returns:
        str: The path written.

    Raises:
        OSError: If the file cannot be written.
    """
    target = path or get_config_path()
    defaults = get_default_config()
    payload = {
        "version": const.CURRENT_CONFIG_VERSION,
        "settings": {k: config.get(k, v) for k, v in defaults.items()},
    }
    ensure_parent_dir(target)
    with open(target, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    logger.debug(f"Configuration saved to '{target}'")
    return target
