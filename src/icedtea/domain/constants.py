from __future__ import annotations

"""
Domain Constants.

Centralizes the file-format markers, extensions and versioning shared by
the compile, watch and clean commands.
"""

from typing import Tuple

APP_NAME = "IcedTea"
APP_VERSION = "0.4.0"
CURRENT_CONFIG_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# FILE FORMAT
# -----------------------------------------------------------------------------

DEFAULT_SOURCE_EXTENSION = ".tea"
DEFAULT_TARGET_EXTENSION = ".php"

DEFAULT_OPEN_TAG = "<?tea"
DEFAULT_CLOSE_TAG = "?>"
DEFAULT_TARGET_OPEN_TAG = "<?php"
DEFAULT_TARGET_CLOSE_TAG = "?>"

DEFAULT_ENCODING = "utf-8"
DEFAULT_COMPILER = "passthrough"
DEFAULT_ERROR_LOG_NAME = "icedtea_errors.txt"

# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

COMMAND_COMPILE = "compile"
COMMAND_WATCH = "watch"
COMMAND_CLEAN = "clean"

COMMANDS: Tuple[str, ...] = (COMMAND_COMPILE, COMMAND_WATCH, COMMAND_CLEAN)

# Accepted values for the 'stat_failure_policy' setting
STAT_POLICIES: Tuple[str, ...] = ("skip", "retry", "assume_file")
