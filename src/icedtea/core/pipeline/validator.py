from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between raw configuration (file + CLI overrides) and the
command layer. Coerces types, normalizes extensions and injects defaults
so commands can index the dictionary without further checks.
"""

import codecs
import logging
from typing import Any, Dict, List, Tuple

from icedtea.domain.config import get_default_config
from icedtea.domain.constants import STAT_POLICIES

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data.
        strict: Raise on invalid values instead of falling back.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.

    Raises:
        TypeError: In strict mode, on a type mismatch.
        ValueError: In strict mode, on an out-of-range value.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    string_fields = [
        "open_tag", "close_tag", "target_open_tag", "target_close_tag",
        "encoding", "compiler", "error_log_name", "stat_failure_policy",
    ]
    bool_fields = ["fail_fast", "save_error_log"]

    for field in string_fields:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in bool_fields:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    merged["stat_retries"] = _as_int(
        merged.get("stat_retries"), defaults["stat_retries"], "stat_retries", warnings, strict
    )

    for field in ("source_extension", "target_extension"):
        raw = _as_str(merged.get(field), defaults[field], field, warnings, strict)
        merged[field] = _normalize_extension(raw, field, warnings, strict)

    if merged["source_extension"] == merged["target_extension"]:
        msg = "Source and target extensions must differ."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Restoring defaults.")
        merged["source_extension"] = defaults["source_extension"]
        merged["target_extension"] = defaults["target_extension"]

    try:
        codecs.lookup(merged["encoding"])
    except LookupError:
        msg = f"Unknown encoding '{merged['encoding']}'."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using '{defaults['encoding']}'.")
        merged["encoding"] = defaults["encoding"]

    policy = merged["stat_failure_policy"].lower()
    if policy not in STAT_POLICIES:
        msg = f"Invalid stat_failure_policy '{policy}': expected one of {list(STAT_POLICIES)}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using '{defaults['stat_failure_policy']}'.")
        policy = defaults["stat_failure_policy"]
    merged["stat_failure_policy"] = policy

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate string inputs. Blank strings fall back to the default."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Coerce non-negative integers, accepting numeric strings."""
    if value is None:
        return fallback
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    if isinstance(value, str) and not strict and value.strip().isdigit():
        warnings.append(f"Field '{field}' converted from '{value}' to int.")
        return int(value.strip())

    msg = f"Invalid field '{field}': expected non-negative int, received {value!r}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_extension(ext: str, field: str, warnings: List[str], strict: bool) -> str:
    """Ensure an extension carries its leading dot."""
    if ext.startswith("."):
        return ext
    if strict:
        raise ValueError(f"Invalid {field} '{ext}': must start with '.'.")
    warnings.append(f"Extension '{ext}' corrected to '.{ext}'.")
    return "." + ext
