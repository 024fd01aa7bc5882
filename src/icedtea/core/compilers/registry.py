from __future__ import annotations

"""
Fragment Compiler Registry.

Resolves the 'compiler' configuration value into a FragmentCompiler
instance. Accepts either a registered short name or an importable
'package.module:attribute' reference so grammar-backed compilers can be
plugged in without touching the pipeline.
"""

import importlib
import logging
from typing import Callable, Dict

from icedtea.core.compilers.base import CallableCompiler, FragmentCompiler
from icedtea.core.compilers.passthrough import PassthroughCompiler

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# BUILT-IN COMPILERS
# -----------------------------------------------------------------------------

_BUILTINS: Dict[str, Callable[[], FragmentCompiler]] = {
    "passthrough": PassthroughCompiler,
}


def available_compilers() -> list:
    """Names accepted without a module reference."""
    return sorted(_BUILTINS)


def register_compiler(name: str, factory: Callable[[], FragmentCompiler]) -> None:
    """Expose *factory* under a short name for the 'compiler' setting."""
    _BUILTINS[name] = factory

# -----------------------------------------------------------------------------
# RESOLUTION
# -----------------------------------------------------------------------------

def load_compiler(spec: str) -> FragmentCompiler:
    """
    Build the compiler described by *spec*.

    Resolution order:
    1. A registered short name ('passthrough').
    2. 'module:attribute' where the attribute is a FragmentCompiler subclass,
       a FragmentCompiler instance or a plain ``str -> str`` callable.

    Args:
        spec: Configuration value.

    Returns:
        FragmentCompiler: Ready-to-use compiler.

    Raises:
        ValueError: If the spec cannot be resolved.
    """
    key = (spec or "").strip()
    if key in _BUILTINS:
        return _BUILTINS[key]()

    if ":" not in key:
        raise ValueError(
            f"Unknown compiler '{spec}'. Use one of {available_compilers()} "
            f"or a 'module:attribute' reference."
        )

    module_name, _, attr_name = key.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import compiler module '{module_name}': {e}") from e

    try:
        target = getattr(module, attr_name)
    except AttributeError as e:
        raise ValueError(f"Module '{module_name}' has no attribute '{attr_name}'") from e

    compiler = _coerce(target, key)
    logger.debug(f"Loaded fragment compiler '{key}' ({type(compiler).__name__})")
    return compiler


def _coerce(target: object, key: str) -> FragmentCompiler:
    """Turn a resolved attribute into a FragmentCompiler instance."""
    if isinstance(target, FragmentCompiler):
        return target
    if isinstance(target, type) and issubclass(target, FragmentCompiler):
        return target()
    if callable(target):
        return CallableCompiler(target, name=key)
    raise ValueError(f"'{key}' is neither a FragmentCompiler nor a callable")
