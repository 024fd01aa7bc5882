from __future__ import annotations

from .base import CallableCompiler, FragmentCompiler
from .passthrough import PassthroughCompiler
from .registry import available_compilers, load_compiler, register_compiler

__all__ = [
    "FragmentCompiler",
    "CallableCompiler",
    "PassthroughCompiler",
    "available_compilers",
    "load_compiler",
    "register_compiler",
]
