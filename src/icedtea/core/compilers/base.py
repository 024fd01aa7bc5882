from __future__ import annotations

"""
Base Definitions for Fragment Compilers.

A fragment compiler turns the text of one embedded fragment into
target-language statements. The grammar and statement rendering live in
the implementations; this module only fixes the contract.
"""

from abc import ABC, abstractmethod
from typing import Callable


class FragmentCompiler(ABC):
    """
    Abstract translator for the inner text of a single fragment.

    Implementations must be deterministic and free of side effects, must
    return an empty string for an empty fragment, and must raise
    SyntaxError on structurally invalid input.
    """

    name: str = "abstract"

    @abstractmethod
    def compile(self, source: str) -> str:
        """
        Translate one fragment.

        Args:
            source: Fragment text, without the delimiting markers.

        Returns:
            str: Target-language text.

        Raises:
            SyntaxError: If the fragment is structurally invalid.
        """
        pass


class CallableCompiler(FragmentCompiler):
    """Adapter exposing a plain ``str -> str`` callable as a FragmentCompiler."""

    def __init__(self, func: Callable[[str], str], name: str = ""):
        self._func = func
        self.name = name or getattr(func, "__name__", "callable")

    def compile(self, source: str) -> str:
        if not source:
            return ""
        return self._func(source)
