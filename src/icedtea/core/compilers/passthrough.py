from __future__ import annotations

"""
Passthrough Fragment Compiler.

Default collaborator used when no grammar-backed compiler is configured.
Emits each fragment's text verbatim, which keeps the rest of the pipeline
(extraction, marker substitution, mirrored output) fully functional.
"""

from icedtea.core.compilers.base import FragmentCompiler


class PassthroughCompiler(FragmentCompiler):
    """Identity translation of fragment text."""

    name = "passthrough"

    def compile(self, source: str) -> str:
        return source
