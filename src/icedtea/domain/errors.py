from __future__ import annotations

"""
Domain Error Taxonomy.

Exceptions raised by the walker, the transform pipeline and the command
layer. Per-file write and delete failures stay plain OSError instances and
are recorded on FileOutcome objects instead of being wrapped here.
"""

from typing import Optional


class IcedTeaError(Exception):
    """Base class for every error surfaced to the CLI controller."""


class PathError(IcedTeaError):
    """The input or output path does not exist or has the wrong kind."""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path


class ListingError(IcedTeaError):
    """A directory could not be enumerated during a walk."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause else ""
        super().__init__(f"Cannot list directory '{path}'{detail}")
        self.path = path
        self.cause = cause


class StatError(IcedTeaError):
    """A directory entry could not be stat'd. Handled by the walker policy."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause else ""
        super().__init__(f"Cannot stat '{path}'{detail}")
        self.path = path
        self.cause = cause


class FragmentSyntaxError(SyntaxError):
    """
    A fragment compiler rejected the text of one fragment.

    Subclasses SyntaxError so collaborators raising the builtin type and
    callers catching it keep working.

    Attributes:
        fragment_index: Zero-based position of the fragment in its file.
        lineno: One-based line of the fragment's opening marker.
        filename: Source file, when known.
    """

    def __init__(
            self,
            message: str,
            *,
            fragment_index: int = 0,
            lineno: Optional[int] = None,
            filename: Optional[str] = None,
    ):
        super().__init__(message)
        self.msg = message
        self.fragment_index = fragment_index
        self.lineno = lineno
        self.filename = filename

    def __str__(self) -> str:
        where = f"fragment #{self.fragment_index + 1}"
        if self.lineno is not None:
            where += f" (line {self.lineno})"
        if self.filename:
            where = f"{self.filename}: {where}"
        return f"{where}: {self.msg}"
