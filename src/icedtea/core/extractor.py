from __future__ import annotations

"""
Fragment Extraction and Transformation.

Locates delimited fragments inside host-file text and rewrites each one
through a FragmentCompiler. Text outside fragments passes through
byte-for-byte. A fragment whose opening marker is never closed runs to
the end of the input and is emitted without a closing marker.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List

from icedtea.core.compilers.base import FragmentCompiler
from icedtea.domain import constants as const
from icedtea.domain.errors import FragmentSyntaxError
from icedtea.domain.models import Fragment

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# MARKER CONFIGURATION
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TagSet:
    """
    Source and target markers delimiting fragments.

    Attributes:
        open_tag: Opening marker in source files.
        close_tag: Closing marker in source files.
        target_open_tag: Marker replacing open_tag on output.
        target_close_tag: Marker emitted for closed fragments on output.
    """
    open_tag: str = const.DEFAULT_OPEN_TAG
    close_tag: str = const.DEFAULT_CLOSE_TAG
    target_open_tag: str = const.DEFAULT_TARGET_OPEN_TAG
    target_close_tag: str = const.DEFAULT_TARGET_CLOSE_TAG

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "TagSet":
        return cls(
            open_tag=cfg.get("open_tag", const.DEFAULT_OPEN_TAG),
            close_tag=cfg.get("close_tag", const.DEFAULT_CLOSE_TAG),
            target_open_tag=cfg.get("target_open_tag", const.DEFAULT_TARGET_OPEN_TAG),
            target_close_tag=cfg.get("target_close_tag", const.DEFAULT_TARGET_CLOSE_TAG),
        )

    def pattern(self) -> re.Pattern:
        """
        Non-greedy match from open_tag to the first close_tag or end of input.

        Group 1 is the inner text; group 2 is the closing marker, empty when
        the fragment is unterminated.
        """
        return re.compile(
            re.escape(self.open_tag) + r"(.*?)(" + re.escape(self.close_tag) + r"|\Z)",
            re.DOTALL,
        )

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def iter_fragments(raw_text: str, tags: TagSet = TagSet()) -> Iterator[Fragment]:
    """
    Yield every fragment of *raw_text* in order of appearance.

    Args:
        raw_text: Full content of a host file.
        tags: Marker configuration.

    Yields:
        Fragment: Extracted span with closure state and offsets.
    """
    for match in tags.pattern().finditer(raw_text):
        yield Fragment(
            inner_text=match.group(1),
            closed=bool(match.group(2)),
            start=match.start(),
            end=match.end(),
        )


def extract_fragments(raw_text: str, tags: TagSet = TagSet()) -> List[Fragment]:
    """Materialized form of iter_fragments."""
    return list(iter_fragments(raw_text, tags))


def transform(
        raw_text: str,
        compiler: FragmentCompiler,
        tags: TagSet = TagSet(),
        filename: str = "",
) -> str:
    """
    Rewrite every fragment of *raw_text* through *compiler*.

    Args:
        raw_text: Full content of a host file.
        compiler: Collaborator translating fragment text.
        tags: Marker configuration.
        filename: Source name used to annotate syntax errors.

    Returns:
        str: Output text with translated fragments.

    Raises:
        FragmentSyntaxError: If the compiler rejects a fragment. Aborts the
                             transformation of this text.
    """
    parts: List[str] = []
    cursor = 0

    for index, fragment in enumerate(iter_fragments(raw_text, tags)):
        parts.append(raw_text[cursor:fragment.start])

        compiled = _compile_fragment(raw_text, fragment, index, compiler, filename)

        parts.append(tags.target_open_tag)
        parts.append(compiled)
        if fragment.closed:
            parts.append(tags.target_close_tag)
        cursor = fragment.end

    parts.append(raw_text[cursor:])
    return "".join(parts)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _compile_fragment(
        raw_text: str,
        fragment: Fragment,
        index: int,
        compiler: FragmentCompiler,
        filename: str,
) -> str:
    """Invoke the compiler, tagging syntax errors with their location."""
    try:
        return compiler.compile(fragment.inner_text)
    except FragmentSyntaxError as e:
        # Raised by the compiler itself without knowledge of its position
        if e.lineno is None:
            e.fragment_index = index
            e.lineno = _line_of(raw_text, fragment)
        if e.filename is None and filename:
            e.filename = filename
        raise
    except SyntaxError as e:
        raise FragmentSyntaxError(
            e.msg or str(e),
            fragment_index=index,
            lineno=_line_of(raw_text, fragment),
            filename=filename or None,
        ) from e


def _line_of(raw_text: str, fragment: Fragment) -> int:
    return raw_text.count("\n", 0, fragment.start) + 1
