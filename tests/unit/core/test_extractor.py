from __future__ import annotations

"""
Unit tests for Fragment Extraction and Transformation.

Verifies:
1. Pass-through of text without fragments.
2. Marker substitution for closed and unclosed fragments.
3. In-order, non-nesting processing of multiple fragments.
4. Location tagging of compiler syntax errors.
"""

import pytest

from icedtea.core.compilers.base import CallableCompiler
from icedtea.core.compilers.passthrough import PassthroughCompiler
from icedtea.core.extractor import TagSet, extract_fragments, transform
from icedtea.domain.errors import FragmentSyntaxError


# -----------------------------------------------------------------------------
# EXTRACTION
# -----------------------------------------------------------------------------

def test_extract_fragments_reports_closure_and_offsets() -> None:
    """TC-01: Each fragment carries its inner text, closure state and span."""
    raw = "a<?tea one ?>b<?tea two"
    fragments = extract_fragments(raw)

    assert [f.inner_text for f in fragments] == [" one ", " two"]
    assert [f.closed for f in fragments] == [True, False]
    assert raw[fragments[0].start:fragments[0].end] == "<?tea one ?>"
    assert fragments[1].end == len(raw)


def test_extract_fragments_none_found() -> None:
    assert extract_fragments("<html>?></html>") == []


def test_fragments_do_not_nest() -> None:
    """An inner opening marker is plain text; the first close ends the fragment."""
    fragments = extract_fragments("<?tea a <?tea b ?> c ?>")

    assert len(fragments) == 1
    assert fragments[0].inner_text == " a <?tea b "


# -----------------------------------------------------------------------------
# TRANSFORMATION
# -----------------------------------------------------------------------------

def test_transform_passes_plain_text_through(upper_compiler) -> None:
    """TC-02: Text with no fragments is returned unchanged."""
    raw = "<html>\r\n  <body>?> stray close</body>\n</html>\n"
    assert transform(raw, upper_compiler) == raw


def test_transform_closed_fragment(upper_compiler) -> None:
    """TC-03: Markers are swapped and the compiled text is inserted."""
    out = transform("<p><?tea x ?></p>\n", upper_compiler)
    assert out == "<p><?php X; ?></p>\n"


def test_transform_unclosed_fragment_omits_close_marker(upper_compiler) -> None:
    """TC-04: An unterminated fragment runs to end of input without '?>'."""
    out = transform("head <?tea y", upper_compiler)
    assert out == "head <?php Y; "
    assert not out.endswith("?>")


def test_transform_multiple_fragments_in_order() -> None:
    """TC-05: Fragments are compiled independently and in order of appearance."""
    seen = []

    def record(text: str) -> str:
        seen.append(text)
        return str(len(seen))

    out = transform("<?tea a ?>-<?tea b ?>-<?tea c", CallableCompiler(record))

    assert seen == [" a ", " b ", " c"]
    assert out == "<?php1?>-<?php2?>-<?php3"


def test_transform_empty_fragment(upper_compiler) -> None:
    assert transform("x<?tea?>y", upper_compiler) == "x<?php?>y"


def test_transform_passthrough_compiler_only_rewrites_markers() -> None:
    raw = "<?tea $a = 1; ?>\ntext"
    assert transform(raw, PassthroughCompiler()) == "<?php $a = 1; ?>\ntext"


def test_transform_with_custom_markers(upper_compiler) -> None:
    """Marker configuration applies to both the source and target side."""
    tags = TagSet(open_tag="{{", close_tag="}}", target_open_tag="<?php", target_close_tag="?>")

    assert transform("a {{ x }} b", upper_compiler, tags) == "a <?php X; ?> b"


def test_tagset_from_config_reads_marker_keys(mock_config_dict) -> None:
    mock_config_dict.update({"open_tag": "[%", "close_tag": "%]"})
    tags = TagSet.from_config(mock_config_dict)

    assert tags.open_tag == "[%"
    assert tags.close_tag == "%]"
    assert tags.target_open_tag == "<?php"


def test_markers_are_matched_literally(upper_compiler) -> None:
    """Regex metacharacters in markers have no special meaning."""
    tags = TagSet(open_tag="(*", close_tag="*)", target_open_tag="<", target_close_tag=">")
    assert transform("(* a *)", upper_compiler, tags) == "< A; >"


# -----------------------------------------------------------------------------
# ERROR PROPAGATION
# -----------------------------------------------------------------------------

def test_syntax_error_is_tagged_with_location(upper_compiler) -> None:
    """TC-06: A compiler SyntaxError surfaces as FragmentSyntaxError with context."""
    raw = "<?tea ok ?>\nline2\n<?tea BROKEN ?>"

    with pytest.raises(FragmentSyntaxError) as exc_info:
        transform(raw, upper_compiler, filename="page.tea")

    err = exc_info.value
    assert isinstance(err, SyntaxError)
    assert err.fragment_index == 1
    assert err.lineno == 3
    assert err.filename == "page.tea"
    assert "BROKEN" in str(err)
    assert isinstance(err.__cause__, SyntaxError)


def test_fragment_syntax_error_from_compiler_gets_filename() -> None:
    def reject(text: str) -> str:
        raise FragmentSyntaxError("bad", fragment_index=0, lineno=1)

    with pytest.raises(FragmentSyntaxError) as exc_info:
        transform("<?tea z ?>", CallableCompiler(reject), filename="z.tea")

    assert exc_info.value.filename == "z.tea"


def test_fragment_syntax_error_from_compiler_gets_position() -> None:
    """TC-07: A positionless FragmentSyntaxError is tagged with its fragment and line."""
    def reject_second(text: str) -> str:
        if text.strip() == "two":
            raise FragmentSyntaxError("bad")
        return text

    raw = "<?tea one ?>\n\n<?tea two ?>"
    with pytest.raises(FragmentSyntaxError) as exc_info:
        transform(raw, CallableCompiler(reject_second), filename="p.tea")

    err = exc_info.value
    assert err.fragment_index == 1
    assert err.lineno == 3
    assert str(err) == "p.tea: fragment #2 (line 3): bad"


def test_non_syntax_errors_are_not_wrapped() -> None:
    def explode(text: str) -> str:
        raise RuntimeError("compiler crashed")

    with pytest.raises(RuntimeError):
        transform("<?tea z ?>", CallableCompiler(explode))
