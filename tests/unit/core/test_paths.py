from __future__ import annotations

"""
Unit tests for Output Path Mapping.

Verifies:
1. Extension swapping on the last path component only.
2. Mirroring of the relative suffix under an output root.
3. Separator normalization of the suffix (root kept as given).
4. Precondition enforcement on the source root prefix.
"""

import pytest

from icedtea.core.paths import (
    default_output_for,
    has_extension,
    map_path,
    relative_suffix,
    swap_extension,
)


# -----------------------------------------------------------------------------
# EXTENSION HANDLING
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("path, expected", [
    ("a.tea", "a.php"),
    ("dir/page.tpl.tea", "dir/page.tpl.php"),
    ("dir.v1/readme", "dir.v1/readme.php"),
    ("C:\\site.d\\index", "C:\\site.d\\index.php"),
    ("noext", "noext.php"),
])
def test_swap_extension(path: str, expected: str) -> None:
    """TC-01: Only the extension of the file name is replaced."""
    assert swap_extension(path, ".php") == expected


@pytest.mark.parametrize("path, new, old, expected", [
    ("a.tea.html", ".php", ".tea.html", "a.php"),
    ("a.min.php", ".tea", ".min.php", "a.tea"),
    ("dir/a.tea", ".min.php", ".tea", "dir/a.min.php"),
    ("a.txt", ".php", ".tea", "a.php"),
])
def test_swap_known_extension_as_a_unit(path: str, new: str, old: str, expected: str) -> None:
    """A known multi-dot extension is replaced whole; unknown ones cut at the last dot."""
    assert swap_extension(path, new, old) == expected


def test_has_extension_requires_suffix_match() -> None:
    assert has_extension("x/a.tea", ".tea")
    assert not has_extension("x/a.tea.bak", ".tea")
    assert not has_extension("x/tea", ".tea")


def test_default_output_for_single_file() -> None:
    assert default_output_for("/srv/www/index.tea", ".php") == "/srv/www/index.php"


def test_default_output_for_multi_dot_source() -> None:
    assert default_output_for("/srv/www/index.tea.html", ".php", ".tea.html") == "/srv/www/index.php"


def test_map_path_with_multi_dot_source_extension() -> None:
    out = map_path("proj/sub/b.tea.html", "proj", "out", ".php", ".tea.html")
    assert out == "out/sub/b.php"


# -----------------------------------------------------------------------------
# MIRRORING
# -----------------------------------------------------------------------------

def test_map_path_mirrors_relative_structure() -> None:
    """TC-02: The relative part is swapped and grafted under the output root."""
    out = map_path("proj/sub/b.tea", "proj", "outdir", ".php")
    assert out == "outdir/sub/b.php"


def test_map_path_normalizes_backslashes_in_suffix_only() -> None:
    """TC-03: Every separator of the suffix becomes '/', the root is untouched."""
    out = map_path("C:\\src\\a\\b\\c.tea", "C:\\src", "D:\\out", ".php")
    assert out == "D:\\out/a/b/c.php"


def test_map_path_tolerates_trailing_separator_on_roots() -> None:
    assert map_path("proj/a.tea", "proj/", "out/", ".php") == "out/a.php"


def test_map_path_to_filesystem_root() -> None:
    assert map_path("/src/a.tea", "/src", "/", ".php") == "/a.php"


def test_map_path_without_output_root_returns_suffix() -> None:
    assert map_path("proj/x/y.tea", "proj", "", ".php") == "x/y.php"


def test_map_path_in_place_when_roots_are_equal() -> None:
    assert map_path("proj/x/y.tea", "proj", "proj", ".php") == "proj/x/y.php"


def test_map_path_is_stable() -> None:
    """TC-04: Same inputs always map to the same output."""
    args = ("root\\deep\\file.tea", "root", "build", ".php")
    assert len({map_path(*args) for _ in range(5)}) == 1


def test_map_path_does_not_resolve_parent_segments() -> None:
    """'..' segments in the suffix are carried through verbatim."""
    assert map_path("proj/../x.tea", "proj", "out", ".php") == "out/../x.php"


def test_map_path_rejects_source_outside_root() -> None:
    """TC-05: A source that does not start with the root violates the precondition."""
    with pytest.raises(ValueError, match="is not located under"):
        map_path("elsewhere/a.tea", "proj", "out", ".php")


def test_relative_suffix_is_prefix_based() -> None:
    assert relative_suffix("proj/sub/a.tea", "proj") == "/sub/a.tea"
    # Prefix semantics, not path semantics
    assert relative_suffix("project/a.tea", "proj") == "ect/a.tea"
