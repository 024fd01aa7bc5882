from __future__ import annotations

"""
Output Path Mapping.

Pure string functions that mirror a source file into an output tree. The
relative part is computed by string prefix, not by path resolution, so
'..' segments and symlinks are carried through untouched.
"""

_SEPARATORS = "/\\"


def has_extension(path: str, extension: str) -> bool:
    """Return True if *path* ends with *extension* (including the dot)."""
    return path.endswith(extension)


def swap_extension(path: str, new_extension: str, old_extension: str = "") -> str:
    """
    Replace the extension of the last path component.

    When *old_extension* is given and *path* ends with it, exactly that
    suffix is replaced, so multi-dot extensions such as '.min.php' swap
    as a unit. Otherwise everything after the final '.' of the file name
    is replaced; a name without a dot gets *new_extension* appended. Dots
    in parent directory names are never touched.

    Args:
        path: File path in either separator style.
        new_extension: Replacement extension, including the leading dot.
        old_extension: Known current extension, including the leading dot.

    Returns:
        str: The path with its extension swapped.
    """
    if old_extension and path.endswith(old_extension):
        return path[:-len(old_extension)] + new_extension
    dot = path.rfind(".")
    sep = max(path.rfind("/"), path.rfind("\\"))
    if dot > sep:
        return path[:dot] + new_extension
    return path + new_extension


def default_output_for(source_path: str, target_extension: str, source_extension: str = "") -> str:
    """Output path used when a single file is compiled without an explicit target."""
    return swap_extension(source_path, target_extension, source_extension)


def relative_suffix(source_path: str, source_root: str) -> str:
    """
    Return the part of *source_path* after *source_root*.

    Raises:
        ValueError: If *source_path* does not begin with *source_root*.
    """
    if not source_path.startswith(source_root):
        raise ValueError(f"'{source_path}' is not located under '{source_root}'")
    return source_path[len(source_root):]


def map_path(
        source_path: str,
        source_root: str,
        output_root: str,
        target_extension: str,
        source_extension: str = "",
) -> str:
    """
    Map a source file under *source_root* to its mirror under *output_root*.

    The relative suffix gets its extension swapped and its separators
    normalized to '/'. The output root itself is kept as given, minus any
    trailing separator, and joined to the suffix with a single '/'.

    Args:
        source_path: File located under source_root.
        source_root: Root the relative structure is measured from.
        output_root: Root of the mirrored tree.
        target_extension: Extension for the generated file.
        source_extension: Known extension of the source, swapped as a unit.

    Returns:
        str: The mirrored output path.

    Raises:
        ValueError: If *source_path* does not begin with *source_root*.
    """
    suffix = relative_suffix(source_path, source_root)
    suffix = swap_extension(suffix, target_extension, source_extension).replace("\\", "/").lstrip("/")

    if not output_root:
        return suffix

    root = output_root.rstrip(_SEPARATORS)
    if not root:
        # Filesystem root such as '/'
        return "/" + suffix
    return f"{root}/{suffix}"
