from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization, the per-user data directory, idempotent
directory creation and the text read/write/delete primitives used by the
command layer. Acts as the single place where the pipeline touches 'os'
for mutations.
"""

import os
from typing import Optional, Tuple

from icedtea.domain.constants import DEFAULT_ENCODING

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "IcedTea"
UNIX_APP_DIR_NAME = ".icedtea"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir(create: bool = True) -> str:
    """
    Resolve the OS-specific directory for persistent application data.

    Standards:
    - Windows: %LOCALAPPDATA%/IcedTea
    - Linux/Mac: ~/.icedtea

    Args:
        create: Create the directory if it does not exist.

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    if create:
        # Callers fall back gracefully when the directory stays missing
        safe_mkdir(path)

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Expand '~' and environment variables and return an absolute path.

    Reverts to *fallback* if the input is empty.
    """
    p = (path or "").strip() or fallback
    return os.path.abspath(os.path.expandvars(os.path.expanduser(p)))

# -----------------------------------------------------------------------------
# FILESYSTEM OPERATIONS
# -----------------------------------------------------------------------------

def safe_mkdir(path: str) -> Tuple[bool, Optional[str]]:
    """
    Recursively create a directory, tolerating concurrent creation.

    Args:
        path: Target directory path.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    if not path:
        return True, None
    try:
        os.makedirs(path, exist_ok=True)
        return True, None
    except OSError as e:
        return False, str(e)


def ensure_parent_dir(file_path: str) -> None:
    """
    Create the parent directory of *file_path* if absent.

    Raises:
        OSError: If the directory cannot be created.
    """
    parent = os.path.dirname(file_path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def read_text(file_path: str, encoding: str = DEFAULT_ENCODING) -> str:
    """
    Read a source file strictly.

    Decoding errors are raised rather than replaced so a corrupted source
    never produces silently altered output.
    """
    with open(file_path, "r", encoding=encoding, newline="") as f:
        return f.read()


def write_text(file_path: str, content: str, encoding: str = DEFAULT_ENCODING) -> None:
    """Write *content* to *file_path*, preserving line endings as given."""
    with open(file_path, "w", encoding=encoding, newline="") as f:
        f.write(content)


def remove_file(file_path: str) -> None:
    """
    Delete a single file.

    Raises:
        OSError: If the file cannot be removed.
    """
    os.remove(file_path)
