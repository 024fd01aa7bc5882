from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for configuration, a sample source tree and a
   deterministic test compiler.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from icedtea.core.compilers.base import FragmentCompiler  # noqa: E402
from icedtea.domain.config import get_default_config  # noqa: E402


# -----------------------------------------------------------------------------
# Test Collaborators
# -----------------------------------------------------------------------------
class UpperCompiler(FragmentCompiler):
    """
    Deterministic stand-in for a grammar-backed compiler.

    Upper-cases the stripped fragment and terminates it with ';'. A fragment
    containing 'BROKEN' is rejected with a SyntaxError.
    """

    name = "upper"

    def compile(self, source: str) -> str:
        text = source.strip()
        if not text:
            return ""
        if "BROKEN" in text:
            raise SyntaxError("unexpected token 'BROKEN'")
        return f" {text.upper()}; "


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Returns:
        Dict[str, Any]: The default configuration.
    """
    return get_default_config()


@pytest.fixture
def upper_compiler() -> UpperCompiler:
    return UpperCompiler()


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """
    Create a small source tree.

    Structure:
    /proj
      a.tea          (no fragments)
      notes.txt
      /sub
        b.tea        (one fragment)
        /deep
          c.tea      (unclosed fragment)
    """
    proj = tmp_path / "proj"
    (proj / "sub" / "deep").mkdir(parents=True)

    (proj / "a.tea").write_text("<html>plain</html>\n", encoding="utf-8")
    (proj / "notes.txt").write_text("not a source", encoding="utf-8")
    (proj / "sub" / "b.tea").write_text("<p><?tea x ?></p>\n", encoding="utf-8")
    (proj / "sub" / "deep" / "c.tea").write_text("head <?tea y", encoding="utf-8")
    return proj
