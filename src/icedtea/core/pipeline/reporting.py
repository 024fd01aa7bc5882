from __future__ import annotations

"""
Batch Error Reporting.

Persists the failed outcomes of a compile or clean batch to a plain-text
report next to the generated output.
"""

import logging
import os
from typing import List

from icedtea.domain.models import FileOutcome
from icedtea.infra.fs import ensure_parent_dir

logger = logging.getLogger(__name__)


def write_error_report(report_path: str, outcomes: List[FileOutcome]) -> str:
    """
    Write every failed outcome to *report_path*.

    Args:
        report_path: Target report file.
        outcomes: Batch outcomes; successful ones are ignored.

    Returns:
        str: The path written, or an empty string if there was nothing to
             report or the report could not be saved.
    """
    failures = [o for o in outcomes if not o.ok]
    if not failures:
        return ""

    try:
        ensure_parent_dir(os.path.abspath(report_path))
        with open(report_path, "w", encoding="utf-8") as f:
            f.write("ICEDTEA ERRORS REPORT:\n")
            f.write("=" * 80 + "\n")
            for item in failures:
                f.write(f"FILE: {item.source}\n")
                if item.output:
                    f.write(f"OUTPUT: {item.output}\n")
                f.write(f"ERROR: {item.error}\n")
                f.write("-" * 80 + "\n")
    except OSError as e:
        logger.error(f"Failed to persist error report to '{report_path}': {e}")
        return ""

    logger.info(f"Error report written to '{report_path}'")
    return report_path
