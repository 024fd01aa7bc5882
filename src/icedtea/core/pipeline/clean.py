from __future__ import annotations

"""
Clean Command.

Deletes generated files whose source still sits next to them. This is
destructive and meant for recovering from an accidental in-place
compile: target-extension files without a matching source file are
treated as hand-written and left untouched.
"""

import logging
import os
from typing import Any, Dict, List, Set

from icedtea.core.paths import has_extension, swap_extension
from icedtea.core.pipeline.reporting import write_error_report
from icedtea.core.walker import StatFailurePolicy, walk_tree
from icedtea.domain.errors import ListingError, PathError
from icedtea.domain.models import (
    CommandRequest,
    CommandResult,
    FileOutcome,
    create_batch_result,
    create_error_result,
)
from icedtea.infra.fs import remove_file

logger = logging.getLogger(__name__)


def select_generated(files: List[str], source_ext: str, target_ext: str) -> List[str]:
    """
    Return the generated files of a walk that have a source sibling.

    A file qualifies when it ends with *target_ext* and the same path with
    *source_ext* is also present in *files*.
    """
    present: Set[str] = set(files)
    return sorted(
        path for path in files
        if has_extension(path, target_ext)
        and swap_extension(path, source_ext, target_ext) in present
    )


def clean_path(request: CommandRequest, cfg: Dict[str, Any]) -> CommandResult:
    """
    Execute the clean command.

    Args:
        request: Directory to clean; dry_run reports without deleting.
        cfg: Validated configuration.

    Returns:
        CommandResult: One outcome per generated file considered.

    Raises:
        PathError: If the input is not a directory.
    """
    root = request.input_path
    if not os.path.isdir(root):
        raise PathError(root, f"{root} is not a directory.")

    logger.info(f"Cleaning generated files under: {root}")

    try:
        files = walk_tree(
            root,
            stat_policy=StatFailurePolicy(cfg["stat_failure_policy"]),
            stat_retries=cfg["stat_retries"],
        )
    except ListingError as e:
        logger.error(str(e))
        return create_error_result(str(e), request, root)

    targets = select_generated(files, cfg["source_extension"], cfg["target_extension"])
    outcomes: List[FileOutcome] = []

    for path in targets:
        source = swap_extension(path, cfg["source_extension"], cfg["target_extension"])
        if request.dry_run:
            logger.info(f"Would delete: {path}")
            outcomes.append(FileOutcome(source=source, output=path, action="skipped"))
            continue
        try:
            remove_file(path)
        except OSError as e:
            logger.error(f"Failed to delete '{path}': {e}")
            outcomes.append(
                FileOutcome(source=source, output=path, ok=False, action="failed", error=str(e))
            )
            continue
        logger.debug(f"Deleted: {path}")
        outcomes.append(FileOutcome(source=source, output=path, action="deleted"))

    report = ""
    if cfg.get("save_error_log"):
        report = write_error_report(os.path.join(root, cfg["error_log_name"]), outcomes)

    result = create_batch_result(
        request, root, outcomes,
        summary_extra={"walked": len(files), "dry_run": request.dry_run, "error_report": report},
    )
    logger.info(
        f"Clean finished. Deleted: {result.summary['deleted']}. "
        f"Errors: {result.summary['errors']}"
    )
    return result
