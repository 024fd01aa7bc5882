from __future__ import annotations

"""
Compile Command.

Transforms a single source file, or every source file below a directory
into a mirrored output tree. Directory batches walk the input tree, then
compile each matching file in its own asyncio task with the blocking
read/transform/write work off-loaded to worker threads.

Batch policy: a failing file is recorded and reported, the rest of the
batch still runs, and the overall result is marked as failed. With
'fail_fast' enabled the first failure cancels the pending files instead.
"""

import asyncio
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from icedtea.core.compilers.base import FragmentCompiler
from icedtea.core.compilers.registry import load_compiler
from icedtea.core.extractor import TagSet, transform
from icedtea.core.paths import default_output_for, has_extension, swap_extension
from icedtea.core.pipeline.reporting import write_error_report
from icedtea.core.walker import StatFailurePolicy, walk_tree
from icedtea.domain.errors import ListingError, PathError
from icedtea.domain.models import (
    CommandRequest,
    CommandResult,
    FileOutcome,
    create_batch_result,
    create_error_result,
    mapping_for,
)
from icedtea.infra.fs import ensure_parent_dir, read_text, write_text

logger = logging.getLogger(__name__)

# Failures recorded per file instead of aborting the batch
_FILE_ERRORS = (SyntaxError, OSError, UnicodeError, LookupError)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def compile_file(
        source: str,
        output: str,
        compiler: FragmentCompiler,
        cfg: Dict[str, Any],
) -> None:
    """
    Read *source*, transform its fragments and write the result to *output*.

    The parent directory of *output* is created if absent.

    Raises:
        FragmentSyntaxError: If the compiler rejects a fragment.
        OSError: On read, directory creation or write failure.
        UnicodeDecodeError: If the source is not valid in the configured encoding.
        LookupError: If the configured encoding is unknown.
    """
    encoding = cfg["encoding"]
    raw = read_text(source, encoding)
    compiled = transform(raw, compiler, TagSet.from_config(cfg), filename=source)
    ensure_parent_dir(output)
    write_text(output, compiled, encoding)
    logger.debug(f"Compiled '{source}' -> '{output}'")


def compile_path(
        request: CommandRequest,
        cfg: Dict[str, Any],
        compiler: Optional[FragmentCompiler] = None,
) -> CommandResult:
    """
    Execute the compile command.

    Args:
        request: Input file or directory plus optional output.
        cfg: Validated configuration.
        compiler: Fragment compiler; resolved from cfg['compiler'] if omitted.

    Returns:
        CommandResult: Per-file outcomes and counters.

    Raises:
        PathError: If the input is neither a file nor a directory, or the
                   requested output directory is unusable.
        ValueError: If the configured compiler cannot be loaded.
    """
    compiler = compiler or load_compiler(cfg["compiler"])
    input_path = request.input_path

    if os.path.isfile(input_path):
        return _compile_single(request, cfg, compiler)

    if os.path.isdir(input_path):
        return _compile_directory(request, cfg, compiler)

    raise PathError(
        input_path,
        f"Invalid path '{input_path}': only files and directories can be compiled.",
    )


# -----------------------------------------------------------------------------
# SINGLE FILE
# -----------------------------------------------------------------------------

def _compile_single(
        request: CommandRequest,
        cfg: Dict[str, Any],
        compiler: FragmentCompiler,
) -> CommandResult:
    """Compile one file to its explicit or derived output path."""
    source = request.input_path
    output = single_output_path(
        source, request.output_path, cfg["target_extension"], cfg["source_extension"]
    )

    logger.info(f"Compiling file: {source}")
    outcome = compile_to_outcome(source, output, compiler, cfg)
    _maybe_report(cfg, os.path.dirname(os.path.abspath(output)), [outcome])
    return create_batch_result(request, output, [outcome])


def single_output_path(
        source: str,
        output: Optional[str],
        target_ext: str,
        source_ext: str = "",
) -> str:
    """Resolve the output of a single-file compile."""
    if not output:
        return default_output_for(source, target_ext, source_ext)
    if os.path.isdir(output):
        name = swap_extension(os.path.basename(source), target_ext, source_ext)
        return os.path.join(output, name)
    return output


# -----------------------------------------------------------------------------
# DIRECTORY BATCH
# -----------------------------------------------------------------------------

def _compile_directory(
        request: CommandRequest,
        cfg: Dict[str, Any],
        compiler: FragmentCompiler,
) -> CommandResult:
    """Walk the input tree and compile every source file into the output root."""
    source_root = request.input_path
    output_root = _resolve_output_root(source_root, request.output_path)

    logger.info(f"Compiling directory: {source_root} -> {output_root}")

    try:
        files = walk_tree(
            source_root,
            stat_policy=StatFailurePolicy(cfg["stat_failure_policy"]),
            stat_retries=cfg["stat_retries"],
        )
    except ListingError as e:
        logger.error(str(e))
        return create_error_result(str(e), request, output_root)

    jobs = plan_jobs(files, source_root, output_root, cfg)
    logger.debug(f"Walk found {len(files)} file(s), {len(jobs)} to compile.")

    outcomes, aborted = asyncio.run(
        _compile_batch(jobs, compiler, cfg, fail_fast=bool(cfg["fail_fast"]))
    )
    outcomes.sort(key=lambda o: o.source)

    report = _maybe_report(cfg, output_root, outcomes)
    extra = {"walked": len(files), "error_report": report}

    if aborted:
        return create_error_result(
            f"Batch aborted after failure in '{aborted.source}': {aborted.error}",
            request, output_root, outcomes, summary_extra=extra,
        )

    result = create_batch_result(request, output_root, outcomes, summary_extra=extra)
    logger.info(
        f"Compile finished. Compiled: {result.summary['compiled']}. "
        f"Errors: {result.summary['errors']}"
    )
    return result


def _resolve_output_root(source_root: str, output: Optional[str]) -> str:
    """Validate an explicit output root; default to in-place compilation."""
    if not output:
        return source_root
    if not os.path.exists(output):
        raise PathError(output, f"The output path {output} does not exist.")
    if not os.path.isdir(output):
        raise PathError(output, f"The output path {output} is not a directory.")
    return output


def plan_jobs(
        files: List[str],
        source_root: str,
        output_root: str,
        cfg: Dict[str, Any],
) -> List[Tuple[str, str]]:
    """
    Pair every source file of a walk with its mirrored output path.

    Files without the source extension are ignored.
    """
    source_ext = cfg["source_extension"]
    target_ext = cfg["target_extension"]
    return [
        (path, mapping_for(path, source_root, output_root, target_ext, source_ext).output_path)
        for path in files
        if has_extension(path, source_ext)
    ]


async def _compile_batch(
        jobs: List[Tuple[str, str]],
        compiler: FragmentCompiler,
        cfg: Dict[str, Any],
        *,
        fail_fast: bool,
) -> Tuple[List[FileOutcome], Optional[FileOutcome]]:
    """
    Compile all jobs concurrently.

    Returns:
        Tuple of the collected outcomes and, under fail_fast, the outcome
        that aborted the batch.
    """
    if not jobs:
        return [], None

    tasks = [
        asyncio.create_task(asyncio.to_thread(compile_to_outcome, source, output, compiler, cfg))
        for source, output in jobs
    ]
    outcomes: List[FileOutcome] = []

    for next_done in asyncio.as_completed(tasks):
        outcome = await next_done
        outcomes.append(outcome)
        if fail_fast and not outcome.ok:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            return outcomes, outcome

    return outcomes, None


def compile_to_outcome(
        source: str,
        output: str,
        compiler: FragmentCompiler,
        cfg: Dict[str, Any],
) -> FileOutcome:
    """Compile one file, converting expected failures into an outcome."""
    try:
        compile_file(source, output, compiler, cfg)
    except _FILE_ERRORS as e:
        logger.error(f"Failed to compile '{source}': {e}")
        return FileOutcome(source=source, output=output, ok=False, action="failed", error=str(e))
    return FileOutcome(source=source, output=output)


def _maybe_report(cfg: Dict[str, Any], directory: str, outcomes: List[FileOutcome]) -> str:
    """Write the error report when enabled and needed."""
    if not cfg.get("save_error_log"):
        return ""
    return write_error_report(os.path.join(directory, cfg["error_log_name"]), outcomes)
