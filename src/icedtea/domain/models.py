from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the data structures exchanged between the walker, the transform
pipeline, the command layer and the CLI. Every instance lives for a single
command invocation.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from icedtea.core.paths import map_path, relative_suffix

# -----------------------------------------------------------------------------
# TRAVERSAL AND EXTRACTION MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileNode:
    """A directory entry classified by the walker after its stat call."""
    path: str
    is_directory: bool


@dataclass(frozen=True)
class Fragment:
    """
    A delimited span of embedded source found in a host file.

    Attributes:
        inner_text: Text between the opening marker and the closing marker
                    (or end of input).
        closed: False when the opening marker had no matching closing marker.
        start: Offset of the opening marker in the raw text.
        end: Offset just past the closing marker (or the end of input).
    """
    inner_text: str
    closed: bool
    start: int = 0
    end: int = 0


@dataclass(frozen=True)
class PathMapping:
    """Source/output roots plus the relative suffix of one source file."""
    source_root: str
    output_root: str
    relative_path: str
    target_extension: str
    source_extension: str = ""

    @property
    def source_path(self) -> str:
        return self.source_root + self.relative_path

    @property
    def output_path(self) -> str:
        return map_path(
            self.source_path, self.source_root, self.output_root,
            self.target_extension, self.source_extension,
        )


def mapping_for(
        source_path: str,
        source_root: str,
        output_root: str,
        target_extension: str,
        source_extension: str = "",
) -> PathMapping:
    """
    Build the PathMapping of a file located under *source_root*.

    Raises:
        ValueError: If *source_path* does not begin with *source_root*.
    """
    return PathMapping(
        source_root=source_root,
        output_root=output_root,
        relative_path=relative_suffix(source_path, source_root),
        target_extension=target_extension,
        source_extension=source_extension,
    )

# -----------------------------------------------------------------------------
# COMMAND MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CommandRequest:
    """
    A fully parsed command invocation, built once at the CLI boundary.

    Attributes:
        command: One of 'compile', 'watch', 'clean'.
        input_path: File or directory the command operates on.
        output_path: Optional output file or directory.
        dry_run: Report actions without touching the filesystem (clean only).
    """
    command: str
    input_path: str
    output_path: Optional[str] = None
    dry_run: bool = False


@dataclass(frozen=True)
class FileOutcome:
    """Result of processing one file in a batch."""
    source: str
    output: str = ""
    ok: bool = True
    action: str = "compiled"
    error: str = ""


@dataclass(frozen=True)
class CommandResult:
    """
    Unified result of a compile or clean invocation.

    Attributes:
        ok: False if the command was rejected or any file failed.
        command: Command name.
        error: Top-level failure description.
        input_path: Input path as requested.
        output_path: Resolved output file or root.
        outcomes: Per-file results, in completion order.
        summary: Counters for rendering.
    """
    ok: bool
    command: str
    error: str = ""
    input_path: str = ""
    output_path: str = ""
    outcomes: List[FileOutcome] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

    @property
    def failures(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if not o.ok]

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def summarize_outcomes(outcomes: List[FileOutcome]) -> Dict[str, int]:
    """Count outcomes per action, plus an 'errors' total."""
    counters: Dict[str, int] = {"compiled": 0, "deleted": 0, "skipped": 0, "errors": 0}
    for outcome in outcomes:
        if not outcome.ok:
            counters["errors"] += 1
        elif outcome.action in counters:
            counters[outcome.action] += 1
    return counters


def create_error_result(
        error: str,
        request: CommandRequest,
        output_path: str = "",
        outcomes: Optional[List[FileOutcome]] = None,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> CommandResult:
    """
    Create a failed command result.

    Args:
        error: Detailed error description.
        request: The invocation that failed.
        output_path: Resolved output location, if known.
        outcomes: Per-file outcomes gathered before the failure.
        summary_extra: Additional counters merged into the summary.

    Returns:
        CommandResult: An immutable error result.
    """
    items = list(outcomes or [])
    summary: Dict[str, Any] = dict(summarize_outcomes(items))
    if summary_extra:
        summary.update(summary_extra)
    return CommandResult(
        ok=False,
        command=request.command,
        error=error,
        input_path=request.input_path,
        output_path=output_path,
        outcomes=items,
        summary=summary,
    )


def create_batch_result(
        request: CommandRequest,
        output_path: str,
        outcomes: List[FileOutcome],
        summary_extra: Optional[Dict[str, Any]] = None,
) -> CommandResult:
    """
    Create the result of a batch that ran to completion.

    The result is only ok when every file succeeded.
    """
    items = list(outcomes)
    summary: Dict[str, Any] = dict(summarize_outcomes(items))
    if summary_extra:
        summary.update(summary_extra)

    failed = summary["errors"]
    return CommandResult(
        ok=failed == 0,
        command=request.command,
        error=f"{failed} file(s) failed" if failed else "",
        input_path=request.input_path,
        output_path=output_path,
        outcomes=items,
        summary=summary,
    )
