from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema (global options plus the compile, watch
and clean subcommands) and translates the parsed namespace into a
CommandRequest and configuration overrides.
"""

import argparse
import sys
from typing import Any, Dict, NoReturn

from icedtea.domain.constants import APP_NAME, APP_VERSION, COMMAND_CLEAN, COMMAND_COMPILE, COMMAND_WATCH
from icedtea.domain.models import CommandRequest

# Usage errors share the exit status of every other invalid invocation
USAGE_EXIT_CODE = 1


class CliArgumentParser(argparse.ArgumentParser):
    """ArgumentParser exiting with status 1 on usage errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(USAGE_EXIT_CODE, f"{self.prog}: error: {message}\n")

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the IcedTea CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = CliArgumentParser(
        prog="icedtea",
        description=f"{APP_NAME}: compile files with embedded fragments into PHP.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")

    # --- Format and Translation ---
    p.add_argument(
        "--compiler",
        dest="compiler",
        default=None,
        help="Fragment compiler: a registered name or 'module:attribute'.",
    )
    p.add_argument(
        "--source-ext",
        dest="source_extension",
        default=None,
        help="Extension of source files (default: .tea).",
    )
    p.add_argument(
        "--target-ext",
        dest="target_extension",
        default=None,
        help="Extension of generated files (default: .php).",
    )

    # --- Batch Behaviour ---
    p.add_argument(
        "--fail-fast",
        action="store_true",
        help="Abort a batch at the first failing file.",
    )
    p.add_argument(
        "--error-log",
        action="store_true",
        help="Write a report of failed files next to the output.",
    )

    # --- Configuration and Diagnostics ---
    p.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Read settings from this JSON file instead of the user config.",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persisted configuration file.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective settings (file plus overrides) before running.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        nargs="?",
        const="",
        default=None,
        help="Also log to a rotating file (default location if no path given).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the command result as JSON.",
    )

    # --- Commands ---
    sub = p.add_subparsers(dest="command", metavar="command", parser_class=CliArgumentParser)

    p_compile = sub.add_parser(
        COMMAND_COMPILE,
        help="Compile a file, or every source file under a directory.",
    )
    p_compile.add_argument("input", help="Source file or directory.")
    p_compile.add_argument("output", nargs="?", default=None, help="Output file or existing directory.")

    p_watch = sub.add_parser(
        COMMAND_WATCH,
        help="Recompile a file or directory whenever it changes.",
    )
    p_watch.add_argument("input", help="Source file or directory to watch.")
    p_watch.add_argument("output", nargs="?", default=None, help="Output file or directory.")

    p_clean = sub.add_parser(
        COMMAND_CLEAN,
        help="Delete generated files that have a source sibling. Destructive.",
    )
    p_clean.add_argument("input", help="Directory to clean.")
    p_clean.add_argument(
        "--dry-run",
        action="store_true",
        help="List the files that would be deleted without deleting them.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_request(args: argparse.Namespace) -> CommandRequest:
    """
    Build the command request from the parsed namespace.

    Args:
        args: Parsed arguments with a command selected.

    Returns:
        CommandRequest: Immutable invocation description.
    """
    return CommandRequest(
        command=args.command,
        input_path=args.input,
        output_path=getattr(args, "output", None),
        dry_run=bool(getattr(args, "dry_run", False)),
    )


def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Overrides; None values mean 'not given'.
    """
    overrides: Dict[str, Any] = {}

    overrides["compiler"] = args.compiler
    overrides["source_extension"] = args.source_extension
    overrides["target_extension"] = args.target_extension

    if args.fail_fast:
        overrides["fail_fast"] = True
    if args.error_log:
        overrides["save_error_log"] = True

    return overrides
