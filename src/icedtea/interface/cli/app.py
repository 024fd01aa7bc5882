from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration
resolution (defaults, persisted file, command-line overrides), dispatch
to the compile, watch and clean commands, and result rendering.
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from icedtea.core.compilers.registry import load_compiler
from icedtea.core.pipeline.clean import clean_path
from icedtea.core.pipeline.compile import compile_path
from icedtea.core.pipeline.validator import validate_config
from icedtea.core.pipeline.watch import watch_path
from icedtea.domain.config import get_config_path, get_default_config, load_config, save_config
from icedtea.domain.constants import COMMAND_CLEAN, COMMAND_COMPILE, COMMAND_WATCH, COMMANDS
from icedtea.domain.errors import IcedTeaError
from icedtea.domain.models import CommandRequest, CommandResult
from icedtea.infra.fs import normalize_path
from icedtea.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    get_logger,
)
from icedtea.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

# Poll interval while the watch command waits for Ctrl-C
_WATCH_WAIT_SECONDS = 0.5

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_file = None
    if args.log_file is not None:
        log_file = normalize_path(args.log_file, ".") if args.log_file else get_default_log_path()
    configure_logging(
        LoggingConfig(level="DEBUG" if args.debug else "INFO", console=True, log_file=log_file)
    )

    if args.command not in COMMANDS:
        msg = f"Invalid command: {args.command}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return EXIT_FAILURE

    cfg = _resolve_config(args)
    request = cli_args.args_to_request(args)
    logger.debug(f"Dispatching {request}")

    try:
        compiler = load_compiler(cfg["compiler"]) if request.command != COMMAND_CLEAN else None

        if request.command == COMMAND_WATCH:
            return _run_watch(request, cfg, compiler)

        if request.command == COMMAND_COMPILE:
            result = compile_path(request, cfg, compiler)
        else:
            result = clean_path(request, cfg)

    except IcedTeaError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except ValueError as e:
        # Unresolvable compiler spec
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"{request.command} failed: {e}", exc_info=True)
        print(f"ERROR: {request.command} failed: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return EXIT_OK if result.ok else EXIT_FAILURE

# -----------------------------------------------------------------------------
# CONFIGURATION
# -----------------------------------------------------------------------------

def _resolve_config(args: Any) -> Dict[str, Any]:
    """Layer defaults, persisted settings and CLI overrides, then validate."""
    config_path = normalize_path(args.config_path, get_config_path()) if args.config_path else None
    if args.use_defaults:
        base = get_default_config()
    else:
        base = load_config(config_path)

    merged = dict(base)
    for key, value in cli_args.args_to_overrides(args).items():
        if value is not None:
            merged[key] = value

    cfg, warnings = validate_config(merged, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.save_config:
        try:
            written = save_config(cfg, config_path)
            logger.info(f"Configuration saved to '{written}'")
        except OSError as e:
            logger.error(f"Failed to save configuration: {e}")
    return cfg

# -----------------------------------------------------------------------------
# WATCH LOOP
# -----------------------------------------------------------------------------

def _run_watch(request: CommandRequest, cfg: Dict[str, Any], compiler: Any) -> int:
    """Run the watch subscription until Ctrl-C."""
    handle = watch_path(request, cfg, compiler)
    print(f"Watching {request.input_path}. Press Ctrl-C to stop.")
    try:
        while not handle.wait(_WATCH_WAIT_SECONDS):
            pass
    except KeyboardInterrupt:
        logger.info("Watch interrupted by user.")
    finally:
        handle.stop()
    return EXIT_OK

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: CommandResult) -> None:
    """Render a CommandResult as a terminal report."""
    summary = result.summary

    if result.command == COMMAND_CLEAN:
        verb = "Would delete" if summary.get("dry_run") else "Deleted"
        removed = [o for o in result.outcomes if o.ok]
        for outcome in removed:
            print(f"  - {verb}: {outcome.output}")
        print(f"{verb}: {len(removed)} file(s)")
    else:
        print(f"Output: {result.output_path}")
        print(f"Files compiled: {summary.get('compiled', 0)}")

    errors = summary.get("errors", 0)
    if errors:
        print(f"Errors: {errors}", file=sys.stderr)
        for outcome in result.failures:
            print(f"  - {outcome.source}: {outcome.error}", file=sys.stderr)

    if summary.get("error_report"):
        print(f"Error report: {summary['error_report']}")

    if not result.ok and result.error:
        print(f"ERROR: {result.error}", file=sys.stderr)
