from __future__ import annotations

"""
Watch Command.

Recompiles sources as they change, using a watchdog observer. A directory
target is watched recursively and each changed source is compiled into
its mirrored output location; a single-file target is watched through its
parent directory and always recompiled into the same output.

The subscription is returned as a WatchHandle so callers decide when to
stop; failures while recompiling are logged and never end the watch.
"""

import logging
import os
import threading
from typing import Any, Callable, Dict, List, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from icedtea.core.compilers.base import FragmentCompiler
from icedtea.core.compilers.registry import load_compiler
from icedtea.core.paths import has_extension, map_path
from icedtea.core.pipeline.compile import compile_to_outcome, single_output_path
from icedtea.domain.errors import PathError
from icedtea.domain.models import CommandRequest, FileOutcome

logger = logging.getLogger(__name__)

# Event types that may leave a source with new content
_CONTENT_EVENTS = ("created", "modified", "moved")


# -----------------------------------------------------------------------------
# EVENT HANDLER
# -----------------------------------------------------------------------------

class RecompileHandler(FileSystemEventHandler):
    """
    Translate filesystem events into single-file recompilations.

    Attributes:
        outcomes: Every recompilation performed, in order.
    """

    def __init__(
            self,
            input_path: str,
            output_path: str,
            is_dir: bool,
            compiler: FragmentCompiler,
            cfg: Dict[str, Any],
            on_compiled: Optional[Callable[[FileOutcome], None]] = None,
    ):
        super().__init__()
        self._input = input_path
        self._output = output_path
        self._is_dir = is_dir
        self._compiler = compiler
        self._cfg = cfg
        self._on_compiled = on_compiled
        self._lock = threading.Lock()
        self.outcomes: List[FileOutcome] = []

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in _CONTENT_EVENTS:
            return

        raw = getattr(event, "dest_path", "") if event.event_type == "moved" else event.src_path
        path = os.fsdecode(raw) if raw else ""
        if not path:
            return

        # Our own output, unless the source extension itself ends with the target one
        name = os.path.basename(path)
        if (has_extension(name, self._cfg["target_extension"])
                and not has_extension(name, self._cfg["source_extension"])):
            return

        if self._is_dir:
            self._recompile_in_tree(path)
        elif os.path.abspath(path) == os.path.abspath(self._input):
            self._recompile(self._input, self._output)

    def _recompile_in_tree(self, path: str) -> None:
        """Map a changed file under the watched directory to its output and compile it."""
        if not has_extension(path, self._cfg["source_extension"]):
            return

        rel = os.path.relpath(os.path.abspath(path), os.path.abspath(self._input))
        if rel == os.pardir or rel.startswith(os.pardir + os.sep):
            return

        source = os.path.join(self._input, rel)
        output = map_path(
            source, self._input, self._output,
            self._cfg["target_extension"], self._cfg["source_extension"],
        )
        self._recompile(source, output)

    def _recompile(self, source: str, output: str) -> None:
        # Observer callbacks are serialized per emitter; the lock covers
        # concurrent emitters sharing this handler.
        with self._lock:
            try:
                outcome = compile_to_outcome(source, output, self._compiler, self._cfg)
            except Exception as e:
                # Any compiler failure must leave the observer thread running
                logger.error(f"Unexpected failure recompiling '{source}': {e}", exc_info=True)
                outcome = FileOutcome(
                    source=source, output=output, ok=False, action="failed", error=str(e)
                )
            self.outcomes.append(outcome)

        if outcome.ok:
            logger.info(f"Recompiled '{source}' -> '{output}'")
        if self._on_compiled:
            self._on_compiled(outcome)


# -----------------------------------------------------------------------------
# SUBSCRIPTION HANDLE
# -----------------------------------------------------------------------------

class WatchHandle:
    """
    Cancellable watch subscription.

    Use stop() to unsubscribe, or the handle as a context manager.
    """

    def __init__(self, observer: Any, handler: RecompileHandler, target: str):
        self._observer = observer
        self._stopped = threading.Event()
        self.handler = handler
        self.target = target

    @property
    def active(self) -> bool:
        return not self._stopped.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until stop() is called or *timeout* elapses.

        Returns:
            bool: True if the watch has been stopped.
        """
        return self._stopped.wait(timeout)

    def stop(self) -> None:
        """Unsubscribe and join the observer thread. Idempotent."""
        if self._stopped.is_set():
            return
        self._observer.stop()
        self._observer.join()
        self._stopped.set()
        logger.info(f"Stopped watching {self.target}")

    def __enter__(self) -> "WatchHandle":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.stop()


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def resolve_watch_output(
        input_path: str,
        output_path: Optional[str],
        is_dir: bool,
        target_ext: str,
        source_ext: str = "",
) -> str:
    """Default the output to the input directory, or the swapped-extension sibling of a file."""
    if is_dir:
        return output_path or input_path
    return single_output_path(input_path, output_path, target_ext, source_ext)


def watch_path(
        request: CommandRequest,
        cfg: Dict[str, Any],
        compiler: Optional[FragmentCompiler] = None,
        *,
        on_compiled: Optional[Callable[[FileOutcome], None]] = None,
        observer_factory: Callable[[], Any] = Observer,
) -> WatchHandle:
    """
    Start watching a file or directory for changes.

    Args:
        request: Input file or directory plus optional output.
        cfg: Validated configuration.
        compiler: Fragment compiler; resolved from cfg['compiler'] if omitted.
        on_compiled: Callback invoked after every recompilation.
        observer_factory: Builds the watchdog observer.

    Returns:
        WatchHandle: The running subscription.

    Raises:
        PathError: If the input does not exist.
    """
    input_path = request.input_path
    if not os.path.exists(input_path):
        raise PathError(input_path, f"The path {input_path} does not exist")

    compiler = compiler or load_compiler(cfg["compiler"])
    is_dir = os.path.isdir(input_path)
    output = resolve_watch_output(
        input_path, request.output_path, is_dir, cfg["target_extension"], cfg["source_extension"]
    )

    handler = RecompileHandler(input_path, output, is_dir, compiler, cfg, on_compiled=on_compiled)

    watched = input_path if is_dir else os.path.dirname(os.path.abspath(input_path))
    observer = observer_factory()
    observer.schedule(handler, watched, recursive=is_dir)
    observer.start()

    logger.info(f"Watching {input_path} (output: {output})")
    return WatchHandle(observer, handler, input_path)
