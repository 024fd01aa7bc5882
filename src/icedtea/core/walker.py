from __future__ import annotations

"""
Concurrent Directory Walker.

Enumerates every leaf file below a root using structured fan-out/fan-in:
each directory level lists its entries, spawns one task per entry and
joins them with asyncio.gather before reporting its own result. All
accumulators belong to the event loop; only the blocking listdir/stat
syscalls run in worker threads and hand back plain values.
"""

import asyncio
import enum
import logging
import os
import stat
from typing import List, Optional

from icedtea.domain.errors import ListingError, StatError
from icedtea.domain.models import FileNode

logger = logging.getLogger(__name__)

# Pause between stat attempts under the RETRY policy
_RETRY_DELAY_SECONDS = 0.05


class StatFailurePolicy(str, enum.Enum):
    """What the walker does with an entry whose stat call fails."""
    SKIP = "skip"
    RETRY = "retry"
    ASSUME_FILE = "assume_file"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

async def walk(
        root: str,
        *,
        stat_policy: StatFailurePolicy = StatFailurePolicy.SKIP,
        stat_retries: int = 2,
) -> List[str]:
    """
    Return every file path reachable by recursive descent from *root*.

    Directories are not part of the result and ordering is unspecified.
    Child paths are built with os.path.join, so they keep *root* as prefix.

    Args:
        root: Existing directory to traverse.
        stat_policy: Handling of entries that cannot be stat'd.
        stat_retries: Extra attempts made under StatFailurePolicy.RETRY.

    Returns:
        List[str]: Leaf file paths.

    Raises:
        ListingError: If any directory in the tree cannot be listed. The
                      first failure cancels the remaining sibling tasks.
    """
    try:
        names = await asyncio.to_thread(os.listdir, root)
    except OSError as e:
        raise ListingError(root, e) from e

    if not names:
        return []

    tasks = [
        asyncio.create_task(_visit(os.path.join(root, name), stat_policy, stat_retries))
        for name in names
    ]
    try:
        branches = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    results: List[str] = []
    for branch in branches:
        results.extend(branch)
    return results


def walk_tree(
        root: str,
        *,
        stat_policy: StatFailurePolicy = StatFailurePolicy.SKIP,
        stat_retries: int = 2,
) -> List[str]:
    """Synchronous entry point running walk() on a fresh event loop."""
    return asyncio.run(walk(root, stat_policy=stat_policy, stat_retries=stat_retries))

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

async def _visit(path: str, policy: StatFailurePolicy, retries: int) -> List[str]:
    """Classify one entry and return the files it contributes."""
    node = await _classify(path, policy, retries)
    if node is None:
        return []
    if node.is_directory:
        return await walk(path, stat_policy=policy, stat_retries=retries)
    return [node.path]


async def _classify(path: str, policy: StatFailurePolicy, retries: int) -> Optional[FileNode]:
    """
    Stat *path* and build its FileNode, applying the stat-failure policy.

    Returns None when the entry is to be dropped from the walk.
    """
    attempts = 1 + (max(0, retries) if policy is StatFailurePolicy.RETRY else 0)
    failure: Optional[StatError] = None

    for attempt in range(attempts):
        try:
            st = await asyncio.to_thread(os.stat, path)
            return FileNode(path=path, is_directory=stat.S_ISDIR(st.st_mode))
        except OSError as e:
            failure = StatError(path, e)
            if attempt + 1 < attempts:
                await asyncio.sleep(_RETRY_DELAY_SECONDS)

    if policy is StatFailurePolicy.ASSUME_FILE:
        logger.warning(f"{failure}. Treating entry as a file.")
        return FileNode(path=path, is_directory=False)

    logger.warning(f"{failure}. Entry skipped.")
    return None
