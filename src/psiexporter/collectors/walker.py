"""
Cgroup tree walker.

Enumerates the cgroups below the cgroup2 mount point as a lazy, depth-first
sequence of identifiers. Directories are listed only when the consumer pulls
the next identifier, so the walk reflects the hierarchy as it is at that
moment rather than a snapshot taken up front.
"""

import logging
import os
import time
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

from ..models.pressure import CgroupEntity
from .exceptions import ScrapeTimeout, WalkRootMissing

logger = logging.getLogger(__name__)

ROOT_ID = "/"


def _child_id(parent_id: str, name: str) -> str:
    return f"/{name}" if parent_id == ROOT_ID else f"{parent_id}/{name}"


def _is_subdirectory(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        # Entry removed after the listing was taken
        return False


def _list_subdirectories(path: str, exclude_suffixes: Sequence[str]) -> List[str]:
    """
    List the child cgroup directory names of ``path``, sorted.

    Raises:
        OSError: Propagated from os.scandir for the caller to classify
    """
    with os.scandir(path) as entries:
        names = [
            entry.name
            for entry in entries
            if _is_subdirectory(entry) and not entry.name.endswith(tuple(exclude_suffixes))
        ]
    names.sort()
    return names


def walk_cgroups(
    root: Union[str, Path],
    exclude_suffixes: Sequence[str] = (),
    deadline: Optional[float] = None,
    timeout: Optional[float] = None,
) -> Iterator[CgroupEntity]:
    """
    Yield every cgroup reachable from ``root``, root first, depth-first.

    A directory is yielded only once it has been listed successfully. One
    that disappears between being seen in its parent and being listed is
    treated as already gone: it and its subtree are skipped silently.
    Directories created during the walk may or may not be seen.

    Args:
        root: The cgroup filesystem mount point
        exclude_suffixes: Directory name suffixes to prune, with their subtrees
        deadline: time.monotonic() value after which the walk is abandoned
        timeout: The scrape timeout the deadline was derived from, for reporting

    Yields:
        CgroupEntity for each cgroup, ``/`` first

    Raises:
        WalkRootMissing: If ``root`` does not exist or is not a directory
        ScrapeTimeout: If ``deadline`` passes mid-walk
    """
    root_path = str(root)
    try:
        root_children = _list_subdirectories(root_path, exclude_suffixes)
    except FileNotFoundError:
        raise WalkRootMissing(root_path, "does not exist")
    except NotADirectoryError:
        raise WalkRootMissing(root_path, "not a directory")
    except PermissionError:
        raise WalkRootMissing(root_path, "permission denied")

    yield CgroupEntity(ROOT_ID)

    # Stack holds ids still to be listed; reversed so siblings pop in sorted order
    stack = [_child_id(ROOT_ID, name) for name in reversed(root_children)]
    while stack:
        if deadline is not None and time.monotonic() > deadline:
            raise ScrapeTimeout(timeout if timeout is not None else 0.0, stage="cgroup walk")

        cgroup_id = stack.pop()
        path = os.path.join(root_path, cgroup_id.lstrip("/"))
        try:
            children = _list_subdirectories(path, exclude_suffixes)
        except (FileNotFoundError, NotADirectoryError):
            logger.debug(f"Cgroup {cgroup_id} vanished before it could be listed")
            continue
        except PermissionError as e:
            logger.warning(f"Skipping cgroup subtree {cgroup_id}: {e}")
            continue

        yield CgroupEntity(cgroup_id)
        stack.extend(_child_id(cgroup_id, name) for name in reversed(children))
