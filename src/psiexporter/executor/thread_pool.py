"""
Thread pool for pressure file reads.

A scrape fans its per-cgroup reads out over a small pool of worker threads.
Each scrape owns its pool, so overlapping scrapes never share workers,
futures or counters.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Set

from ..validation import ErrorSeverity, handle_error

logger = logging.getLogger(__name__)


@dataclass
class ThreadPoolConfig:
    """Sizing and naming of a read pool."""

    max_workers: int = 4
    thread_name_prefix: str = "PressureReader"


class ManagedThreadPoolExecutor:
    """
    ThreadPoolExecutor with an explicit start/shutdown lifecycle and task counters.

    Use it as a context manager: entering starts the workers, a clean exit
    waits for every submitted read, and leaving on an exception (a scrape
    timeout, a vanished cgroup root) cancels whatever has not started yet
    without waiting for reads that are stuck in the kernel.
    """

    def __init__(self, config: ThreadPoolConfig):
        self.config = config
        self.executor: Optional[ThreadPoolExecutor] = None
        self.active_futures: Set[Future] = set()
        self.is_shutdown = False
        self._lock = threading.Lock()
        self.stats = dict.fromkeys(
            ("tasks_submitted", "tasks_completed", "tasks_failed", "tasks_cancelled"), 0
        )

    def start(self) -> None:
        """
        Create the worker pool.

        Raises:
            RuntimeError: If the pool is already running
        """
        if self.executor is not None:
            raise RuntimeError("Thread pool already started")

        self.executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix=self.config.thread_name_prefix,
        )
        self.is_shutdown = False
        logger.debug(f"Started {self.config.thread_name_prefix} pool with {self.config.max_workers} workers")

    def submit(self, fn: Callable, *args, **kwargs) -> Future:
        """
        Schedule ``fn(*args, **kwargs)`` on a worker.

        Raises:
            RuntimeError: If the pool was never started or is already shut down
        """
        if self.is_shutdown:
            raise RuntimeError("Thread pool is shutdown")
        if self.executor is None:
            raise RuntimeError("Thread pool not started")

        future = self.executor.submit(fn, *args, **kwargs)
        with self._lock:
            self.stats["tasks_submitted"] += 1
            self.active_futures.add(future)
        future.add_done_callback(self._task_completed)
        return future

    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        """
        Stop accepting work and release the workers.

        Args:
            wait: Block until running tasks finish
            cancel_futures: Cancel tasks that have not started yet
        """
        if self.executor is None or self.is_shutdown:
            return

        self.is_shutdown = True
        executor, self.executor = self.executor, None
        try:
            executor.shutdown(wait=wait, cancel_futures=cancel_futures)
        except RuntimeError as e:
            handle_error(
                error=e,
                context="shutting down thread pool",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
            return
        logger.debug(f"Thread pool shut down (wait={wait}, cancel_futures={cancel_futures})")

    def get_stats(self) -> Dict[str, Any]:
        """Snapshot of the task counters plus the number of unfinished futures."""
        with self._lock:
            stats = dict(self.stats, active_futures=len(self.active_futures))
        stats["is_shutdown"] = self.is_shutdown
        return stats

    def _task_completed(self, future: Future) -> None:
        if future.cancelled():
            outcome = "tasks_cancelled"
        elif future.exception() is not None:
            outcome = "tasks_failed"
        else:
            outcome = "tasks_completed"
        with self._lock:
            self.active_futures.discard(future)
            self.stats[outcome] += 1

    def __enter__(self) -> "ManagedThreadPoolExecutor":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown(wait=exc_type is None, cancel_futures=exc_type is not None)
