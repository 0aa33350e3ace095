"""
Unit tests for the managed thread pool.

Tests lifecycle management, task submission and the statistics kept from
future completion callbacks.
"""

import threading
from concurrent.futures import wait

import pytest

from psiexporter.executor import ManagedThreadPoolExecutor, ThreadPoolConfig


@pytest.fixture
def pool():
    executor = ManagedThreadPoolExecutor(ThreadPoolConfig(max_workers=2))
    executor.start()
    yield executor
    executor.shutdown(wait=True)


@pytest.mark.unit
class TestManagedThreadPoolExecutor:
    """Test cases for ManagedThreadPoolExecutor."""

    def test_config_defaults(self):
        """Test the default pool configuration."""
        config = ThreadPoolConfig()

        assert config.max_workers == 4
        assert config.thread_name_prefix == "PressureReader"

    def test_submit_before_start(self):
        """Test that submit requires a started pool."""
        executor = ManagedThreadPoolExecutor(ThreadPoolConfig())

        with pytest.raises(RuntimeError, match="not started"):
            executor.submit(lambda: None)

    def test_double_start(self, pool):
        """Test that a pool cannot be started twice."""
        with pytest.raises(RuntimeError, match="already started"):
            pool.start()

    def test_submit_after_shutdown(self):
        """Test that a shut down pool refuses work."""
        executor = ManagedThreadPoolExecutor(ThreadPoolConfig())
        executor.start()
        executor.shutdown()

        with pytest.raises(RuntimeError):
            executor.submit(lambda: None)
        assert executor.get_stats()["is_shutdown"] is True

    def test_results_and_stats(self, pool):
        """Test task results and completion counters."""
        def fail():
            raise ValueError("bad")

        futures = [pool.submit(lambda x: x * 2, i) for i in range(3)]
        futures.append(pool.submit(fail))
        wait(futures)
        # Joining the workers guarantees the completion callbacks have run
        pool.shutdown(wait=True)

        assert [f.result() for f in futures[:3]] == [0, 2, 4]
        with pytest.raises(ValueError):
            futures[3].result()

        stats = pool.get_stats()
        assert stats["tasks_submitted"] == 4
        assert stats["tasks_completed"] == 3
        assert stats["tasks_failed"] == 1
        assert stats["active_futures"] == 0

    def test_worker_thread_names(self, pool):
        """Test that worker threads carry the configured prefix."""
        future = pool.submit(lambda: threading.current_thread().name)

        assert future.result().startswith("PressureReader")

    def test_context_manager_cancels_on_error(self):
        """Test that leaving on an exception cancels queued tasks."""
        started = threading.Event()
        release = threading.Event()
        executor = ManagedThreadPoolExecutor(ThreadPoolConfig(max_workers=1))

        def block():
            started.set()
            release.wait(5)

        with pytest.raises(RuntimeError, match="abort"):
            with executor:
                executor.submit(block)
                started.wait(5)
                queued = executor.submit(lambda: "never")
                raise RuntimeError("abort")

        release.set()
        assert queued.cancelled()
        assert executor.get_stats()["tasks_cancelled"] == 1
        assert executor.executor is None

    def test_context_manager_waits_on_success(self):
        """Test that a clean exit waits for submitted tasks."""
        with ManagedThreadPoolExecutor(ThreadPoolConfig(max_workers=2)) as executor:
            futures = [executor.submit(lambda i=i: i) for i in range(5)]

        assert all(f.done() for f in futures)
        assert executor.get_stats()["tasks_completed"] == 5
