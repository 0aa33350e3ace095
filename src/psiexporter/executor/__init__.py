"""
Thread pool used to parallelize pressure file reads within one scrape.
"""

from .thread_pool import ManagedThreadPoolExecutor, ThreadPoolConfig

__all__ = [
    "ManagedThreadPoolExecutor",
    "ThreadPoolConfig",
]
