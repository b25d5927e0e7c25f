"""Shared thread pool for background validation passes."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

logger = logging.getLogger(__name__)

_executor: ThreadPoolExecutor | None = None
_executor_max_workers: int | None = None
_executor_lock = threading.Lock()


def get_executor(max_workers: int | None = None) -> ThreadPoolExecutor:
    """Return the process-wide validation pool, creating it on first use.

    ``max_workers`` only applies when the pool is created; later calls with a
    different value get the existing pool.
    """
    global _executor, _executor_max_workers
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=max_workers,
                thread_name_prefix="modelguard-validate",
            )
            _executor_max_workers = max_workers
            logger.debug("Created validation pool (max_workers=%s)", max_workers)
        elif max_workers is not None and max_workers != _executor_max_workers:
            logger.warning(
                "Validation pool already running with max_workers=%s; ignoring max_workers=%d",
                _executor_max_workers,
                max_workers,
            )
        return _executor


def shutdown_executor(wait: bool = True) -> None:
    """Shut down the shared pool. The next get_executor() call recreates it."""
    global _executor, _executor_max_workers
    with _executor_lock:
        executor, _executor = _executor, None
        _executor_max_workers = None
    if executor is not None:
        executor.shutdown(wait=wait)
