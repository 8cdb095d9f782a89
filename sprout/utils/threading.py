"""Threading utilities for sizing worker pools."""

import os
import sys
from typing import Optional


def is_free_threading_enabled() -> bool:
    """Detect if Python is running with free-threading enabled.

    Returns:
        True if running on Python 3.13+ with the GIL disabled
    """
    # sys._is_gil_enabled() only exists on Python 3.13+
    is_gil_enabled = getattr(sys, "_is_gil_enabled", None)
    return is_gil_enabled is not None and not is_gil_enabled()


def get_optimal_worker_count(user_specified: Optional[int] = None, task_count: Optional[int] = None) -> int:
    """Calculate a worker count for I/O-bound git subprocess calls.

    Args:
        user_specified: Explicit worker count, used as-is when positive
        task_count: Number of tasks; the pool never exceeds it

    Returns:
        Number of workers to use
    """
    if user_specified is not None and user_specified > 0:
        return user_specified

    cpu_count = os.cpu_count() or 1

    if is_free_threading_enabled():
        workers = min(64, cpu_count * 2)
    else:
        # CPU_count + 4 is a good heuristic for I/O-bound work
        workers = min(32, cpu_count + 4)

    if task_count is not None:
        workers = max(1, min(workers, task_count))
    return workers
