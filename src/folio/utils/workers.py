"""Worker-count selection for parallel page builds.

Page builds mix file reads, CPU-bound parsing and file writes. Under the
GIL the CPU-bound part does not scale, so the pool stays small; on a
free-threaded interpreter (PEP 703) it can grow with the core count.

Example:
    >>> workers = get_optimal_workers(len(pages))
    >>> with ThreadPoolExecutor(max_workers=workers) as executor:
    ...     results = list(executor.map(build_page, pages))

"""

from __future__ import annotations

import os
import sys
from enum import Enum

# Below this many pages the pool costs more than it saves.
_PARALLEL_THRESHOLD = 4


class WorkloadType(Enum):
    """What a batch of tasks mostly spends its time on."""

    RENDER = "render"
    IO = "io"


def is_free_threading_enabled() -> bool:
    """Return True when running on a free-threaded build with the GIL off."""
    check = getattr(sys, "_is_gil_enabled", None)
    if check is None:
        return False
    return not check()


def should_parallelize(task_count: int, workload_type: WorkloadType = WorkloadType.RENDER) -> bool:
    if workload_type is WorkloadType.IO:
        return task_count > 1
    return task_count >= _PARALLEL_THRESHOLD


def get_optimal_workers(
    task_count: int,
    max_workers: int | None = None,
    workload_type: WorkloadType = WorkloadType.RENDER,
) -> int:
    """Pick a thread-pool size for ``task_count`` tasks.

    Args:
        task_count: Number of tasks to run.
        max_workers: Explicit upper bound (e.g. from ``--workers``).
        workload_type: Dominant cost of each task.

    Returns:
        At least 1 and never more than ``task_count`` or ``max_workers``.
    """
    if task_count <= 1:
        return 1
    if max_workers is not None:
        return max(1, min(max_workers, task_count))
    if not should_parallelize(task_count, workload_type):
        return 1

    cpus = os.cpu_count() or 1
    if workload_type is WorkloadType.IO:
        workers = cpus * 4
    elif is_free_threading_enabled():
        workers = cpus
    else:
        workers = min(4, cpus)
    return max(1, min(workers, task_count))
