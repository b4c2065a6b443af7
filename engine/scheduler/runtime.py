# engine/scheduler/runtime.py

"""
Process-wide runtime lifecycle.

This module owns the singleton TaskRegistry and LocalScheduler.
The registry lives as long as the process.
"""

from typing import Optional

from engine.scheduler.local import LocalScheduler
from engine.scheduler.metrics import SchedulerMetrics
from engine.scheduler.registry import TaskRegistry


# Internal singletons
_REGISTRY: Optional[TaskRegistry] = None
_SCHEDULER: Optional[LocalScheduler] = None


def init_runtime(*, max_workers: int) -> LocalScheduler:
    """
    Initialize the global registry and scheduler.

    Must be called exactly once at process startup.
    """

    global _REGISTRY, _SCHEDULER

    if _SCHEDULER is not None:
        raise RuntimeError("Runtime already initialized")

    _REGISTRY = TaskRegistry()
    _SCHEDULER = LocalScheduler(
        max_workers=max_workers,
        metrics=SchedulerMetrics(),
    )

    return _SCHEDULER


def get_registry() -> TaskRegistry:
    """
    Retrieve the process-wide registry.

    Raises:
        RuntimeError if the runtime was not initialized.
    """
    if _REGISTRY is None:
        raise RuntimeError(
            "Runtime not initialized. "
            "Call init_runtime() at process startup."
        )

    return _REGISTRY


def get_scheduler() -> LocalScheduler:
    """
    Retrieve the process-wide scheduler.

    Raises:
        RuntimeError if the runtime was not initialized.
    """
    if _SCHEDULER is None:
        raise RuntimeError(
            "Runtime not initialized. "
            "Call init_runtime() at process startup."
        )

    return _SCHEDULER
