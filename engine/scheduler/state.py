import threading
from typing import Optional
from .types import TaskState


class NonPersistent:
    """
    Marker mixin.
    Any subclass must NEVER be persisted or serialized.
    """
    __persistent__ = False


class TaskRuntimeState(NonPersistent):
    """
    Scheduler-owned state of one task run.

    Represents HOW a task is progressing.
    Exists only in memory, for the lifetime of one scheduler.
    """

    __slots__ = (
        "task_name",
        "state",
        "error",
        "_finished",
    )

    def __init__(self, task_name: str):
        self.task_name: str = task_name
        self.state: TaskState = TaskState.PENDING
        self.error: Optional[BaseException] = None
        self._finished = threading.Event()

    def finish(self, state: TaskState, error: Optional[BaseException] = None) -> None:
        self.state = state
        self.error = error
        self._finished.set()

    def wait(self) -> Optional[BaseException]:
        """Block until the run finished; returns its error, if any."""
        self._finished.wait()
        return self.error
