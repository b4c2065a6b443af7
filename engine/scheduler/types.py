from enum import Enum


class TaskState(str, Enum):
    """
    Finite-state machine for one task run on the local scheduler.
    Runtime-only. Never persisted.
    """

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    DONE = "DONE"
    FAILED = "FAILED"
    BLOCKED = "BLOCKED"

    @property
    def finished(self) -> bool:
        return self in (TaskState.DONE, TaskState.FAILED, TaskState.BLOCKED)
