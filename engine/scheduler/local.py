# engine/scheduler/local.py

"""
In-process host scheduler.

Responsibilities:
- Run each registered task at most once
- Start native dependencies concurrently, await them before the action
- Drive run_in_order() chains one task at a time
- Record timings

It knows nothing about descriptors, sequences or defaults.
The execution bridge composes those into plain host actions.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from engine.scheduler.metrics import SchedulerMetrics
from engine.scheduler.ports import HostAction, SequenceCallback
from engine.scheduler.state import TaskRuntimeState
from engine.scheduler.types import TaskState
from engine.utils import format_duration, get_logger

log = get_logger("scheduler")


class TaskExecutionError(Exception):
    """Raised by start() when a requested task did not complete."""

    def __init__(self, task: str, cause: BaseException):
        self.task = task
        self.cause = cause
        super().__init__(f"Task '{task}' failed: {cause}")


@dataclass(frozen=True, slots=True)
class _RegisteredTask:
    name: str
    dependencies: Tuple[str, ...]
    action: HostAction


class LocalScheduler:
    """
    Thread-per-task scheduler.

    max_workers bounds how many actions execute at once.
    Waiting on other tasks never holds a worker slot.
    """

    def __init__(self, max_workers: int = 8, metrics: Optional[SchedulerMetrics] = None):
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")

        self.metrics = metrics or SchedulerMetrics()
        self._tasks: Dict[str, _RegisteredTask] = {}
        self._runs: Dict[str, TaskRuntimeState] = {}
        self._lock = threading.Lock()
        self._slots = threading.BoundedSemaphore(max_workers)
        self._local = threading.local()

    # -------------------------
    # HOST SCHEDULER PORT
    # -------------------------

    def register_task(self, name: str, dependencies: Sequence[str], action: HostAction) -> None:
        with self._lock:
            if name in self._tasks:
                raise RuntimeError(f"Task already registered with scheduler: {name}")
            self._tasks[name] = _RegisteredTask(name, tuple(dependencies), action)

    def run_in_order(self, names: Sequence[str], callback: SequenceCallback) -> None:
        error: Optional[BaseException] = None

        with self._slot_released():
            for name in names:
                error = self._ensure_started(name).wait()
                if error is not None:
                    log.debug(f"Sequence stopped at '{name}'")
                    break

        callback(error)

    # -------------------------
    # PUBLIC ENTRYPOINT
    # -------------------------

    def start(self, names: Sequence[str]) -> None:
        """
        Run the named tasks concurrently and wait for all of them.

        Raises:
            TaskExecutionError for the first failed task, in request order.
        """
        runs = [self._ensure_started(name) for name in names]
        outcomes = [(run.task_name, run.wait()) for run in runs]

        for name, error in outcomes:
            if error is not None:
                raise TaskExecutionError(name, error) from error

    def state_of(self, name: str) -> Optional[TaskState]:
        run = self._runs.get(name)
        return None if run is None else run.state

    # -------------------------
    # INTERNAL EXECUTION
    # -------------------------

    def _ensure_started(self, name: str) -> TaskRuntimeState:
        with self._lock:
            run = self._runs.get(name)
            if run is not None:
                return run

            task = self._tasks.get(name)
            if task is None:
                raise LookupError(f"Task not registered with scheduler: {name}")

            run = TaskRuntimeState(name)
            self._runs[name] = run

        thread = threading.Thread(
            target=self._execute,
            args=(task, run),
            name=f"task-{name}",
            daemon=True,
        )
        thread.start()
        return run

    def _execute(self, task: _RegisteredTask, run: TaskRuntimeState) -> None:
        try:
            dependency_runs = [self._ensure_started(dep) for dep in task.dependencies]

            for dependency in dependency_runs:
                error = dependency.wait()
                if error is not None:
                    log.warning(
                        f"'{task.name}' blocked: dependency '{dependency.task_name}' failed"
                    )
                    run.finish(TaskState.BLOCKED, error)
                    return

            error = self._invoke(task, run)

        except BaseException as exc:
            log.error(f"'{task.name}' could not run: {exc}")
            run.finish(TaskState.FAILED, exc)
            return

        if error is None:
            run.finish(TaskState.DONE)
        else:
            run.finish(TaskState.FAILED, error)

    def _invoke(self, task: _RegisteredTask, run: TaskRuntimeState) -> Optional[BaseException]:
        signalled = threading.Event()
        outcome: List[Optional[BaseException]] = []

        def done(error: Optional[BaseException] = None) -> None:
            with self._lock:
                if signalled.is_set():
                    log.warning(f"'{task.name}' signalled completion more than once")
                    return
                outcome.append(_as_exception(error))
                signalled.set()

        self._acquire_slot()
        try:
            run.state = TaskState.RUNNING
            self.metrics.task_started(task.name)
            log.info(f"Starting '{task.name}'...")
            try:
                task.action(done)
            except BaseException as exc:
                done(exc)
        finally:
            self._release_slot()

        signalled.wait()
        error = outcome[0]

        elapsed = self.metrics.task_finished(task.name, success=error is None)
        if error is None:
            log.info(f"Finished '{task.name}' after {format_duration(elapsed)}")
        else:
            log.error(f"'{task.name}' errored after {format_duration(elapsed)}: {error}")
        return error

    # -------------------------
    # WORKER SLOTS
    # -------------------------

    def _acquire_slot(self) -> None:
        self._slots.acquire()
        self._local.holding = True

    def _release_slot(self) -> None:
        self._local.holding = False
        self._slots.release()

    @contextmanager
    def _slot_released(self):
        holding = getattr(self._local, "holding", False)
        if holding:
            self._release_slot()
        try:
            yield
        finally:
            if holding:
                self._acquire_slot()


def _as_exception(error) -> Optional[BaseException]:
    if error is None or isinstance(error, BaseException):
        return error
    return RuntimeError(str(error))
