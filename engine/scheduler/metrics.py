import threading
import time
from collections import defaultdict
from typing import Dict


class SchedulerMetrics:
    """
    Scheduler-owned run metrics.

    Used for:
    - the timing summary printed after a run
    - tests asserting what actually executed
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.counters: Dict[str, int] = defaultdict(int)
        self.durations: Dict[str, float] = {}
        self._started: Dict[str, float] = {}

    # ---- per-task timing ----
    def task_started(self, task_name: str) -> None:
        with self._lock:
            self._started[task_name] = time.monotonic()
            self.counters["tasks_started"] += 1

    def task_finished(self, task_name: str, success: bool) -> float:
        with self._lock:
            start = self._started.pop(task_name, None)
            elapsed = 0.0 if start is None else time.monotonic() - start
            self.durations[task_name] = elapsed
            self.counters["tasks_succeeded" if success else "tasks_failed"] += 1
            return elapsed
