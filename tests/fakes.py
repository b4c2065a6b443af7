from typing import Dict, List, Optional, Tuple

from engine.scheduler.ports import HostAction


class FakeHostScheduler:
    """
    Synchronous HostScheduler for bridge tests.

    - Records every registration and run_in_order() call
    - Runs each task at most once, dependencies first
    """

    def __init__(self):
        self.registered: Dict[str, Tuple[List[str], HostAction]] = {}
        self.sequence_calls: List[List[str]] = []
        self._results: Dict[str, Optional[BaseException]] = {}

    def register_task(self, name, dependencies, action) -> None:
        self.registered[name] = (list(dependencies), action)

    def run_in_order(self, names, callback) -> None:
        self.sequence_calls.append(list(names))
        for name in names:
            error = self.run(name)
            if error is not None:
                callback(error)
                return
        callback(None)

    def run(self, name: str) -> Optional[BaseException]:
        if name in self._results:
            return self._results[name]

        dependencies, action = self.registered[name]
        for dependency in dependencies:
            error = self.run(dependency)
            if error is not None:
                self._results[name] = error
                return error

        outcome: List[Optional[BaseException]] = []
        action(lambda error=None: outcome.append(error))
        self._results[name] = outcome[0]
        return outcome[0]

    def start(self, names) -> None:
        for name in names:
            error = self.run(name)
            if error is not None:
                raise error


def recorder(order: List[str], name: str, error: Optional[BaseException] = None):
    """Plain task action that appends its name to order, then optionally raises."""

    def action():
        order.append(name)
        if error is not None:
            raise error

    action.__name__ = name
    return action
