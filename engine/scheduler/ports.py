"""
Host scheduler port.

The compiler hands execution to whatever implements this Protocol.
LocalScheduler is the in-process implementation shipped with the runner.
"""

from typing import Callable, Optional, Protocol, Sequence

Completion = Callable[..., None]
# done() on success, done(error) on failure.

HostAction = Callable[[Completion], None]

SequenceCallback = Callable[[Optional[BaseException]], None]


class HostScheduler(Protocol):
    def register_task(
        self,
        name: str,
        dependencies: Sequence[str],
        action: HostAction,
    ) -> None:
        """
        Register one unit of work.

        dependencies run (possibly concurrently) before action.
        The host runs each task at most once per run.
        """
        ...

    def run_in_order(self, names: Sequence[str], callback: SequenceCallback) -> None:
        """
        Run already-registered tasks strictly one after another.

        callback receives the first failure, or None.
        """
        ...


class RunnableScheduler(HostScheduler, Protocol):
    """A host scheduler that can also be asked to run named tasks."""

    def start(self, names: Sequence[str]) -> None: ...
