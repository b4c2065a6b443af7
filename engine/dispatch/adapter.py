import asyncio
import inspect
from typing import Any, Awaitable

from engine.scheduler.dag import TaskAction
from engine.scheduler.ports import Completion


class ActionAdapter:
    """
    Adapts heterogeneous task action signatures
    to the host scheduler's done-callback form.

    Supported:
    - def build(): ...            completes when it returns
    - def build(done): ...        completes when done() is called
    - async def build(): ...      completes when the coroutine finishes

    A raised exception, SystemExit included, is reported through done(error).
    """

    def __init__(self, action: TaskAction):
        self.action = action
        self.takes_completion = _accepts_completion(action)

    def __call__(self, done: Completion) -> None:
        try:
            if self.takes_completion:
                result = self.action(done)
            else:
                result = self.action()

            if inspect.isawaitable(result):
                asyncio.run(_resolve(result))

        except BaseException as exc:
            done(exc)
            return

        if not self.takes_completion:
            done()


def as_host_action(action: TaskAction) -> ActionAdapter:
    if isinstance(action, ActionAdapter):
        return action
    return ActionAdapter(action)


async def _resolve(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def _accepts_completion(action: TaskAction) -> bool:
    try:
        params = list(inspect.signature(action).parameters.values())
    except (TypeError, ValueError):
        return False

    positional = [
        p for p in params
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]

    if any(p.name == "done" for p in positional):
        return True

    return any(p.default is p.empty for p in positional)
