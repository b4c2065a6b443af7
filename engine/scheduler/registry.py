from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping

from engine.planner.exceptions import (
    DuplicateTaskError,
    RegistryFrozenError,
    UnknownTaskError,
)
from engine.scheduler.dag import TaskDescriptor
from engine.utils import get_logger

log = get_logger("registry")


class TaskRegistry:
    """
    Name -> TaskDescriptor mapping.

    Single source of truth for:
    - which tasks exist
    - what each task declared

    Append-only while loading, read-only once frozen.
    Entries are never removed.
    """

    __slots__ = ("_tasks", "_frozen")

    def __init__(self):
        self._tasks: dict[str, TaskDescriptor] = {}
        self._frozen: bool = False

    def register(self, descriptor: TaskDescriptor) -> None:
        if self._frozen:
            raise RegistryFrozenError(descriptor.name)
        if descriptor.name in self._tasks:
            raise DuplicateTaskError(descriptor.name)

        self._tasks[descriptor.name] = descriptor
        log.debug(f"Registered task '{descriptor.name}'")

    def register_all(self, descriptors: Iterable[TaskDescriptor]) -> None:
        for descriptor in descriptors:
            self.register(descriptor)

    def lookup(self, name: str) -> TaskDescriptor:
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTaskError(name) from None

    def freeze(self) -> None:
        if not self._frozen:
            log.debug(f"Registry frozen with {len(self._tasks)} task(s)")
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def snapshot(self) -> Mapping[str, TaskDescriptor]:
        """Read-only view for the pure compile/help functions."""
        return MappingProxyType(self._tasks)

    def names(self) -> List[str]:
        return list(self._tasks)

    def __contains__(self, name: str) -> bool:
        return name in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[TaskDescriptor]:
        return iter(list(self._tasks.values()))
