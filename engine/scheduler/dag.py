from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple

from engine.planner.exceptions import InvalidTaskDeclarationError, MissingActionError

TaskAction = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class TaskDescriptor:
    """
    Immutable task descriptor.

    Describes WHAT the task is and what must run before it.
    Does NOT describe HOW it runs.
    Must NEVER be mutated once registered.
    """

    name: str
    action: TaskAction
    dependencies: Tuple[str, ...] = ()
    sequence: Tuple[str, ...] = ()
    description: str = ""
    options: Mapping[str, str] = field(default_factory=dict)
    priority: int = 0
    is_default: bool = False

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise InvalidTaskDeclarationError(repr(self.name), "name must be a non-empty string")
        if self.action is None:
            raise MissingActionError(self.name)

        object.__setattr__(self, "dependencies", _ordered_unique(self.dependencies))
        object.__setattr__(self, "sequence", _ordered_unique(self.sequence))
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))


@dataclass(frozen=True, slots=True)
class CompiledNode:
    """
    One task after compilation.

    parallel: prerequisites with no ordering among themselves.
    sequence: prerequisites that run strictly in the given order.
    """

    descriptor: TaskDescriptor
    parallel: Tuple[str, ...]
    sequence: Tuple[str, ...]

    @property
    def name(self) -> str:
        return self.descriptor.name

    def edges(self) -> Tuple[str, ...]:
        """All must-run-before names, dependencies first."""
        return self.parallel + self.sequence


@dataclass(frozen=True, slots=True)
class CompiledGraph:
    """
    Derived execution graph. Runtime-only, never persisted.
    """

    nodes: Mapping[str, CompiledNode]
    default_entry: Optional[TaskDescriptor] = None
    default_is_synthetic: bool = False

    def __contains__(self, name: str) -> bool:
        return name in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def node(self, name: str) -> CompiledNode:
        return self.nodes[name]

    def iter_nodes(self) -> Iterator[CompiledNode]:
        """
        Nodes in name order, followed by the synthetic default entry if any.
        """
        for name in sorted(self.nodes):
            yield self.nodes[name]

        if self.default_is_synthetic and self.default_entry is not None:
            entry = self.default_entry
            yield CompiledNode(descriptor=entry, parallel=(), sequence=entry.sequence)

    def with_default(self, entry: Optional[TaskDescriptor], synthetic: bool = False) -> "CompiledGraph":
        return replace(self, default_entry=entry, default_is_synthetic=synthetic)


def _ordered_unique(names) -> Tuple[str, ...]:
    if isinstance(names, str):
        names = (names,)

    seen: Dict[str, None] = {}
    for name in names:
        seen.setdefault(name, None)
    return tuple(seen)
