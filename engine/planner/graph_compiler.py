from typing import Dict, Iterable, List, Mapping, Sequence

from engine.scheduler.dag import CompiledGraph, CompiledNode, TaskDescriptor
from engine.planner.exceptions import (
    CyclicDependencyError,
    UnknownDependencyError,
    UnknownTaskError,
)
from engine.utils import get_logger

log = get_logger("planner.graph")

# DFS colours
_UNVISITED = 0
_IN_PROGRESS = 1
_DONE = 2

# -------------------------
# PUBLIC ENTRYPOINT
# -------------------------

def compile_graph(tasks: Mapping[str, TaskDescriptor]) -> CompiledGraph:
    """
    Validate descriptors and build the execution graph.

    Pure function: takes a registry snapshot, never talks to a scheduler.

    Raises:
        UnknownDependencyError
        CyclicDependencyError
    """

    _validate_references(tasks)

    nodes = {name: _compile_node(tasks[name]) for name in sorted(tasks)}

    _detect_cycles(nodes)

    log.debug(f"Compiled graph with {len(nodes)} task(s)")
    return CompiledGraph(nodes=nodes)


def plan_order(graph: CompiledGraph, names: Sequence[str]) -> List[str]:
    """
    Deterministic linear order of every task the named tasks would execute.

    Dependencies come first, then the sequence chain, then the task itself.
    Each task appears once.

    Raises:
        UnknownTaskError
    """
    order: List[str] = []
    seen = set()

    for name in names:
        entry = _entry_node(graph, name)
        if entry.name in seen:
            continue

        seen.add(entry.name)
        stack = [(entry.name, iter(entry.edges()))]

        while stack:
            current, edges = stack[-1]
            child = next(edges, None)

            if child is None:
                stack.pop()
                order.append(current)
                continue

            if child not in seen:
                seen.add(child)
                stack.append((child, iter(graph.node(child).edges())))

    return order

# -------------------------
# VALIDATION
# -------------------------

def _validate_references(tasks: Mapping[str, TaskDescriptor]) -> None:
    for name in sorted(tasks):
        descriptor = tasks[name]

        for missing in _unknown(descriptor.dependencies, tasks):
            raise UnknownDependencyError(name, missing, "dep")

        for missing in _unknown(descriptor.sequence, tasks):
            raise UnknownDependencyError(name, missing, "seq")


def _unknown(names: Iterable[str], tasks: Mapping[str, TaskDescriptor]) -> Iterable[str]:
    return (n for n in names if n not in tasks)


def _compile_node(descriptor: TaskDescriptor) -> CompiledNode:
    # strict order wins for names declared in both
    in_sequence = set(descriptor.sequence)
    parallel = tuple(n for n in descriptor.dependencies if n not in in_sequence)

    return CompiledNode(
        descriptor=descriptor,
        parallel=parallel,
        sequence=descriptor.sequence,
    )

# -------------------------
# CYCLE DETECTION
# -------------------------

def _detect_cycles(nodes: Mapping[str, CompiledNode]) -> None:
    colour: Dict[str, int] = {name: _UNVISITED for name in nodes}

    for root in nodes:
        if colour[root] != _UNVISITED:
            continue

        path: List[str] = [root]
        stack = [iter(nodes[root].edges())]
        colour[root] = _IN_PROGRESS

        while stack:
            child = next(stack[-1], None)

            if child is None:
                stack.pop()
                colour[path.pop()] = _DONE
                continue

            if colour[child] == _IN_PROGRESS:
                cycle_start = path.index(child)
                raise CyclicDependencyError(path[cycle_start:] + [child])

            if colour[child] == _UNVISITED:
                colour[child] = _IN_PROGRESS
                path.append(child)
                stack.append(iter(nodes[child].edges()))


def _entry_node(graph: CompiledGraph, name: str) -> CompiledNode:
    if name in graph:
        return graph.node(name)

    entry = graph.default_entry
    if graph.default_is_synthetic and entry is not None and entry.name == name:
        return CompiledNode(descriptor=entry, parallel=(), sequence=entry.sequence)

    raise UnknownTaskError(name)
