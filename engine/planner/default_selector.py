from typing import List

from engine.scheduler.dag import CompiledGraph, TaskDescriptor
from engine.planner.exceptions import DuplicateTaskError
from engine.utils import get_logger

log = get_logger("planner.default")


def select_default(graph: CompiledGraph, default_name: str = "default") -> CompiledGraph:
    """
    Resolve what runs when no task is named.

    - no task flagged is_default: a task literally called default_name,
      if any, otherwise no entry
    - one flagged task: that task
    - several flagged tasks: a synthetic task named default_name whose
      sequence is the flagged tasks, highest priority first, ties by name

    Raises:
        DuplicateTaskError if the synthetic name is already taken
    """

    candidates = default_candidates(graph)

    if not candidates:
        if default_name in graph:
            return graph.with_default(graph.node(default_name).descriptor)
        log.debug("No default task defined")
        return graph

    if len(candidates) == 1:
        return graph.with_default(candidates[0])

    if default_name in graph:
        raise DuplicateTaskError(default_name)

    order = [c.name for c in candidates]
    log.debug(f"Default task runs in sequence: {', '.join(order)}")

    entry = TaskDescriptor(
        name=default_name,
        action=_run_nothing,
        sequence=tuple(order),
        description="Runs " + ", ".join(order),
    )
    return graph.with_default(entry, synthetic=True)


def default_candidates(graph: CompiledGraph) -> List[TaskDescriptor]:
    flagged = [node.descriptor for node in graph.iter_nodes() if node.descriptor.is_default]
    return sorted(flagged, key=lambda d: (-d.priority, d.name))


def _run_nothing() -> None:
    pass
