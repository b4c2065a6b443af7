# engine/dispatch/bridge.py

"""
Execution bridge: compiled graph -> host scheduler.

Responsibilities:
- Register exactly ONE unit of work per task
- Pass parallel dependencies as native prerequisites
- Wrap sequenced tasks so their chain runs strictly in order first
- Forward sequence failures untouched

Never executes, never retries, never re-validates the DAG shape.
"""

from typing import List, Optional

from engine.dispatch.adapter import as_host_action
from engine.planner.exceptions import UnknownDependencyError
from engine.scheduler.dag import CompiledGraph, CompiledNode
from engine.scheduler.ports import Completion, HostAction, HostScheduler
from engine.utils import get_logger

log = get_logger("dispatch.bridge")


class ExecutionBridge:
    """
    Stateless bridge.

    Compiler output goes in, host registrations come out.
    """

    def __init__(self, scheduler: HostScheduler):
        if scheduler is None:
            raise ValueError("scheduler must not be None")

        self._scheduler = scheduler

    # -------------------------
    # PUBLIC ENTRYPOINT
    # -------------------------

    def register(self, graph: CompiledGraph) -> List[str]:
        """
        Register every compiled task with the host scheduler.

        The whole graph is checked before the first registration,
        so a bad graph registers nothing.

        Returns:
            Registered task names, in registration order
        """
        nodes = list(graph.iter_nodes())
        self._check_complete(nodes)

        registered = []
        for node in nodes:
            self._scheduler.register_task(
                node.name,
                list(node.parallel),
                self._host_action(node),
            )
            registered.append(node.name)

        log.debug(f"Registered {len(registered)} task(s) with host scheduler")
        return registered

    # -------------------------
    # INTERNAL HELPERS
    # -------------------------

    def _host_action(self, node: CompiledNode) -> HostAction:
        action = as_host_action(node.descriptor.action)

        if not node.sequence:
            return action

        return self._sequenced(node.name, list(node.sequence), action)

    def _sequenced(self, name: str, sequence: List[str], action: HostAction) -> HostAction:
        scheduler = self._scheduler

        def run_sequence_then_action(done: Completion) -> None:
            def after_sequence(error: Optional[BaseException]) -> None:
                if error is not None:
                    log.debug(f"'{name}' skipped: its sequence failed")
                    done(error)
                    return
                action(done)

            scheduler.run_in_order(sequence, after_sequence)

        run_sequence_then_action.__name__ = f"sequence[{name}]"
        return run_sequence_then_action

    def _check_complete(self, nodes: List[CompiledNode]) -> None:
        known = {node.name for node in nodes}

        for node in nodes:
            for edge in node.edges():
                if edge not in known:
                    kind = "seq" if edge in node.sequence else "dep"
                    raise UnknownDependencyError(node.name, edge, kind)
