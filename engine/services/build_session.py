# engine/services/build_session.py

"""
Build session service.

This module is the ONLY entry point the CLI uses to get from
task modules to executed tasks.

Lifecycle:
- load: normalize declarations, register descriptors
- compile: freeze registry, compile graph, select default,
  register everything with the host scheduler
- run: hand the requested tasks to the host scheduler

Load-phase errors propagate unchanged; nothing reaches the host
scheduler until the whole graph has compiled.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from engine.dispatch.bridge import ExecutionBridge
from engine.planner.default_selector import select_default
from engine.planner.exceptions import NoDefaultTaskError
from engine.planner.graph_compiler import compile_graph, plan_order
from engine.planner.normalizer import Declaration, normalize
from engine.reporting.help_writer import DEFAULT_USAGE, render_help, render_task_detail
from engine.scheduler.dag import CompiledGraph
from engine.scheduler.ports import RunnableScheduler
from engine.scheduler.registry import TaskRegistry
from engine.services.task_loader import load_task_declarations
from engine.utils import get_logger

log = get_logger("session")


class BuildSession:
    """
    One load -> compile -> run pass over a registry.
    """

    def __init__(
        self,
        scheduler: RunnableScheduler,
        registry: Optional[TaskRegistry] = None,
        *,
        default_name: str = "default",
    ):
        if scheduler is None:
            raise ValueError("scheduler must not be None")

        self._scheduler = scheduler
        self._registry = registry if registry is not None else TaskRegistry()
        self._bridge = ExecutionBridge(scheduler)
        self._default_name = default_name
        self._graph: Optional[CompiledGraph] = None

    @property
    def registry(self) -> TaskRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # LOAD PHASE
    # ------------------------------------------------------------------

    def add(self, declaration: Declaration) -> List[str]:
        """
        Normalize one declaration and register its tasks.

        Returns:
            Names of the registered tasks
        """
        descriptors = normalize(declaration)
        self._registry.register_all(descriptors)
        return [d.name for d in descriptors]

    def add_all(self, declarations: Iterable[Declaration]) -> List[str]:
        names: List[str] = []
        for declaration in declarations:
            names.extend(self.add(declaration))
        return names

    def load_directory(self, tasks_dir: Union[str, Path]) -> List[str]:
        declarations = load_task_declarations(tasks_dir, scheduler=self._scheduler)
        names = self.add_all(declarations)
        log.info(f"Loaded {len(names)} task(s) from {tasks_dir}")
        return names

    # ------------------------------------------------------------------
    # COMPILE
    # ------------------------------------------------------------------

    def compile(self) -> CompiledGraph:
        """
        Freeze the registry and hand the compiled graph to the host.

        Idempotent: the graph is compiled and registered once.

        Raises:
            UnknownDependencyError
            CyclicDependencyError
            DuplicateTaskError (synthetic default name taken)
        """
        if self._graph is not None:
            return self._graph

        self._registry.freeze()

        graph = compile_graph(self._registry.snapshot())
        graph = select_default(graph, self._default_name)

        self._bridge.register(graph)
        self._graph = graph
        return graph

    # ------------------------------------------------------------------
    # RUN PHASE
    # ------------------------------------------------------------------

    def resolve_targets(self, names: Sequence[str]) -> List[str]:
        """
        Raises:
            NoDefaultTaskError when no name is given and no default exists
            UnknownTaskError for a name that is not registered
        """
        graph = self.compile()

        if not names:
            if graph.default_entry is None:
                raise NoDefaultTaskError()
            return [graph.default_entry.name]

        for name in names:
            if not self._is_synthetic_default(graph, name):
                self._registry.lookup(name)

        return list(names)

    def run(self, names: Sequence[str] = ()) -> List[str]:
        """
        Execute the named tasks (or the default entry).

        Returns:
            The task names handed to the scheduler
        """
        targets = self.resolve_targets(names)
        log.info(f"Running: {', '.join(targets)}")
        self._scheduler.start(targets)
        return targets

    def plan(self, names: Sequence[str] = ()) -> List[str]:
        targets = self.resolve_targets(names)
        return plan_order(self.compile(), targets)

    # ------------------------------------------------------------------
    # HELP
    # ------------------------------------------------------------------

    def help_text(self, *, usage: str = DEFAULT_USAGE, margin: int = 2, name_width: int = 20) -> str:
        return render_help(self._registry, usage=usage, margin=margin, name_width=name_width)

    def task_detail(self, name: str, *, margin: int = 2, name_width: int = 20) -> str:
        return render_task_detail(
            self._registry.lookup(name), margin=margin, name_width=name_width
        )

    @staticmethod
    def _is_synthetic_default(graph: CompiledGraph, name: str) -> bool:
        entry = graph.default_entry
        return graph.default_is_synthetic and entry is not None and entry.name == name
