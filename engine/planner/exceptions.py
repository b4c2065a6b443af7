# engine/planner/exceptions.py

from typing import Sequence


class TaskConfigError(Exception):
    """Base class for load-phase (configuration) errors"""


class DuplicateTaskError(TaskConfigError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Task '{name}' is already registered")


class UnknownTaskError(TaskConfigError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Task '{name}' is not registered")


class UnknownDependencyError(TaskConfigError):
    """
    Raised when a task references a name that is not in the registry.

    edge_kind is "dep" for a dependency edge, "seq" for a sequence edge.
    """

    def __init__(self, task: str, missing: str, edge_kind: str = "dep"):
        self.task = task
        self.missing = missing
        self.edge_kind = edge_kind
        super().__init__(
            f"Task '{task}' references unknown task '{missing}' (in {edge_kind})"
        )


class CyclicDependencyError(TaskConfigError):
    def __init__(self, path: Sequence[str]):
        self.path = list(path)
        super().__init__("Cyclic dependency: " + " -> ".join(self.path))


class MissingActionError(TaskConfigError):
    def __init__(self, task: str):
        self.task = task
        super().__init__(f"Task '{task}' has no action (fn)")


class RegistryFrozenError(TaskConfigError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cannot register '{name}': registry is frozen")


class InvalidTaskDeclarationError(TaskConfigError):
    def __init__(self, task: str, reason: str):
        self.task = task
        self.reason = reason
        super().__init__(f"Invalid declaration for task '{task}': {reason}")


class TaskModuleLoadError(TaskConfigError):
    def __init__(self, module: str, reason: str):
        self.module = module
        self.reason = reason
        super().__init__(f"Failed to load task module '{module}': {reason}")


class NoDefaultTaskError(TaskConfigError):
    def __init__(self):
        super().__init__(
            "No task given and no default task is defined "
            "(mark a task with isDefault or name one 'default')"
        )
