# engine/reporting/help_writer.py

"""
Help listing.

Read-only projection of registered descriptors. Does not need a compiled
graph and never touches the registry's state.
"""

from typing import Iterable, List

from engine.scheduler.dag import TaskDescriptor

DEFAULT_USAGE = "taskloom [TASK ...] [--tasks-dir DIR] [--dry-run]"
SEPARATOR = " "


def render_help(
    tasks: Iterable[TaskDescriptor],
    *,
    usage: str = DEFAULT_USAGE,
    margin: int = 2,
    name_width: int = 20,
) -> str:
    """
    Column-aligned task listing, sorted by name.

    Options are not shown here; see render_task_detail().
    """
    pad = " " * margin

    lines = ["Usage", pad + usage, "", "Tasks"]
    for descriptor in sorted(tasks, key=lambda d: d.name):
        lines.append(_row(pad, descriptor.name, descriptor.description, name_width))

    return "\n".join(lines) + "\n"


def render_task_detail(
    descriptor: TaskDescriptor,
    *,
    margin: int = 2,
    name_width: int = 20,
) -> str:
    pad = " " * margin

    lines = ["Task", _row(pad, descriptor.name, descriptor.description, name_width)]

    if descriptor.options:
        lines += ["", "Options"]
        for flag, explanation in descriptor.options.items():
            lines.append(_row(pad, flag, explanation, name_width))

    if descriptor.dependencies:
        lines += ["", "Dependencies", pad + ", ".join(descriptor.dependencies)]

    if descriptor.sequence:
        lines += ["", "Sequence", pad + " -> ".join(descriptor.sequence)]

    return "\n".join(lines) + "\n"


def _row(pad: str, left: str, right: str, width: int) -> str:
    return (pad + left.ljust(width) + SEPARATOR + right).rstrip()


def task_names(tasks: Iterable[TaskDescriptor]) -> List[str]:
    return sorted(d.name for d in tasks)
