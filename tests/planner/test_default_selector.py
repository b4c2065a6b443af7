import pytest

from engine.planner.default_selector import default_candidates, select_default
from engine.planner.exceptions import DuplicateTaskError
from engine.planner.graph_compiler import compile_graph
from engine.scheduler.dag import TaskDescriptor


def _noop():
    pass


def _graph(*descriptors):
    return compile_graph({d.name: d for d in descriptors})


def _flagged(name, priority=0):
    return TaskDescriptor(name=name, action=_noop, priority=priority, is_default=True)


def test_multiple_defaults_compose_by_priority_then_name():
    graph = select_default(_graph(_flagged("a", 5), _flagged("c", 10), _flagged("b", 10)))

    entry = graph.default_entry
    assert graph.default_is_synthetic is True
    assert entry.name == "default"
    assert entry.sequence == ("b", "c", "a")
    assert entry.dependencies == ()


def test_single_default_is_the_entry_itself():
    build = _flagged("build")
    graph = select_default(_graph(build, TaskDescriptor(name="lint", action=_noop)))

    assert graph.default_entry is build
    assert graph.default_is_synthetic is False


def test_no_default_produces_no_entry():
    graph = select_default(_graph(TaskDescriptor(name="lint", action=_noop)))

    assert graph.default_entry is None


def test_task_named_default_is_used_when_nothing_is_flagged():
    default = TaskDescriptor(name="default", action=_noop, dependencies=("lint",))
    graph = select_default(_graph(default, TaskDescriptor(name="lint", action=_noop)))

    assert graph.default_entry is default
    assert graph.default_is_synthetic is False


def test_synthetic_name_must_be_free():
    with pytest.raises(DuplicateTaskError) as exc_info:
        select_default(_graph(
            _flagged("a"), _flagged("b"),
            TaskDescriptor(name="default", action=_noop),
        ))

    assert exc_info.value.name == "default"


def test_custom_default_name():
    graph = select_default(_graph(_flagged("a"), _flagged("b")), default_name="all")

    assert graph.default_entry.name == "all"


def test_synthetic_entry_is_iterated_last():
    graph = select_default(_graph(_flagged("a", 1), _flagged("b", 2)))

    names = [node.name for node in graph.iter_nodes()]

    assert names == ["a", "b", "default"]
    assert [d.name for d in default_candidates(graph)] == ["b", "a"]
