import pytest

from engine.planner.exceptions import (
    DuplicateTaskError,
    InvalidTaskDeclarationError,
    MissingActionError,
    RegistryFrozenError,
    UnknownTaskError,
)
from engine.scheduler.dag import TaskDescriptor
from engine.scheduler.registry import TaskRegistry


def _first():
    pass


def _second():
    pass


def test_register_and_lookup():
    registry = TaskRegistry()
    build = TaskDescriptor(name="build", action=_first)

    registry.register(build)

    assert registry.lookup("build") is build
    assert "build" in registry
    assert len(registry) == 1


def test_duplicate_keeps_the_first_registration():
    registry = TaskRegistry()
    registry.register(TaskDescriptor(name="build", action=_first))

    with pytest.raises(DuplicateTaskError) as exc_info:
        registry.register(TaskDescriptor(name="build", action=_second))

    assert exc_info.value.name == "build"
    assert registry.lookup("build").action is _first
    assert len(registry) == 1


def test_register_all_stops_at_first_error():
    registry = TaskRegistry()

    with pytest.raises(DuplicateTaskError):
        registry.register_all([
            TaskDescriptor(name="a", action=_first),
            TaskDescriptor(name="a", action=_second),
            TaskDescriptor(name="b", action=_first),
        ])

    assert registry.names() == ["a"]


def test_unknown_lookup():
    with pytest.raises(UnknownTaskError) as exc_info:
        TaskRegistry().lookup("missing")

    assert exc_info.value.name == "missing"


def test_frozen_registry_refuses_registration():
    registry = TaskRegistry()
    registry.register(TaskDescriptor(name="a", action=_first))
    registry.freeze()
    registry.freeze()

    with pytest.raises(RegistryFrozenError) as exc_info:
        registry.register(TaskDescriptor(name="b", action=_first))

    assert registry.frozen is True
    assert exc_info.value.name == "b"
    assert "b" not in registry


def test_snapshot_is_read_only():
    registry = TaskRegistry()
    registry.register(TaskDescriptor(name="a", action=_first))

    snapshot = registry.snapshot()

    with pytest.raises(TypeError):
        snapshot["b"] = TaskDescriptor(name="b", action=_first)


def test_iteration_follows_registration_order():
    registry = TaskRegistry()
    for name in ["zeta", "alpha", "mid"]:
        registry.register(TaskDescriptor(name=name, action=_first))

    assert [d.name for d in registry] == ["zeta", "alpha", "mid"]


def test_descriptor_requires_name_and_action():
    with pytest.raises(MissingActionError):
        TaskDescriptor(name="a", action=None)

    with pytest.raises(InvalidTaskDeclarationError):
        TaskDescriptor(name="", action=_first)


def test_descriptor_is_immutable():
    descriptor = TaskDescriptor(name="a", action=_first)

    with pytest.raises(AttributeError):
        descriptor.name = "b"
