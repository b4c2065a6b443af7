# engine/planner/normalizer.py

"""
Declaration normalizer.

Task modules declare tasks in one of three shapes:

    1. BareAction          a single callable, named by the caller
    2. ActionMapping       {"name": callable}
    3. DeclarationMapping  {"name": {"fn": callable, "dep": [...], ...}}

classify() turns a raw exported value into one of these variants, once,
at the loader boundary. normalize() turns any variant into canonical
TaskDescriptors. Nothing here registers anything.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from engine.planner.exceptions import InvalidTaskDeclarationError, MissingActionError
from engine.scheduler.dag import TaskAction, TaskDescriptor


class TaskSpec(BaseModel):
    """
    Rich task declaration.

    Accepts the declaration keys used by task modules (dep, seq, isDefault)
    as well as is_default when built from Python.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    fn: Optional[Callable[..., Any]] = None
    dep: List[str] = Field(default_factory=list)
    seq: List[str] = Field(default_factory=list)
    description: str = ""
    options: Dict[str, str] = Field(default_factory=dict)
    priority: int = 0
    is_default: bool = Field(default=False, alias="isDefault")

    @field_validator("dep", "seq", mode="before")
    @classmethod
    def _accept_single_name(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return "" if value is None else value

    @field_validator("options", mode="before")
    @classmethod
    def _none_is_no_options(cls, value):
        return {} if value is None else value


# -------------------------
# DECLARATION VARIANTS
# -------------------------

@dataclass(frozen=True)
class BareAction:
    name: str
    action: TaskAction


@dataclass(frozen=True)
class ActionMapping:
    actions: Mapping[str, TaskAction]


@dataclass(frozen=True)
class DeclarationMapping:
    declarations: Mapping[str, Union[TaskSpec, Mapping[str, Any], TaskAction]]


Declaration = Union[BareAction, ActionMapping, DeclarationMapping]


# -------------------------
# PUBLIC ENTRYPOINTS
# -------------------------

def classify(exported: Any, module_name: str) -> Declaration:
    """
    Wrap a value exported by a task module in its declaration variant.

    Raises:
        InvalidTaskDeclarationError
    """
    if isinstance(exported, Mapping):
        if all(_is_bare_callable(value) for value in exported.values()):
            return ActionMapping(actions=dict(exported))
        return DeclarationMapping(declarations=dict(exported))

    if callable(exported):
        return BareAction(name=module_name, action=exported)

    raise InvalidTaskDeclarationError(
        module_name,
        f"expected a callable or a mapping, got {type(exported).__name__}",
    )


def normalize(declaration: Declaration) -> List[TaskDescriptor]:
    """
    Build canonical descriptors from one declaration, in declaration order.

    Raises:
        MissingActionError
        InvalidTaskDeclarationError
    """
    if isinstance(declaration, BareAction):
        return [_from_action(declaration.name, declaration.action)]

    if isinstance(declaration, ActionMapping):
        return [
            _from_action(_checked_name(name), action)
            for name, action in declaration.actions.items()
        ]

    if isinstance(declaration, DeclarationMapping):
        return [
            _from_declaration(_checked_name(name), value)
            for name, value in declaration.declarations.items()
        ]

    raise TypeError(f"Unsupported declaration: {type(declaration).__name__}")


# -------------------------
# INTERNAL HELPERS
# -------------------------

def _from_action(name: str, action: Optional[TaskAction]) -> TaskDescriptor:
    if action is None:
        raise MissingActionError(name)
    if not callable(action):
        raise InvalidTaskDeclarationError(name, "action is not callable")

    return TaskDescriptor(name=name, action=action)


def _from_declaration(name: str, value: Any) -> TaskDescriptor:
    if _is_bare_callable(value):
        return _from_action(name, value)

    spec = _to_spec(name, value)
    if spec.fn is None:
        raise MissingActionError(name)

    return TaskDescriptor(
        name=name,
        action=spec.fn,
        dependencies=tuple(spec.dep),
        sequence=tuple(spec.seq),
        description=spec.description,
        options=spec.options,
        priority=spec.priority,
        is_default=spec.is_default,
    )


def _to_spec(name: str, value: Any) -> TaskSpec:
    if isinstance(value, TaskSpec):
        return value

    if value is None:
        raise MissingActionError(name)

    if not isinstance(value, Mapping):
        raise InvalidTaskDeclarationError(
            name, f"expected a callable or a mapping, got {type(value).__name__}"
        )

    try:
        return TaskSpec.model_validate(dict(value))
    except ValidationError as exc:
        raise InvalidTaskDeclarationError(name, _describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


def _checked_name(name: Any) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidTaskDeclarationError(repr(name), "task name must be a non-empty string")
    return name


def _is_bare_callable(value: Any) -> bool:
    return callable(value) and not isinstance(value, (Mapping, TaskSpec))
