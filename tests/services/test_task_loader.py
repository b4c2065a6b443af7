import sys
import textwrap

import pytest

from engine.planner.exceptions import InvalidTaskDeclarationError, TaskModuleLoadError
from engine.planner.normalizer import ActionMapping, BareAction, DeclarationMapping, normalize
from engine.services.task_loader import MODULE_NAMESPACE, load_task_declarations


def _write(directory, name, source):
    (directory / name).write_text(textwrap.dedent(source))


@pytest.mark.contract
def test_each_export_shape_maps_to_its_declaration(tmp_path):
    _write(tmp_path, "clean.py", """
        def clean():
            pass

        TASKS = clean
    """)
    _write(tmp_path, "lint.py", """
        TASKS = {"lint-python": lambda: None, "lint-docs": lambda: None}
    """)
    _write(tmp_path, "package.py", """
        SEEN = []

        def setup(scheduler):
            SEEN.append(scheduler)
            return {"package": {"fn": lambda: None, "dep": ["clean"], "isDefault": True}}
    """)
    handle = object()

    declarations = load_task_declarations(tmp_path, scheduler=handle)

    clean, lint, package = declarations
    assert isinstance(clean, BareAction) and clean.name == "clean"
    assert isinstance(lint, ActionMapping)
    assert isinstance(package, DeclarationMapping)
    assert sys.modules[f"{MODULE_NAMESPACE}.package"].SEEN == [handle]
    assert normalize(package)[0].dependencies == ("clean",)


@pytest.mark.contract
def test_private_and_exportless_modules_are_skipped(tmp_path):
    _write(tmp_path, "_helpers.py", "raise RuntimeError('never imported')\n")
    _write(tmp_path, "notes.py", "VALUE = 1\n")
    _write(tmp_path, "build.py", "TASKS = {'build': print}\n")

    declarations = load_task_declarations(tmp_path)

    assert len(declarations) == 1
    assert list(declarations[0].actions) == ["build"]


def test_import_failure_names_the_module(tmp_path):
    _write(tmp_path, "broken.py", "import does_not_exist_anywhere\n")

    with pytest.raises(TaskModuleLoadError) as exc_info:
        load_task_declarations(tmp_path)

    assert exc_info.value.module == "broken"
    assert "ModuleNotFoundError" in exc_info.value.reason


def test_setup_failure_names_the_module(tmp_path):
    _write(tmp_path, "deploy.py", """
        def setup(scheduler):
            raise KeyError("DEPLOY_TARGET")
    """)

    with pytest.raises(TaskModuleLoadError) as exc_info:
        load_task_declarations(tmp_path)

    assert exc_info.value.module == "deploy"


def test_unsupported_export_is_rejected(tmp_path):
    _write(tmp_path, "odd.py", "TASKS = 42\n")

    with pytest.raises(InvalidTaskDeclarationError):
        load_task_declarations(tmp_path)


def test_missing_directory(tmp_path):
    with pytest.raises(TaskModuleLoadError):
        load_task_declarations(tmp_path / "nope")


@pytest.mark.contract
def test_shipped_sample_tasks_load(sample_tasks_dir):
    names = [
        descriptor.name
        for declaration in load_task_declarations(sample_tasks_dir)
        for descriptor in normalize(declaration)
    ]

    assert sorted(names) == ["check", "clean", "compile", "lint-docs", "lint-python", "package"]
