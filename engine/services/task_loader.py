import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, List, Optional, Union

from engine.planner.exceptions import TaskConfigError, TaskModuleLoadError
from engine.planner.normalizer import Declaration, classify
from engine.utils import get_logger

logger = get_logger("loader")

MODULE_NAMESPACE = "taskloom_tasks"


def load_task_declarations(
    tasks_dir: Union[str, Path],
    scheduler: Optional[Any] = None,
) -> List[Declaration]:
    """
    Discovers task modules and collects their declarations.
    1. Looks at every *.py file in tasks_dir (sorted, '_' files skipped).
    2. Imports each one.
    3. Reads TASKS, or calls setup(scheduler).
    4. Returns one Declaration per module, ready to normalize.

    A bare callable is named after the module's file stem.

    Raises:
        TaskModuleLoadError
        InvalidTaskDeclarationError
    """
    path = Path(tasks_dir)
    if not path.is_dir():
        raise TaskModuleLoadError(str(path), "task directory not found")

    declarations = []

    for file in sorted(path.glob("*.py")):
        if file.name.startswith("_"):
            continue

        module = _import_task_module(file)
        declaration = _declaration_of(module, file.stem, scheduler)

        if declaration is None:
            logger.warning(f"Module '{file.stem}' exports neither TASKS nor setup(); skipped")
            continue

        declarations.append(declaration)
        logger.debug(f"Loaded task module: {file.stem}")

    return declarations


def _import_task_module(file: Path) -> ModuleType:
    module_name = f"{MODULE_NAMESPACE}.{file.stem}"

    spec = importlib.util.spec_from_file_location(module_name, file)
    if spec is None or spec.loader is None:
        raise TaskModuleLoadError(file.stem, "not an importable Python file")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise TaskModuleLoadError(file.stem, f"{type(exc).__name__}: {exc}") from exc

    return module


def _declaration_of(module: ModuleType, name: str, scheduler: Optional[Any]) -> Optional[Declaration]:
    if hasattr(module, "TASKS"):
        return classify(module.TASKS, name)

    setup = getattr(module, "setup", None)
    if not callable(setup):
        return None

    try:
        exported = setup(scheduler)
    except TaskConfigError:
        raise
    except Exception as exc:
        raise TaskModuleLoadError(name, f"setup() failed: {exc}") from exc

    return classify(exported, name)
