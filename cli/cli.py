import argparse
import sys
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config.settings import LOG_LEVELS, settings
from engine.planner.exceptions import TaskConfigError
from engine.reporting.help_writer import task_names
from engine.scheduler.local import TaskExecutionError
from engine.scheduler.runtime import get_registry, init_runtime
from engine.services.build_session import BuildSession
from engine.utils import format_duration, set_log_level

# --- Exit codes ---
EXIT_OK = 0
EXIT_TASK_FAILED = 1
EXIT_CONFIG_ERROR = 2

HELP_TASK = "help"

console = Console(soft_wrap=True)

# --- Helper Functions ---

def print_error(message, details=None):
    console.print(f"[bold red]Error:[/bold red] {escape(str(message))}")
    if details:
        console.print(f"[red]{escape(str(details))}[/red]")

def print_success(message):
    console.print(f"[bold green]Success:[/bold green] {escape(str(message))}")

def print_plan(order):
    table = Table(title="Execution Plan", show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Task", style="bold white")
    for index, name in enumerate(order, start=1):
        table.add_row(str(index), name)
    console.print(table)

def print_timings(scheduler):
    metrics = scheduler.metrics
    if not metrics.durations:
        return

    table = Table(title="Task Timings", show_header=True, header_style="bold magenta")
    table.add_column("Task", style="bold white")
    table.add_column("Duration", justify="right")
    table.add_column("State", style="dim")
    for name, elapsed in metrics.durations.items():
        state = scheduler.state_of(name)
        table.add_row(name, format_duration(elapsed), state.value if state else "-")
    console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskloom",
        description="Run build tasks declared in task modules. "
                    f"Use '{HELP_TASK}' to list tasks or '{HELP_TASK} NAME' for one task's options.",
    )
    parser.add_argument("tasks", nargs="*", metavar="TASK", help="Tasks to run (default task if omitted)")
    parser.add_argument("-d", "--tasks-dir", default=None, help="Directory holding task modules")
    parser.add_argument("-n", "--dry-run", action="store_true", help="Print the execution plan without running")
    parser.add_argument("--list", action="store_true", help="Print task names only")
    parser.add_argument("-j", "--max-workers", type=int, default=None, help="Actions allowed to run at once")
    parser.add_argument("--log-level", default=None, type=str.upper, choices=LOG_LEVELS, help="Logging verbosity")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.log_level:
        set_log_level(args.log_level)

    tasks_dir = args.tasks_dir or settings.TASKS_PATH
    scheduler = init_runtime(max_workers=args.max_workers or settings.MAX_WORKERS)
    session = BuildSession(scheduler, get_registry(), default_name=settings.DEFAULT_TASK_NAME)
    layout = {"margin": settings.HELP_MARGIN, "name_width": settings.HELP_NAME_WIDTH}

    try:
        session.load_directory(tasks_dir)

        if args.list:
            for name in task_names(session.registry):
                console.print(name, markup=False, highlight=False)
            return EXIT_OK

        if args.tasks and args.tasks[0] == HELP_TASK:
            if len(args.tasks) > 1:
                text = session.task_detail(args.tasks[1], **layout)
            else:
                text = session.help_text(**layout)
            console.print(text, markup=False, highlight=False, end="")
            return EXIT_OK

        if args.dry_run:
            print_plan(session.plan(args.tasks))
            return EXIT_OK

        targets = session.run(args.tasks)

    except TaskConfigError as e:
        print_error(e)
        return EXIT_CONFIG_ERROR
    except TaskExecutionError as e:
        print_timings(scheduler)
        print_error(f"Task '{e.task}' failed", e.cause)
        return EXIT_TASK_FAILED

    print_timings(scheduler)
    print_success(f"Finished {', '.join(targets)}")
    return EXIT_OK

if __name__ == "__main__":
    sys.exit(main())
