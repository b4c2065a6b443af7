import logging

log = logging.getLogger("taskloom.tasks.lint")


def lint_python():
    log.info("Linting Python sources")


def lint_docs():
    log.info("Checking docs")


TASKS = {
    "lint-python": lint_python,
    "lint-docs": lint_docs,
}
