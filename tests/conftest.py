import os
import sys

import pytest

# Ensure project root is on sys.path so top-level packages (e.g., engine, config) are importable
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

def pytest_sessionstart(session):
    os.environ.setdefault("LOG_LEVEL", "WARNING")


@pytest.fixture
def noop():
    def _noop():
        pass
    return _noop


@pytest.fixture
def sample_tasks_dir():
    return os.path.join(PROJECT_ROOT, "tasks")
