"""Pytest configuration and fixtures for devtasks tests."""
from collections.abc import Iterator
from pathlib import Path

import pytest

from devtasks.git.state import GIT_STATE


@pytest.fixture(autouse=True)
def _reset_git_state() -> Iterator[None]:
    """Give every test a fresh process-wide git state cache."""
    GIT_STATE.reset()
    yield
    GIT_STATE.reset()


def pytest_sessionfinish(session, exitstatus):
    """Fail the run if --cov was requested but no coverage data was collected."""
    cov_enabled = any("--cov" in str(arg) for arg in session.config.args)
    if not cov_enabled:
        return

    coverage_files = list(Path.cwd().glob(".coverage*"))
    if not coverage_files:
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'devtasks' (the package) not 'src/devtasks' (filesystem path).",
            returncode=1
        )
