"""Shared fixtures for waterhammer.py tests."""
import io
import shlex
import sys
from pathlib import Path

import pytest

# Add parent directory to path so we can import waterhammer
sys.path.insert(0, str(Path(__file__).parent.parent))

STUB_RUNNER = Path(__file__).parent / "stub_runner.py"


@pytest.fixture
def stub_command():
    """Build a test_command template that runs the stub runner in a mode."""
    def _build(mode: str = "pass") -> str:
        return (
            f"{shlex.quote(sys.executable)} {shlex.quote(str(STUB_RUNNER))} "
            f"--mode {mode} -v -run {{pattern}}"
        )
    return _build


@pytest.fixture
def output():
    """In-memory terminal sink."""
    return io.StringIO()


@pytest.fixture
def logger(output):
    """Logger writing to the in-memory sink."""
    import waterhammer
    return waterhammer.Logger(waterhammer.LogLevel.INFO, stream=output)


@pytest.fixture
def log_path(tmp_path):
    """Canonical log location inside the test's temp dir."""
    return tmp_path / "test.log"


@pytest.fixture
def make_config(log_path, stub_command):
    """Create a Config that runs the stub runner with short timeouts."""
    import waterhammer

    def _create(mode: str = "pass", **overrides) -> "waterhammer.Config":
        settings = {
            "test_command": stub_command(mode),
            "log_path": str(log_path),
            "round_timeout_s": 10.0,
            "kill_grace_s": 0.5,
            "poll_interval_s": 0.05,
        }
        settings.update(overrides)
        return waterhammer.Config(**settings)
    return _create


@pytest.fixture
def make_round():
    """Create a Round whose deadline starts now."""
    import time
    import waterhammer

    def _create(filter_: str = "", timeout_s: float = 10.0, index: int = 0):
        return waterhammer.Round(index, filter_, time.monotonic() + timeout_s)
    return _create
