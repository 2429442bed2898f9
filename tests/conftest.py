import pytest

from wat.interpreter import Interpreter
from wat.types.environment import Environment


@pytest.fixture
def env():
    """Fresh top-level environment."""
    return Environment()


@pytest.fixture
def interp():
    """Interpreter with its own long-lived top-level environment."""
    return Interpreter()


@pytest.fixture(autouse=True)
def _default_depth(monkeypatch):
    # Tests that exercise the depth limit set it explicitly
    monkeypatch.delenv("WAT_MAX_DEPTH", raising=False)
