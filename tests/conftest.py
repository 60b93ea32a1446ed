import pytest

from roux.operations import OperationHandler, OperationRegistry
from roux.recipe import Recipe


class AppendText(OperationHandler):
    """Appends its first argument to the input."""

    name = "Append Text"
    default_args = ("",)

    def run(self, input, args):
        return input + args[0]


class FailOn(OperationHandler):
    """Raises RuntimeError when the input contains its first argument."""

    name = "Fail On"
    default_args = ("",)

    def run(self, input, args):
        if args[0] and args[0] in input:
            raise RuntimeError(f"found {args[0]!r}")
        return input


@pytest.fixture
def operations() -> OperationRegistry:
    """Built-in operations plus the test helpers above."""
    registry = OperationRegistry.create_default()
    registry.register(AppendText())
    registry.register(FailOn())
    return registry


@pytest.fixture
def make_recipe(operations):
    """Compile a recipe config against the test registry."""
    def _make(config):
        return Recipe.from_config(config, operations)
    return _make


@pytest.fixture(autouse=True)
def roux_home(tmp_path, monkeypatch):
    """Point $ROUX_HOME at a temp dir so tests never read a real config."""
    home = tmp_path / "roux_home"
    monkeypatch.setenv("ROUX_HOME", str(home))
    return home
