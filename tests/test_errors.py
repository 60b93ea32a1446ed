"""Tests for roux error classes.

Tests cover:
- Error hierarchy
- RecipeError carries op name, progress and cause
- StepLimitExceeded message
"""

import pytest
from roux.errors import (
    DishError,
    OperationError,
    RecipeCompileError,
    RecipeError,
    RouxError,
    StepLimitExceeded,
)


class TestRouxError:
    """Tests for base RouxError."""

    def test_is_exception(self):
        """RouxError should be an Exception."""
        assert issubclass(RouxError, Exception)

    def test_has_message(self):
        """RouxError should have a message."""
        error = RouxError("my message")
        assert str(error) == "my message"

    @pytest.mark.parametrize("cls", [OperationError, DishError, RecipeCompileError, RecipeError, StepLimitExceeded])
    def test_subclasses(self, cls):
        """All roux errors can be caught as RouxError."""
        assert issubclass(cls, RouxError)


class TestRecipeError:
    """Tests for RecipeError."""

    def test_attributes(self):
        cause = ValueError("bad input")
        error = RecipeError("To Hex", 3, cause)
        assert error.op_name == "To Hex"
        assert error.progress == 3
        assert error.cause is cause

    def test_message_names_operation(self):
        error = RecipeError("To Hex", 3, ValueError("bad input"))
        assert str(error) == "To Hex - bad input"

    def test_progress_is_mutable(self):
        """Enclosing interpreters rewrite progress to their own index."""
        error = RecipeError("Fail", 2, RuntimeError("x"))
        error.progress = 0
        assert error.progress == 0

    def test_not_an_operation_error(self):
        """Hard failures must not be mistaken for expected failures."""
        assert not issubclass(RecipeError, OperationError)


class TestStepLimitExceeded:
    """Tests for StepLimitExceeded."""

    def test_message(self):
        error = StepLimitExceeded(50)
        assert error.max_steps == 50
        assert str(error) == "Step limit of 50 operations exceeded"

    def test_not_a_recipe_error(self):
        """A Fork's ignore-errors policy only absorbs RecipeError."""
        assert not issubclass(StepLimitExceeded, RecipeError)
