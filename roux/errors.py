"""
Error classes for roux execution.

Two failure policies coexist:
- OperationError / DishError: expected failures. The interpreter writes the
  message into the dish and stops at the failing operation.
- RecipeError: hard failure. Propagates to the caller carrying the progress
  (index of the failing operation) so an enclosing Fork can apply its
  ignore-errors policy.

Flow-control soft failures (missing labels, exhausted jump budgets, empty
patterns) are not errors at all and never raise.
"""


class RouxError(Exception):
    """Base exception for roux."""
    pass


class OperationError(RouxError):
    """
    Expected operation failure - shown as output.

    Examples:
    - Input is not valid hex
    - Argument out of range

    The interpreter does not propagate this error. The message becomes the
    dish value and execution halts at the failing operation.
    """
    pass


class DishError(RouxError):
    """Raised when a Dish value cannot be translated to the requested type."""
    pass


class RecipeCompileError(RouxError):
    """Raised when a RecipeDef cannot be compiled into operations."""
    pass


class RecipeError(RouxError):
    """
    Hard failure while executing a recipe.

    Attributes:
        op_name: Name of the operation that failed
        progress: Index of the failing operation in the list being executed.
            Rewritten by each enclosing interpreter to its own index.
        cause: The original exception
    """

    def __init__(self, op_name: str, progress: int, cause: Exception):
        self.op_name = op_name
        self.progress = progress
        self.cause = cause
        super().__init__(f"{op_name} - {cause}")


class StepLimitExceeded(RouxError):
    """
    Raised when a run executes more operations than the host allows.

    Never absorbed by a Fork's ignore-errors policy.
    """

    def __init__(self, max_steps: int):
        self.max_steps = max_steps
        super().__init__(f"Step limit of {max_steps} operations exceeded")
