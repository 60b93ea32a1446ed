"""
Recipe - the top-level interpreter.

Execution flow for each operation in the list:
1. Skip it if disabled; pause (return its index) if it has a breakpoint
2. Translate the dish to the operation's input type
3. Dispatch:
   a. Flow-control ops run against the ExecutionState and may move the cursor
   b. Ordinary ops transform the input; the result is set on the dish
4. Continue at cursor + 1

Error handling:
- OperationError / DishError: message becomes the dish value, execution
  halts, and the failing index is returned
- StepLimitExceeded: propagates unchanged
- Anything else: propagates as RecipeError with progress = failing index
"""

import copy
import logging
from typing import Any, Optional

from roux.dish import Dish
from roux.errors import (
    DishError,
    OperationError,
    RecipeCompileError,
    RecipeError,
    StepLimitExceeded,
)
from roux.flow_control import run_flow_control
from roux.operation import Operation
from roux.operations.registry import OperationRegistry
from roux.schemas import Op, OperationDef, RecipeDef
from roux.state import ExecutionState, RegisterPublisher, RunCounters

logger = logging.getLogger(__name__)


def _pad_args(name: str, args: list[Any], defaults: list[Any]) -> list[Any]:
    """
    Fill missing trailing args from defaults.

    Args given as text where the default is an integer (e.g. a maximum jump
    count written as "2" in a recipe file) are converted to int.

    Raises:
        RecipeCompileError: If such an arg is not an integer
    """
    for i, default in enumerate(defaults[:len(args)]):
        if isinstance(default, int) and not isinstance(default, bool) and isinstance(args[i], str):
            try:
                args[i] = int(args[i].strip())
            except ValueError:
                raise RecipeCompileError(
                    f"Operation '{name}': argument {i} must be an integer, got {args[i]!r}"
                )

    if len(args) >= len(defaults):
        return args
    return args + copy.deepcopy(defaults[len(args):])


def compile_operation(op_def: OperationDef, operations: OperationRegistry) -> Operation:
    """
    Build a runtime Operation from its definition.

    Raises:
        RecipeCompileError: If the operation name is unknown or an integer
            argument cannot be converted
    """
    args = copy.deepcopy(list(op_def.args))
    flow = Op.lookup(op_def.op)

    if flow is not None:
        return Operation(
            op_def.op,
            _pad_args(op_def.op, args, flow.default_args),
            input_type=flow.input_type,
            output_type=flow.output_type,
            disabled=op_def.disabled,
            breakpoint=op_def.breakpoint,
        )

    try:
        handler = operations.get(op_def.op)
    except KeyError:
        raise RecipeCompileError(f"Unknown operation: '{op_def.op}'")

    return Operation(
        op_def.op,
        _pad_args(op_def.op, args, list(handler.default_args)),
        input_type=handler.input_type,
        output_type=handler.output_type,
        disabled=op_def.disabled,
        breakpoint=op_def.breakpoint,
        handler=handler,
    )


class Recipe:
    """
    An executable list of operations.

    Usage:
        recipe = Recipe.from_config([
            {"op": "Fork", "args": [",", ";", False]},
            {"op": "To Upper case", "args": []},
        ])
        dish = Dish("a,b,c", Dish.STRING)
        recipe.execute(dish)
        dish.get(Dish.STRING)   # "A;B;C;"
    """

    def __init__(self, op_list: Optional[list[Operation]] = None):
        self.op_list: list[Operation] = list(op_list or [])
        self.last_run_op: Optional[Operation] = None

    @classmethod
    def from_def(
        cls,
        recipe_def: RecipeDef,
        operations: Optional[OperationRegistry] = None,
    ) -> "Recipe":
        """
        Compile a RecipeDef.

        Args:
            recipe_def: The recipe definition
            operations: Registry for ordinary operations (defaults to built-ins)

        Raises:
            RecipeCompileError: If an operation is unknown
        """
        operations = operations or OperationRegistry.create_default()
        return cls([compile_operation(o, operations) for o in recipe_def.operations])

    @classmethod
    def from_config(
        cls,
        config: list[dict[str, Any]],
        operations: Optional[OperationRegistry] = None,
    ) -> "Recipe":
        """Compile a compact recipe-config list ([{"op": ..., "args": [...]}, ...])."""
        return cls.from_def(RecipeDef.from_config(config), operations)

    def add_operation(self, operation: Operation) -> None:
        self.op_list.append(operation)

    def add_operations(self, operations: list[Operation]) -> None:
        self.op_list.extend(operations)

    def execute(
        self,
        dish: Dish,
        start_from: int = 0,
        state: Optional[ExecutionState] = None,
        max_steps: Optional[int] = None,
        publish_registers: Optional[RegisterPublisher] = None,
    ) -> int:
        """
        Execute the recipe against a dish.

        Args:
            dish: The value container, modified in place
            start_from: Index of the first operation to run
            state: Execution state to continue from. Fork passes a child state
                sharing the run's counters; None starts a new top-level run.
            max_steps: Step limit for a new top-level run
            publish_registers: Register publisher for a new top-level run

        Returns:
            The index execution stopped at: len(op_list) on completion, or the
            index of a breakpoint or of an operation that raised OperationError

        Raises:
            RecipeError: If an operation fails unexpectedly
            StepLimitExceeded: If the run exceeds max_steps operations
        """
        if state is None:
            state = ExecutionState(
                op_list=self.op_list,
                dish=dish,
                counters=RunCounters(max_steps=max_steps),
                publish_registers=publish_registers,
            )
            self.last_run_op = None
        else:
            state.op_list = self.op_list
            state.dish = dish

        counters = state.counters
        logger.debug(f"Executing recipe of {len(self.op_list)} operations, starting at {start_from}")

        i = start_from
        while i < len(self.op_list):
            op = self.op_list[i]

            if op.disabled:
                logger.debug(f"[{i}] {op.name} is disabled, skipping")
                i += 1
                continue
            if op.breakpoint and i != start_from:
                logger.debug(f"[{i}] Pausing at breakpoint")
                return i

            counters.steps += 1
            if counters.max_steps is not None and counters.steps > counters.max_steps:
                raise StepLimitExceeded(counters.max_steps)

            logger.debug(f"[{i}] {op.name} {op.ing_values!r}")
            try:
                input = dish.get(op.input_type)
                if op.is_flow_control:
                    state.cursor = i
                    state = run_flow_control(state)
                    i = state.cursor
                else:
                    output = op.run(input)
                    dish.set(output, op.output_type)
                self.last_run_op = op
            except (OperationError, DishError) as e:
                # Expected errors are returned as output
                dish.set(str(e), Dish.STRING)
                return i
            except StepLimitExceeded:
                raise
            except RecipeError as e:
                # Nested failure from a Fork: report our own position
                e.progress = i
                raise
            except Exception as e:
                raise RecipeError(op.name, i, e) from e

            i += 1

        logger.debug("Recipe complete")
        return len(self.op_list)

    def __len__(self) -> int:
        return len(self.op_list)

    def __repr__(self) -> str:
        return f"Recipe(operations={[o.name for o in self.op_list]})"
