"""
Operation - a runtime instance of one recipe step.

Operations are built by Recipe.from_def() from OperationDefs. Their
ingredient values are mutable: Register rewrites them in place for the
remainder of a run, and Fork works on clones so that tranche-local rewrites
never reach sibling tranches or the outer list.
"""

import copy
from typing import Any, Optional, TYPE_CHECKING

from roux.dish import Dish
from roux.schemas.ops import Op

if TYPE_CHECKING:
    from roux.operations.base import OperationHandler


class Operation:
    """
    One step of a recipe.

    Flow-control operations (flow is an Op) are executed by
    roux.flow_control against the ExecutionState. Ordinary operations
    delegate to their handler.
    """

    def __init__(
        self,
        name: str,
        ing_values: Optional[list[Any]] = None,
        input_type: str = Dish.STRING,
        output_type: str = Dish.STRING,
        disabled: bool = False,
        breakpoint: bool = False,
        handler: Optional["OperationHandler"] = None,
    ):
        self.name = name
        self.flow = Op.lookup(name)
        self.ing_values: list[Any] = list(ing_values or [])
        self.input_type = input_type
        self.output_type = output_type
        self.disabled = disabled
        self.breakpoint = breakpoint
        self.handler = handler

    @property
    def is_flow_control(self) -> bool:
        return self.flow is not None

    def set_ing_values(self, values: list[Any]) -> None:
        """Replace the ingredient values."""
        self.ing_values = list(values)

    def run(self, input: Any) -> Any:
        """
        Transform input with this operation's handler.

        Raises:
            TypeError: If called on a flow-control operation or an operation
                without a handler
        """
        if self.is_flow_control:
            raise TypeError(f"'{self.name}' is a flow-control operation and has no transform")
        if self.handler is None:
            raise TypeError(f"Operation '{self.name}' has no handler")
        return self.handler.run(input, self.ing_values)

    def clone(self) -> "Operation":
        """Return an independent copy with deep-copied ingredient values."""
        return Operation(
            self.name,
            copy.deepcopy(self.ing_values),
            input_type=self.input_type,
            output_type=self.output_type,
            disabled=self.disabled,
            breakpoint=self.breakpoint,
            handler=self.handler,
        )

    def __repr__(self) -> str:
        flags = "".join([" disabled" if self.disabled else "", " breakpoint" if self.breakpoint else ""])
        return f"Operation({self.name!r}, {self.ing_values!r}{flags})"
