"""
Base operation handler and common implementations.

An OperationHandler is the transform behind an ordinary (non flow-control)
operation: it receives the dish value under its input type plus the
operation's ingredient values, and returns a value of its output type.
"""

from abc import ABC, abstractmethod
from typing import Any

from roux.dish import Dish


class OperationHandler(ABC):
    """
    Abstract base class for ordinary operations.

    Subclasses set the class attributes and implement run().

    Attributes:
        name: Operation name used in recipes (e.g. "To Upper case")
        input_type: Dish type the handler consumes
        output_type: Dish type the handler produces
        default_args: Default ingredient values, in argument order
    """

    name: str = ""
    input_type: str = Dish.STRING
    output_type: str = Dish.STRING
    default_args: tuple[Any, ...] = ()

    @abstractmethod
    def run(self, input: Any, args: list[Any]) -> Any:
        """
        Transform input.

        Args:
            input: Dish value, already translated to input_type
            args: Ingredient values

        Returns:
            The output value, of output_type

        Raises:
            OperationError: For expected failures shown to the user as output
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
