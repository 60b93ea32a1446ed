"""
Op enum defining the flow-control primitives of roux.

Flow-control operations manipulate the Execution State (cursor, counters,
operation arguments) instead of transforming the dish:
- Fork / Merge      -> re-run the rest of the recipe over each tranche of input
- Register          -> capture values and patch downstream arguments
- Jump / Conditional Jump / Label -> move the cursor
- Return            -> end the recipe
- Comment           -> inert

Any operation name not listed here is an ordinary operation, dispatched to
its OperationHandler.
"""

from enum import Enum
from typing import Any, Optional


class Op(str, Enum):
    """Enumeration of the flow-control operations in roux."""
    FORK = "Fork"
    MERGE = "Merge"
    REGISTER = "Register"
    JUMP = "Jump"
    CONDITIONAL_JUMP = "Conditional Jump"
    LABEL = "Label"
    RETURN = "Return"
    COMMENT = "Comment"

    @property
    def default_args(self) -> list[Any]:
        """Default ingredient values, in argument order."""
        return list(_DEFAULT_ARGS[self])

    @property
    def input_type(self) -> str:
        return "string"

    @property
    def output_type(self) -> str:
        return "string"

    @classmethod
    def lookup(cls, value: str) -> Optional["Op"]:
        """Return the Op for a flow-control name, or None for an ordinary operation."""
        try:
            return cls(value)
        except ValueError:
            return None


_DEFAULT_ARGS: dict[Op, tuple[Any, ...]] = {
    # split delimiter, merge delimiter, ignore errors
    Op.FORK: ("\n", "\n", False),
    Op.MERGE: (),
    # extractor, case insensitive, multiline
    Op.REGISTER: ("([\\s\\S]*)", True, False),
    # label name, max jumps
    Op.JUMP: ("", 10),
    # match, invert, label name, max jumps
    Op.CONDITIONAL_JUMP: ("", False, "", 10),
    Op.LABEL: ("",),
    Op.RETURN: (),
    Op.COMMENT: ("",),
}
