"""
Execution State - the mutable record threaded through flow-control operations.

One ExecutionState is created per Recipe.execute() call. A Fork spawns a child
state per tranche; the child gets its own cursor and operation sub-list but
shares the run-wide RunCounters with its parent by reference. Each tranche
starts with a fresh jump budget.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from roux.dish import Dish
    from roux.operation import Operation


# publish_registers(op_index, num_registers_before, captured_values)
RegisterPublisher = Callable[[int, int, list[str]], None]


@dataclass
class RunCounters:
    """
    Counters shared by every ExecutionState of one top-level run.

    Attributes:
        registers: Every register value captured during the run, in capture
            order. Append-only.
        steps: Operations executed so far (all nesting levels)
        max_steps: Host-imposed limit on steps, or None for no limit
    """
    registers: list[str] = field(default_factory=list)
    steps: int = 0
    max_steps: Optional[int] = None


@dataclass
class ExecutionState:
    """
    State of one recipe execution.

    Attributes:
        op_list: Operations being executed
        dish: The value container
        counters: Run-wide counters, shared with parent and child states
        cursor: Index of the current operation (0 <= cursor <= len(op_list))
        num_jumps: Jumps taken in this execution. Never decreases; a Fork
            tranche starts again at 0.
        num_registers: Registers addressable as $R0..$R(num_registers-1)
        fork_offset: Position of op_list[0] within the top-level recipe
        publish_registers: Callback used when running in a worker; None otherwise
    """
    op_list: list["Operation"]
    dish: "Dish"
    counters: RunCounters = field(default_factory=RunCounters)
    cursor: int = 0
    num_jumps: int = 0
    num_registers: int = 0
    fork_offset: int = 0
    publish_registers: Optional[RegisterPublisher] = None

    @property
    def current_op(self) -> "Operation":
        return self.op_list[self.cursor]

    def spawn(self, op_list: list["Operation"], dish: "Dish") -> "ExecutionState":
        """
        Create the child state for one Fork tranche.

        The child starts at cursor 0 of op_list with no jumps taken, shares this
        state's counters and publisher, and inherits the addressable register
        count. Its fork_offset places op_list[0] right after the Fork at
        self.cursor.
        """
        return ExecutionState(
            op_list=op_list,
            dish=dish,
            counters=self.counters,
            cursor=0,
            num_jumps=0,
            num_registers=self.num_registers,
            fork_offset=self.fork_offset + self.cursor + 1,
            publish_registers=self.publish_registers,
        )

    def publish(self, op_index: int, num_registers: int, registers: list[Any]) -> None:
        """Notify the host of newly captured registers. No-op outside a worker."""
        if self.publish_registers is not None:
            self.publish_registers(op_index, num_registers, list(registers))
