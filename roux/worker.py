"""
RecipeWorker - run recipes off the calling thread.

Bakes execute on a single background thread so a host (CLI, UI) stays
responsive. While running in the worker, Register operations publish their
captured values through a thread-safe queue that the host can drain for live
inspection. Bakes are serialized: one worker thread, one recipe at a time.
"""

import logging
import queue
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Optional

from roux.dish import Dish
from roux.errors import RecipeError, StepLimitExceeded
from roux.recipe import Recipe
from roux.state import ExecutionState, RunCounters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisterUpdate:
    """
    Registers published by one Register operation.

    Attributes:
        op_index: Position of the Register operation in the top-level recipe
        num_registers: Registers addressable before this capture; the first
            captured value is $R{num_registers}
        registers: Captured values, in group order
    """
    op_index: int
    num_registers: int
    registers: tuple[str, ...]


@dataclass
class BakeResult:
    """
    Outcome of one bake.

    Attributes:
        output: Final dish value as text
        output_type: Final dish type
        progress: Index execution stopped at (len(recipe) on completion)
        duration_ms: Wall-clock execution time
        error: Error message if the bake failed, else None
        registers: Every register captured during the run
    """
    output: str
    output_type: str
    progress: int
    duration_ms: int
    error: Optional[str] = None
    registers: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.error is None


class RecipeWorker:
    """
    Runs a Recipe on a background thread.

    Usage:
        with RecipeWorker(recipe) as worker:
            result = worker.bake("12-34").result()
            for update in worker.register_updates():
                print(update.op_index, update.registers)
    """

    def __init__(self, recipe: Recipe, max_steps: Optional[int] = None):
        self._recipe = recipe
        self._max_steps = max_steps
        self._updates: "queue.Queue[RegisterUpdate]" = queue.Queue()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="roux-worker")

    def bake(self, input: Any, input_type: str = Dish.STRING) -> "Future[BakeResult]":
        """
        Schedule the recipe against input.

        Returns:
            Future resolving to a BakeResult. Recipe failures are reported in
            BakeResult.error rather than raised from the future.
        """
        return self._executor.submit(self._bake, input, input_type)

    def register_updates(self) -> list[RegisterUpdate]:
        """Drain and return register updates published since the last call."""
        updates = []
        while True:
            try:
                updates.append(self._updates.get_nowait())
            except queue.Empty:
                return updates

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "RecipeWorker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def _publish(self, op_index: int, num_registers: int, registers: list[str]) -> None:
        self._updates.put(RegisterUpdate(op_index, num_registers, tuple(registers)))

    def _bake(self, input: Any, input_type: str) -> BakeResult:
        # Register rewrites arguments in place; every bake starts from the compiled values
        recipe = Recipe([op.clone() for op in self._recipe.op_list])
        dish = Dish(input, input_type)
        state = ExecutionState(
            op_list=recipe.op_list,
            dish=dish,
            counters=RunCounters(max_steps=self._max_steps),
            publish_registers=self._publish,
        )

        error = None
        progress = 0
        started = time.monotonic()
        try:
            progress = recipe.execute(dish, 0, state)
        except RecipeError as e:
            logger.warning(f"Recipe failed at operation {e.progress}: {e}", extra={"progress": e.progress})
            error, progress = str(e), e.progress
        except StepLimitExceeded as e:
            error, progress = str(e), state.cursor
            logger.warning(str(e), extra={"progress": progress})
        duration_ms = int((time.monotonic() - started) * 1000)

        return BakeResult(
            output=_as_text(dish),
            output_type=dish.type,
            progress=progress,
            duration_ms=duration_ms,
            error=error,
            registers=list(state.counters.registers),
        )


def _as_text(dish: Dish) -> str:
    return dish.clone().get(Dish.STRING)
