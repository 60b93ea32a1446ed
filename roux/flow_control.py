"""
Flow control operations.

Each operation takes the current ExecutionState and returns it updated. The
interpreter (roux.recipe.Recipe.execute) resumes at state.cursor + 1, so a
primitive that wants execution to continue just after position n sets the
cursor to n.

Soft failures (unknown label, exhausted jump budget, empty pattern) degrade
to a no-op. Hard failures raised inside a Fork tranche propagate as
RecipeError unless the Fork ignores errors.
"""

import copy
import logging
import re
from typing import Any, Callable, Optional

from roux.dish import Dish
from roux.errors import RecipeError
from roux.operation import Operation
from roux.schemas.ops import Op
from roux.state import ExecutionState

logger = logging.getLogger(__name__)


# Register reference: optional run of escaping backslashes, then $R and a 1-2 digit number
REGISTER_REF_PATTERN = re.compile(r"(\\*)\$R(\d{1,2})")


def resolve_label(name: str, op_list: list[Operation]) -> Optional[int]:
    """
    Find the position of the first enabled Label with the given name.

    Scans the whole list from position 0, so a jump may target a label
    before or after the current cursor.

    Returns:
        The label's index, or None if no enabled label matches
    """
    for index, operation in enumerate(op_list):
        if operation.flow is not Op.LABEL or operation.disabled:
            continue
        if operation.ing_values and operation.ing_values[0] == name:
            return index
    return None


def replace_registers(text: str, registers: list[str], num_registers: int) -> str:
    """
    Replace $Rn references to freshly captured registers.

    Only references to the registers just captured are substituted, i.e.
    $R{num_registers} .. $R{num_registers + len(registers) - 1}. A reference
    preceded by an odd number of backslashes is escaped: one backslash is
    removed and the literal $Rn is kept.

    Args:
        text: Argument text to rewrite
        registers: Newly captured values, in group order
        num_registers: Registers that existed before this capture

    Returns:
        The rewritten text
    """
    def _substitute(match: re.Match) -> str:
        slashes, reg_num = match.group(1), match.group(2)
        index = int(reg_num) + 1
        if index <= num_registers or index > num_registers + len(registers):
            return match.group(0)
        if len(slashes) % 2 != 0:
            return match.group(0)[1:]
        return slashes + registers[index - num_registers - 1]

    return REGISTER_REF_PATTERN.sub(_substitute, text)


def _replace_in_arg(arg: Any, registers: list[str], num_registers: int) -> Any:
    if isinstance(arg, str):
        return replace_registers(arg, registers, num_registers)
    if isinstance(arg, dict) and isinstance(arg.get("string"), str):
        arg["string"] = replace_registers(arg["string"], registers, num_registers)
    return arg


def run_fork(state: ExecutionState) -> ExecutionState:
    """
    Fork operation.

    Splits the input into tranches and runs every operation up to the next
    enabled Merge (or the end of the recipe) once per tranche. Outputs are
    joined with the merge delimiter, which is appended after every tranche.

    Args (ingredients): split delimiter, merge delimiter, ignore errors
    """
    from roux.recipe import Recipe

    fork_op = state.current_op
    input_type, output_type = fork_op.input_type, fork_op.output_type
    split_delim, merge_delim, ignore_errors = fork_op.ing_values[:3]
    data = state.dish.get(input_type)

    inputs: list[str] = []
    if data:
        inputs = list(data) if split_delim == "" else data.split(split_delim)

    # All remaining operations unless we encounter an enabled Merge
    sub_op_list: list[Operation] = []
    for operation in state.op_list[state.cursor + 1:]:
        if operation.flow is Op.MERGE and not operation.disabled:
            break
        sub_op_list.append(operation.clone())

    recipe = Recipe(sub_op_list)
    baseline = [copy.deepcopy(op.ing_values) for op in sub_op_list]
    output = ""
    progress = 0

    for i, tranche in enumerate(inputs):
        logger.debug(f"Entering tranche {i + 1} of {len(inputs)}")

        # Reset ingredient values so registers captured in a previous tranche do not leak
        for op, values in zip(sub_op_list, baseline):
            op.set_ing_values(copy.deepcopy(values))

        dish = Dish(tranche, input_type)
        child = state.spawn(sub_op_list, dish)

        try:
            progress = recipe.execute(dish, 0, child)
        except RecipeError as err:
            if not ignore_errors:
                raise
            logger.debug(f"Ignoring error in tranche {i + 1}: {err}")
            progress = err.progress + 1

        output += f"{_as_text(dish.get(output_type))}{merge_delim}"

    state.dish.set(output, output_type)
    state.cursor += progress
    return state


def run_merge(state: ExecutionState) -> ExecutionState:
    """Merge operation. Fork stops collecting its sub-recipe here."""
    return state


def run_register(state: ExecutionState) -> ExecutionState:
    """
    Register operation.

    Captures the groups of the extractor's first match as registers and
    substitutes $Rn references in the arguments of every later enabled
    operation. Rewrites persist for the rest of the run.

    Args (ingredients): extractor, case insensitive, multiline
    """
    extractor, case_insensitive, multiline = state.current_op.ing_values[:3]

    flags = 0
    if case_insensitive:
        flags |= re.IGNORECASE
    if multiline:
        flags |= re.MULTILINE

    match = re.compile(extractor, flags).search(state.dish.get(Dish.STRING))
    if match is None:
        return state

    registers = ["" if group is None else group for group in match.groups()]
    if not registers:
        return state

    state.publish(state.fork_offset + state.cursor, state.num_registers, registers)

    for operation in state.op_list[state.cursor + 1:]:
        if operation.disabled:
            continue
        operation.set_ing_values([
            _replace_in_arg(arg, registers, state.num_registers)
            for arg in operation.ing_values
        ])

    state.counters.registers.extend(registers)
    state.num_registers += len(registers)
    return state


def run_jump(state: ExecutionState) -> ExecutionState:
    """
    Jump operation.

    Args (ingredients): label name, maximum jumps
    """
    label, max_jumps = state.current_op.ing_values[:2]
    jump_index = resolve_label(label, state.op_list)

    if state.num_jumps >= max_jumps or jump_index is None:
        logger.debug("Maximum jumps reached or label cannot be found")
        return state

    state.cursor = jump_index
    state.num_jumps += 1
    logger.debug(f"Jumping to label '{label}' at position {jump_index} (jumps = {state.num_jumps})")
    return state


def run_cond_jump(state: ExecutionState) -> ExecutionState:
    """
    Conditional Jump operation.

    Jumps when the input matches the pattern, or when it does not match and
    invert is set. An empty pattern never jumps.

    Args (ingredients): match pattern, invert match, label name, maximum jumps
    """
    pattern, invert, label, max_jumps = state.current_op.ing_values[:4]
    jump_index = resolve_label(label, state.op_list)

    if state.num_jumps >= max_jumps or jump_index is None:
        logger.debug("Maximum jumps reached or label cannot be found")
        return state

    if pattern != "":
        matched = re.search(pattern, state.dish.get(Dish.STRING)) is not None
        if matched != bool(invert):
            state.cursor = jump_index
            state.num_jumps += 1
            logger.debug(f"Jumping to label '{label}' at position {jump_index} (jumps = {state.num_jumps})")

    return state


def run_label(state: ExecutionState) -> ExecutionState:
    """Label operation. Marks a jump target."""
    return state


def run_return(state: ExecutionState) -> ExecutionState:
    """Return operation. Ends the recipe successfully."""
    state.cursor = len(state.op_list)
    return state


def run_comment(state: ExecutionState) -> ExecutionState:
    """Comment operation."""
    return state


FLOW_CONTROL_HANDLERS: dict[Op, Callable[[ExecutionState], ExecutionState]] = {
    Op.FORK: run_fork,
    Op.MERGE: run_merge,
    Op.REGISTER: run_register,
    Op.JUMP: run_jump,
    Op.CONDITIONAL_JUMP: run_cond_jump,
    Op.LABEL: run_label,
    Op.RETURN: run_return,
    Op.COMMENT: run_comment,
}


def run_flow_control(state: ExecutionState) -> ExecutionState:
    """
    Dispatch the operation at state.cursor to its flow-control handler.

    Raises:
        ValueError: If the operation is not a flow-control operation
    """
    operation = state.current_op
    if operation.flow is None:
        raise ValueError(f"Not a flow-control operation: {operation.name}")
    return FLOW_CONTROL_HANDLERS[operation.flow](state)


def _as_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)
