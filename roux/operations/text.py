"""
Text operations.

Built-in ordinary operations covering case changes, reversal, find/replace
and hex encoding.
"""

import re
from typing import Any

from roux.dish import Dish
from roux.errors import OperationError
from roux.operations.base import OperationHandler


class ToUpperCase(OperationHandler):
    name = "To Upper case"

    def run(self, input: str, args: list[Any]) -> str:
        return input.upper()


class ToLowerCase(OperationHandler):
    name = "To Lower case"

    def run(self, input: str, args: list[Any]) -> str:
        return input.lower()


class Reverse(OperationHandler):
    """Reverse the input by character or by line."""

    name = "Reverse"
    default_args = ("Character",)

    def run(self, input: str, args: list[Any]) -> str:
        by = args[0] if args else "Character"
        if by == "Line":
            return "\n".join(reversed(input.split("\n")))
        if by == "Character":
            return input[::-1]
        raise OperationError(f"Reverse: unknown mode {by!r}, expected 'Character' or 'Line'")


class FindReplace(OperationHandler):
    """
    Replace occurrences of a pattern.

    Args:
        find: {"option": "Regex" | "Simple string", "string": <pattern>}
        replace: Replacement text, inserted literally
        global: Replace every match (otherwise only the first)
        case insensitive
        multiline: ^ and $ match at line boundaries
    """

    name = "Find / Replace"
    default_args = ({"option": "Regex", "string": ""}, "", True, False, True)

    def run(self, input: str, args: list[Any]) -> str:
        find, replace, global_match, case_insensitive, multiline = args[:5]

        if isinstance(find, dict):
            option, pattern = find.get("option", "Regex"), find.get("string", "")
        else:
            option, pattern = "Regex", str(find)

        if not pattern:
            return input
        if option != "Regex":
            pattern = re.escape(pattern)

        flags = 0
        if case_insensitive:
            flags |= re.IGNORECASE
        if multiline:
            flags |= re.MULTILINE

        try:
            regex = re.compile(pattern, flags)
        except re.error as e:
            raise OperationError(f"Invalid regular expression: {e}")

        return regex.sub(lambda _: replace, input, count=0 if global_match else 1)


class ToHex(OperationHandler):
    """Encode bytes as hex pairs separated by a delimiter."""

    name = "To Hex"
    input_type = Dish.BYTE_ARRAY
    default_args = (" ",)

    def run(self, input: bytes, args: list[Any]) -> str:
        delimiter = args[0] if args else " "
        return delimiter.join(f"{b:02x}" for b in input)


class FromHex(OperationHandler):
    """Decode hex pairs, ignoring any non-hex separators."""

    name = "From Hex"
    output_type = Dish.BYTE_ARRAY

    def run(self, input: str, args: list[Any]) -> bytes:
        digits = re.sub(r"[^0-9a-fA-F]", "", input)
        if len(digits) % 2 != 0:
            raise OperationError(f"From Hex: odd number of hex digits ({len(digits)})")
        return bytes.fromhex(digits)


TEXT_OPERATIONS: tuple[type[OperationHandler], ...] = (
    ToUpperCase,
    ToLowerCase,
    Reverse,
    FindReplace,
    ToHex,
    FromHex,
)
