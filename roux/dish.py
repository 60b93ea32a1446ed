"""
Dish - the typed value container a recipe operates on.

A Dish holds exactly one value together with a type tag. Operations declare
the type they consume and produce; the interpreter asks the Dish for its
value under the consumer's type and the Dish translates in place.

Translation always goes through bytes:
    value (type A) -> bytes -> value (type B)
"""

import json
from typing import Any

from roux.errors import DishError


class Dish:
    """
    Container for the current value of a recipe run.

    Usage:
        dish = Dish("12-34", Dish.STRING)
        data = dish.get(Dish.BYTE_ARRAY)   # b"12-34"
        dish.set("done", Dish.STRING)
    """

    STRING = "string"
    BYTE_ARRAY = "byteArray"
    NUMBER = "number"
    JSON = "JSON"

    TYPES = (STRING, BYTE_ARRAY, NUMBER, JSON)

    def __init__(self, value: Any = None, type_: str = STRING):
        self.value = None
        self.type = type_
        if value is not None:
            self.set(value, type_)

    @staticmethod
    def check_type(type_: str) -> str:
        """Validate a type tag, returning it unchanged."""
        if type_ not in Dish.TYPES:
            raise DishError(f"Unknown dish type: {type_!r}. Valid types: {list(Dish.TYPES)}")
        return type_

    def set(self, value: Any, type_: str) -> None:
        """Replace the value and its type tag."""
        self.check_type(type_)
        if type_ == Dish.BYTE_ARRAY and isinstance(value, (list, bytearray)):
            value = bytes(value)
        self.value = value
        self.type = type_

    def get(self, type_: str) -> Any:
        """
        Return the value as the given type, translating the Dish in place.

        Raises:
            DishError: If the value cannot be represented as type_
        """
        self.check_type(type_)
        if type_ != self.type:
            self._translate(type_)
        return self._value_or_empty()

    def clone(self) -> "Dish":
        """Return an independent Dish with the same value and type."""
        return Dish(json.loads(json.dumps(self.value)) if self.type == Dish.JSON else self.value, self.type)

    def _value_or_empty(self) -> Any:
        if self.value is not None:
            return self.value
        if self.type == Dish.STRING:
            return ""
        if self.type == Dish.BYTE_ARRAY:
            return b""
        if self.type == Dish.NUMBER:
            return 0
        return None

    def _translate(self, to_type: str) -> None:
        if self.value is None:
            self.type = to_type
            return

        data = self._to_bytes()

        try:
            if to_type == Dish.BYTE_ARRAY:
                self.value = data
            elif to_type == Dish.STRING:
                self.value = data.decode("utf-8", errors="replace")
            elif to_type == Dish.NUMBER:
                text = data.decode("utf-8", errors="replace").strip()
                self.value = _parse_number(text)
            elif to_type == Dish.JSON:
                text = data.decode("utf-8", errors="replace")
                self.value = json.loads(text) if text else None
        except ValueError as e:
            raise DishError(f"Cannot convert {self.type} to {to_type}: {e}") from e

        self.type = to_type

    def _to_bytes(self) -> bytes:
        value = self._value_or_empty()
        if self.type == Dish.BYTE_ARRAY:
            return bytes(value)
        if self.type == Dish.STRING:
            return str(value).encode("utf-8")
        if self.type == Dish.NUMBER:
            return _format_number(value).encode("utf-8")
        if self.type == Dish.JSON:
            return json.dumps(value).encode("utf-8")
        raise DishError(f"Unknown dish type: {self.type!r}")

    def __repr__(self) -> str:
        return f"Dish(type={self.type}, value={self.value!r})"


def _parse_number(text: str) -> float:
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        return float(text)


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
