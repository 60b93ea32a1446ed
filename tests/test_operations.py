"""Tests for roux.operations and roux.operation.

Tests cover:
- OperationRegistry register/get/has/list
- Built-in text operations
- Operation runtime instances (run, clone)
"""

import pytest

from roux.dish import Dish
from roux.errors import OperationError
from roux.operation import Operation
from roux.operations import (
    FindReplace,
    FromHex,
    OperationHandler,
    OperationRegistry,
    Reverse,
    ToHex,
    ToLowerCase,
    ToUpperCase,
)
from roux.schemas import Op


class Passthrough(OperationHandler):
    """Returns its input unchanged under a configurable name and type."""

    def __init__(self, name: str, type_: str = Dish.STRING):
        self.name = name
        self.input_type = type_
        self.output_type = type_

    def run(self, input, args):
        return input


# =============================================================================
# REGISTRY
# =============================================================================


class TestOperationRegistry:
    """Tests for OperationRegistry."""

    def test_register_and_get(self):
        registry = OperationRegistry()
        handler = Passthrough("Identity")
        registry.register(handler)
        assert registry.get("Identity") is handler
        assert registry.has("Identity")

    def test_get_unknown_raises_key_error(self):
        registry = OperationRegistry()
        with pytest.raises(KeyError, match="No operation registered with name: Nope"):
            registry.get("Nope")

    def test_flow_control_names_rejected(self):
        registry = OperationRegistry()
        with pytest.raises(ValueError, match="flow-control"):
            registry.register(Passthrough("Fork"))

    def test_empty_name_rejected(self):
        registry = OperationRegistry()
        with pytest.raises(ValueError, match="has no name"):
            registry.register(Passthrough(""))

    def test_register_replaces_existing(self):
        registry = OperationRegistry()
        registry.register(Passthrough("X"))
        replacement = Passthrough("X", Dish.BYTE_ARRAY)
        registry.register(replacement)
        assert registry.get("X") is replacement

    def test_create_default_has_builtins(self):
        registry = OperationRegistry.create_default()
        assert registry.list_operations() == sorted([
            "To Upper case",
            "To Lower case",
            "Reverse",
            "Find / Replace",
            "To Hex",
            "From Hex",
        ])


# =============================================================================
# TEXT OPERATIONS
# =============================================================================


class TestTextOperations:
    """Tests for the built-in text operations."""

    def test_case_changes(self):
        assert ToUpperCase().run("aBc", []) == "ABC"
        assert ToLowerCase().run("aBc", []) == "abc"

    def test_reverse_characters(self):
        assert Reverse().run("abc", ["Character"]) == "cba"

    def test_reverse_lines(self):
        assert Reverse().run("a\nb\nc", ["Line"]) == "c\nb\na"

    def test_reverse_unknown_mode(self):
        with pytest.raises(OperationError, match="unknown mode"):
            Reverse().run("abc", ["Word"])

    def test_to_hex(self):
        assert ToHex().run(b"hi", [" "]) == "68 69"
        assert ToHex().run(b"hi", [""]) == "6869"

    def test_from_hex_ignores_separators(self):
        assert FromHex().run("68:69", []) == b"hi"

    def test_from_hex_odd_digits(self):
        with pytest.raises(OperationError, match=r"odd number of hex digits \(3\)"):
            FromHex().run("abc", [])


class TestFindReplace:
    """Tests for Find / Replace."""

    def _run(self, input, find, replace, global_match=True, case_insensitive=False, multiline=True):
        return FindReplace().run(input, [find, replace, global_match, case_insensitive, multiline])

    def test_regex_global(self):
        assert self._run("a1b22", {"option": "Regex", "string": r"\d+"}, "#") == "a#b#"

    def test_first_match_only(self):
        assert self._run("a1b2", {"option": "Regex", "string": r"\d"}, "#", global_match=False) == "a#b2"

    def test_simple_string_is_literal(self):
        assert self._run("1+1=2", {"option": "Simple string", "string": "1+1"}, "two") == "two=2"

    def test_replacement_inserted_literally(self):
        assert self._run("abc", {"option": "Regex", "string": "(b)"}, r"\1$&") == r"a\1$&c"

    def test_case_insensitive(self):
        assert self._run("ABC", {"option": "Regex", "string": "b"}, "x", case_insensitive=True) == "AxC"

    def test_multiline_anchors(self):
        assert self._run("a\nb", {"option": "Regex", "string": "^"}, ">") == ">a\n>b"
        assert self._run("a\nb", {"option": "Regex", "string": "^"}, ">", multiline=False) == ">a\nb"

    def test_empty_pattern_is_noop(self):
        assert self._run("abc", {"option": "Regex", "string": ""}, "x") == "abc"

    def test_plain_string_find(self):
        assert self._run("aa", "a", "b") == "bb"

    def test_invalid_regex(self):
        with pytest.raises(OperationError, match="Invalid regular expression"):
            self._run("abc", {"option": "Regex", "string": "("}, "x")


# =============================================================================
# OPERATION
# =============================================================================


class TestOperation:
    """Tests for runtime Operation instances."""

    def test_flow_control_detection(self):
        assert Operation("Jump").flow is Op.JUMP
        assert Operation("Jump").is_flow_control
        assert not Operation("To Upper case").is_flow_control

    def test_run_delegates_to_handler(self):
        op = Operation("To Upper case", handler=ToUpperCase())
        assert op.run("abc") == "ABC"

    def test_run_flow_control_raises(self):
        with pytest.raises(TypeError, match="flow-control"):
            Operation("Label", ["x"]).run("abc")

    def test_run_without_handler_raises(self):
        with pytest.raises(TypeError, match="has no handler"):
            Operation("Custom").run("abc")

    def test_clone_deep_copies_ingredients(self):
        find = {"option": "Regex", "string": "$R0"}
        op = Operation("Find / Replace", [find, ""], disabled=True, handler=FindReplace())
        clone = op.clone()

        clone.ing_values[0]["string"] = "x"
        assert op.ing_values[0]["string"] == "$R0"
        assert clone.disabled is True
        assert clone.handler is op.handler

    def test_set_ing_values_copies_list(self):
        op = Operation("Comment")
        values = ["a"]
        op.set_ing_values(values)
        values.append("b")
        assert op.ing_values == ["a"]
