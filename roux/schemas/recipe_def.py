"""
RecipeDef schema - the declarative recipe definition.

A RecipeDef is the static, version-controlled definition of a recipe: an
ordered list of operation names with their arguments. It is compiled into
runtime Operation instances by Recipe.from_def().

File format (YAML or JSON):
    recipe_id: extract_ports
    version: "1.0"
    input_type: string
    operations:
      - op: Register
        args: ['port=(\\d+)', false, false]
      - op: Find / Replace
        args: [{option: Simple string, string: "$R0"}, "PORT", true, false, false]
        disabled: false
        breakpoint: false
"""

from dataclasses import dataclass, field
from typing import Any

from roux.dish import Dish
from roux.errors import RecipeCompileError


@dataclass(frozen=True)
class OperationDef:
    """
    An operation entry within a RecipeDef.

    Attributes:
        op: Operation name (a flow-control primitive or a registered operation)
        args: Ingredient values, in argument order. Missing trailing args
            are filled from the operation's defaults at compile time.
        disabled: Disabled operations are skipped by the interpreter
        breakpoint: Execution pauses before this operation
    """
    op: str
    args: tuple[Any, ...] = field(default_factory=tuple)
    disabled: bool = False
    breakpoint: bool = False

    def __post_init__(self):
        if not isinstance(self.op, str) or not self.op:
            raise RecipeCompileError(f"Operation name must be a non-empty string, got {self.op!r}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary, omitting default flags."""
        return {
            "op": self.op,
            "args": list(self.args),
            **({"disabled": True} if self.disabled else {}),
            **({"breakpoint": True} if self.breakpoint else {}),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OperationDef":
        """Deserialize from dictionary."""
        if not isinstance(data, dict) or "op" not in data:
            raise RecipeCompileError(f"Operation entry must be a mapping with an 'op' key: {data!r}")
        args = data.get("args", [])
        if not isinstance(args, (list, tuple)):
            raise RecipeCompileError(f"Operation '{data['op']}': args must be a list")
        return cls(
            op=data["op"],
            args=tuple(args),
            disabled=bool(data.get("disabled", False)),
            breakpoint=bool(data.get("breakpoint", False)),
        )


@dataclass(frozen=True)
class RecipeDef:
    """
    A recipe definition.

    Attributes:
        recipe_id: Unique identifier for the recipe
        version: Version of the recipe definition
        operations: Ordered operation entries
        description: Free-text description
        input_type: Dish type the input is tagged with before the first operation
        extras: Unrecognised top-level keys, preserved on round trip
    """
    recipe_id: str
    version: str = "1.0"
    operations: tuple[OperationDef, ...] = field(default_factory=tuple)
    description: str = ""
    input_type: str = Dish.STRING
    extras: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.input_type not in Dish.TYPES:
            raise RecipeCompileError(
                f"Recipe '{self.recipe_id}': unknown input_type {self.input_type!r}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON/YAML output."""
        return {
            "recipe_id": self.recipe_id,
            "version": self.version,
            **({"description": self.description} if self.description else {}),
            "input_type": self.input_type,
            "operations": [o.to_dict() for o in self.operations],
            **self.extras,
        }

    def to_config(self) -> list[dict[str, Any]]:
        """Serialize operations to the compact recipe-config list."""
        return [o.to_dict() for o in self.operations]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RecipeDef":
        """Deserialize from dictionary."""
        if not isinstance(data, dict):
            raise RecipeCompileError("Recipe definition must be a mapping")
        if "recipe_id" not in data:
            raise RecipeCompileError("Recipe definition is missing 'recipe_id'")

        known_keys = {"recipe_id", "version", "description", "input_type", "operations"}
        extras = {k: v for k, v in data.items() if k not in known_keys}

        operations = data.get("operations") or []
        if not isinstance(operations, list):
            raise RecipeCompileError(f"Recipe '{data['recipe_id']}': operations must be a list")

        return cls(
            recipe_id=data["recipe_id"],
            version=str(data.get("version", "1.0")),
            operations=tuple(OperationDef.from_dict(o) for o in operations),
            description=data.get("description", ""),
            input_type=data.get("input_type", Dish.STRING),
            extras=extras,
        )

    @classmethod
    def from_config(cls, config: list[dict[str, Any]], recipe_id: str = "inline") -> "RecipeDef":
        """
        Build a RecipeDef from the compact recipe-config list.

        Example:
            RecipeDef.from_config([
                {"op": "Fork", "args": [",", ";", False]},
                {"op": "To Upper case", "args": []},
            ])
        """
        if not isinstance(config, list):
            raise RecipeCompileError("Recipe config must be a list of operations")
        return cls(
            recipe_id=recipe_id,
            operations=tuple(OperationDef.from_dict(o) for o in config),
        )
