"""
roux.schemas - Schema definitions for recipes.

RecipeDef -> Recipe (compiled Operations) -> ExecutionState

Lifecycle:
1. RecipeDef: Static, version-controlled recipe definition (operation names + args)
2. Recipe: Compiled operation list, ready to execute against a Dish
3. ExecutionState: Runtime record threaded through flow-control operations
"""

from roux.errors import RecipeCompileError

from .ops import Op
from .recipe_def import (
    OperationDef,
    RecipeDef,
)

__all__ = [
    # Ops
    "Op",
    # Recipe Definition
    "OperationDef",
    "RecipeDef",
    "RecipeCompileError",
]
