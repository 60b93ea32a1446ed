"""
Ordinary operations for roux recipes.

Provides:
- OperationHandler: base class for operation transforms
- OperationRegistry: name -> handler lookup used when compiling recipes
- Built-in text operations
"""

from roux.operations.base import OperationHandler
from roux.operations.registry import OperationRegistry
from roux.operations.text import (
    ToUpperCase,
    ToLowerCase,
    Reverse,
    FindReplace,
    ToHex,
    FromHex,
)

__all__ = [
    "OperationHandler",
    "OperationRegistry",
    "ToUpperCase",
    "ToLowerCase",
    "Reverse",
    "FindReplace",
    "ToHex",
    "FromHex",
]
