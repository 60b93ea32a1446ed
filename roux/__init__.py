"""
roux - Recipe interpreter for data transformations.

Runs recipes (ordered lists of typed, parameterized operations) against a
Dish, with flow control for jumps, labels, registers and fork/merge.
"""

__version__ = "0.1.0"
__author__ = "Local Pipeline Team"


__all__ = ["Dish", "Recipe", "RouxConfig", "load_config", "get_roux_home"]

from .config import RouxConfig, load_config, get_roux_home
from .dish import Dish
from .recipe import Recipe
