"""
RecipeRegistry - Load and validate RecipeDefs from storage.

The registry provides:
- Loading RecipeDefs from YAML or JSON files in a recipes directory
- Version support (optional, default="latest")
- Caching loaded definitions
- SHA256 content hashes of definitions
"""

import hashlib
import json
from pathlib import Path
from typing import Optional

import yaml

from roux.schemas import RecipeDef


class RecipeNotFoundError(Exception):
    """Raised when a recipe definition is not found."""
    pass


class RecipeValidationError(Exception):
    """Raised when a recipe definition fails validation."""
    pass


class RecipeRegistry:
    """
    Registry for loading and caching RecipeDefs.

    Example directory structure:
        recipes/
            extract_ports.yaml
            network/
                split_hosts.json
    """

    def __init__(self, recipes_dir: Path | str):
        """
        Initialize the registry.

        Args:
            recipes_dir: Path to directory containing recipe definition files
        """
        self._recipes_dir = Path(recipes_dir)
        self._cache: dict[str, RecipeDef] = {}

    @property
    def recipes_dir(self) -> Path:
        """Get the recipes directory path."""
        return self._recipes_dir

    def load(self, recipe_id: str, version: Optional[str] = None) -> RecipeDef:
        """
        Load a RecipeDef by ID and optional version.

        Searches for {recipe_id}.yaml, .yml or .json in the recipes directory
        tree. YAML files are preferred over JSON when both exist.

        Args:
            recipe_id: The recipe identifier (filename without extension)
            version: Optional version string. If provided and not "latest",
                     validates that the loaded RecipeDef has this version.

        Raises:
            RecipeNotFoundError: If the file doesn't exist or the version doesn't match
            RecipeValidationError: If the recipe definition is invalid
        """
        if version is None or version == "latest":
            if recipe_id in self._cache:
                return self._cache[recipe_id]

        def_path = self.find_definition(recipe_id)
        if def_path is None:
            raise RecipeNotFoundError(f"Recipe definition not found: {recipe_id}")

        try:
            data = self._load_file(def_path)
        except Exception as e:
            raise RecipeValidationError(f"Failed to load {def_path}: {e}")

        try:
            recipe_def = RecipeDef.from_dict(data)
        except Exception as e:
            raise RecipeValidationError(f"Invalid RecipeDef in {def_path}: {e}")

        if recipe_def.recipe_id != recipe_id:
            raise RecipeValidationError(
                f"Recipe ID mismatch: file is '{recipe_id}' but recipe_id is '{recipe_def.recipe_id}'"
            )

        if version is not None and version != "latest":
            if recipe_def.version != version:
                raise RecipeNotFoundError(
                    f"Version mismatch for {recipe_id}: requested '{version}', found '{recipe_def.version}'"
                )

        self._cache[recipe_id] = recipe_def

        return recipe_def

    def _load_file(self, path: Path) -> dict:
        """
        Load a definition file (YAML or JSON).

        Raises:
            ValueError: If file format is unsupported
        """
        suffix = path.suffix.lower()

        with open(path) as f:
            if suffix in (".yaml", ".yml"):
                return yaml.safe_load(f)
            elif suffix == ".json":
                return json.load(f)
            else:
                raise ValueError(f"Unsupported file format: {suffix}")

    def list_recipes(self) -> list[str]:
        """
        List all available recipe IDs.

        Returns:
            Sorted list of recipe IDs found in the recipes directory
        """
        if not self._recipes_dir.exists():
            return []

        recipe_ids = set()
        for ext in ["*.yaml", "*.yml", "*.json"]:
            for f in self._recipes_dir.glob(f"**/{ext}"):
                if "_deprecated" not in str(f):
                    recipe_ids.add(f.stem)

        return sorted(recipe_ids)

    def find_definition(self, recipe_id: str) -> Optional[Path]:
        """
        Find the definition file for a recipe ID.

        Searches the recipes directory recursively. YAML files are preferred
        over JSON.
        """
        for ext in [".yaml", ".yml", ".json"]:
            filename = f"{recipe_id}{ext}"

            root_path = self._recipes_dir / filename
            if root_path.exists():
                return root_path

            matches = sorted(self._recipes_dir.glob(f"**/{filename}"))
            if matches:
                return matches[0]

        return None

    @staticmethod
    def compute_hash(recipe_def: RecipeDef) -> str:
        """
        Compute SHA256 hash of a RecipeDef for content addressing.

        Uses canonical JSON serialization (sorted keys, no whitespace).
        """
        canonical = json.dumps(recipe_def.to_dict(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode()).hexdigest()
